"""Retriever settings.

Settings have built-in defaults that can be overridden through
PROPERTY_RETRIEVER_* environment variables:

- PROPERTY_RETRIEVER_LIST_SEPARATOR: separator for list values (default ";")
- PROPERTY_RETRIEVER_LONG_PREFIX: prefix of long flags (default "--")
- PROPERTY_RETRIEVER_SHORT_PREFIX: prefix of short flags (default "-")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from property_retriever.exceptions import UsageError
from property_retriever.matching import DEFAULT_LONG_PREFIX, DEFAULT_SHORT_PREFIX

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROPERTY_RETRIEVER_"
DEFAULT_LIST_SEPARATOR = ";"


class RetrieverSettings(BaseModel):
    """Pydantic model for retriever settings."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    list_separator: str = Field(default=DEFAULT_LIST_SEPARATOR)
    long_prefix: str = Field(default=DEFAULT_LONG_PREFIX, min_length=1)
    short_prefix: str = Field(default=DEFAULT_SHORT_PREFIX, min_length=1)

    @field_validator("list_separator")
    @classmethod
    def validate_list_separator(cls, v: str) -> str:
        """Require a single, non-whitespace separator character."""
        if len(v) != 1 or v.isspace():
            raise ValueError(
                f"list_separator must be a single non-whitespace character, got {v!r}"
            )
        return v

    @model_validator(mode="after")
    def validate_prefixes_differ(self) -> RetrieverSettings:
        """Long and short flags must be distinguishable."""
        if self.long_prefix == self.short_prefix:
            raise ValueError("long_prefix and short_prefix must differ")
        return self


def load_settings(env: Mapping[str, str] | None = None) -> RetrieverSettings:
    """Build settings from defaults and PROPERTY_RETRIEVER_* overrides.

    Args:
        env: Optional mapping to use instead of os.environ.

    Returns:
        Validated RetrieverSettings.

    Raises:
        UsageError: If an override is invalid.
    """
    source = env if env is not None else os.environ
    overrides: dict[str, str] = {}
    for field_name in RetrieverSettings.model_fields:
        value = source.get(f"{ENV_PREFIX}{field_name.upper()}")
        if value:
            overrides[field_name] = value

    if overrides:
        logger.debug("Retriever settings overrides: %s", sorted(overrides))

    try:
        return RetrieverSettings(**overrides)
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        )
        raise UsageError(f"Invalid retriever settings: {errors}") from e
