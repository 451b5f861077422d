"""Locale-independent conversion of raw strings to typed values.

Numbers always use "." as decimal separator and booleans only accept
"true"/"false", whatever the host locale. Types without a built-in rule are
handed to pydantic's lax validation.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.errors import PydanticSchemaGenerationError

T = TypeVar("T")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)

TRUE_VALUES = frozenset({"true"})
FALSE_VALUES = frozenset({"false"})


@lru_cache(maxsize=64)
def _type_adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def parse_bool(raw: str) -> bool:
    """Parse a boolean using invariant rules.

    Args:
        raw: Raw string value.

    Returns:
        True for "true", False for "false" (case-insensitive).

    Raises:
        ValueError: If the value is neither.
    """
    folded = raw.strip().casefold()
    if folded in TRUE_VALUES:
        return True
    if folded in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {raw}")


def parse_int(raw: str) -> int:
    """Parse an integer: optional sign followed by ASCII digits."""
    text = raw.strip()
    if not _INT_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid integer value: {raw}")
    return int(text)


def parse_float(raw: str) -> float:
    """Parse a float with "." as decimal separator.

    NaN and infinity are rejected, as are digit group separators.
    """
    text = raw.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid float value: {raw}")
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"NaN/infinity not allowed: {raw}")
    return value


def parse_enum(raw: str, target: type[Enum]) -> Enum:
    """Parse an enum member by name (case-insensitive) or by value."""
    text = raw.strip()
    folded = text.casefold()
    for member in target:
        if member.name.casefold() == folded:
            return member
    for member in target:
        if str(member.value) == text:
            return member
    raise ValueError(f"Invalid {target.__name__} value: {raw}")


def convert(raw: str, target: type[T]) -> T:
    """Convert a raw string to the requested type.

    Args:
        raw: Raw value taken from the command line or environment.
        target: Requested type.

    Returns:
        The converted value.

    Raises:
        ValueError: If the value cannot be converted. The retriever wraps
            it in ConversionError, which adds the property name.
    """
    if target is str:
        return raw  # type: ignore[return-value]
    # bool before int: bool is an int subclass
    if target is bool:
        return parse_bool(raw)  # type: ignore[return-value]
    if target is int:
        return parse_int(raw)  # type: ignore[return-value]
    if target is float:
        return parse_float(raw)  # type: ignore[return-value]
    if isinstance(target, type) and issubclass(target, Enum):
        return parse_enum(raw, target)  # type: ignore[return-value]

    try:
        adapter = _type_adapter(target)
    except (TypeError, PydanticSchemaGenerationError) as e:
        raise ValueError(f"Unsupported target type: {target!r}") from e
    try:
        return adapter.validate_python(raw)
    except PydanticValidationError as e:
        name = getattr(target, "__name__", repr(target))
        errors = "; ".join(err["msg"] for err in e.errors())
        raise ValueError(f"Invalid {name} value: {raw} ({errors})") from e


def split_values(raw: str, separator: str) -> list[str]:
    """Split a separator-delimited string into its non-empty segments.

    Segments are kept verbatim, whitespace included; only empty segments
    are discarded.

    Args:
        raw: Raw delimited string.
        separator: Delimiter between values.

    Returns:
        List of segments in their original order.
    """
    return [part for part in raw.split(separator) if part]
