"""Access to the process command line and environment variables.

This module provides the LocalEnvironment class, the only place the library
touches process-global state. It supports dependency injection for testing
by accepting an optional argument vector and env mapping.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from property_retriever.exceptions import UsageError

logger = logging.getLogger(__name__)


@runtime_checkable
class EnvironmentAccessor(Protocol):
    """Read-only view over the argument vector and environment table."""

    def get_command_line_args(self) -> list[str]:
        """Return the argument vector, program path first."""
        ...

    def get_environment_variable(self, name: str) -> str | None:
        """Return the raw value of an environment variable, or None."""
        ...


class LocalEnvironment:
    """Environment accessor backed by sys.argv and os.environ.

    Both sources are read fresh on every call, so changes to the process
    state are visible to the next retrieval.

    Example:
        # Production usage (reads from sys.argv / os.environ)
        environment = LocalEnvironment()
        args = environment.get_command_line_args()

        # Testing usage (inject fixed values)
        environment = LocalEnvironment(
            argv=["prog", "--port", "9000"], env={"PORT": "8321"}
        )
    """

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the environment accessor.

        Args:
            argv: Optional fixed argument vector to use instead of sys.argv.
            env: Optional mapping to use instead of os.environ.
        """
        self._argv = argv
        self._env = env

    def get_command_line_args(self) -> list[str]:
        """Get the command line arguments.

        Returns:
            A new list holding the argument vector, program path included
            as the first element.
        """
        if self._argv is not None:
            return list(self._argv)
        return list(sys.argv)

    def get_environment_variable(self, name: str) -> str | None:
        """Get the raw value of an environment variable.

        Args:
            name: Environment variable name, matched exactly.

        Returns:
            The variable value, or None if it is not set or set to an
            empty string.

        Raises:
            UsageError: If name is empty or whitespace-only.
        """
        if name is None or not name.strip():
            raise UsageError("You must provide an environment variable name.")

        env = self._env if self._env is not None else os.environ
        value = env.get(name)
        if not value:
            logger.debug("Environment variable %s is not set", name)
            return None
        return value
