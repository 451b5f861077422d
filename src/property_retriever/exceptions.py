"""Property retrieval exceptions.

Every failure a retrieval can produce maps to one of these classes. The
fallback-accepting retrieval methods never raise them; the other methods
raise them unchanged so callers can tell the causes apart.
"""

from __future__ import annotations


def describe_names(long_name: str | None, short_name: str | None) -> str:
    """Render the identifying names of a property for error messages.

    Args:
        long_name: Long name, or None.
        short_name: Short name, or None.

    Returns:
        "long", "short" or "long/short" depending on what was supplied.
    """
    if long_name and short_name:
        return f"{long_name}/{short_name}"
    return long_name or short_name or ""


class PropertyRetrieverError(Exception):
    """Base exception for property retrieval errors."""


class UsageError(PropertyRetrieverError, ValueError):
    """Caller omitted the names needed to identify a property."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PropertyNotFoundError(PropertyRetrieverError, LookupError):
    """No matching argument or environment variable was found."""

    def __init__(self, name: str, source: str = "command line") -> None:
        self.name = name
        self.source = source
        super().__init__(f"No value found in {source} for property with name {name}.")


class ConversionError(PropertyRetrieverError, ValueError):
    """A value was found but could not be parsed as the requested type."""

    def __init__(
        self, name: str, raw: str, target: type, reason: str | None = None
    ) -> None:
        self.name = name
        self.raw = raw
        self.target = target
        self.reason = reason
        message = f"Error while converting value found for property with name {name}."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class ValidationError(PropertyRetrieverError, ValueError):
    """A converted value is not a member of the supplied allow-list."""

    def __init__(self, name: str, value: object, allowed: tuple[object, ...]) -> None:
        self.name = name
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"The value {value!r} retrieved for property with name {name} "
            f"is not permitted. Allowed: {list(allowed)}"
        )
