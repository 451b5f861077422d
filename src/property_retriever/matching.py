"""Flag token matching over the raw argument vector.

All case-insensitive operations use casefold() for proper Unicode handling.
Flag tokens are matched by exact equality; "--namefoo" never matches a
property named "name".
"""

from __future__ import annotations

from collections.abc import Sequence

DEFAULT_LONG_PREFIX = "--"
DEFAULT_SHORT_PREFIX = "-"


def compare_strings_ci(a: str, b: str) -> bool:
    """Compare strings case-insensitively.

    Example:
        >>> compare_strings_ci("--Name", "--name")
        True
        >>> compare_strings_ci("--name", "--namefoo")
        False
    """
    return a.casefold() == b.casefold()


def contains_ci(haystack: str, needle: str) -> bool:
    """Check if string contains substring (case-insensitive).

    Example:
        >>> contains_ci("-abc", "B")
        True
    """
    return needle.casefold() in haystack.casefold()


def long_flag(name: str, *, long_prefix: str = DEFAULT_LONG_PREFIX) -> str:
    """Build the long flag token for a name.

    Example:
        >>> long_flag("port")
        '--port'
    """
    return f"{long_prefix}{name}"


def short_flag(name: str, *, short_prefix: str = DEFAULT_SHORT_PREFIX) -> str:
    """Build the short flag token for a name.

    Example:
        >>> short_flag("p")
        '-p'
    """
    return f"{short_prefix}{name}"


def contains_short_flag(
    token: str,
    short_name: str,
    *,
    long_prefix: str = DEFAULT_LONG_PREFIX,
    short_prefix: str = DEFAULT_SHORT_PREFIX,
) -> bool:
    """Check whether a single token sets a short flag, alone or grouped.

    The token must start with the short prefix but not the long one, and
    the rest of it must contain the short name ("-abc" sets a, b, c).
    """
    if not token.startswith(short_prefix) or token.startswith(long_prefix):
        return False
    return contains_ci(token[len(short_prefix):], short_name)


def matches_flag(
    token: str,
    long_name: str | None = None,
    short_name: str | None = None,
    *,
    long_prefix: str = DEFAULT_LONG_PREFIX,
    short_prefix: str = DEFAULT_SHORT_PREFIX,
) -> bool:
    """Check whether a token is the flag for a long or short name.

    Args:
        token: Argument token.
        long_name: Long name, matched against "--{long_name}".
        short_name: Short name, matched against "-{short_name}".
        long_prefix: Prefix of long flags.
        short_prefix: Prefix of short flags.

    Returns:
        True if the token equals either flag (case-insensitive).
    """
    if long_name and compare_strings_ci(
        token, long_flag(long_name, long_prefix=long_prefix)
    ):
        return True
    if short_name and compare_strings_ci(
        token, short_flag(short_name, short_prefix=short_prefix)
    ):
        return True
    return False


def find_value_indices(
    args: Sequence[str],
    long_name: str | None = None,
    short_name: str | None = None,
    *,
    long_prefix: str = DEFAULT_LONG_PREFIX,
    short_prefix: str = DEFAULT_SHORT_PREFIX,
) -> list[int]:
    """Find the positions of every value given for a property.

    The value of a flag is the token right after it. Element 0 is the
    program path and is never read as a flag; a flag in last position has
    no value and is skipped.

    Args:
        args: Argument vector, program path first.
        long_name: Long name of the property.
        short_name: Short name of the property.
        long_prefix: Prefix of long flags.
        short_prefix: Prefix of short flags.

    Returns:
        Indices of the value tokens, in order of occurrence.
    """
    indices: list[int] = []
    for i in range(1, len(args) - 1):
        if matches_flag(
            args[i],
            long_name,
            short_name,
            long_prefix=long_prefix,
            short_prefix=short_prefix,
        ):
            indices.append(i + 1)
    return indices


def find_token_index(args: Sequence[str], names: Sequence[str]) -> int | None:
    """Find the first token equal to any of the given names.

    Used for lookups where the caller spells out the whole token.

    Returns:
        Index of the first match, or None.
    """
    for i in range(1, len(args)):
        if any(compare_strings_ci(args[i], name) for name in names if name):
            return i
    return None


def has_long_flag(
    args: Sequence[str], long_name: str, *, long_prefix: str = DEFAULT_LONG_PREFIX
) -> bool:
    """Check whether "--{long_name}" appears among the arguments."""
    flag = long_flag(long_name, long_prefix=long_prefix)
    return any(compare_strings_ci(token, flag) for token in args[1:])


def has_short_flag(
    args: Sequence[str],
    short_name: str,
    *,
    long_prefix: str = DEFAULT_LONG_PREFIX,
    short_prefix: str = DEFAULT_SHORT_PREFIX,
) -> bool:
    """Check whether a short flag is set, alone or grouped.

    See contains_short_flag for how each token is checked.
    """
    return any(
        contains_short_flag(
            token, short_name, long_prefix=long_prefix, short_prefix=short_prefix
        )
        for token in args[1:]
    )
