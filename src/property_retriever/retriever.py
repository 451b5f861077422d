"""Property retriever: typed values from the command line and environment.

Every public retrieval method is a thin wrapper over two canonical
resolution functions, PropertyRetriever.resolve (single value) and
PropertyRetriever.resolve_all (list of values). Those never raise for a
failed resolution; they return a Resolution holding either the value or the
error. Wrappers without a fallback raise that error, wrappers with a
fallback return the fallback instead.

Precedence is always command line first, environment second. A value found
on the command line that cannot be converted is an error; the environment
is not consulted in that case.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from property_retriever.conversion import convert, split_values
from property_retriever.environment import EnvironmentAccessor, LocalEnvironment
from property_retriever.exceptions import (
    ConversionError,
    PropertyNotFoundError,
    PropertyRetrieverError,
    UsageError,
    ValidationError,
    describe_names,
)
from property_retriever.matching import (
    find_token_index,
    find_value_indices,
    has_long_flag,
    has_short_flag,
)
from property_retriever.settings import RetrieverSettings

logger = logging.getLogger(__name__)


class _MissingType:
    """Marker for "no fallback supplied"; None is a valid fallback."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _MissingType()


class Source(Enum):
    """Where a property value may come from."""

    COMMAND_LINE = "command line"
    ENVIRONMENT = "environment"


@dataclass(frozen=True)
class PropertyQuery:
    """Everything needed to resolve one property.

    Attributes:
        long_name: Long name, matched against "--{long_name}".
        short_name: Short name, matched against "-{short_name}".
        environment_name: Environment variable name. Defaults to the long
            name, then the short name.
        target: Type the raw value is converted to.
        allowed: Optional allow-list of converted values.
        separator: Separator for list values read from the environment.
            None uses the retriever settings.
        sources: Sources consulted, in precedence order.
    """

    long_name: str | None = None
    short_name: str | None = None
    environment_name: str | None = None
    target: Any = str
    allowed: tuple[Any, ...] | None = None
    separator: str | None = None
    sources: tuple[Source, ...] = (Source.COMMAND_LINE,)

    @property
    def display_name(self) -> str:
        """Names used to identify the property in messages."""
        return describe_names(self.long_name, self.short_name) or (
            self.environment_name or ""
        )

    @property
    def variable_name(self) -> str | None:
        """Environment variable consulted for this property."""
        return self.environment_name or self.long_name or self.short_name


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a property: a value or an error."""

    value: Any = None
    error: PropertyRetrieverError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, raising the resolution error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value

    def value_or(self, fallback: Any) -> Any:
        """Return the value, or fallback if resolution failed."""
        if self.error is not None:
            return fallback
        return self.value


def _freeze_allowed(allowed: Iterable[Any] | None) -> tuple[Any, ...] | None:
    if allowed is None:
        return None
    return tuple(allowed)


class PropertyRetriever:
    """Retrieve typed property values from the command line and environment.

    Example:
        retriever = PropertyRetriever()
        port = retriever.retrieve_from_command_line_or_environment(
            "port", "p", environment_name="APP_PORT", target=int, fallback=8080
        )

        # Testing usage (inject fixed arguments and environment)
        retriever = PropertyRetriever(
            LocalEnvironment(argv=["prog", "--port", "9000"], env={})
        )
    """

    def __init__(
        self,
        environment: EnvironmentAccessor | None = None,
        settings: RetrieverSettings | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            environment: Accessor for arguments and environment variables.
                Defaults to a LocalEnvironment over the running process.
            settings: Retriever settings. Defaults to RetrieverSettings().
        """
        if environment is None:
            environment = LocalEnvironment()
        self._environment = environment
        self._settings = settings if settings is not None else RetrieverSettings()

    @property
    def environment(self) -> EnvironmentAccessor:
        return self._environment

    @property
    def settings(self) -> RetrieverSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Canonical resolution
    # ------------------------------------------------------------------

    def resolve(self, query: PropertyQuery) -> Resolution:
        """Resolve a single value.

        The first matching flag on the command line wins. Failing that, the
        environment variable is read when the query allows it.

        Args:
            query: Property to resolve.

        Returns:
            Resolution with the converted value or the error.
        """
        if Source.COMMAND_LINE in query.sources:
            usage = self._check_names(query)
            if usage is not None:
                return Resolution(error=usage)
            args = self._environment.get_command_line_args()
            indices = self._value_indices(args, query)
            if indices:
                return self._convert_one(args[indices[0]], query, query.display_name)

        if Source.ENVIRONMENT in query.sources:
            name = query.variable_name
            found = self._read_variable(name)
            if isinstance(found, PropertyRetrieverError):
                return Resolution(error=found)
            if found is not None:
                return self._convert_one(found, query, name)

        return Resolution(error=self._not_found(query))

    def resolve_all(self, query: PropertyQuery) -> Resolution:
        """Resolve a list of values.

        Every occurrence of the flag on the command line contributes its
        value, in order. If there is none and the query allows it, the
        environment variable is split on the separator instead. A
        conversion or allow-list failure on any element fails the whole
        list.

        Args:
            query: Property to resolve.

        Returns:
            Resolution with the list of converted values or the error. A
            command-line-only query with no occurrences resolves to [].
        """
        if Source.COMMAND_LINE in query.sources:
            usage = self._check_names(query)
            if usage is not None:
                return Resolution(error=usage)
            args = self._environment.get_command_line_args()
            indices = self._value_indices(args, query)
            if indices:
                return self._convert_many(
                    [args[i] for i in indices], query, query.display_name
                )
            if Source.ENVIRONMENT not in query.sources:
                return Resolution(value=[])

        if Source.ENVIRONMENT in query.sources:
            name = query.variable_name
            found = self._read_variable(name)
            if isinstance(found, PropertyRetrieverError):
                return Resolution(error=found)
            if found is not None:
                separator = query.separator or self._settings.list_separator
                values = split_values(found, separator)
                return self._convert_many(values, query, name)

        return Resolution(error=self._not_found(query))

    # ------------------------------------------------------------------
    # Command line
    # ------------------------------------------------------------------

    def check_from_command_line(
        self, long_name: str | None = None, short_name: str | None = None
    ) -> bool:
        """Check if a property is set via command line.

        A long name matches the token "--{long_name}" exactly. A short name
        matches any single-dash token containing it, so "-abc" sets "a",
        "b" and "c". Both comparisons are case-insensitive.

        Args:
            long_name: Optional long name.
            short_name: Optional short name.

        Returns:
            True if at least one of the names is present.

        Raises:
            UsageError: If neither name is supplied.
        """
        usage = self._check_names(PropertyQuery(long_name, short_name))
        if usage is not None:
            raise usage

        args = self._environment.get_command_line_args()
        long_prefix = self._settings.long_prefix
        short_prefix = self._settings.short_prefix
        if long_name and has_long_flag(args, long_name, long_prefix=long_prefix):
            return True
        if short_name and has_short_flag(
            args, short_name, long_prefix=long_prefix, short_prefix=short_prefix
        ):
            return True
        return False

    def retrieve_from_command_line(
        self,
        long_name: str | None = None,
        short_name: str | None = None,
        *,
        target: Any = str,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve a single value from the command line.

        Args:
            long_name: Optional long name.
            short_name: Optional short name.
            target: Type the value is converted to.
            allowed: Optional allow-list of converted values.
            fallback: Value returned when retrieval fails for any reason.

        Returns:
            The converted value of the first matching flag, or fallback.

        Raises:
            PropertyRetrieverError: If retrieval fails and no fallback is
                supplied.
        """
        query = PropertyQuery(
            long_name=long_name,
            short_name=short_name,
            target=target,
            allowed=_freeze_allowed(allowed),
        )
        return self._single(query, fallback)

    def retrieve_all_from_command_line(
        self,
        long_name: str | None = None,
        short_name: str | None = None,
        *,
        target: Any = str,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve every value given for a property on the command line.

        Returns:
            Converted values in order of occurrence. Without a fallback an
            absent property gives []; with one, an empty result gives the
            fallback.

        Raises:
            PropertyRetrieverError: If retrieval fails and no fallback is
                supplied.
        """
        query = PropertyQuery(
            long_name=long_name,
            short_name=short_name,
            target=target,
            allowed=_freeze_allowed(allowed),
        )
        return self._many(query, fallback)

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def retrieve_from_environment(
        self,
        name: str,
        *,
        target: Any = str,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve a value from an environment variable.

        Args:
            name: Environment variable name.
            target: Type the value is converted to.
            allowed: Optional allow-list of converted values.
            fallback: Value returned when retrieval fails for any reason.

        Returns:
            The converted value, or fallback.

        Raises:
            PropertyRetrieverError: If retrieval fails and no fallback is
                supplied.
        """
        query = PropertyQuery(
            environment_name=name,
            target=target,
            allowed=_freeze_allowed(allowed),
            sources=(Source.ENVIRONMENT,),
        )
        return self._single(query, fallback)

    def retrieve_all_from_environment(
        self,
        name: str,
        *,
        target: Any = str,
        separator: str | None = None,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve a list of values from a separator-delimited variable.

        Empty segments are discarded. The separator defaults to the
        settings' list_separator (";").
        """
        query = PropertyQuery(
            environment_name=name,
            target=target,
            allowed=_freeze_allowed(allowed),
            separator=separator,
            sources=(Source.ENVIRONMENT,),
        )
        return self._many(query, fallback)

    # ------------------------------------------------------------------
    # Command line, then environment
    # ------------------------------------------------------------------

    def retrieve_from_command_line_or_environment(
        self,
        long_name: str | None = None,
        short_name: str | None = None,
        *,
        environment_name: str | None = None,
        target: Any = str,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve a value from the command line, else the environment.

        Args:
            long_name: Optional long name.
            short_name: Optional short name.
            environment_name: Environment variable to fall back on. Defaults
                to long_name, then short_name.
            target: Type the value is converted to.
            allowed: Optional allow-list of converted values.
            fallback: Value returned when retrieval fails for any reason.

        Returns:
            The converted value, or fallback.

        Raises:
            PropertyRetrieverError: If retrieval fails and no fallback is
                supplied.
        """
        query = PropertyQuery(
            long_name=long_name,
            short_name=short_name,
            environment_name=environment_name,
            target=target,
            allowed=_freeze_allowed(allowed),
            sources=(Source.COMMAND_LINE, Source.ENVIRONMENT),
        )
        return self._single(query, fallback)

    def retrieve_all_from_command_line_or_environment(
        self,
        long_name: str | None = None,
        short_name: str | None = None,
        *,
        environment_name: str | None = None,
        target: Any = str,
        separator: str | None = None,
        allowed: Iterable[Any] | None = None,
        fallback: Any = MISSING,
    ) -> Any:
        """Retrieve a list from the command line, else split the environment value."""
        query = PropertyQuery(
            long_name=long_name,
            short_name=short_name,
            environment_name=environment_name,
            target=target,
            allowed=_freeze_allowed(allowed),
            separator=separator,
            sources=(Source.COMMAND_LINE, Source.ENVIRONMENT),
        )
        return self._many(query, fallback)

    def retrieve_property(
        self, name: str, *other_names: str, target: Any = str
    ) -> Any:
        """Look a property up by its literal token, then by environment.

        Unlike the other methods, names are compared with whole tokens, so
        callers pass "--port" rather than "port". The first token matching
        name or an alias (case-insensitive) supplies the next token as the
        value; otherwise the environment variable called name is used.

        Args:
            name: Token and environment variable name.
            *other_names: Alternative tokens.
            target: Type the value is converted to.

        Returns:
            The converted value, or None if nothing is found. A blank
            environment value counts as nothing found.

        Raises:
            ConversionError: If a value is found but cannot be converted.
        """
        args = self._environment.get_command_line_args()
        index = find_token_index(args, (name, *other_names))
        if index is not None and index < len(args) - 1:
            query = PropertyQuery(long_name=name, target=target)
            return self._convert_one(args[index + 1], query, name).unwrap()

        found = self._read_variable(name)
        if found is None or isinstance(found, PropertyRetrieverError):
            return None
        if not found.strip():
            return None
        query = PropertyQuery(environment_name=name, target=target)
        return self._convert_one(found, query, name).unwrap()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _single(self, query: PropertyQuery, fallback: Any) -> Any:
        resolution = self.resolve(query)
        if resolution.ok or fallback is MISSING:
            return resolution.unwrap()
        logger.debug(
            "Using fallback for property %s: %s", query.display_name, resolution.error
        )
        return fallback

    def _many(self, query: PropertyQuery, fallback: Any) -> Any:
        resolution = self.resolve_all(query)
        if fallback is MISSING:
            return resolution.unwrap()
        if resolution.ok and resolution.value:
            return resolution.value
        logger.debug(
            "Using fallback for property %s: %s",
            query.display_name,
            resolution.error or "no values found",
        )
        return fallback

    def _check_names(self, query: PropertyQuery) -> UsageError | None:
        if not query.long_name and not query.short_name:
            return UsageError("You need to supply a long_name and/or a short_name.")
        return None

    def _value_indices(self, args: list[str], query: PropertyQuery) -> list[int]:
        return find_value_indices(
            args,
            query.long_name,
            query.short_name,
            long_prefix=self._settings.long_prefix,
            short_prefix=self._settings.short_prefix,
        )

    def _read_variable(self, name: str | None) -> str | PropertyRetrieverError | None:
        """Read an environment variable, reporting usage errors as values.

        Accessors that signal a missing variable by raising LookupError are
        treated the same as those returning None.
        """
        if not name or not name.strip():
            return UsageError("You must provide an environment variable name.")
        try:
            return self._environment.get_environment_variable(name)
        except UsageError as e:
            return e
        except LookupError:
            logger.debug("Environment accessor reported %s as missing", name)
            return None

    def _convert_one(
        self, raw: str, query: PropertyQuery, name: str | None
    ) -> Resolution:
        label = name or query.display_name
        try:
            value = convert(raw, query.target)
        except ValueError as e:
            return Resolution(
                error=ConversionError(label, raw, query.target, reason=str(e))
            )
        if query.allowed is not None and value not in query.allowed:
            return Resolution(error=ValidationError(label, value, query.allowed))
        return Resolution(value=value)

    def _convert_many(
        self, raws: list[str], query: PropertyQuery, name: str | None
    ) -> Resolution:
        values: list[Any] = []
        for raw in raws:
            resolution = self._convert_one(raw, query, name)
            if not resolution.ok:
                return resolution
            values.append(resolution.value)
        return Resolution(value=values)

    def _not_found(self, query: PropertyQuery) -> PropertyNotFoundError:
        source = " or ".join(s.value for s in query.sources)
        return PropertyNotFoundError(query.display_name, source=source)
