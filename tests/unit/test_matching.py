"""Tests for flag token matching."""

from __future__ import annotations

import pytest

from property_retriever.matching import (
    compare_strings_ci,
    contains_ci,
    contains_short_flag,
    find_token_index,
    find_value_indices,
    has_long_flag,
    has_short_flag,
    long_flag,
    matches_flag,
    short_flag,
)


class TestStringHelpers:
    """Tests for case-insensitive string helpers."""

    def test_compare_strings_ci(self) -> None:
        """Should compare whole strings ignoring case."""
        assert compare_strings_ci("--Name", "--NAME") is True
        assert compare_strings_ci("--name", "--names") is False

    def test_compare_uses_casefold(self) -> None:
        """Should fold special characters such as German eszett."""
        assert compare_strings_ci("--STRASSE", "--straße") is True

    def test_contains_ci(self) -> None:
        """Should find substrings ignoring case."""
        assert contains_ci("-aBc", "b") is True
        assert contains_ci("-abc", "d") is False


class TestFlagBuilders:
    """Tests for long_flag and short_flag functions."""

    def test_default_prefixes(self) -> None:
        """Should prepend "--" to long names and "-" to short names."""
        assert long_flag("port") == "--port"
        assert short_flag("p") == "-p"

    def test_custom_prefixes(self) -> None:
        """Should prepend the configured prefix verbatim."""
        assert long_flag("port", long_prefix="/") == "/port"
        assert short_flag("p", short_prefix="+") == "+p"

    def test_names_keep_their_case(self) -> None:
        """Should not fold the name; matching handles case."""
        assert long_flag("longName") == "--longName"


class TestContainsShortFlag:
    """Tests for contains_short_flag function."""

    @pytest.mark.parametrize("token", ["-v", "-V", "-xvz", "-vv"])
    def test_single_or_grouped(self, token: str) -> None:
        """Should find the short name alone or grouped behind one dash."""
        assert contains_short_flag(token, "v") is True

    @pytest.mark.parametrize("token", ["--verbose", "--v", "v", "-abc", ""])
    def test_rejects_long_bare_and_other_tokens(self, token: str) -> None:
        """Should ignore long flags, bare words and groups without the name."""
        assert contains_short_flag(token, "v") is False

    def test_custom_prefixes(self) -> None:
        """Should honor configured prefixes."""
        assert contains_short_flag("+xv", "v", long_prefix="/", short_prefix="+")
        assert not contains_short_flag("-xv", "v", long_prefix="/", short_prefix="+")

    def test_agrees_with_has_short_flag(self) -> None:
        """Should be the per-token rule has_short_flag applies."""
        for token in ["-v", "-xvz", "--verbose", "v", "-abc"]:
            assert has_short_flag(["prog", token], "v") == contains_short_flag(
                token, "v"
            )


class TestMatchesFlag:
    """Tests for matches_flag function."""

    @pytest.mark.parametrize("token", ["--name", "--NAME", "--Name"])
    def test_long_flag_case_insensitive(self, token: str) -> None:
        """Should match the long flag in any case."""
        assert matches_flag(token, long_name="name") is True

    @pytest.mark.parametrize("token", ["-c", "-C"])
    def test_short_flag_case_insensitive(self, token: str) -> None:
        """Should match the short flag in any case."""
        assert matches_flag(token, short_name="c") is True

    @pytest.mark.parametrize("token", ["--namefoo", "--nam", "-name", "name"])
    def test_long_flag_requires_exact_token(self, token: str) -> None:
        """Prefix and partial matches should not count."""
        assert matches_flag(token, long_name="name") is False

    @pytest.mark.parametrize("token", ["-abc", "--c", "c"])
    def test_short_flag_requires_exact_token(self, token: str) -> None:
        """Grouped short flags should not supply values."""
        assert matches_flag(token, short_name="c") is False

    def test_no_names_never_match(self) -> None:
        """Should never match when no name is given."""
        assert matches_flag("--", None, None) is False
        assert matches_flag("-", "", "") is False

    def test_custom_prefixes(self) -> None:
        """Should match using the configured prefixes only."""
        assert matches_flag("/name", "name", long_prefix="/", short_prefix="+") is True
        assert matches_flag("+n", None, "n", long_prefix="/", short_prefix="+") is True
        assert matches_flag("--name", "name", long_prefix="/") is False


class TestFindValueIndices:
    """Tests for find_value_indices function."""

    def test_finds_every_occurrence_in_order(self) -> None:
        """Should return the value index of every long or short flag."""
        args = ["prog", "--name", "Alice", "-n", "Bob", "--name", "Carol"]
        assert find_value_indices(args, "name", "n") == [2, 4, 6]

    def test_flag_in_last_position_has_no_value(self) -> None:
        """Should skip a flag that has no following token."""
        assert find_value_indices(["prog", "--name"], "name") == []

    def test_program_path_is_not_a_flag(self) -> None:
        """Element 0 should never be read as a flag."""
        assert find_value_indices(["--name", "value"], "name") == []

    def test_value_token_is_taken_verbatim(self) -> None:
        """The token after a flag is its value, even if it looks like a flag."""
        assert find_value_indices(["prog", "--a", "--b"], "a") == [2]

    def test_empty_arguments(self) -> None:
        """Should handle an empty argument vector."""
        assert find_value_indices([], "name") == []


class TestFindTokenIndex:
    """Tests for find_token_index function."""

    def test_returns_first_matching_alias(self) -> None:
        """Should return the first token equal to any alias."""
        args = ["prog", "-p", "1", "--port", "2"]
        assert find_token_index(args, ["--port", "-p"]) == 1

    def test_returns_none_when_absent(self) -> None:
        """Should return None when no token matches."""
        assert find_token_index(["prog", "--other"], ["--port"]) is None


class TestPresenceHelpers:
    """Tests for has_long_flag and has_short_flag functions."""

    def test_has_long_flag(self) -> None:
        """Should detect the long flag in any case."""
        args = ["prog", "--Flag"]
        assert has_long_flag(args, "flag") is True
        assert has_long_flag(args, "other") is False

    def test_has_long_flag_is_exact(self) -> None:
        """Should not accept a longer token starting with the flag."""
        assert has_long_flag(["prog", "--flags"], "flag") is False

    @pytest.mark.parametrize("token", ["-v", "-V", "-xvz"])
    def test_has_short_flag_grouped(self, token: str) -> None:
        """Short flags may be grouped behind a single dash."""
        assert has_short_flag(["prog", token], "v") is True

    @pytest.mark.parametrize("token", ["--verbose", "v", "-abc"])
    def test_has_short_flag_ignores_long_and_bare_tokens(self, token: str) -> None:
        """Should ignore long flags, bare words and groups without the name."""
        assert has_short_flag(["prog", token], "v") is False
