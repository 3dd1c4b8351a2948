"""Tests for range satisfaction."""

import pytest

from depshare.versioning import (
    ParseError,
    is_accept_all,
    parse,
    parse_range,
    satisfies,
    split_operator,
    validate_range,
)


class TestSentinels:
    """Tests for universal-accept ranges."""

    @pytest.mark.parametrize("sentinel", ["*", "x", ">=0"])
    def test_any_version_satisfies(self, sentinel):
        assert satisfies("5.0.0", sentinel) is True
        assert is_accept_all(sentinel)

    def test_version_not_parsed_for_sentinel(self):
        """Test that the version is not validated against a sentinel."""
        assert satisfies("not-a-version", "*") is True

    def test_similar_strings_are_not_sentinels(self):
        assert not is_accept_all(">=0.0.0")
        assert satisfies("0.0.1", ">=0.0.0") is True


class TestComparisonOperators:
    """Tests for >, >=, =, <=, < and the implicit =."""

    @pytest.mark.parametrize("version,range_str,expected", [
        ("1.2.4", ">1.2.3", True),
        ("1.2.3", ">1.2.3", False),
        ("1.2.3", ">=1.2.3", True),
        ("1.2.2", ">=1.2.3", False),
        ("1.2.3", "=1.2.3", True),
        ("1.2.4", "=1.2.3", False),
        ("1.0.0", "<=1.0.0", True),
        ("1.0.1", "<=1.0.0", False),
        ("1.9.9", "<2.0.0", True),
        ("2.0.0", "<2.0.0", False),
        ("1.2.3", "1.2.3", True),
        ("1.2.3", "v1.2.3", True),
        ("1.2.4", "1.2.3", False),
        ("17.0.2", ">=16.0.0", True),
    ])
    def test_operator(self, version, range_str, expected):
        assert satisfies(version, range_str) is expected

    def test_prerelease_below_release_bound(self):
        assert satisfies("1.0.0-rc.1", ">=1.0.0") is False
        assert satisfies("1.0.0-rc.1", "<1.0.0") is True

    def test_build_metadata_ignored(self):
        assert satisfies("1.0.0+build.5", "=1.0.0") is True


class TestCaret:
    """Tests for ^ ranges."""

    @pytest.mark.parametrize("version,range_str,expected", [
        ("1.2.5", "^1.2.0", True),
        ("2.0.0", "^1.2.0", False),
        ("1.3.0", "^1.2.5", True),
        ("1.2.4", "^1.2.5", False),
        ("1.1.9", "^1.2.0", False),
        ("1.0.0", "^1", True),
        ("1.5.2", "^1", True),
        ("0.9.0", "^1", False),
        ("18.0.0", "^18.0.0", True),
        ("17.0.0", "^18.0.0", False),
    ])
    def test_caret(self, version, range_str, expected):
        assert satisfies(version, range_str) is expected

    def test_wildcard_matches_any_position(self):
        assert satisfies("1.9.3", "^1.x") is True
        assert satisfies("2.0.0", "^1.x") is False


class TestTilde:
    """Tests for ~ ranges."""

    @pytest.mark.parametrize("version,range_str,expected", [
        ("1.2.7", "~1.2.5", True),
        ("1.2.3", "~1.2.5", False),
        ("1.2.5", "~1.2.5", True),
        ("1.3.0", "~1.2.0", False),
        ("2.2.5", "~1.2.5", False),
        ("1.2.0", "~1.2", True),
    ])
    def test_tilde(self, version, range_str, expected):
        assert satisfies(version, range_str) is expected

    def test_wildcard_patch(self):
        assert satisfies("1.2.0", "~1.2.x") is True
        assert satisfies("1.2.99", "~1.2.x") is True


class TestErrors:
    """Tests for malformed ranges and versions."""

    @pytest.mark.parametrize("range_str", ["=>1.0.0", "~>1.0", "==1.0.0", "^~1.0.0"])
    def test_unknown_operator(self, range_str):
        with pytest.raises(ParseError):
            satisfies("1.0.0", range_str)

    @pytest.mark.parametrize("range_str", [
        ">=1.0.0 <2.0.0",
        "1.x || 2.x",
        "1.0.0 - 2.0.0",
        ">=1.0.0,<2.0.0",
    ])
    def test_compound_ranges_unsupported(self, range_str):
        with pytest.raises(ParseError):
            satisfies("1.5.0", range_str)

    def test_malformed_version(self):
        with pytest.raises(ParseError):
            satisfies("bad", "^1.0.0")

    def test_validate_range(self):
        assert validate_range("^1.2.0") is True
        assert validate_range("*") is True
        assert validate_range("=>1.0.0") is False
        assert validate_range("") is False
        assert validate_range(None) is False


class TestParseRange:
    """Tests for parse_range() and split_operator()."""

    def test_operator_and_bound(self):
        expression = parse_range("^1.2.0")
        assert expression.operator == "^"
        assert expression.bound == parse("1.2.0")
        assert not expression.accepts_all

    def test_default_operator(self):
        assert parse_range("1.2.3").operator == "="

    def test_sentinel(self):
        assert parse_range("*").accepts_all

    def test_split_operator(self):
        assert split_operator(">=1.0") == (">=", "1.0")
        assert split_operator("1.0") == ("=", "1.0")
        assert split_operator("v1.0") == ("=", "v1.0")
