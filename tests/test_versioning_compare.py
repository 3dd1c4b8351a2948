"""Tests for version comparison."""

import itertools

import pytest

from depshare.versioning import (
    ParseError,
    classify_segment,
    compare,
    compare_identifiers,
    compare_prerelease,
    parse,
    sort_key,
)

# Ordered lowest to highest, per semver precedence.
ORDERED = [
    "0.9.9",
    "1.0.0-0",
    "1.0.0-1",
    "1.0.0-alpha",
    "1.0.0-alpha.1",
    "1.0.0-alpha.beta",
    "1.0.0-beta",
    "1.0.0-beta.2",
    "1.0.0-beta.11",
    "1.0.0-rc.1",
    "1.0.0",
    "1.0.1",
    "1.1.0",
    "1.9.9",
    "1.10.0",
    "2.0.0",
]


class TestCompareExamples:
    """Tests for the documented comparison examples."""

    def test_equal(self):
        assert compare("1.2.3", "1.2.3") == 0

    def test_major_difference(self):
        assert compare("2.0.0", "1.9.9") == 1

    def test_prerelease_below_release(self):
        assert compare("1.0.0-alpha", "1.0.0") == -1

    def test_shorter_prerelease_sorts_lower(self):
        assert compare("1.0.0-alpha", "1.0.0-alpha.1") == -1

    def test_textual_prerelease_order(self):
        assert compare("1.0.0-beta", "1.0.0-alpha") == 1

    def test_numeric_components_not_lexicographic(self):
        assert compare("1.10.0", "1.9.0") == 1
        assert compare("1.0.0-beta.11", "1.0.0-beta.2") == 1

    def test_numeric_identifier_below_textual(self):
        assert compare("1.0.0-1", "1.0.0-alpha") == -1
        assert compare("1.0.0-alpha.999", "1.0.0-alpha.beta") == -1

    def test_missing_components_count_as_zero(self):
        assert compare("1", "1.0.0") == 0
        assert compare("1.2", "1.2.0") == 0
        assert compare("1.2", "1.2.1") == -1

    def test_wildcard_counts_as_zero(self):
        assert compare("1.x", "1.0.0") == 0

    def test_build_metadata_ignored(self):
        assert compare("1.0.0+build.1", "1.0.0+build.2") == 0
        assert compare("1.0.0-rc.1+a", "1.0.0-rc.1") == 0

    def test_prefixes_ignored(self):
        assert compare("v1.2.3", "1.2.3") == 0

    def test_accepts_parsed_versions(self):
        assert compare(parse("1.2.3"), "1.2.4") == -1

    def test_malformed_raises(self):
        with pytest.raises(ParseError):
            compare("1.2.3", "not-a-version")


class TestCompareProperties:
    """Ordering properties over a fixed corpus."""

    def test_sorted_corpus_is_ordered(self):
        for lower, higher in zip(ORDERED, ORDERED[1:]):
            assert compare(lower, higher) == -1, (lower, higher)

    def test_antisymmetric(self):
        for a, b in itertools.product(ORDERED, repeat=2):
            assert compare(a, b) == -compare(b, a)

    def test_transitive(self):
        for a, b, c in itertools.combinations(ORDERED, 3):
            assert compare(a, b) == -1
            assert compare(b, c) == -1
            assert compare(a, c) == -1

    def test_equality_is_transitive(self):
        equal = ["1.2", "1.2.0", "v1.2.0+build", "1.2.x"]
        for a, b, c in itertools.permutations(equal, 3):
            assert compare(a, b) == 0 and compare(b, c) == 0
            assert compare(a, c) == 0

    def test_sort_key(self):
        shuffled = list(reversed(ORDERED))
        assert sorted(shuffled, key=sort_key) == ORDERED

    def test_agrees_with_semantic_version(self):
        semantic_version = pytest.importorskip("semantic_version")
        for a, b in itertools.product(ORDERED, repeat=2):
            sa, sb = semantic_version.Version(a), semantic_version.Version(b)
            expected = (sa > sb) - (sa < sb)
            assert compare(a, b) == expected, (a, b)


class TestIdentifierComparison:
    """Tests for identifier-level helpers."""

    def test_compare_identifiers(self):
        assert compare_identifiers(classify_segment("2"), classify_segment("10")) == -1
        assert compare_identifiers(classify_segment("10"), classify_segment("alpha")) == -1
        assert compare_identifiers(classify_segment("beta"), classify_segment("alpha")) == 1
        assert compare_identifiers(classify_segment("rc"), classify_segment("rc")) == 0

    def test_compare_prerelease_release_highest(self):
        pre = (classify_segment("alpha"),)
        assert compare_prerelease((), pre) == 1
        assert compare_prerelease(pre, ()) == -1
        assert compare_prerelease((), ()) == 0
