"""Total ordering over parsed versions."""

import functools
from typing import Sequence, Union

from .models import Identifier, ParsedVersion
from .parser import parse

VersionLike = Union[str, ParsedVersion]


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def _coerce(version: VersionLike) -> ParsedVersion:
    if isinstance(version, ParsedVersion):
        return version
    return parse(version)


def compare_identifiers(a: Identifier, b: Identifier) -> int:
    """Compare two prerelease identifiers; Numeric sorts below Textual."""
    if a.is_numeric != b.is_numeric:
        return -1 if a.is_numeric else 1
    return _sign(a.value, b.value)


def compare_prerelease(p1: Sequence[Identifier], p2: Sequence[Identifier]) -> int:
    """Compare prerelease sequences; an empty sequence is a release and sorts highest."""
    if not p1 or not p2:
        return _sign(not p1, not p2)
    for a, b in zip(p1, p2):
        result = compare_identifiers(a, b)
        if result:
            return result
    return _sign(len(p1), len(p2))


def compare(v1: VersionLike, v2: VersionLike) -> int:
    """Compare two versions.

    Core components are compared numerically (absent or wildcard as 0), then
    prerelease precedence applies. Build metadata is ignored.

    Returns:
        -1, 0 or 1.

    Raises:
        ParseError: A string argument is not a valid version.
    """
    a = _coerce(v1)
    b = _coerce(v2)
    result = _sign(a.core_numbers(), b.core_numbers())
    if result:
        return result
    return compare_prerelease(a.prerelease, b.prerelease)


sort_key = functools.cmp_to_key(compare)
