"""Version string parsing.

Grammar (case-insensitive)::

    [operator chars v^~<>=]  major  [.minor [.patch]]  [-prerelease]  [+build]

minor and patch are digits or a single wildcard (x, X, *); prerelease and
build are dot-separated identifiers made of [0-9A-Za-z-].
"""

import string
from typing import List, Optional, Tuple

from depshare.constants import Constants
from .errors import ParseError
from .models import (
    ABSENT,
    Component,
    ComponentKind,
    Identifier,
    IdentifierKind,
    ParsedVersion,
)

_DIGITS = frozenset(string.digits)
_IDENTIFIER_CHARS = frozenset(string.ascii_letters + string.digits + "-")


def _is_digits(token: str) -> bool:
    return bool(token) and all(c in _DIGITS for c in token)


def _to_number(value: str, token: str, name: str) -> int:
    if len(token) > Constants.MAX_NUMBER_DIGITS:
        raise ParseError(value, f"{name} is too large ({len(token)} digits)")
    return int(token)


def classify_segment(token: str) -> Identifier:
    """Classify a segment as Numeric when it is entirely digits, else Textual."""
    if _is_digits(token):
        return Identifier(IdentifierKind.NUMERIC, _to_number(token, token, "identifier"))
    return Identifier(IdentifierKind.TEXTUAL, token)


def _split_operator(text: str) -> Tuple[str, str]:
    """Split the leading run of prefix characters from the rest."""
    end = 0
    while end < len(text) and text[end] in Constants.VERSION_PREFIX_CHARS:
        end += 1
    return text[:end], text[end:]


def _split(text: str) -> Tuple[List[str], Optional[str], Optional[str]]:
    """Split a version body into core parts, raw prerelease and raw build.

    Prerelease/build are None when their separator is missing, which keeps
    "1.0.0-" distinguishable from "1.0.0".
    """
    build = None
    if "+" in text:
        text, build = text.split("+", 1)
    prerelease = None
    if "-" in text:
        text, prerelease = text.split("-", 1)
    return text.split("."), prerelease, build


def split_core(value: str) -> Tuple[str, str, str, str]:
    """Return (major, minor, patch, prerelease) as raw strings.

    Strips a leading "v" and any build suffix; absent parts are "".
    """
    text = value.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    core, prerelease, _ = _split(text)
    core = (core + ["", "", ""])[:3]
    return core[0], core[1], core[2], prerelease or ""


def _parse_component(value: str, token: str, name: str) -> Component:
    if token in Constants.WILDCARDS:
        return Component(ComponentKind.WILDCARD, 0, token)
    if not _is_digits(token):
        raise ParseError(value, f"{name} must be digits or a wildcard, got {token!r}")
    return Component(ComponentKind.NUMERIC, _to_number(value, token, name), token)


def _parse_identifiers(value: str, raw: str, name: str) -> List[str]:
    tokens = raw.split(".")
    for token in tokens:
        if not token:
            raise ParseError(value, f"empty {name} identifier")
        if any(c not in _IDENTIFIER_CHARS for c in token):
            raise ParseError(value, f"invalid character in {name} identifier {token!r}")
    return tokens


def parse(value: str, keep_operator: bool = False) -> ParsedVersion:
    """Parse a version (or the bound of a range) into a ParsedVersion.

    Args:
        value: Version string, optionally prefixed with v/^/~/</>/=.
        keep_operator: Record the stripped operator prefix on the result.

    Returns:
        ParsedVersion.

    Raises:
        ParseError: The string does not match the grammar.
    """
    if not isinstance(value, str):
        raise ParseError(value, "expected a string")
    prefix, body = _split_operator(value.strip())
    if not body:
        raise ParseError(value, "missing major version")

    core, prerelease_raw, build_raw = _split(body)
    if len(core) > 3:
        raise ParseError(value, "too many core components")
    if not _is_digits(core[0]):
        raise ParseError(value, f"major must be digits, got {core[0]!r}")
    major = _to_number(value, core[0], "major")

    minor = _parse_component(value, core[1], "minor") if len(core) > 1 else ABSENT
    patch = _parse_component(value, core[2], "patch") if len(core) > 2 else ABSENT

    prerelease: Tuple[Identifier, ...] = ()
    if prerelease_raw is not None:
        prerelease = tuple(
            classify_segment(t) for t in _parse_identifiers(value, prerelease_raw, "prerelease")
        )
    build = ""
    if build_raw is not None:
        build = ".".join(_parse_identifiers(value, build_raw, "build"))

    operator = ""
    if keep_operator:
        operator = prefix.replace("v", "").replace("V", "")
    return ParsedVersion(
        major=major,
        minor=minor,
        patch=patch,
        prerelease=prerelease,
        build=build,
        operator=operator,
    )


def validate(value: str) -> bool:
    """Return True if value is a universal-accept sentinel or a parseable version."""
    if not isinstance(value, str):
        return False
    if value.strip() in Constants.ACCEPTS_ALL:
        return True
    try:
        parse(value)
    except ParseError:
        return False
    return True
