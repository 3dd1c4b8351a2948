"""Semantic version parsing, ordering and range evaluation."""

from .errors import ParseError
from .models import (
    Component,
    ComponentKind,
    Identifier,
    IdentifierKind,
    ParsedVersion,
    RangeExpression,
)
from .parser import classify_segment, parse, split_core, validate
from .compare import compare, compare_identifiers, compare_prerelease, sort_key
from .ranges import is_accept_all, parse_range, satisfies, split_operator, validate_range

__all__ = [
    "ParseError",
    "Component",
    "ComponentKind",
    "Identifier",
    "IdentifierKind",
    "ParsedVersion",
    "RangeExpression",
    "classify_segment",
    "parse",
    "split_core",
    "validate",
    "compare",
    "compare_identifiers",
    "compare_prerelease",
    "sort_key",
    "is_accept_all",
    "parse_range",
    "satisfies",
    "split_operator",
    "validate_range",
]
