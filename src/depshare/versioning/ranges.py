"""Range satisfaction for single-operator ranges and caret/tilde shorthand.

Compound ranges (comma lists, ``||`` unions, hyphen ranges) are not supported.
"""

import logging
from typing import Tuple

from depshare.constants import Constants, RangeOperators
from depshare.common.logging_utils import extra_context, is_debug_enabled
from .compare import compare
from .errors import ParseError
from .models import Component, ParsedVersion, RangeExpression
from .parser import parse

logger = logging.getLogger(__name__)

_SHORTHAND = (RangeOperators.CARET.value, RangeOperators.TILDE.value)


def is_accept_all(range_str: str) -> bool:
    """True if range_str is one of the universal-accept sentinels."""
    return range_str.strip() in Constants.ACCEPTS_ALL


def split_operator(range_str: str) -> Tuple[str, str]:
    """Split a range into (operator, bound); operator defaults to "="."""
    text = range_str.strip()
    end = 0
    while end < len(text) and text[end] in Constants.OPERATOR_CHARS:
        end += 1
    operator = text[:end] or RangeOperators.EQ.value
    return operator, text[end:]


def parse_range(range_str: str) -> RangeExpression:
    """Parse a range string into a RangeExpression.

    Raises:
        ParseError: Unknown operator or malformed bound.
    """
    if not isinstance(range_str, str):
        raise ParseError(range_str, "expected a range string")
    if is_accept_all(range_str):
        return RangeExpression(raw=range_str, operator="*", bound=None)
    operator, bound = split_operator(range_str)
    if operator not in Constants.OPERATOR_RESULTS and operator not in _SHORTHAND:
        raise ParseError(range_str, f"unsupported range operator {operator!r}")
    return RangeExpression(raw=range_str, operator=operator, bound=parse(bound))


def validate_range(range_str: str) -> bool:
    """Return True if range_str can be evaluated by satisfies()."""
    try:
        parse_range(range_str)
    except ParseError:
        return False
    return True


def _compare_component(a: Component, b: Component) -> int:
    # A wildcard on either side matches any value at that position.
    if a.is_wildcard or b.is_wildcard:
        return 0
    x, y = a.as_number(), b.as_number()
    return (x > y) - (x < y)


def _satisfies_shorthand(version: ParsedVersion, operator: str, bound: ParsedVersion) -> bool:
    if version.major != bound.major:
        return False
    if operator == RangeOperators.CARET.value:
        for a, b in ((version.minor, bound.minor), (version.patch, bound.patch)):
            result = _compare_component(a, b)
            if result:
                return result > 0
        return True
    if _compare_component(version.minor, bound.minor) != 0:
        return False
    return _compare_component(version.patch, bound.patch) >= 0


def satisfies(version: str, range_str: str) -> bool:
    """Decide whether version satisfies range_str.

    Args:
        version: Concrete version string.
        range_str: Range such as ``^1.2.0``, ``>=2.0.0``, ``1.4.1`` or ``*``.

    Returns:
        True if the version is inside the range.

    Raises:
        ParseError: Either string is malformed.
    """
    expression = parse_range(range_str)
    if expression.accepts_all:
        return True

    parsed = parse(version)
    bound = expression.bound
    if expression.operator in _SHORTHAND:
        result = _satisfies_shorthand(parsed, expression.operator, bound)
    else:
        result = compare(parsed, bound) in Constants.OPERATOR_RESULTS[expression.operator]

    if is_debug_enabled(logger):
        logger.debug(
            "Range evaluated",
            extra=extra_context(
                event="range_check",
                component="ranges",
                version=version,
                range=range_str,
                outcome=result,
            ),
        )
    return result
