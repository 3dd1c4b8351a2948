"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    USAGE_ERROR = 2


class RangeOperators(Enum):
    """Range operators understood by the range evaluator.

    Args:
        Enum (string): Operator prefixes of a range expression.
    """

    GT = ">"
    GTE = ">="
    EQ = "="
    LTE = "<="
    LT = "<"
    CARET = "^"
    TILDE = "~"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Range strings that every version satisfies
    ACCEPTS_ALL = ("*", "x", ">=0")
    # Accepted compare() results per comparison operator
    OPERATOR_RESULTS = {
        RangeOperators.GT.value: (1,),
        RangeOperators.GTE.value: (0, 1),
        RangeOperators.EQ.value: (0,),
        RangeOperators.LTE.value: (-1, 0),
        RangeOperators.LT.value: (-1,),
    }
    OPERATOR_CHARS = "<>=~^"
    VERSION_PREFIX_CHARS = "vV^~<>="
    WILDCARDS = ("x", "X", "*")
    # Longest digit run accepted as a number
    MAX_NUMBER_DIGITS = 256

    DEPS_PREFIX = "/deps:"
    INTERNAL_PREFIX = "/_depshare"
    QUERY_PATH = "path"
    QUERY_PROVIDED = "provided"
    QUERY_VERSION = "version"
    QUERY_DEMANDED = "demanded"

    DEFAULT_HOST = "127.0.0.1"
    DEFAULT_PORT = 8080
    DEFAULT_REDIRECT_STATUS = 302
    REDIRECT_STATUSES = (301, 302, 303, 307, 308)
    REQUEST_TIMEOUT = 30  # Timeout in seconds for upstream requests

    ENV_LOG_LEVEL = "DEPSHARE_LOG_LEVEL"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    USER_AGENT = "depshare-proxy/1.0"
