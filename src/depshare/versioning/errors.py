"""Exceptions raised by the versioning package."""

from typing import Any


class ParseError(ValueError):
    """A version or range string does not match the accepted grammar."""

    def __init__(self, value: Any, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid version {value!r}: {reason}")
