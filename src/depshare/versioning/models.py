"""Data models for versions and range expressions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class ComponentKind(Enum):
    """How a minor or patch position was written."""
    ABSENT = "absent"
    NUMERIC = "numeric"
    WILDCARD = "wildcard"


class IdentifierKind(Enum):
    """Kind of a dot-separated segment (prerelease identifier or core digit run)."""
    NUMERIC = "numeric"
    TEXTUAL = "textual"


@dataclass(frozen=True)
class Component:
    """Minor or patch position of a version core."""
    kind: ComponentKind
    value: int = 0
    raw: str = ""

    @property
    def is_wildcard(self) -> bool:
        return self.kind == ComponentKind.WILDCARD

    @property
    def is_absent(self) -> bool:
        return self.kind == ComponentKind.ABSENT

    def as_number(self) -> int:
        """Numeric value used for ordering; absent and wildcard count as 0."""
        return self.value if self.kind == ComponentKind.NUMERIC else 0

    def __str__(self) -> str:
        return self.raw


ABSENT = Component(ComponentKind.ABSENT)


@dataclass(frozen=True)
class Identifier:
    """A classified segment: Numeric(int) or Textual(str)."""
    kind: IdentifierKind
    value: Union[int, str]

    @property
    def is_numeric(self) -> bool:
        return self.kind == IdentifierKind.NUMERIC

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ParsedVersion:
    """Structured version; build metadata and operator never take part in ordering."""
    major: int
    minor: Component = ABSENT
    patch: Component = ABSENT
    prerelease: Tuple[Identifier, ...] = ()
    build: str = ""
    operator: str = ""

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def core_numbers(self) -> Tuple[int, int, int]:
        """Return (major, minor, patch) with absent/wildcard positions as 0."""
        return self.major, self.minor.as_number(), self.patch.as_number()

    def __str__(self) -> str:
        text = str(self.major)
        for part in (self.minor, self.patch):
            if part.is_absent:
                break
            text += f".{part}"
        if self.prerelease:
            text += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            text += f"+{self.build}"
        return self.operator + text


@dataclass(frozen=True)
class RangeExpression:
    """Single-operator range; bound is None for the universal-accept sentinel."""
    raw: str
    operator: str
    bound: Optional[ParsedVersion]

    @property
    def accepts_all(self) -> bool:
        return self.bound is None
