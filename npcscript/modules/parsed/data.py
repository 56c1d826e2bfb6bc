from __future__ import annotations

import re
from enum import Enum, IntEnum
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

_E = TypeVar("_E", bound=Enum)

SAID_NUMBER = "%NUMBER"
_EXPRESSION_RE = re.compile(r"^expr\s*\((?P<body>.+)\)$", re.IGNORECASE)
_EXPRESSION_BODY_RE = re.compile(r"^(?:%NUMBER|[0-9+\-*/()\s])+$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


class CharacterRace(IntEnum):
    human = 0
    dwarf = 1
    halfling = 2
    elf = 3
    orc = 4
    lizardman = 5


class CharacterSex(IntEnum):
    male = 0
    female = 1


class Towns(IntEnum):
    Free = 0
    Cadomyr = 1
    Runewick = 2
    Galmair = 3


class Direction(IntEnum):
    north = 0
    northeast = 1
    east = 2
    southeast = 3
    south = 4
    southwest = 5
    west = 6
    northwest = 7


class PlayerLanguage(IntEnum):
    common = 0
    human = 1
    dwarf = 2
    elf = 3
    lizard = 4
    orc = 5
    halfling = 6
    fairy = 7
    gnome = 8
    goblin = 9
    ancient = 10


class EquipmentSlot(IntEnum):
    head = 1
    chest = 3
    hands = 4
    mainHand = 5
    secondHand = 6
    trousers = 9
    shoes = 10
    coat = 11

    @property
    def keyword(self) -> str:
        return f"item{self.name[0].upper()}{self.name[1:]}"


class ItemPositions(str, Enum):
    all = "all"
    backpack = "backpack"
    belt = "belt"
    body = "body"


class CompareOperators(str, Enum):
    equal = "="
    not_equal = "~="
    lesser = "<"
    greater = ">"
    lesser_equal = "<="
    greater_equal = ">="

    @classmethod
    def from_symbol(cls, symbol: str) -> CompareOperators:
        text = str(symbol or "").strip()
        text = _COMPARE_ALIASES.get(text, text)
        return cls(text)


_COMPARE_ALIASES = {"==": "=", "!=": "~=", "<>": "~=", "=<": "<=", "=>": ">="}


class CalculationOperators(str, Enum):
    set = "="
    add = "+"
    subtract = "-"

    @classmethod
    def from_symbol(cls, symbol: str) -> CalculationOperators:
        text = str(symbol or "").strip()
        if text in {"+=", "-="}:
            text = text[0]
        return cls(text)


def enum_by_name(enum_type: type[_E], name: str) -> _E:
    key = str(name or "").strip().lower()
    for member in enum_type:
        if member.name.lower() == key:
            return member
    raise ValueError(f"unknown {enum_type.__name__} '{name}'")


class AdvancedNumber(BaseModel):
    """A numeric argument: a literal, the number said by the player, or an expression over it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["normal", "said", "expression"] = "normal"
    value: int = 0
    expression: str | None = None

    @model_validator(mode="after")
    def validate_shape(self):
        if self.kind == "expression":
            body = str(self.expression or "").strip()
            if not body or not _EXPRESSION_BODY_RE.match(body):
                raise ValueError(f"invalid number expression '{self.expression}'")
        elif self.expression is not None:
            raise ValueError("expression is only allowed for kind='expression'")
        return self

    @classmethod
    def parse(cls, text: str) -> AdvancedNumber:
        raw = str(text or "").strip()
        if _INTEGER_RE.match(raw):
            return cls(value=int(raw))
        if raw.upper() == SAID_NUMBER:
            return cls(kind="said")
        match = _EXPRESSION_RE.match(raw)
        if match:
            return cls(kind="expression", expression=" ".join(match.group("body").split()))
        raise ValueError(f"'{raw}' is not a number, {SAID_NUMBER} or expr(...)")

    def easynpc(self) -> str:
        if self.kind == "said":
            return SAID_NUMBER
        if self.kind == "expression":
            return f"expr({self.expression})"
        return str(self.value)

    def lua(self) -> str:
        if self.kind == "said":
            return f'"{SAID_NUMBER}"'
        if self.kind == "expression":
            body = str(self.expression).replace(SAID_NUMBER, "number")
            return f"function(number) return ({body}); end"
        return str(self.value)
