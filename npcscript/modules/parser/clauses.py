from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from npcscript.modules.parsed.data import (
    AdvancedNumber,
    CalculationOperators,
    CharacterRace,
    CharacterSex,
    CompareOperators,
    ItemPositions,
    Towns,
    enum_by_name,
)
from npcscript.modules.parsed.talk import conditions as cond
from npcscript.modules.parsed.talk import consequences as cons

_QUOTED = r'"(?P<text>[^"]*)"'
_COMPARE = r"(?P<op>==|~=|!=|<>|<=|>=|=<|=>|=|<|>)"
_CALC = r"(?P<op>\+=|-=|=|\+|-)"
_COUNT = r"(?P<count>expr\s*\(.*\)|[^,()]+?)"

ClauseBuilder = Callable[[re.Match[str]], Any]


def split_clauses(text: str) -> list[str]:
    """Split on commas that are neither quoted nor inside parentheses."""
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quoted = False
    for char in text:
        if char == '"':
            quoted = not quoted
        elif not quoted and char == "(":
            depth += 1
        elif not quoted and char == ")":
            depth = max(0, depth - 1)
        elif not quoted and depth == 0 and char == ",":
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return parts


def find_arrow(text: str) -> int:
    quoted = False
    for index, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        elif not quoted and text.startswith("->", index):
            return index
    return -1


def _rx(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"^{pattern}$", re.IGNORECASE)


def _number(match: re.Match[str], group: str = "value") -> AdvancedNumber:
    return AdvancedNumber.parse(match.group(group))


CONDITION_PATTERNS: list[tuple[re.Pattern[str], ClauseBuilder]] = [
    (_rx(_QUOTED), lambda m: cond.ConditionTrigger(text=m.group("text"))),
    (_rx(r"isadmin"), lambda m: cond.ConditionAdmin()),
    (_rx(r"(?P<lang>english|german)"), lambda m: cond.ConditionLanguage(language=m.group("lang").lower())),
    (_rx(r"race\s*=\s*(?P<race>\w+)"), lambda m: cond.ConditionRace(race=enum_by_name(CharacterRace, m.group("race")))),
    (_rx(r"sex\s*=\s*(?P<sex>\w+)"), lambda m: cond.ConditionSex(sex=enum_by_name(CharacterSex, m.group("sex")))),
    (
        _rx(rf"state\s*{_COMPARE}\s*(?P<value>.+)"),
        lambda m: cond.ConditionState(operator=CompareOperators.from_symbol(m.group("op")), value=_number(m)),
    ),
    (
        _rx(rf"money\s*{_COMPARE}\s*(?P<value>.+)"),
        lambda m: cond.ConditionMoney(operator=CompareOperators.from_symbol(m.group("op")), value=_number(m)),
    ),
    (_rx(r"town\s*=\s*(?P<town>\w+)"), lambda m: cond.ConditionTown(town=enum_by_name(Towns, m.group("town")))),
    (
        _rx(rf"item\s*\(\s*(?P<id>\d+)\s*(?:,\s*(?P<pos>\w+)\s*)?\)\s*{_COMPARE}\s*(?P<value>.+)"),
        lambda m: cond.ConditionItem(
            item_id=int(m.group("id")),
            position=enum_by_name(ItemPositions, m.group("pos") or "all"),
            operator=CompareOperators.from_symbol(m.group("op")),
            value=_number(m),
        ),
    ),
    (_rx(r"chance\s*\(\s*(?P<pct>\d+)\s*\)"), lambda m: cond.ConditionChance(percent=int(m.group("pct")))),
    (
        _rx(rf"queststatus\s*\(\s*(?P<id>\d+)\s*\)\s*{_COMPARE}\s*(?P<value>.+)"),
        lambda m: cond.ConditionQuest(
            quest_id=int(m.group("id")),
            operator=CompareOperators.from_symbol(m.group("op")),
            value=_number(m),
        ),
    ),
    (_rx(r"talkstate\s*=\s*(?P<mode>busy|idle)"), lambda m: cond.ConditionTalkState(mode=m.group("mode").lower())),
]

CONSEQUENCE_PATTERNS: list[tuple[re.Pattern[str], ClauseBuilder]] = [
    (_rx(_QUOTED), lambda m: cons.ConsequenceAnswer(text=m.group("text"))),
    (_rx(rf"inform\s*\(\s*{_QUOTED}\s*\)"), lambda m: cons.ConsequenceInform(text=m.group("text"))),
    (
        _rx(rf"state\s*{_CALC}\s*(?P<value>.+)"),
        lambda m: cons.ConsequenceState(operator=CalculationOperators.from_symbol(m.group("op")), value=_number(m)),
    ),
    (
        _rx(rf"money\s*{_CALC}\s*(?P<value>.+)"),
        lambda m: cons.ConsequenceMoney(operator=CalculationOperators.from_symbol(m.group("op")), value=_number(m)),
    ),
    (_rx(r"town\s*=\s*(?P<town>\w+)"), lambda m: cons.ConsequenceTown(town=enum_by_name(Towns, m.group("town")))),
    (_rx(r"trade"), lambda m: cons.ConsequenceTrade()),
    (_rx(r"gemcraft"), lambda m: cons.ConsequenceGemcraft()),
    (
        _rx(rf"item\s*\(\s*(?P<id>\d+)\s*,\s*{_COUNT}\s*(?:,\s*(?P<quality>\d+)\s*)?\)"),
        lambda m: cons.ConsequenceItem(
            item_id=int(m.group("id")),
            count=_number(m, "count"),
            quality=int(m.group("quality") or 333),
        ),
    ),
    (
        _rx(rf"deleteitem\s*\(\s*(?P<id>\d+)\s*,\s*{_COUNT}\s*\)"),
        lambda m: cons.ConsequenceDeleteItem(item_id=int(m.group("id")), count=_number(m, "count")),
    ),
    (
        _rx(rf"queststatus\s*\(\s*(?P<id>\d+)\s*\)\s*{_CALC}\s*(?P<value>.+)"),
        lambda m: cons.ConsequenceQuest(
            quest_id=int(m.group("id")),
            operator=CalculationOperators.from_symbol(m.group("op")),
            value=_number(m),
        ),
    ),
    (_rx(r"introduce"), lambda m: cons.ConsequenceIntroduce()),
    (
        _rx(r"warp\s*\(\s*(?P<x>-?\d+)\s*,\s*(?P<y>-?\d+)\s*,\s*(?P<z>-?\d+)\s*\)"),
        lambda m: cons.ConsequenceWarp(x=int(m.group("x")), y=int(m.group("y")), z=int(m.group("z"))),
    ),
    (
        _rx(r"talkstate\s*=\s*(?P<mode>begin|end|idle)"),
        lambda m: cons.ConsequenceTalkState(mode=m.group("mode").lower()),
    ),
    (_rx(r"repair"), lambda m: cons.ConsequenceRepair()),
]


def match_clause(text: str, patterns: list[tuple[re.Pattern[str], ClauseBuilder]]) -> Any | None:
    """Return the clause built by the first matching pattern, ``None`` when nothing matches.

    Builders raise ``ValueError`` (pydantic's ``ValidationError`` included) for
    values the pattern accepted but the clause rejects.
    """
    for pattern, build in patterns:
        match = pattern.match(text)
        if match:
            return build(match)
    return None
