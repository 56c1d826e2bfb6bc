from __future__ import annotations

import re
from collections.abc import Callable

from npcscript.modules.parsed import lines as nodes
from npcscript.modules.parsed.base import ParsedData
from npcscript.modules.parsed.data import (
    CharacterRace,
    CharacterSex,
    Direction,
    EquipmentSlot,
    PlayerLanguage,
    Towns,
    enum_by_name,
)

LineBuilder = Callable[[re.Match[str]], ParsedData]

_TEXT_PAIR = r'"(?P<de>[^"]*)"\s*,\s*"(?P<en>[^"]*)"'

_MESSAGE_KEYWORDS = {"lookat": "lookat", "usemsg": "use", "wronglangmsg": "confused"}
_TRADE_TEXT_KEYWORDS = {
    "tradenotenoughmoneymsg": "no_money",
    "tradefinishedmsg": "finished",
    "tradefinishedwithouttradingmsg": "finished_without_trade",
    "tradewrongitemmsg": "wrong_item",
}
_TRADE_MODES = {"sell": "sell", "buyprimary": "buyPrimary", "buysecondary": "buySecondary"}


def _rx(pattern: str) -> re.Pattern[str]:
    return re.compile(rf"^{pattern}$", re.IGNORECASE)


def _switch(text: str) -> bool:
    return text.lower() in {"on", "true", "yes"}


def _item_ids(text: str) -> tuple[int, ...]:
    return tuple(int(part) for part in text.split(",") if part.strip())


# Tried top to bottom; talk lines are handled separately because they carry
# their own diagnostics.
LINE_PATTERNS: list[tuple[str, re.Pattern[str], LineBuilder]] = [
    ("empty", _rx(r"\s*"), lambda m: nodes.ParsedEmptyLine()),
    ("comment", _rx(r"--\s?(?P<text>.*)"), lambda m: nodes.ParsedComment(text=m.group("text").rstrip())),
    ("name", _rx(r'name\s*=\s*"(?P<v>[^"]+)"'), lambda m: nodes.ParsedNpcName(name=m.group("v"))),
    (
        "text_property",
        _rx(r'(?P<prop>job|author)\s*=\s*"(?P<v>[^"]*)"'),
        lambda m: nodes.ParsedTextProperty(prop=m.group("prop").lower(), text=m.group("v")),
    ),
    (
        "affiliation",
        _rx(r'affiliation\s*=\s*"?(?P<v>\w+)"?'),
        lambda m: nodes.ParsedAffiliation(town=enum_by_name(Towns, m.group("v"))),
    ),
    ("race", _rx(r"race\s*=\s*(?P<v>\w+)"), lambda m: nodes.ParsedRace(race=enum_by_name(CharacterRace, m.group("v")))),
    ("sex", _rx(r"sex\s*=\s*(?P<v>\w+)"), lambda m: nodes.ParsedSex(sex=enum_by_name(CharacterSex, m.group("v")))),
    (
        "position",
        _rx(r"position\s*=\s*(?P<x>-?\d+)\s*,\s*(?P<y>-?\d+)\s*,\s*(?P<z>-?\d+)"),
        lambda m: nodes.ParsedPosition(x=int(m.group("x")), y=int(m.group("y")), z=int(m.group("z"))),
    ),
    (
        "direction",
        _rx(r"direction\s*=\s*(?P<v>\w+)"),
        lambda m: nodes.ParsedDirection(direction=enum_by_name(Direction, m.group("v"))),
    ),
    (
        "language",
        _rx(r"(?P<default>default)?language\s*=\s*(?P<v>\w+)"),
        lambda m: nodes.ParsedLanguage(
            language=enum_by_name(PlayerLanguage, m.group("v")),
            default=bool(m.group("default")),
        ),
    ),
    (
        "auto_introduce",
        _rx(r"autointroduce\s*=\s*(?P<v>on|off|true|false|yes|no)"),
        lambda m: nodes.ParsedAutoIntroduce(enabled=_switch(m.group("v"))),
    ),
    (
        "message",
        _rx(rf"(?P<key>lookat|usemsg|wronglangmsg)\s*=\s*{_TEXT_PAIR}"),
        lambda m: nodes.ParsedMessage(
            message=_MESSAGE_KEYWORDS[m.group("key").lower()],
            german=m.group("de"),
            english=m.group("en"),
        ),
    ),
    (
        "colors",
        _rx(r"color(?P<part>hair|skin)\s*=\s*(?P<r>\d+)\s*,\s*(?P<g>\d+)\s*,\s*(?P<b>\d+)"),
        lambda m: nodes.ParsedColors(
            part=m.group("part").lower(),
            red=int(m.group("r")),
            green=int(m.group("g")),
            blue=int(m.group("b")),
        ),
    ),
    (
        "hair",
        _rx(r"(?P<part>hair|beard)id\s*=\s*(?P<v>\d+)"),
        lambda m: nodes.ParsedHair(part=m.group("part").lower(), hair_id=int(m.group("v"))),
    ),
    (
        "equipment",
        _rx(r"item(?P<slot>head|chest|hands|mainhand|secondhand|trousers|shoes|coat)\s*=\s*(?P<v>\d+)"),
        lambda m: nodes.ParsedEquipment(slot=enum_by_name(EquipmentSlot, m.group("slot")), item_id=int(m.group("v"))),
    ),
    ("walking", _rx(r"radius\s*=\s*(?P<v>\d+)"), lambda m: nodes.ParsedWalkingRadius(radius=int(m.group("v")))),
    (
        "trade_text",
        _rx(
            r"(?P<key>tradenotenoughmoneymsg|tradefinishedmsg|tradefinishedwithouttradingmsg|tradewrongitemmsg)"
            rf"\s*=?\s*{_TEXT_PAIR}"
        ),
        lambda m: nodes.ParsedTradeText(
            text_type=_TRADE_TEXT_KEYWORDS[m.group("key").lower()],
            german=m.group("de"),
            english=m.group("en"),
        ),
    ),
    (
        "trade_items",
        _rx(r"(?P<mode>sell|buyprimary|buysecondary)items\s*=\s*(?P<ids>\d+(?:\s*,\s*\d+)*)"),
        lambda m: nodes.ParsedTradeItems(mode=_TRADE_MODES[m.group("mode").lower()], item_ids=_item_ids(m.group("ids"))),
    ),
    (
        "cycle_text",
        _rx(rf"cycletext\s*=?\s*{_TEXT_PAIR}"),
        lambda m: nodes.ParsedCycleText(german=m.group("de"), english=m.group("en")),
    ),
]


def match_line(text: str) -> tuple[str, ParsedData] | None:
    for name, pattern, build in LINE_PATTERNS:
        match = pattern.match(text)
        if match:
            return name, build(match)
    return None
