from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar, Literal, TextIO

from pydantic import Field

from npcscript.config import settings
from npcscript.modules.parsed.base import EasyNpcStage, LuaStage, ParsedData
from npcscript.modules.parsed.data import (
    CharacterRace,
    CharacterSex,
    Direction,
    EquipmentSlot,
    PlayerLanguage,
    Towns,
)
from npcscript.modules.parsed.talk.base import lua_string

if TYPE_CHECKING:
    from npcscript.modules.writer.sql_builder import SqlBuilder

EASYNPC_HEADER_MARK = "-- [easyNPC]"
_LUA_NAME_RE = re.compile(r"[^a-z0-9_]+")

_BODY = frozenset({EasyNpcStage.BODY})


def lua_script_name(npc_name: str) -> str:
    text = "_".join(str(npc_name or "").strip().lower().split())
    return _LUA_NAME_RE.sub("", text) or "unnamed"


def _nl() -> str:
    return settings.lua_newline


class ParsedEmptyLine(ParsedData):
    kind: Literal["empty_line"] = "empty_line"

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write("\n")


class ParsedComment(ParsedData):
    kind: Literal["comment"] = "comment"
    text: str = ""

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"-- {self.text}".rstrip() + "\n")


class ParsedNpcName(ParsedData):
    """The ``name`` line; it also owns the frame of the generated Lua script."""

    kind: Literal["name"] = "name"
    name: str = Field(min_length=1)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = frozenset({EasyNpcStage.HEADER, EasyNpcStage.BODY})
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset(
        {LuaStage.HEADER, LuaStage.MODULE, LuaStage.INIT, LuaStage.FOOTER}
    )
    effects_sql: ClassVar[bool] = True

    @property
    def lua_name(self) -> str:
        return lua_script_name(self.name)

    @property
    def lua_module_name(self) -> str:
        return f"{settings.lua_script_prefix}{self.lua_name}"

    def required_modules(self) -> tuple[str, ...]:
        return (settings.lua_basic_module,)

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        if stage == EasyNpcStage.HEADER:
            target.write(f"{EASYNPC_HEADER_MARK} Lua script: {self.lua_module_name}\n")
            return
        target.write(f'name = "{self.name}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        nl = _nl()
        if stage == LuaStage.HEADER:
            target.write(f"-- NPC Name: {self.name}{nl}")
        elif stage == LuaStage.MODULE:
            target.write(f'module("{self.lua_module_name}", package.seeall){nl}{nl}')
        elif stage == LuaStage.INIT:
            target.write(f"function initNpc(){nl}mainNPC = {settings.lua_basic_module}.baseNPC();{nl}")
        elif stage == LuaStage.FOOTER:
            target.write(
                f"{nl}mainNPC:initDone();{nl}end;{nl}{nl}"
                f"function receiveText(npcChar, texttype, message, speaker) "
                f"mainNPC:receiveText(npcChar, speaker, message); end;{nl}"
                f"function nextCycle(npcChar) mainNPC:nextCycle(npcChar); end;{nl}"
                f"function lookAtNpc(npcChar, char, mode) mainNPC:lookAt(npcChar, char, mode); end;{nl}"
                f"function useNPC(npcChar, char, counter, param) mainNPC:use(npcChar, char); end;{nl}"
                f"initNpc();{nl}initNpc = nil;{nl}-- END{nl}"
            )

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value("npc_name", self.name)
        builder.set_npc_value("npc_script", self.lua_module_name)


class ParsedTextProperty(ParsedData):
    kind: Literal["text_property"] = "text_property"
    prop: Literal["job", "author"]
    text: str

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})

    LUA_LABELS: ClassVar[dict[str, str]] = {"job": "NPC Job", "author": "Author"}

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f'{self.prop} = "{self.text}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- {self.LUA_LABELS[self.prop]}: {self.text}{_nl()}")


class ParsedAffiliation(ParsedData):
    kind: Literal["affiliation"] = "affiliation"
    town: Towns

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f'affiliation = "{self.town.name}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- NPC Affiliation: {self.town.name}{_nl()}")


class ParsedRace(ParsedData):
    kind: Literal["race"] = "race"
    race: CharacterRace

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"race = {self.race.name}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- NPC Race: {self.race.name}{_nl()}")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value("npc_type", int(self.race))


class ParsedSex(ParsedData):
    kind: Literal["sex"] = "sex"
    sex: CharacterSex

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"sex = {self.sex.name}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- NPC Sex: {self.sex.name}{_nl()}")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value("npc_sex", int(self.sex))


class ParsedPosition(ParsedData):
    kind: Literal["position"] = "position"
    x: int
    y: int
    z: int

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"position = {self.x}, {self.y}, {self.z}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- NPC Position: {self.x}, {self.y}, {self.z}{_nl()}")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value("npc_posx", self.x)
        builder.set_npc_value("npc_posy", self.y)
        builder.set_npc_value("npc_posz", self.z)


class ParsedDirection(ParsedData):
    kind: Literal["direction"] = "direction"
    direction: Direction

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.HEADER})
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"direction = {self.direction.name}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"-- NPC Direction: {self.direction.name}{_nl()}")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value("npc_faceto", int(self.direction))


class ParsedLanguage(ParsedData):
    kind: Literal["language"] = "language"
    language: PlayerLanguage
    default: bool = False

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        keyword = "defaultLanguage" if self.default else "language"
        target.write(f"{keyword} = {self.language.name}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        method = "setDefaultLanguage" if self.default else "addLanguage"
        target.write(f"mainNPC:{method}({int(self.language)});{_nl()}")


class ParsedAutoIntroduce(ParsedData):
    kind: Literal["auto_introduce"] = "auto_introduce"
    enabled: bool

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"autointroduce = {'on' if self.enabled else 'off'}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"mainNPC:setAutoIntroduceMode({'true' if self.enabled else 'false'});{_nl()}")


class ParsedMessage(ParsedData):
    kind: Literal["message"] = "message"
    message: Literal["lookat", "use", "confused"]
    german: str
    english: str

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    KEYWORDS: ClassVar[dict[str, str]] = {"lookat": "lookat", "use": "useMsg", "confused": "wrongLangMsg"}
    LUA_METHODS: ClassVar[dict[str, str]] = {
        "lookat": "setLookat",
        "use": "setUseMessage",
        "confused": "setConfusedMessage",
    }

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f'{self.KEYWORDS[self.message]} = "{self.german}", "{self.english}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        method = self.LUA_METHODS[self.message]
        target.write(f"mainNPC:{method}({lua_string(self.german)}, {lua_string(self.english)});{_nl()}")


class ParsedColors(ParsedData):
    kind: Literal["colors"] = "colors"
    part: Literal["hair", "skin"]
    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        keyword = "colorHair" if self.part == "hair" else "colorSkin"
        target.write(f"{keyword} = {self.red}, {self.green}, {self.blue}\n")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value(f"npc_{self.part}red", self.red)
        builder.set_npc_value(f"npc_{self.part}green", self.green)
        builder.set_npc_value(f"npc_{self.part}blue", self.blue)


class ParsedHair(ParsedData):
    kind: Literal["hair"] = "hair"
    part: Literal["hair", "beard"]
    hair_id: int = Field(ge=0, le=255)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    effects_sql: ClassVar[bool] = True

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"{self.part}ID = {self.hair_id}\n")

    def build_sql(self, builder: SqlBuilder) -> None:
        builder.set_npc_value(f"npc_{self.part}", self.hair_id)


class ParsedEquipment(ParsedData):
    kind: Literal["equipment"] = "equipment"
    slot: EquipmentSlot
    item_id: int = Field(ge=0)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"{self.slot.keyword} = {self.item_id}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"mainNPC:setEquipment({int(self.slot)}, {self.item_id});{_nl()}")


class ParsedWalkingRadius(ParsedData):
    kind: Literal["walking_radius"] = "walking_radius"
    radius: int = Field(ge=0)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f"radius = {self.radius}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"mainNPC:setWalkingRadius({self.radius});{_nl()}")


class ParsedCycleText(ParsedData):
    kind: Literal["cycle_text"] = "cycle_text"
    german: str
    english: str

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.CYCLE_TEXT})

    def required_modules(self) -> tuple[str, ...]:
        return (settings.lua_talk_module,)

    def required_locals(self) -> tuple[str, ...]:
        return ("talkingNPC",)

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f'cycletext "{self.german}", "{self.english}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        target.write(f"talkingNPC:addCycleText({lua_string(self.german)}, {lua_string(self.english)});{_nl()}")


class ParsedTradeItems(ParsedData):
    kind: Literal["trade_items"] = "trade_items"
    mode: Literal["sell", "buyPrimary", "buySecondary"]
    item_ids: tuple[int, ...] = Field(min_length=1)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.TRADING})
    effects_sql: ClassVar[bool] = True

    def required_modules(self) -> tuple[str, ...]:
        return (settings.lua_trade_module,)

    def required_locals(self) -> tuple[str, ...]:
        return ("tradingNPC",)

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        items = ", ".join(str(item_id) for item_id in self.item_ids)
        target.write(f"{self.mode}Items = {items}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        for item_id in self.item_ids:
            target.write(
                f'tradingNPC:addItem({settings.lua_trade_module}.tradeNPCItem({item_id}, "{self.mode}"));{_nl()}'
            )

    def build_sql(self, builder: SqlBuilder) -> None:
        for item_id in self.item_ids:
            builder.add_trade_item(item_id=item_id, mode=self.mode)


class ParsedTradeText(ParsedData):
    kind: Literal["trade_text"] = "trade_text"
    text_type: Literal["no_money", "finished", "finished_without_trade", "wrong_item"]
    german: str
    english: str

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = _BODY
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.TRADING})

    KEYWORDS: ClassVar[dict[str, str]] = {
        "no_money": "tradeNotEnoughMoneyMsg",
        "finished": "tradeFinishedMsg",
        "finished_without_trade": "tradeFinishedWithoutTradingMsg",
        "wrong_item": "tradeWrongItemMsg",
    }
    LUA_METHODS: ClassVar[dict[str, str]] = {
        "no_money": "addNotEnoughMoneyMsg",
        "finished": "addDialogClosedMsg",
        "finished_without_trade": "addDialogClosedNoTradeMsg",
        "wrong_item": "addWrongItemMsg",
    }

    def required_modules(self) -> tuple[str, ...]:
        return (settings.lua_trade_module,)

    def required_locals(self) -> tuple[str, ...]:
        return ("tradingNPC",)

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        target.write(f'{self.KEYWORDS[self.text_type]} "{self.german}", "{self.english}"\n')

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        method = self.LUA_METHODS[self.text_type]
        target.write(f"tradingNPC:{method}({lua_string(self.german)}, {lua_string(self.english)});{_nl()}")
