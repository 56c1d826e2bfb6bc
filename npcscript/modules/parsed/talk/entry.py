from __future__ import annotations

from typing import ClassVar, Literal, TextIO

from pydantic import Field

from npcscript.config import settings
from npcscript.modules.parsed.base import EasyNpcStage, LuaStage, ParsedData
from npcscript.modules.parsed.talk.conditions import ConditionTrigger, TalkCondition
from npcscript.modules.parsed.talk.consequences import TalkConsequence


class ParsedTalk(ParsedData):
    """One talk entry: conditions left of ``->``, consequences right of it."""

    kind: Literal["talk"] = "talk"
    conditions: tuple[TalkCondition, ...] = ()
    consequences: tuple[TalkConsequence, ...] = Field(min_length=1)

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = frozenset({EasyNpcStage.BODY})
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.TALKING})

    @property
    def has_trigger(self) -> bool:
        return any(isinstance(item, ConditionTrigger) for item in self.conditions)

    def required_modules(self) -> tuple[str, ...]:
        modules: list[str] = []
        for clause in (*self.conditions, *self.consequences):
            module = clause.lua_module()
            if module and module not in modules:
                modules.append(module)
        modules.append(settings.lua_talk_module)
        return tuple(modules)

    def required_locals(self) -> tuple[str, ...]:
        names = ["talkingNPC"]
        for clause in (*self.conditions, *self.consequences):
            for name in clause.lua_locals:
                if name not in names:
                    names.append(name)
        return tuple(names)

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        left = ", ".join(item.easynpc() for item in self.conditions)
        right = ", ".join(item.easynpc() for item in self.consequences)
        target.write(f"{left} -> {right}\n")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        nl = settings.lua_newline
        target.write(f"if (true) then{nl}")
        target.write(f"local talkEntry = {settings.lua_talk_module}.talkNPCEntry();{nl}")
        for clause in (*self.conditions, *self.consequences):
            target.write(f"{clause.lua()}{nl}")
        target.write(f"talkingNPC:addTalkingEntry(talkEntry);{nl}")
        target.write(f"end;{nl}")
