from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar, TextIO

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from npcscript.modules.writer.sql_builder import SqlBuilder


class EasyNpcStage(str, Enum):
    HEADER = "header"
    BODY = "body"


class LuaStage(str, Enum):
    REQUIRES = "requires"
    HEADER = "header"
    MODULE = "module"
    INIT = "init"
    DECLARATIONS = "declarations"
    TALKING = "talking"
    CYCLE_TEXT = "cycle_text"
    TRADING = "trading"
    SETTINGS = "settings"
    FOOTER = "footer"


EASYNPC_STAGE_ORDER: tuple[EasyNpcStage, ...] = tuple(EasyNpcStage)
LUA_STAGE_ORDER: tuple[LuaStage, ...] = tuple(LuaStage)


class ParsedData(BaseModel):
    """One semantic element of a parsed NPC script.

    Participation in the writing stages is a static property of each variant:
    subclasses fill the ``easynpc_stages``/``lua_stages`` tables (or override the
    ``effects_*`` queries with a per-value table) and the writer pipeline only
    calls ``write_*``/``build_sql`` for a stage the node declared.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    easynpc_stages: ClassVar[frozenset[EasyNpcStage]] = frozenset()
    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset()
    effects_sql: ClassVar[bool] = False

    def effects_easynpc_stage(self, stage: EasyNpcStage) -> bool:
        return stage in self.easynpc_stages

    def effects_lua_stage(self, stage: LuaStage) -> bool:
        return stage in self.lua_stages

    def required_modules(self) -> tuple[str, ...]:
        return ()

    def required_locals(self) -> tuple[str, ...]:
        """Stage-local Lua bindings (``talkingNPC``, ``tradingNPC``) this node refers to."""
        return ()

    def write_easynpc(self, target: TextIO, stage: EasyNpcStage) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not write easyNPC stage {stage.value}")

    def write_lua(self, target: TextIO, stage: LuaStage) -> None:
        raise NotImplementedError(f"{type(self).__name__} does not write Lua stage {stage.value}")

    def build_sql(self, builder: SqlBuilder) -> None:
        raise NotImplementedError(f"{type(self).__name__} has no SQL effect")
