from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from npcscript.config import settings


def lua_string(text: str) -> str:
    escaped = str(text).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


class TalkClause(BaseModel):
    """Common shape of talk conditions and consequences.

    A clause renders itself as one easyNPC clause and as one Lua statement on
    ``talkEntry``. Clauses backed by a Lua module report it through
    ``lua_module``; the writer is responsible for the matching ``require``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    module_name: ClassVar[str | None] = None
    lua_method: ClassVar[str] = ""
    lua_locals: ClassVar[tuple[str, ...]] = ()

    def module_base(self) -> str:
        raise NotImplementedError

    def lua_module(self) -> str | None:
        if not self.module_name:
            return None
        return f"{self.module_base()}{self.module_name}"

    def lua_args(self) -> list[str]:
        return []

    def easynpc(self) -> str:
        raise NotImplementedError

    def lua(self) -> str:
        module = self.lua_module()
        call = f"{module}.{self.module_name}({', '.join(self.lua_args())})"
        return f"talkEntry:{self.lua_method}({call});"


class TalkConditionBase(TalkClause):
    lua_method: ClassVar[str] = "addCondition"

    def module_base(self) -> str:
        return settings.lua_condition_module_base


class TalkConsequenceBase(TalkClause):
    lua_method: ClassVar[str] = "addConsequence"

    def module_base(self) -> str:
        return settings.lua_consequence_module_base
