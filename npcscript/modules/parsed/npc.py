from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from npcscript.modules.parsed.base import ParsedData
from npcscript.modules.parsed.lines import ParsedNpcName, lua_script_name


@dataclass(frozen=True, slots=True)
class ParsedNpc:
    nodes: tuple[ParsedData, ...] = ()
    errors: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[dict[str, Any]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def npc_name(self) -> str | None:
        for node in self.nodes:
            if isinstance(node, ParsedNpcName):
                return node.name
        return None

    @property
    def lua_name(self) -> str:
        return lua_script_name(self.npc_name or "")
