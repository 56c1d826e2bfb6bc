from __future__ import annotations

import io
import logging
import time
from collections.abc import Callable, Iterable
from enum import Enum
from typing import TextIO, TypeVar

from npcscript.config import settings
from npcscript.modules.parsed.base import EASYNPC_STAGE_ORDER, LUA_STAGE_ORDER, LuaStage, ParsedData
from npcscript.modules.parsed.npc import ParsedNpc
from npcscript.modules.writer.errors import NodeEmitError, NpcWriterError
from npcscript.modules.writer.registry import ModuleRegistry
from npcscript.modules.writer.sql_builder import SqlBuilder

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class WriterTarget(str, Enum):
    EASYNPC = "easynpc"
    LUA = "lua"
    SQL = "sql"


def _local_declarations() -> dict[str, tuple[str, str]]:
    return {
        "talkingNPC": (settings.lua_talk_module, f"local talkingNPC = {settings.lua_talk_module}.talkNPC(mainNPC);"),
        "tradingNPC": (settings.lua_trade_module, f"local tradingNPC = {settings.lua_trade_module}.tradeNPC(mainNPC);"),
    }


def _nodes_of(script: ParsedNpc | Iterable[ParsedData]) -> tuple[ParsedData, ...]:
    if isinstance(script, ParsedNpc):
        return script.nodes
    return tuple(script)


def _emit(index: int, stage: str, call: Callable[[], _T]) -> _T:
    try:
        return call()
    except (OSError, NpcWriterError):
        raise
    except Exception as exc:  # noqa: BLE001
        raise NodeEmitError(node_index=index, stage=stage, detail=f"{type(exc).__name__}: {exc}") from exc


def _known_locals(node: ParsedData, declarations: dict[str, tuple[str, str]]) -> tuple[str, ...]:
    names = node.required_locals()
    unknown = [name for name in names if name not in declarations]
    if unknown:
        raise KeyError(f"unknown Lua local(s): {', '.join(unknown)}")
    return names


def write_easynpc(script: ParsedNpc | Iterable[ParsedData], target: TextIO) -> None:
    nodes = _nodes_of(script)
    started = time.perf_counter()
    for stage in EASYNPC_STAGE_ORDER:
        for index, node in enumerate(nodes):
            if node.effects_easynpc_stage(stage):
                _emit(index, stage.value, lambda: node.write_easynpc(target, stage))
    logger.debug("easyNPC written: %d nodes in %.2f ms", len(nodes), (time.perf_counter() - started) * 1000)


def write_lua(
    script: ParsedNpc | Iterable[ParsedData],
    target: TextIO,
    registry: ModuleRegistry | None = None,
) -> ModuleRegistry:
    nodes = _nodes_of(script)
    registry = registry if registry is not None else ModuleRegistry()
    declarations = _local_declarations()
    nl = settings.lua_newline
    started = time.perf_counter()

    # Locals are bound once, right after initNpc() opens, in first-use order.
    node_locals = [
        _emit(index, LuaStage.DECLARATIONS.value, lambda: _known_locals(node, declarations))
        for index, node in enumerate(nodes)
    ]
    used_locals: list[str] = []
    for names in node_locals:
        for name in names:
            if name not in used_locals:
                used_locals.append(name)

    for stage in LUA_STAGE_ORDER:
        if stage == LuaStage.REQUIRES:
            for index, node in enumerate(nodes):
                module_ids = list(_emit(index, stage.value, node.required_modules))
                module_ids.extend(declarations[name][0] for name in node_locals[index])
                for module_id in module_ids:
                    if registry.require_once(module_id):
                        target.write(f'require("{module_id}"){nl}')
            continue
        if stage == LuaStage.DECLARATIONS:
            for name in used_locals:
                target.write(f"{declarations[name][1]}{nl}")
            continue
        for index, node in enumerate(nodes):
            if node.effects_lua_stage(stage):
                _emit(index, stage.value, lambda: node.write_lua(target, stage))

    logger.debug(
        "Lua written: %d nodes, %d modules, locals %s in %.2f ms",
        len(nodes),
        len(registry.modules),
        used_locals,
        (time.perf_counter() - started) * 1000,
    )
    return registry


def write_sql(
    script: ParsedNpc | Iterable[ParsedData],
    target: TextIO,
    dialect: str | None = None,
) -> None:
    nodes = _nodes_of(script)
    builder = SqlBuilder(dialect)
    for index, node in enumerate(nodes):
        if node.effects_sql:
            _emit(index, WriterTarget.SQL.value, lambda: node.build_sql(builder))
    target.write(builder.render())


def write_script(script: ParsedNpc | Iterable[ParsedData], target_kind: WriterTarget | str, target: TextIO) -> None:
    kind = WriterTarget(target_kind)
    if kind == WriterTarget.EASYNPC:
        write_easynpc(script, target)
    elif kind == WriterTarget.LUA:
        write_lua(script, target)
    else:
        write_sql(script, target)


def render_script(script: ParsedNpc | Iterable[ParsedData], target_kind: WriterTarget | str) -> str:
    buffer = io.StringIO()
    write_script(script, target_kind, buffer)
    return buffer.getvalue()
