import io
from typing import ClassVar, Literal

import pytest

from npcscript.config import settings
from npcscript.modules.parsed.base import LuaStage, ParsedData
from npcscript.modules.parsed.data import CharacterRace, PlayerLanguage
from npcscript.modules.parsed.lines import (
    ParsedCycleText,
    ParsedEmptyLine,
    ParsedLanguage,
    ParsedRace,
    ParsedTradeItems,
)
from npcscript.modules.writer import (
    ModuleRegistry,
    NpcWriterError,
    WriterTarget,
    render_script,
    write_lua,
)
from npcscript.modules.parser import parse_script
from tests.support.npc_scripts import RUBY_SCRIPT, FailingSink, admin_talk, greeting_talk, npc_name


class ExplodingNode(ParsedData):
    kind: Literal["exploding"] = "exploding"

    lua_stages: ClassVar[frozenset[LuaStage]] = frozenset({LuaStage.SETTINGS})

    def write_lua(self, target, stage) -> None:
        raise RuntimeError("boom")


class BrokenImportNode(ParsedData):
    kind: Literal["broken_import"] = "broken_import"

    def required_modules(self) -> tuple[str, ...]:
        raise RuntimeError("no module")


def _full_npc() -> list[ParsedData]:
    return [
        npc_name(),
        ParsedRace(race=CharacterRace.dwarf),
        ParsedLanguage(language=PlayerLanguage.dwarf),
        greeting_talk(),
        ParsedCycleText(german="Heiß hier.", english="Hot in here."),
        ParsedTradeItems(mode="sell", item_ids=(2763,)),
    ]


def test_admin_condition_script_starts_with_its_import() -> None:
    settings.lua_condition_module_base = "npc.base.consequence."
    nodes = [admin_talk()]

    lua = render_script(nodes, WriterTarget.LUA)
    lines = lua.splitlines()

    assert lines[0] == 'require("npc.base.consequence.admin")'
    assert lua.count('require("npc.base.consequence.admin")') == 1
    assert lua.count("npc.base.consequence.admin.admin()") == 1
    assert "talkEntry:addCondition(npc.base.consequence.admin.admin());" in lines
    assert render_script(nodes, WriterTarget.SQL) == ""


def test_blank_lines_only_survive_in_easynpc() -> None:
    nodes = [ParsedEmptyLine(), ParsedEmptyLine(), ParsedEmptyLine()]

    assert render_script(nodes, "lua") == ""
    assert render_script(nodes, "sql") == ""
    assert render_script(nodes, "easynpc") == "\n\n\n"


def test_empty_script_writes_nothing() -> None:
    assert render_script([], "easynpc") == ""
    assert render_script([], "lua") == ""
    assert render_script([], "sql") == ""


def test_shared_module_is_required_once() -> None:
    nodes = [admin_talk("First."), admin_talk("Second.")]

    lua = render_script(nodes, "lua")

    assert lua.count('require("npc.base.condition.admin")') == 1
    assert lua.count('require("npc.base.talk")') == 1
    assert lua.count("talkingNPC:addTalkingEntry(talkEntry);") == 2
    assert lua.index('require("npc.base.condition.admin")') < lua.index("npc.base.condition.admin.admin()")


def test_write_lua_reports_modules_in_first_use_order() -> None:
    registry = write_lua(_full_npc(), io.StringIO())

    assert registry.modules == ("npc.base.basic", "npc.base.talk", "npc.base.trade")


def test_lua_stages_follow_the_canonical_order() -> None:
    lua = render_script(_full_npc(), "lua")

    markers = [
        'require("npc.base.basic")',
        "-- NPC Name: Ruby Redhair",
        "-- NPC Race: dwarf",
        'module("npc.ruby_redhair", package.seeall)',
        "function initNpc()",
        "local talkingNPC = npc.base.talk.talkNPC(mainNPC);",
        "local tradingNPC = npc.base.trade.tradeNPC(mainNPC);",
        'talkEntry:addTrigger("Hello");',
        'talkingNPC:addCycleText("Heiß hier.", "Hot in here.");',
        'tradingNPC:addItem(npc.base.trade.tradeNPCItem(2763, "sell"));',
        "mainNPC:addLanguage(2);",
        "mainNPC:initDone();",
        "-- END",
    ]
    positions = [lua.index(marker) for marker in markers]
    assert positions == sorted(positions)
    assert lua.count("local talkingNPC") == 1
    assert lua.count("local tradingNPC") == 1


def test_stage_declaration_only_when_stage_is_used() -> None:
    lua = render_script([npc_name(), ParsedRace(race=CharacterRace.human)], "lua")

    assert "talkingNPC" not in lua
    assert "tradingNPC" not in lua


def test_passes_are_idempotent() -> None:
    nodes = _full_npc()

    for target in WriterTarget:
        assert render_script(nodes, target) == render_script(nodes, target)


def test_explicit_registry_suppresses_known_modules() -> None:
    registry = ModuleRegistry()
    registry.require_once("npc.base.basic")
    buffer = io.StringIO()

    write_lua([npc_name()], buffer, registry)

    assert 'require("npc.base.basic")' not in buffer.getvalue()


def test_node_failure_is_wrapped_with_position() -> None:
    with pytest.raises(NpcWriterError) as excinfo:
        render_script([npc_name(), ExplodingNode()], "lua")

    error = excinfo.value
    assert error.code == "NODE_EMIT_FAILED"
    assert error.node_index == 1
    assert error.stage == "settings"
    assert isinstance(error.__cause__, RuntimeError)


def test_declining_node_is_not_called() -> None:
    assert render_script([ExplodingNode()], "easynpc") == ""
    assert render_script([ExplodingNode()], "sql") == ""


def test_sink_failure_propagates_unchanged() -> None:
    with pytest.raises(OSError, match="disk full"):
        write_lua([admin_talk()], FailingSink())


def test_trade_consequence_declares_trading_npc_before_use() -> None:
    npc = parse_script('name = "Bob"\n"trade" -> "Sure.", trade\nsellItems = 1\n')
    assert npc.errors == []

    lua = render_script(npc, "lua")

    assert lua.count("local tradingNPC") == 1
    assert lua.index("local tradingNPC") < lua.index("trade(tradingNPC)")
    assert lua.index("local tradingNPC") < lua.index("tradingNPC:addItem")


def test_trade_consequence_without_trade_items_still_declares_trading_npc() -> None:
    npc = parse_script('name = "Bob"\n"trade" -> "Sure.", trade\n')
    assert npc.errors == []

    lua = render_script(npc, "lua")

    assert lua.count("local tradingNPC") == 1
    assert lua.index("local tradingNPC") < lua.index("trade(tradingNPC)")
    assert lua.count('require("npc.base.trade")') == 1
    assert lua.index('require("npc.base.trade")') < lua.index("local tradingNPC")


@pytest.mark.parametrize("name", ["talkingNPC", "tradingNPC"])
def test_every_local_reference_follows_its_declaration(name: str) -> None:
    script = RUBY_SCRIPT + '"wares" -> "Have a look.", trade\n'

    lua = render_script(parse_script(script), "lua")

    declared_at = lua.index(f"local {name} =")
    position = lua.find(name)
    while position >= 0:
        assert position >= declared_at
        position = lua.find(name, position + 1)


def test_module_lookup_failure_is_wrapped_with_position() -> None:
    with pytest.raises(NpcWriterError) as excinfo:
        render_script([npc_name(), admin_talk(), BrokenImportNode()], "lua")

    error = excinfo.value
    assert error.code == "NODE_EMIT_FAILED"
    assert error.node_index == 2
    assert error.stage == "requires"
    assert isinstance(error.__cause__, RuntimeError)
