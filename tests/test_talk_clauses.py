import pytest
from pydantic import ValidationError

from npcscript.config import settings
from npcscript.modules.parsed.data import (
    AdvancedNumber,
    CalculationOperators,
    CharacterRace,
    CompareOperators,
    ItemPositions,
    Towns,
)
from npcscript.modules.parsed.talk.conditions import (
    ConditionAdmin,
    ConditionChance,
    ConditionItem,
    ConditionLanguage,
    ConditionMoney,
    ConditionQuest,
    ConditionRace,
    ConditionState,
    ConditionTown,
    ConditionTrigger,
)
from npcscript.modules.parsed.talk.consequences import (
    ConsequenceAnswer,
    ConsequenceDeleteItem,
    ConsequenceInform,
    ConsequenceItem,
    ConsequenceMoney,
    ConsequenceQuest,
    ConsequenceState,
    ConsequenceTown,
    ConsequenceTrade,
    ConsequenceWarp,
)


def test_admin_condition_uses_its_module_as_receiver() -> None:
    clause = ConditionAdmin()

    assert clause.lua_module() == "npc.base.condition.admin"
    assert clause.easynpc() == "isAdmin"
    assert clause.lua() == "talkEntry:addCondition(npc.base.condition.admin.admin());"


def test_module_base_follows_settings() -> None:
    settings.lua_condition_module_base = "npc.base.consequence."

    assert ConditionAdmin().lua_module() == "npc.base.consequence.admin"
    assert ConditionAdmin().lua() == "talkEntry:addCondition(npc.base.consequence.admin.admin());"


def test_trigger_and_answer_need_no_module() -> None:
    trigger = ConditionTrigger(text="Hello")
    answer = ConsequenceAnswer(text='Say "hi"')

    assert trigger.lua_module() is None
    assert answer.lua_module() is None
    assert trigger.lua() == 'talkEntry:addTrigger("Hello");'
    assert answer.lua() == 'talkEntry:addResponse("Say \\"hi\\"");'


def test_comparison_conditions_render_both_targets() -> None:
    state = ConditionState(operator=CompareOperators.greater_equal, value=AdvancedNumber(value=3))
    item = ConditionItem(
        item_id=2763,
        position=ItemPositions.belt,
        operator=CompareOperators.greater,
        value=AdvancedNumber(value=0),
    )
    quest = ConditionQuest(quest_id=10, operator=CompareOperators.not_equal, value=AdvancedNumber(kind="said"))

    assert state.easynpc() == "state >= 3"
    assert state.lua() == 'talkEntry:addCondition(npc.base.condition.state.state(">=", 3));'
    assert item.easynpc() == "item(2763, belt) > 0"
    assert item.lua() == 'talkEntry:addCondition(npc.base.condition.item.item(2763, "belt", ">", 0));'
    assert quest.easynpc() == "queststatus(10) ~= %NUMBER"
    assert quest.lua() == 'talkEntry:addCondition(npc.base.condition.quest.quest(10, "~=", "%NUMBER"));'


def test_simple_conditions_render_both_targets() -> None:
    assert ConditionLanguage(language="german").lua() == (
        'talkEntry:addCondition(npc.base.condition.language.language("german"));'
    )
    assert ConditionRace(race=CharacterRace.elf).easynpc() == "race = elf"
    assert ConditionRace(race=CharacterRace.elf).lua() == "talkEntry:addCondition(npc.base.condition.race.race(3));"
    assert ConditionTown(town=Towns.Runewick).easynpc() == "town = Runewick"
    assert ConditionChance(percent=25).lua() == "talkEntry:addCondition(npc.base.condition.chance.chance(25));"


def test_money_condition_rejects_equality() -> None:
    with pytest.raises(ValidationError):
        ConditionMoney(operator=CompareOperators.equal, value=AdvancedNumber(value=5))

    clause = ConditionMoney(operator=CompareOperators.lesser, value=AdvancedNumber(value=5))
    assert clause.easynpc() == "money < 5"


def test_invalid_parameters_fail_at_construction() -> None:
    with pytest.raises(ValidationError):
        ConditionChance(percent=101)
    with pytest.raises(ValidationError):
        ConditionTrigger(text="")
    with pytest.raises(ValidationError):
        ConsequenceItem(item_id=-1, count=AdvancedNumber(value=1))


def test_calculation_consequences_render_both_targets() -> None:
    state = ConsequenceState(operator=CalculationOperators.set, value=AdvancedNumber(value=1))
    money = ConsequenceMoney(operator=CalculationOperators.subtract, value=AdvancedNumber(value=100))
    quest = ConsequenceQuest(quest_id=10, operator=CalculationOperators.add, value=AdvancedNumber(value=1))

    assert state.easynpc() == "state = 1"
    assert state.lua() == 'talkEntry:addConsequence(npc.base.consequence.state.state("=", 1));'
    assert money.easynpc() == "money -= 100"
    assert money.lua() == 'talkEntry:addConsequence(npc.base.consequence.money.money("-", 100));'
    assert quest.easynpc() == "queststatus(10) += 1"
    assert quest.lua() == 'talkEntry:addConsequence(npc.base.consequence.quest.quest(10, "+", 1));'


def test_other_consequences_render_both_targets() -> None:
    assert ConsequenceInform(text="Ruby waves.").lua() == (
        'talkEntry:addConsequence(npc.base.consequence.inform.inform("Ruby waves."));'
    )
    assert ConsequenceTown(town=Towns.Cadomyr).lua() == (
        'talkEntry:addConsequence(npc.base.consequence.town.town("=", "1"));'
    )
    assert ConsequenceTrade().lua() == "talkEntry:addConsequence(npc.base.consequence.trade.trade(tradingNPC));"
    assert ConsequenceWarp(x=1, y=-2, z=0).easynpc() == "warp(1, -2, 0)"
    assert ConsequenceDeleteItem(item_id=5, count=AdvancedNumber(value=2)).lua() == (
        "talkEntry:addConsequence(npc.base.consequence.deleteitem.deleteitem(5, 2));"
    )


def test_item_consequence_with_expression_count() -> None:
    count = AdvancedNumber.parse("expr(%NUMBER * 2)")
    clause = ConsequenceItem(item_id=2763, count=count, quality=555)

    assert clause.easynpc() == "item(2763, expr(%NUMBER * 2), 555)"
    assert clause.lua() == (
        "talkEntry:addConsequence(npc.base.consequence.item.item("
        "2763, function(number) return (number * 2); end, 555));"
    )


def test_advanced_number_parsing() -> None:
    assert AdvancedNumber.parse("42").lua() == "42"
    assert AdvancedNumber.parse("%number").easynpc() == "%NUMBER"
    assert AdvancedNumber.parse("expr( %NUMBER+1 )").easynpc() == "expr(%NUMBER+1)"
    with pytest.raises(ValueError):
        AdvancedNumber.parse("lots")
    with pytest.raises(ValidationError):
        AdvancedNumber(kind="expression", expression="os.exit()")
