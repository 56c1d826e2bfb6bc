from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field, field_validator

from npcscript.modules.parsed.data import (
    AdvancedNumber,
    CharacterRace,
    CharacterSex,
    CompareOperators,
    ItemPositions,
    Towns,
)
from npcscript.modules.parsed.talk.base import TalkConditionBase, lua_string

MONEY_OPERATORS = frozenset(
    {
        CompareOperators.lesser,
        CompareOperators.greater,
        CompareOperators.lesser_equal,
        CompareOperators.greater_equal,
    }
)


class ConditionTrigger(TalkConditionBase):
    kind: Literal["trigger"] = "trigger"
    text: str = Field(min_length=1)

    def easynpc(self) -> str:
        return f'"{self.text}"'

    def lua(self) -> str:
        return f"talkEntry:addTrigger({lua_string(self.text)});"


class ConditionAdmin(TalkConditionBase):
    kind: Literal["admin"] = "admin"

    module_name: ClassVar[str] = "admin"

    def easynpc(self) -> str:
        return "isAdmin"


class ConditionLanguage(TalkConditionBase):
    kind: Literal["language"] = "language"
    language: Literal["english", "german"]

    module_name: ClassVar[str] = "language"

    def easynpc(self) -> str:
        return self.language

    def lua_args(self) -> list[str]:
        return [lua_string(self.language)]


class ConditionRace(TalkConditionBase):
    kind: Literal["race"] = "race"
    race: CharacterRace

    module_name: ClassVar[str] = "race"

    def easynpc(self) -> str:
        return f"race = {self.race.name}"

    def lua_args(self) -> list[str]:
        return [str(int(self.race))]


class ConditionSex(TalkConditionBase):
    kind: Literal["sex"] = "sex"
    sex: CharacterSex

    module_name: ClassVar[str] = "sex"

    def easynpc(self) -> str:
        return f"sex = {self.sex.name}"

    def lua_args(self) -> list[str]:
        return [str(int(self.sex))]


class ConditionState(TalkConditionBase):
    kind: Literal["state"] = "state"
    operator: CompareOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "state"

    def easynpc(self) -> str:
        return f"state {self.operator.value} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.operator.value), self.value.lua()]


class ConditionMoney(TalkConditionBase):
    kind: Literal["money"] = "money"
    operator: CompareOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "money"

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, value: CompareOperators) -> CompareOperators:
        if value not in MONEY_OPERATORS:
            raise ValueError(f"money can't be compared with '{value.value}'")
        return value

    def easynpc(self) -> str:
        return f"money {self.operator.value} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.operator.value), self.value.lua()]


class ConditionTown(TalkConditionBase):
    kind: Literal["town"] = "town"
    town: Towns

    module_name: ClassVar[str] = "town"

    def easynpc(self) -> str:
        return f"town = {self.town.name}"

    def lua_args(self) -> list[str]:
        return [lua_string("="), str(int(self.town))]


class ConditionItem(TalkConditionBase):
    kind: Literal["item"] = "item"
    item_id: int = Field(ge=0)
    position: ItemPositions = ItemPositions.all
    operator: CompareOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "item"

    def easynpc(self) -> str:
        return f"item({self.item_id}, {self.position.value}) {self.operator.value} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [
            str(self.item_id),
            lua_string(self.position.value),
            lua_string(self.operator.value),
            self.value.lua(),
        ]


class ConditionChance(TalkConditionBase):
    kind: Literal["chance"] = "chance"
    percent: int = Field(ge=0, le=100)

    module_name: ClassVar[str] = "chance"

    def easynpc(self) -> str:
        return f"chance({self.percent})"

    def lua_args(self) -> list[str]:
        return [str(self.percent)]


class ConditionQuest(TalkConditionBase):
    kind: Literal["quest"] = "quest"
    quest_id: int = Field(ge=0)
    operator: CompareOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "quest"

    def easynpc(self) -> str:
        return f"queststatus({self.quest_id}) {self.operator.value} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [str(self.quest_id), lua_string(self.operator.value), self.value.lua()]


class ConditionTalkState(TalkConditionBase):
    kind: Literal["talkstate"] = "talkstate"
    mode: Literal["busy", "idle"]

    module_name: ClassVar[str] = "talkstate"

    def easynpc(self) -> str:
        return f"talkstate = {self.mode}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.mode)]


TalkCondition = Annotated[
    Union[
        ConditionTrigger,
        ConditionAdmin,
        ConditionLanguage,
        ConditionRace,
        ConditionSex,
        ConditionState,
        ConditionMoney,
        ConditionTown,
        ConditionItem,
        ConditionChance,
        ConditionQuest,
        ConditionTalkState,
    ],
    Field(discriminator="kind"),
]
