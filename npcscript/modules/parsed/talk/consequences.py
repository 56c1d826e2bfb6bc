from __future__ import annotations

from typing import Annotated, ClassVar, Literal, Union

from pydantic import Field

from npcscript.modules.parsed.data import AdvancedNumber, CalculationOperators, Towns
from npcscript.modules.parsed.talk.base import TalkConsequenceBase, lua_string


class ConsequenceAnswer(TalkConsequenceBase):
    kind: Literal["answer"] = "answer"
    text: str = Field(min_length=1)

    def easynpc(self) -> str:
        return f'"{self.text}"'

    def lua(self) -> str:
        return f"talkEntry:addResponse({lua_string(self.text)});"


class ConsequenceInform(TalkConsequenceBase):
    kind: Literal["inform"] = "inform"
    text: str = Field(min_length=1)

    module_name: ClassVar[str] = "inform"

    def easynpc(self) -> str:
        return f'inform("{self.text}")'

    def lua_args(self) -> list[str]:
        return [lua_string(self.text)]


class ConsequenceState(TalkConsequenceBase):
    kind: Literal["state"] = "state"
    operator: CalculationOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "state"

    def easynpc(self) -> str:
        return f"state {_calc_symbol(self.operator)} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.operator.value), self.value.lua()]


class ConsequenceMoney(TalkConsequenceBase):
    kind: Literal["money"] = "money"
    operator: CalculationOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "money"

    def easynpc(self) -> str:
        return f"money {_calc_symbol(self.operator)} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.operator.value), self.value.lua()]


class ConsequenceTown(TalkConsequenceBase):
    kind: Literal["town"] = "town"
    town: Towns

    module_name: ClassVar[str] = "town"

    def easynpc(self) -> str:
        return f"town = {self.town.name}"

    def lua_args(self) -> list[str]:
        return [lua_string("="), lua_string(str(int(self.town)))]


class ConsequenceTrade(TalkConsequenceBase):
    kind: Literal["trade"] = "trade"

    module_name: ClassVar[str] = "trade"
    lua_locals: ClassVar[tuple[str, ...]] = ("tradingNPC",)

    def easynpc(self) -> str:
        return "trade"

    def lua_args(self) -> list[str]:
        return ["tradingNPC"]


class ConsequenceGemcraft(TalkConsequenceBase):
    kind: Literal["gemcraft"] = "gemcraft"

    module_name: ClassVar[str] = "gemcraft"

    def easynpc(self) -> str:
        return "gemcraft"


class ConsequenceItem(TalkConsequenceBase):
    kind: Literal["item"] = "item"
    item_id: int = Field(ge=0)
    count: AdvancedNumber
    quality: int = Field(default=333, ge=0, le=999)

    module_name: ClassVar[str] = "item"

    def easynpc(self) -> str:
        return f"item({self.item_id}, {self.count.easynpc()}, {self.quality})"

    def lua_args(self) -> list[str]:
        return [str(self.item_id), self.count.lua(), str(self.quality)]


class ConsequenceDeleteItem(TalkConsequenceBase):
    kind: Literal["deleteitem"] = "deleteitem"
    item_id: int = Field(ge=0)
    count: AdvancedNumber

    module_name: ClassVar[str] = "deleteitem"

    def easynpc(self) -> str:
        return f"deleteItem({self.item_id}, {self.count.easynpc()})"

    def lua_args(self) -> list[str]:
        return [str(self.item_id), self.count.lua()]


class ConsequenceQuest(TalkConsequenceBase):
    kind: Literal["quest"] = "quest"
    quest_id: int = Field(ge=0)
    operator: CalculationOperators
    value: AdvancedNumber

    module_name: ClassVar[str] = "quest"

    def easynpc(self) -> str:
        return f"queststatus({self.quest_id}) {_calc_symbol(self.operator)} {self.value.easynpc()}"

    def lua_args(self) -> list[str]:
        return [str(self.quest_id), lua_string(self.operator.value), self.value.lua()]


class ConsequenceIntroduce(TalkConsequenceBase):
    kind: Literal["introduce"] = "introduce"

    module_name: ClassVar[str] = "introduce"

    def easynpc(self) -> str:
        return "introduce"


class ConsequenceWarp(TalkConsequenceBase):
    kind: Literal["warp"] = "warp"
    x: int
    y: int
    z: int

    module_name: ClassVar[str] = "warp"

    def easynpc(self) -> str:
        return f"warp({self.x}, {self.y}, {self.z})"

    def lua_args(self) -> list[str]:
        return [str(self.x), str(self.y), str(self.z)]


class ConsequenceTalkState(TalkConsequenceBase):
    kind: Literal["talkstate"] = "talkstate"
    mode: Literal["begin", "end", "idle"]

    module_name: ClassVar[str] = "talkstate"

    def easynpc(self) -> str:
        return f"talkstate = {self.mode}"

    def lua_args(self) -> list[str]:
        return [lua_string(self.mode)]


class ConsequenceRepair(TalkConsequenceBase):
    kind: Literal["repair"] = "repair"

    module_name: ClassVar[str] = "repair"

    def easynpc(self) -> str:
        return "repair"


def _calc_symbol(operator: CalculationOperators) -> str:
    # "=" reads as an assignment in easyNPC, the others as compound updates.
    if operator == CalculationOperators.set:
        return "="
    return f"{operator.value}="


TalkConsequence = Annotated[
    Union[
        ConsequenceAnswer,
        ConsequenceInform,
        ConsequenceState,
        ConsequenceMoney,
        ConsequenceTown,
        ConsequenceTrade,
        ConsequenceGemcraft,
        ConsequenceItem,
        ConsequenceDeleteItem,
        ConsequenceQuest,
        ConsequenceIntroduce,
        ConsequenceWarp,
        ConsequenceTalkState,
        ConsequenceRepair,
    ],
    Field(discriminator="kind"),
]
