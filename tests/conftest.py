from __future__ import annotations

import pytest

from npcscript.config import settings


@pytest.fixture(autouse=True)
def _reset_settings() -> None:
    settings.debug = False
    settings.lua_script_prefix = "npc."
    settings.lua_basic_module = "npc.base.basic"
    settings.lua_talk_module = "npc.base.talk"
    settings.lua_trade_module = "npc.base.trade"
    settings.lua_condition_module_base = "npc.base.condition."
    settings.lua_consequence_module_base = "npc.base.consequence."
    settings.lua_newline = "\n"
    settings.lua_encoding = "iso-8859-1"
    settings.easynpc_encoding = "utf-8"
    settings.easynpc_file_suffix = ".npc"
    settings.sql_dialect = "postgresql"
    yield
