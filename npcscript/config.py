from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_SQL_DIALECTS: set[str] = {"postgresql", "sqlite", "mysql"}


class Settings(BaseSettings):
    """Compiler settings, read from ``NPCSCRIPT_*`` environment variables or ``.env``.

    Condition modules default to ``npc.base.condition.``. Scripts that expect
    the admin check as ``npc.base.consequence.admin`` need
    ``lua_condition_module_base = "npc.base.consequence."``.
    """

    debug: bool = False

    lua_script_prefix: str = "npc."
    lua_basic_module: str = "npc.base.basic"
    lua_talk_module: str = "npc.base.talk"
    lua_trade_module: str = "npc.base.trade"
    lua_condition_module_base: str = "npc.base.condition."
    lua_consequence_module_base: str = "npc.base.consequence."
    lua_newline: str = "\n"
    lua_encoding: str = "iso-8859-1"

    easynpc_encoding: str = "utf-8"
    easynpc_file_suffix: str = ".npc"

    sql_dialect: str = "postgresql"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="NPCSCRIPT_", extra="ignore")


def validate_sql_dialect(name: str | None) -> str:
    candidate = (name or "").strip().lower()
    if not candidate:
        return "postgresql"
    if candidate not in SUPPORTED_SQL_DIALECTS:
        raise RuntimeError(
            f"NPCSCRIPT_SQL_DIALECT={name!r} is not supported. "
            f"Use one of: {', '.join(sorted(SUPPORTED_SQL_DIALECTS))}."
        )
    return candidate


settings = Settings()
settings.sql_dialect = validate_sql_dialect(settings.sql_dialect)
