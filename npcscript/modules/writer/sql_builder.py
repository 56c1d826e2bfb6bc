from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import insert
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import Dialect

from npcscript.config import settings, validate_sql_dialect
from npcscript.db.models import Npc, NpcTrade

logger = logging.getLogger(__name__)

_DIALECTS = {
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
    "mysql": mysql.dialect,
}


def sql_dialect(name: str | None = None) -> Dialect:
    return _DIALECTS[validate_sql_dialect(name or settings.sql_dialect)]()


class SqlBuilder:
    """Collects the static NPC data of one script and renders it as INSERT statements."""

    def __init__(self, dialect: str | None = None) -> None:
        self.dialect = sql_dialect(dialect)
        self._npc_values: dict[str, Any] = {}
        self._trade_rows: list[tuple[int, str]] = []

    def set_npc_value(self, column: str, value: Any) -> None:
        if column not in Npc.__table__.columns:
            raise KeyError(f"npc table has no column '{column}'")
        if column in self._npc_values and self._npc_values[column] != value:
            logger.debug("npc column %s overwritten: %r -> %r", column, self._npc_values[column], value)
        self._npc_values[column] = value

    def add_trade_item(self, *, item_id: int, mode: str) -> None:
        self._trade_rows.append((int(item_id), str(mode)))

    @property
    def is_empty(self) -> bool:
        return not self._npc_values and not self._trade_rows

    def statements(self) -> list[str]:
        out: list[str] = []
        if self.is_empty:
            return out
        script = self._npc_values.get("npc_script")
        if "npc_name" in self._npc_values:
            values = {
                column.name: self._npc_values[column.name]
                for column in Npc.__table__.columns
                if column.name in self._npc_values
            }
            out.append(self._render(insert(Npc).values(**values)))
        else:
            logger.warning("npc row skipped: script declares no name")
        if self._trade_rows and not script:
            logger.warning("%d trade rows skipped: script declares no name", len(self._trade_rows))
            return out
        for item_id, mode in self._trade_rows:
            stmt = insert(NpcTrade).values(nt_npc_script=script, nt_item_id=item_id, nt_mode=mode)
            out.append(self._render(stmt))
        return out

    def render(self) -> str:
        return "".join(f"{statement}\n" for statement in self.statements())

    def _render(self, stmt) -> str:
        compiled = stmt.compile(dialect=self.dialect, compile_kwargs={"literal_binds": True})
        return f"{compiled};"
