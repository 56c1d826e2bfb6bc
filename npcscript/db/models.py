from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from npcscript.db.base import Base


class Npc(Base):
    __tablename__ = "npc"

    npc_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    npc_type: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_posx: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_posy: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_posz: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_faceto: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_name: Mapped[str] = mapped_column(String(100), index=True)
    npc_script: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    npc_sex: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_hair: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_beard: Mapped[int] = mapped_column(Integer, server_default="0")
    npc_hairred: Mapped[int] = mapped_column(Integer, server_default="255")
    npc_hairgreen: Mapped[int] = mapped_column(Integer, server_default="255")
    npc_hairblue: Mapped[int] = mapped_column(Integer, server_default="255")
    npc_skinred: Mapped[int] = mapped_column(Integer, server_default="255")
    npc_skingreen: Mapped[int] = mapped_column(Integer, server_default="255")
    npc_skinblue: Mapped[int] = mapped_column(Integer, server_default="255")


class NpcTrade(Base):
    __tablename__ = "npc_trade"

    nt_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nt_npc_script: Mapped[str] = mapped_column(String(100), index=True)
    nt_item_id: Mapped[int] = mapped_column(Integer)
    nt_mode: Mapped[str] = mapped_column(String(16))
