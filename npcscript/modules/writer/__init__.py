from npcscript.modules.writer.errors import NodeEmitError, NpcWriterError
from npcscript.modules.writer.pipeline import (
    WriterTarget,
    render_script,
    write_easynpc,
    write_lua,
    write_script,
    write_sql,
)
from npcscript.modules.writer.registry import ModuleRegistry

__all__ = [
    "ModuleRegistry",
    "NodeEmitError",
    "NpcWriterError",
    "WriterTarget",
    "render_script",
    "write_easynpc",
    "write_lua",
    "write_script",
    "write_sql",
]
