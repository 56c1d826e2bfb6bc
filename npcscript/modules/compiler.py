from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from npcscript.config import settings
from npcscript.modules.diagnostics import format_diagnostic
from npcscript.modules.parsed.npc import ParsedNpc
from npcscript.modules.parser.service import parse_script
from npcscript.modules.writer.pipeline import WriterTarget, write_easynpc, write_lua, write_sql

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CompileResult:
    source: Path
    npc: ParsedNpc
    written: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.npc.has_errors

    def error_lines(self) -> list[str]:
        return [format_diagnostic(item) for item in self.npc.errors]


def find_scripts(paths: Iterable[Path]) -> list[Path]:
    out: list[Path] = []
    seen: set[Path] = set()
    for path in paths:
        candidates = sorted(path.rglob(f"*{settings.easynpc_file_suffix}")) if path.is_dir() else [path]
        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            out.append(candidate)
    return out


def _write_text(path: Path, text: str, encoding: str) -> None:
    # Characters outside the target charset are written as "?".
    with path.open("w", encoding=encoding, errors="replace", newline="") as handle:
        handle.write(text)


def compile_file(
    source: Path,
    *,
    targets: Iterable[WriterTarget],
    out_dir: Path | None = None,
    reformat: bool = False,
) -> CompileResult:
    text = source.read_text(encoding=settings.easynpc_encoding)
    npc = parse_script(text)
    result = CompileResult(source=source, npc=npc)
    for item in npc.warnings:
        logger.warning("%s: %s", source, format_diagnostic(item))
    if npc.has_errors:
        logger.error("%s: %d errors, nothing written", source, len(npc.errors))
        return result

    destination = out_dir if out_dir is not None else source.parent
    destination.mkdir(parents=True, exist_ok=True)
    wanted = set(targets)

    if WriterTarget.LUA in wanted:
        buffer = io.StringIO()
        write_lua(npc, buffer)
        path = destination / f"{npc.lua_name}.lua"
        _write_text(path, buffer.getvalue(), settings.lua_encoding)
        result.written.append(path)
    if WriterTarget.SQL in wanted:
        buffer = io.StringIO()
        write_sql(npc, buffer)
        path = destination / f"{npc.lua_name}.sql"
        _write_text(path, buffer.getvalue(), "utf-8")
        result.written.append(path)
    if WriterTarget.EASYNPC in wanted or reformat:
        buffer = io.StringIO()
        write_easynpc(npc, buffer)
        path = source if reformat else destination / f"{npc.lua_name}{settings.easynpc_file_suffix}"
        _write_text(path, buffer.getvalue(), settings.easynpc_encoding)
        result.written.append(path)

    logger.info("%s: wrote %s", source, ", ".join(str(path) for path in result.written) or "nothing")
    return result
