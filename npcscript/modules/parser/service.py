from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from npcscript.modules.diagnostics import diag, line_path
from npcscript.modules.parsed.base import ParsedData
from npcscript.modules.parsed.lines import EASYNPC_HEADER_MARK
from npcscript.modules.parsed.npc import ParsedNpc
from npcscript.modules.parsed.talk.entry import ParsedTalk
from npcscript.modules.parser.clauses import (
    CONDITION_PATTERNS,
    CONSEQUENCE_PATTERNS,
    find_arrow,
    match_clause,
    split_clauses,
)
from npcscript.modules.parser.lines import match_line

logger = logging.getLogger(__name__)


def _error_text(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(str(item.get("msg") or "") for item in exc.errors()) or str(exc)
    return str(exc)


def _parse_clauses(
    text: str,
    *,
    side: str,
    path: str,
    errors: list[dict[str, Any]],
) -> list[Any]:
    patterns = CONDITION_PATTERNS if side == "condition" else CONSEQUENCE_PATTERNS
    out: list[Any] = []
    if not text.strip():
        return out
    for raw in split_clauses(text):
        if not raw:
            errors.append(
                diag(
                    code=f"NPC_EMPTY_{side.upper()}",
                    path=path,
                    message=f"Empty {side} in talk line.",
                    suggestion="Remove the stray comma.",
                )
            )
            continue
        try:
            clause = match_clause(raw, patterns)
        except ValueError as exc:
            errors.append(
                diag(
                    code=f"NPC_INVALID_{side.upper()}",
                    path=path,
                    message=f"Invalid {side} '{raw}': {_error_text(exc)}",
                )
            )
            continue
        if clause is None:
            errors.append(
                diag(
                    code=f"NPC_UNKNOWN_{side.upper()}",
                    path=path,
                    message=f"Unknown {side} '{raw}'.",
                )
            )
            continue
        out.append(clause)
    return out


def _parse_talk(
    text: str,
    *,
    line_no: int,
    errors: list[dict[str, Any]],
    warnings: list[dict[str, Any]],
) -> ParsedTalk | None:
    path = line_path(line_no)
    arrow = find_arrow(text)
    conditions = _parse_clauses(text[:arrow], side="condition", path=path, errors=errors)
    consequences = _parse_clauses(text[arrow + 2 :], side="consequence", path=path, errors=errors)
    if not consequences:
        errors.append(
            diag(
                code="NPC_TALK_WITHOUT_CONSEQUENCE",
                path=path,
                message="Talk line has no valid consequence.",
                suggestion='Add at least one answer, e.g. -> "Hello."',
            )
        )
        return None
    talk = ParsedTalk(conditions=tuple(conditions), consequences=tuple(consequences))
    if not talk.has_trigger:
        warnings.append(
            diag(
                code="NPC_TALK_WITHOUT_TRIGGER",
                path=path,
                message="Talk line has no trigger text.",
                suggestion='Add a quoted trigger left of "->".',
            )
        )
    return talk


def parse_script(source: str | Iterable[str]) -> ParsedNpc:
    lines = source.splitlines() if isinstance(source, str) else [str(line).rstrip("\r\n") for line in source]
    started = time.perf_counter()
    parsed: list[ParsedData] = []
    errors: list[dict[str, Any]] = []
    warnings: list[dict[str, Any]] = []

    for line_no, raw in enumerate(lines, start=1):
        text = raw.strip()
        if text.startswith(EASYNPC_HEADER_MARK):
            continue
        path = line_path(line_no)
        if not text.startswith("--") and find_arrow(text) >= 0:
            talk = _parse_talk(text, line_no=line_no, errors=errors, warnings=warnings)
            if talk is not None:
                parsed.append(talk)
            continue
        try:
            matched = match_line(text)
        except ValueError as exc:
            errors.append(diag(code="NPC_INVALID_LINE", path=path, message=_error_text(exc)))
            continue
        if matched is None:
            errors.append(
                diag(
                    code="NPC_UNKNOWN_LINE",
                    path=path,
                    message="No parser seems to know what to do with this line.",
                )
            )
            continue
        parsed.append(matched[1])

    logger.debug(
        "parsed %d lines into %d nodes (%d errors, %d warnings) in %.2f ms",
        len(lines),
        len(parsed),
        len(errors),
        len(warnings),
        (time.perf_counter() - started) * 1000,
    )
    return ParsedNpc(nodes=tuple(parsed), errors=errors, warnings=warnings)
