from __future__ import annotations


def diag(
    *,
    code: str,
    path: str | None,
    message: str,
    suggestion: str | None = None,
) -> dict[str, str | None]:
    return {
        "code": code,
        "path": path,
        "message": message,
        "suggestion": suggestion,
    }


def line_path(line_no: int) -> str:
    return f"line {line_no}"


def format_diagnostic(item: dict) -> str:
    path = str(item.get("path") or "")
    prefix = f"Line {path.removeprefix('line ')}: " if path.startswith("line ") else ""
    text = f"{prefix}{item.get('message')}"
    if item.get("suggestion"):
        text = f"{text} ({item['suggestion']})"
    return text
