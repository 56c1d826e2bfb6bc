#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from npcscript.config import settings
from npcscript.modules.compiler import compile_file, find_scripts
from npcscript.modules.writer.pipeline import WriterTarget

TARGET_CHOICES = ("easynpc", "lua", "sql", "all")


def _targets(name: str) -> list[WriterTarget]:
    if name == "all":
        return [WriterTarget.LUA, WriterTarget.SQL, WriterTarget.EASYNPC]
    return [WriterTarget(name)]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile easyNPC scripts to Lua, SQL or normalized easyNPC.")
    parser.add_argument("paths", nargs="+", help="Script files or directories searched for *.npc files.")
    parser.add_argument("--target", choices=TARGET_CHOICES, default="lua", help="Output to generate (default: lua).")
    parser.add_argument("--out-dir", default=None, help="Directory for generated files (default: next to the source).")
    parser.add_argument("--reformat", action="store_true", help="Rewrite the source files in normalized form.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if (args.debug or settings.debug) else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    scripts = find_scripts(Path(path) for path in args.paths)
    if not scripts:
        print("no scripts found", file=sys.stderr)
        return 2

    out_dir = Path(args.out_dir) if args.out_dir else None
    failed = 0
    for script in scripts:
        result = compile_file(script, targets=_targets(args.target), out_dir=out_dir, reformat=bool(args.reformat))
        if not result.ok:
            failed += 1
            print(f"{script}:", file=sys.stderr)
            for line in result.error_lines():
                print(f"  {line}", file=sys.stderr)
            continue
        for path in result.written:
            print(f"wrote {path}")

    print(f"compiled {len(scripts) - failed}/{len(scripts)} scripts")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
