import subprocess
import sys
from pathlib import Path

from npcscript.modules.compiler import compile_file, find_scripts
from npcscript.modules.writer import WriterTarget
from tests.support.npc_scripts import RUBY_HEADER, RUBY_SCRIPT

ROOT = Path(__file__).resolve().parents[1]


def _write_script(path: Path, text: str = RUBY_SCRIPT) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_compile_file_writes_lua_and_sql(tmp_path: Path) -> None:
    source = _write_script(tmp_path / "src" / "ruby.npc")
    out_dir = tmp_path / "out"

    result = compile_file(source, targets=[WriterTarget.LUA, WriterTarget.SQL], out_dir=out_dir)

    assert result.ok is True
    assert result.written == [out_dir / "ruby_redhair.lua", out_dir / "ruby_redhair.sql"]
    lua = (out_dir / "ruby_redhair.lua").read_text(encoding="iso-8859-1")
    assert lua.startswith('require("npc.base.basic")')
    assert "Heiß hier." in lua
    assert (out_dir / "ruby_redhair.sql").read_text(encoding="utf-8").startswith("INSERT INTO npc ")


def test_compile_file_reformats_source(tmp_path: Path) -> None:
    source = _write_script(tmp_path / "ruby.npc")

    result = compile_file(source, targets=[], reformat=True)

    assert result.written == [source]
    assert source.read_text(encoding="utf-8") == RUBY_HEADER + RUBY_SCRIPT


def test_compile_file_skips_scripts_with_errors(tmp_path: Path) -> None:
    source = _write_script(tmp_path / "broken.npc", 'name = "Broken"\nfly away\n')

    result = compile_file(source, targets=[WriterTarget.LUA], out_dir=tmp_path / "out")

    assert result.ok is False
    assert result.written == []
    assert result.error_lines() == ["Line 2: No parser seems to know what to do with this line."]
    assert not (tmp_path / "out").exists()


def test_find_scripts_searches_directories(tmp_path: Path) -> None:
    first = _write_script(tmp_path / "a" / "one.npc")
    second = _write_script(tmp_path / "a" / "b" / "two.npc")
    (tmp_path / "a" / "notes.txt").write_text("x", encoding="utf-8")

    found = find_scripts([tmp_path / "a", first])

    assert found == [second, first]


def test_cli_compiles_all_targets(tmp_path: Path) -> None:
    _write_script(tmp_path / "npcs" / "ruby.npc")
    out_dir = tmp_path / "out"

    proc = subprocess.run(
        [sys.executable, "scripts/compile_npc.py", str(tmp_path / "npcs"), "--target", "all", "--out-dir", str(out_dir)],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )

    assert proc.returncode == 0, proc.stderr
    assert "compiled 1/1 scripts" in proc.stdout
    assert (out_dir / "ruby_redhair.lua").exists()
    assert (out_dir / "ruby_redhair.sql").exists()
    assert (out_dir / "ruby_redhair.npc").read_text(encoding="utf-8") == RUBY_HEADER + RUBY_SCRIPT


def test_cli_reports_errors_and_fails(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "broken.npc", "fly away\n")

    proc = subprocess.run(
        [sys.executable, "scripts/compile_npc.py", str(script)],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )

    assert proc.returncode == 1
    assert "Line 1: No parser seems to know what to do with this line." in proc.stderr
