"""
Tests for the CLI 'transform' command.

Verifies that:
1.  A single file is printed to stdout, or written with `--out`.
2.  Directories are transformed recursively into `--out`, skipping node_modules.
3.  Failing worklets produce exit code 1 and a report, but output is still written.
"""

from workletizer.cli.__main__ import main
from workletizer.cli.commands import collect_sources

WORKLET = "const f = () => {\n  'worklet';\n  return shared.value;\n};\n"
BROKEN = "const g = () => {\n  'worklet';\n  class A {}\n};\n"


def test_single_file_to_stdout(tmp_path, capsys):
  infile = tmp_path / "App.js"
  infile.write_text(WORKLET, encoding="utf-8")

  assert main(["transform", str(infile), "--root", str(tmp_path)]) == 0

  out = capsys.readouterr().out
  assert out.startswith("const f = (function () {\n")
  assert '_f.__location = "App.js (1:10)";' in out


def test_single_file_to_out(tmp_path):
  infile = tmp_path / "App.js"
  infile.write_text(WORKLET, encoding="utf-8")
  outfile = tmp_path / "build" / "App.js"

  assert main(["transform", str(infile), "--out", str(outfile)]) == 0

  assert outfile.exists()
  assert "_f._closure = { shared: { value: shared.value } };" in outfile.read_text(encoding="utf-8")


def test_globals_flag(tmp_path, capsys):
  infile = tmp_path / "App.js"
  infile.write_text("const f = () => {\n  'worklet';\n  return helper();\n};\n", encoding="utf-8")

  assert main(["transform", str(infile), "--globals", "helper"]) == 0
  assert "_f._closure = {};" in capsys.readouterr().out


def test_directory_requires_out(tmp_path, recording_console):
  (tmp_path / "a.js").write_text(WORKLET, encoding="utf-8")

  assert main(["transform", str(tmp_path)]) == 1
  assert "requires --out" in recording_console.export_text()


def test_directory_batch(tmp_path):
  src = tmp_path / "src"
  (src / "sub").mkdir(parents=True)
  (src / "node_modules" / "lib").mkdir(parents=True)
  (src / "a.js").write_text(WORKLET, encoding="utf-8")
  (src / "sub" / "b.jsx").write_text("const el = <View />;\n", encoding="utf-8")
  (src / "node_modules" / "lib" / "c.js").write_text(WORKLET, encoding="utf-8")
  (src / "notes.md").write_text("# notes", encoding="utf-8")
  out = tmp_path / "out"

  assert main(["transform", str(src), "--out", str(out)]) == 0

  assert "(function () {" in (out / "a.js").read_text(encoding="utf-8")
  assert (out / "sub" / "b.jsx").read_text(encoding="utf-8") == "const el = <View />;\n"
  assert not (out / "node_modules").exists()
  assert not (out / "notes.md").exists()


def test_failures_are_reported(tmp_path, recording_console):
  src = tmp_path / "src"
  src.mkdir()
  (src / "good.js").write_text(WORKLET, encoding="utf-8")
  (src / "broken.js").write_text(BROKEN, encoding="utf-8")
  out = tmp_path / "out"

  assert main(["transform", str(src), "--out", str(out)]) == 1

  assert (out / "broken.js").read_text(encoding="utf-8") == BROKEN
  text = recording_console.export_text()
  assert "Transformation Report" in text
  assert "broken.js" in text
  assert "1 Passed, 1 with Issues" in text


def test_missing_input(tmp_path, recording_console):
  assert main(["transform", str(tmp_path / "missing.js")]) == 1
  assert "Input not found" in recording_console.export_text()


def test_collect_sources(tmp_path):
  (tmp_path / "b.mjs").write_text("", encoding="utf-8")
  (tmp_path / "a.js").write_text("", encoding="utf-8")
  (tmp_path / "c.ts").write_text("", encoding="utf-8")
  (tmp_path / "node_modules").mkdir()
  (tmp_path / "node_modules" / "d.js").write_text("", encoding="utf-8")

  assert [p.name for p in collect_sources(tmp_path)] == ["a.js", "b.mjs"]
