"""
Tests for the CLI 'inspect' command.
"""

from workletizer.cli.__main__ import main


def test_inspect_file(tmp_path, recording_console):
  infile = tmp_path / "App.js"
  infile.write_text(
    "const f = () => {\n  'worklet';\n  sv.value = base;\n};\nconst plain = () => 1;\n",
    encoding="utf-8",
  )

  assert main(["inspect", str(infile), "--root", str(tmp_path)]) == 0

  text = recording_console.export_text()
  assert "Worklets" in text
  assert "App.js (1:10)" in text
  assert "sv, base" in text
  # Nothing is written next to the source.
  assert [p.name for p in tmp_path.iterdir()] == ["App.js"]


def test_inspect_directory_lists_factories(tmp_path, recording_console):
  (tmp_path / "handlers.js").write_text(
    "export const h = {\n  onTap() {\n    'worklet';\n    return this.other();\n  },\n};\n",
    encoding="utf-8",
  )

  assert main(["inspect", str(tmp_path), "--root", str(tmp_path)]) == 0

  text = recording_console.export_text()
  assert "method-factory" in text
  assert "onTap" in text


def test_inspect_reports_failures(tmp_path, recording_console):
  infile = tmp_path / "bad.js"
  infile.write_text("const g = () => {\n  'worklet';\n  class A {}\n};\n", encoding="utf-8")

  assert main(["inspect", str(infile), "--root", str(tmp_path)]) == 1
  assert "bad.js (1:10)" in recording_console.export_text()


def test_inspect_missing_input(tmp_path):
  assert main(["inspect", str(tmp_path / "nope.js")]) == 1
