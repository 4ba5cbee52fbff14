"""
Tests for the runtime configuration.

Verifies that:
1. RuntimeConfig.load() picks up [tool.workletizer] from pyproject.toml.
2. CLI arguments extend or override TOML settings.
3. Plugin-style options are validated.
4. Location file names are made relative to the root.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from workletizer.config import RuntimeConfig
from workletizer.semantics.ambient import DEFAULT_AMBIENT_NAMES


@pytest.fixture
def toml_file(tmp_path):
  """Creates a dummy pyproject.toml in the temp dir."""
  fpath = tmp_path / "pyproject.toml"
  content = """
[tool.workletizer]
globals = ["fromToml"]
root = "src"
"""
  fpath.write_text(content, encoding="utf-8")
  return fpath


def test_defaults():
  config = RuntimeConfig()
  assert config.globals == []
  assert config.ambient_names == DEFAULT_AMBIENT_NAMES


def test_globals_extend_ambient_names():
  config = RuntimeConfig(globals=[" myHelper "])
  assert config.globals == ["myHelper"]
  assert "myHelper" in config.ambient_names
  assert "Math" in config.ambient_names


def test_empty_global_is_rejected():
  with pytest.raises(ValidationError):
    RuntimeConfig(globals=[""])


def test_config_is_frozen():
  config = RuntimeConfig()
  with pytest.raises(ValidationError):
    config.globals = ["x"]


def test_load_from_toml(tmp_path, toml_file):
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.globals == ["fromToml"]
  assert config.root == (tmp_path / "src").resolve()


def test_cli_arguments_extend_and_override(tmp_path, toml_file):
  config = RuntimeConfig.load(globals=["fromCli"], root=tmp_path, search_path=tmp_path)
  assert config.globals == ["fromToml", "fromCli"]
  assert config.root == tmp_path


def test_toml_found_in_parent_directory(tmp_path, toml_file):
  nested = tmp_path / "a" / "b"
  nested.mkdir(parents=True)
  config = RuntimeConfig.load(search_path=nested)
  assert config.globals == ["fromToml"]


def test_toml_directory_is_default_root(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
  config = RuntimeConfig.load(search_path=tmp_path)
  assert config.globals == []
  assert config.root == tmp_path.resolve()


def test_plugin_options():
  config = RuntimeConfig.from_plugin_options({"globals": ["a", "b"], "unknown": 1})
  assert config.globals == ["a", "b"]
  assert RuntimeConfig.from_plugin_options(None).globals == []


@pytest.mark.parametrize("options", [{"globals": "a"}, {"globals": [1]}, {"globals": [" "]}])
def test_plugin_options_validation(options):
  with pytest.raises(ValueError):
    RuntimeConfig.from_plugin_options(options)


def test_relative_filename(tmp_path):
  root = tmp_path.resolve()
  config = RuntimeConfig(root=root)
  assert config.relative_filename(str(root / "src" / "App.js")) == "src/App.js"
  assert config.relative_filename("lib/a.js") == "lib/a.js"
  outside = Path("/elsewhere/b.js")
  assert config.relative_filename(str(outside)) == outside.as_posix()
