"""
Tests for CLI argument handling.

Verifies that:
1.  `transform` and `inspect` dispatch to their handlers with parsed arguments.
2.  The handler's return value becomes the exit code.
3.  `--version` and missing subcommands exit through argparse.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from workletizer.cli.__main__ import main


@patch("workletizer.cli.commands.handle_transform")
def test_transform_dispatch(mock_handle):
  mock_handle.return_value = 0
  code = main(["transform", "src/", "--out", "build/", "--globals", "a", "b", "--root", "."])

  assert code == 0
  mock_handle.assert_called_once_with(Path("src/"), Path("build/"), ["a", "b"], Path("."))


@patch("workletizer.cli.commands.handle_transform")
def test_transform_defaults(mock_handle):
  mock_handle.return_value = 1
  assert main(["transform", "App.js"]) == 1
  mock_handle.assert_called_once_with(Path("App.js"), None, [], None)


@patch("workletizer.cli.commands.handle_inspect")
def test_inspect_dispatch(mock_handle):
  mock_handle.return_value = 0
  assert main(["inspect", "App.js", "--globals", "helper"]) == 0
  mock_handle.assert_called_once_with(Path("App.js"), ["helper"], None)


def test_version(capsys):
  with pytest.raises(SystemExit) as excinfo:
    main(["--version"])
  assert excinfo.value.code == 0
  assert "0.1.0" in capsys.readouterr().out


def test_command_required():
  with pytest.raises(SystemExit) as excinfo:
    main([])
  assert excinfo.value.code == 2
