"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so log output of one test never leaks into another.
- Small helpers to build worklet trees from source snippets.
"""

import io
import sys
import pytest
from pathlib import Path

from rich.console import Console

# Add src to path so we can import 'workletizer' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from workletizer.core.js.parser import parse_expression, parse_program
from workletizer.utils.console import reset_console, set_console


@pytest.fixture(autouse=True)
def recording_console():
  """
  Routes all console and logging output to an in-memory console for the
  duration of a test.
  """
  rec = Console(record=True, width=200, file=io.StringIO(), force_terminal=False)
  set_console(rec)
  yield rec
  reset_console()


@pytest.fixture
def parse_fn():
  """
  Parses a snippet holding one function.

  A snippet starting with `function` is read as a declaration, anything else
  as an expression.
  """

  def _parse(code: str):
    if code.lstrip().startswith(("function", "async function")):
      return parse_program(code)[0]
    return parse_expression(code)

  return _parse
