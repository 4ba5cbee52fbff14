"""
Tests for the optimization-flag analyzer.
"""

import pytest

from workletizer.analysis.optimization import optimization_flags
from workletizer.enums import OptimizationFlag


@pytest.mark.parametrize(
  "code, expected",
  [
    ("() => ({ width: sv.value * 2 })", 3),
    ("() => ({ opacity: interpolate(sv.value, [0, 1], [0, 1]) })", 3),
    ("() => ({ width: Math.max(sv.value, 1) })", 2),
    ("() => { if (sv.value) { return { a: 1 }; } return {}; }", 1),
    ("() => { switch (k) { default: return f(); } }", 0),
    ("() => cond ? { a: 1 } : { a: 2 }", 3),
  ],
)
def test_flags(parse_fn, code, expected):
  assert int(optimization_flags(parse_fn(code))) == expected


def test_nested_functions_count(parse_fn):
  fn = parse_fn("() => { const g = () => { if (a) {} }; return { a: 1 }; }")
  assert optimization_flags(fn) == OptimizationFlag.FUNCTIONLESS


def test_custom_helpers(parse_fn):
  fn = parse_fn("() => ({ x: spring(1) })")
  assert optimization_flags(fn) == OptimizationFlag.STATEMENTLESS
  assert optimization_flags(fn, helpers={"spring"}) == (
    OptimizationFlag.FUNCTIONLESS | OptimizationFlag.STATEMENTLESS
  )
