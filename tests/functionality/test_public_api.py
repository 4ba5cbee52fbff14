"""
Tests for the package-level API.
"""

import pytest

import workletizer
from workletizer import WorkletTransformError, transform


def test_exports():
  assert workletizer.__version__ == "0.1.0"
  for name in ("RuntimeConfig", "TransformResult", "WorkletEngine", "WorkletRecord", "transform"):
    assert hasattr(workletizer, name)


def test_transform_returns_code():
  out = transform("const f = () => {\n  'worklet';\n  return shared.value;\n};\n", filename="App.js")
  assert out.startswith("const f = (function () {\n")
  assert "_f._closure = { shared: { value: shared.value } };" in out
  assert '_f.__location = "App.js (1:10)";' in out


def test_transform_globals():
  out = transform("const f = () => {\n  'worklet';\n  return helper();\n};\n", globals=["helper"])
  assert "_f._closure = {};" in out


def test_transform_raises_with_location():
  code = "const ok = 1;\nconst f = () => {\n  'worklet';\n  class A {}\n};\n"
  with pytest.raises(WorkletTransformError) as excinfo:
    transform(code, filename="bad.js")
  assert excinfo.value.location == "bad.js (2:10)"
  assert len(excinfo.value.errors) == 1
  assert "Unsupported syntax in worklet" in str(excinfo.value)


def test_code_outside_worklets_may_use_any_syntax():
  code = "class A extends B {}\nconst el = <View />;\n"
  assert transform(code, filename="a.jsx") == code
