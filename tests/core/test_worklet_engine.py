"""
Tests for the file-level engine.

Verifies:
1. Only worklet text changes; everything else is preserved byte for byte.
2. Rendered worklets follow the indentation of the line they start on.
3. A failing worklet is reported and kept while the rest still transform.
4. Export defaults, style factories and object methods are handled in place.
"""

from workletizer.config import RuntimeConfig
from workletizer.core.engine import WorkletEngine


def test_top_level_declaration():
  code = (
    "import x from 'y';\n"
    "const a = 1;\n"
    "function f() {\n"
    "  'worklet';\n"
    "  return a;\n"
    "}\n"
    "class C {}\n"
  )
  result = WorkletEngine().run(code, "src/x.js")
  assert result.success
  record = result.worklets[0]
  assert record.code == "function f(){const{a}=jsThis._closure;return a;}"
  expected = (
    "import x from 'y';\n"
    "const a = 1;\n"
    "const f = (function () {\n"
    "  const _f = function f() {\n"
    "    return a;\n"
    "  };\n"
    "  _f._closure = { a: a };\n"
    f'  _f.asString = "{record.code}";\n'
    f"  _f.__workletHash = {record.hash};\n"
    '  _f.__location = "src/x.js (3:0)";\n'
    "  _f.__worklet = true;\n"
    "  return _f;\n"
    "})();\n"
    "class C {}\n"
  )
  assert result.code == expected


def test_indentation_follows_site_line():
  code = (
    "function App() {\n"
    "  const handler = () => {\n"
    "    'worklet';\n"
    "    return 1;\n"
    "  };\n"
    "  return handler;\n"
    "}\n"
  )
  result = WorkletEngine().run(code, "App.js")
  record = result.worklets[0]
  expected = (
    "function App() {\n"
    "  const handler = (function () {\n"
    "    const _f = () => {\n"
    "      return 1;\n"
    "    };\n"
    "    _f._closure = {};\n"
    '    _f.asString = "function _f(){return 1;}";\n'
    f"    _f.__workletHash = {record.hash};\n"
    '    _f.__location = "App.js (2:18)";\n'
    "    _f.__worklet = true;\n"
    "    return _f;\n"
    "  })();\n"
    "  return handler;\n"
    "}\n"
  )
  assert result.code == expected


def test_no_worklets_leaves_code_alone():
  code = "const f = () => 1;\nclass A { m() { return <div />; } }\n"
  result = WorkletEngine().run(code, "a.jsx")
  assert result.code == code
  assert result.success
  assert result.worklets == []


def test_failing_worklet_is_isolated(recording_console):
  bad = "function bad() {\n  'worklet';\n  class K {}\n}\n"
  good = "function good() {\n  'worklet';\n  return 1;\n}\n"
  result = WorkletEngine().run(bad + good, "x.js")
  assert not result.success
  assert result.has_errors
  assert len(result.errors) == 1
  assert result.errors[0].startswith("x.js (1:0): Unsupported syntax in worklet")
  assert result.code.startswith(bad)
  assert "const good = (function () {" in result.code
  assert [r.name for r in result.worklets] == ["good"]
  assert "Skipped worklet" in recording_console.export_text()


def test_export_default_function():
  code = "export default function f() {\n  'worklet';\n  return 1;\n}\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.code.startswith("export default (function () {\n  const _f = function f() {\n")
  assert result.code.endswith("  return _f;\n})();\n")
  assert result.worklets[0].location == "x.js (1:15)"


def test_style_factory_argument_gets_flags():
  code = (
    "const style = createAnimatedStyle(() => {\n"
    "  'worklet';\n"
    "  return { opacity: interpolate(sv.value, [0, 1], [0, 1]) };\n"
    "});\n"
  )
  result = WorkletEngine().run(code, "x.js")
  record = result.worklets[0]
  assert record.optimization_flags == 3
  assert "sv" in record.captured
  assert "  _f.__optimalization = 3;\n  _f.__worklet = true;\n" in result.code
  assert result.code.endswith("})());\n")


def test_object_method_site():
  code = (
    "const handlers = {\n"
    "  onTap() {\n"
    "    'worklet';\n"
    "    return this.other();\n"
    "  },\n"
    "};\n"
  )
  result = WorkletEngine().run(code, "x.js")
  assert result.code.startswith(
    "const handlers = {\n"
    "  onTap() {\n"
    "    return this.other();\n"
    "  },\n"
    "  _onTap_worklet_factory_: function () {\n"
    "    var other = this._other_worklet_factory_();\n"
    "    var f = (function () {\n"
  )
  assert result.code.endswith("    return f;\n  },\n};\n")
  assert [r.kind for r in result.worklets] == ["method-factory", "worklet"]
  assert result.worklets[0].routes == ["other:re-materialized"]
  # The inner worklet is new but reports the method's position.
  assert [r.location for r in result.worklets] == ["x.js (2:2)", "x.js (2:2)"]
  assert '_f.__location = "x.js (2:2)";' in result.code


def test_nested_worklet_is_one_site():
  code = (
    "const outer = () => {\n"
    "  'worklet';\n"
    "  const inner = () => {\n"
    "    'worklet';\n"
    "    return 1;\n"
    "  };\n"
    "  return inner;\n"
    "};\n"
  )
  result = WorkletEngine().run(code, "x.js")
  assert len(result.worklets) == 2
  assert result.code.count("__worklet = true") == 2


def test_configured_globals():
  code = "const f = () => {\n  'worklet';\n  return helper(a);\n};\n"
  result = WorkletEngine(RuntimeConfig(globals=["helper"])).run(code, "x.js")
  assert result.worklets[0].captured == ["a"]


def test_location_relative_to_root(tmp_path):
  root = tmp_path.resolve()
  code = "const f = () => {\n  'worklet';\n};\n"
  result = WorkletEngine(RuntimeConfig(root=root)).run(code, str(root / "src" / "a.js"))
  assert result.worklets[0].location == "src/a.js (1:10)"


def test_columns_count_characters():
  code = "const s = 'é'; const f = () => {\n  'worklet';\n  return 1;\n};\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.worklets[0].location == "x.js (1:25)"
  assert result.code.startswith("const s = 'é'; const f = (function () {\n")


def test_parenthesized_optional_chain_keeps_its_meaning():
  code = "const f = () => {\n  'worklet';\n  return (a?.b).c;\n};\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.success
  assert "    return (a?.b).c;\n" in result.code
  assert result.worklets[0].code == "function _f(){const{a}=jsThis._closure;return(a==null?void 0:a.b).c;}"


def test_arrow_site_without_semicolon_ends_its_statement():
  code = "const f = () => {\n  'worklet';\n  return 1\n}\n[1, 2].forEach(log)\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.success
  assert result.code.endswith("  return _f;\n})();\n[1, 2].forEach(log)\n")


def test_continuation_check_skips_comments():
  code = "const f = () => {\n  'worklet';\n}\n// next\n(go)()\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.code.endswith("})();\n// next\n(go)()\n")


def test_arrow_site_with_semicolon_is_unchanged():
  code = "const f = () => {\n  'worklet';\n};\n[1, 2].forEach(log);\n"
  result = WorkletEngine().run(code, "x.js")
  assert result.code.endswith("})();\n[1, 2].forEach(log);\n")
  assert ";;" not in result.code


def test_repeated_runs_are_deterministic():
  code = "const f = () => {\n  'worklet';\n  return sv.value + (o?.x ?? 0);\n};\n"
  first = WorkletEngine().run(code, "x.js")
  second = WorkletEngine().run(code, "x.js")
  assert first.code == second.code
  assert first.worklets[0].code == second.worklets[0].code
  assert first.worklets[0].hash == second.worklets[0].hash


def test_identical_bodies_share_hash_not_location():
  body = "() => {\n  'worklet';\n  return sv.value;\n}"
  result = WorkletEngine().run(f"const a = {body};\nconst b = {body};\n", "x.js")
  first, second = result.worklets
  assert first.code == second.code
  assert first.hash == second.hash
  assert first.location == "x.js (1:10)"
  assert second.location == "x.js (5:10)"
