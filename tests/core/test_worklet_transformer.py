"""
Tests for the tree-level worklet transformer.

Verifies:
1. Declarations, expressions, arrows and object properties are replaced.
2. Nested worklets are transformed with their parent and recorded after it.
3. Style factory arguments carry optimization flags.
4. Unmarked code is untouched.
"""

import pytest

from workletizer.core.js.emitter import to_source
from workletizer.core.js.parser import parse_expression, parse_program
from workletizer.core.transformer import WorkletTransformer, is_marked_function, is_style_factory_call
from workletizer.semantics.ambient import DEFAULT_AMBIENT_NAMES


@pytest.fixture
def transformer():
  return WorkletTransformer(DEFAULT_AMBIENT_NAMES, "App.js")


def test_declaration_becomes_const(transformer):
  stmt = parse_program("function f() { 'worklet'; return 1; }")[0]
  out = to_source(transformer.visit(stmt), compact=True)
  assert out.startswith("const f=(function(){const _f=function f(){return 1;};")
  assert out.endswith("_f.__worklet=true;return _f;})();")
  assert [r.name for r in transformer.records] == ["f"]


def test_declaration_as_expression(transformer):
  fn = parse_program("function f() { 'worklet'; return 1; }")[0]
  out = to_source(transformer.transform_worklet(fn, as_expression=True), compact=True)
  assert out.startswith("(function(){const _f=function f(){return 1;};")


def test_unmarked_code_is_untouched(transformer):
  stmt = parse_program("function g() { return () => 1; }")[0]
  assert to_source(transformer.visit(stmt), compact=True) == "function g(){return()=>1;}"
  assert transformer.records == []


def test_nested_worklets_are_recorded_after_parent(transformer):
  stmt = parse_program(
    "function outer() { 'worklet'; const inner = () => { 'worklet'; return 1; }; return inner(); }"
  )[0]
  out = to_source(transformer.visit(stmt), compact=True)
  assert [r.name for r in transformer.records] == ["outer", "_f"]
  assert out.count("__worklet=true") == 2


def test_worklets_inside_plain_functions(transformer):
  stmt = parse_program("function setup() { return [() => { 'worklet'; return a; }, 1]; }")[0]
  out = to_source(transformer.visit(stmt), compact=True)
  assert out.startswith("function setup(){return[(function(){const _f=()=>{return a;};_f._closure={a:a};")
  assert transformer.records[0].captured == ["a"]


def test_style_factory_arguments_get_flags(transformer):
  call = parse_expression("createAnimatedStyle(() => { 'worklet'; return { a: 1 }; })")
  out = to_source(transformer.visit(call), compact=True)
  assert "_f.__optimalization=3;" in out
  assert transformer.records[0].optimization_flags == 3


def test_other_calls_do_not_get_flags(transformer):
  call = parse_expression("useStyle(() => { 'worklet'; return { a: 1 }; })")
  out = to_source(transformer.visit(call), compact=True)
  assert "__optimalization" not in out
  assert transformer.records[0].optimization_flags is None


def test_object_method_becomes_pair(transformer):
  obj = parse_expression("{ foo: function () { 'worklet'; return this.bar(); }, baz: 1 }")
  out = transformer.visit(obj)
  keys = [to_source(p.key) for p in out.properties]
  assert keys == ["foo", "_foo_worklet_factory_", "baz"]
  assert [r.kind for r in transformer.records] == ["method-factory", "worklet"]


def test_computed_key_uses_general_builder(transformer):
  obj = parse_expression("{ [k]: function () { 'worklet'; return 1; } }")
  out = to_source(transformer.visit(obj), compact=True)
  assert out.startswith("{[k]:(function(){const _f=function(){return 1;};")
  assert [r.kind for r in transformer.records] == ["worklet"]


def test_accessor_only_transforms_nested(transformer):
  obj = parse_expression("{ get g() { 'worklet'; return () => { 'worklet'; return 1; }; } }")
  out = to_source(transformer.visit(obj), compact=True)
  assert out.startswith("{get g(){")
  assert len(transformer.records) == 1


def test_helpers(parse_fn):
  assert is_marked_function(parse_fn("() => { 'worklet'; }"))
  assert not is_marked_function(parse_fn("() => { 'use strict'; }"))
  assert is_style_factory_call(parse_expression("createAnimatedStyle(f)"))
  assert not is_style_factory_call(parse_expression("obj.createAnimatedStyle(f)"))
