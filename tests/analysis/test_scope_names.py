"""
Tests for binding collection and the scope stack.
"""

from workletizer.analysis.scopes import (
  ScopeStack,
  function_scope_names,
  hoisted_var_names,
  lexical_names,
  pattern_names,
)
from workletizer.core.js.parser import parse_program


def test_pattern_names_walk_destructuring():
  decl = parse_program("const { a, b: { c }, d = 1, ...rest } = o;")[0]
  assert pattern_names(decl.declarations[0].id) == ["a", "c", "d", "rest"]
  decl = parse_program("let [x, , [y], ...zs] = arr;")[0]
  assert pattern_names(decl.declarations[0].id) == ["x", "y", "zs"]


def test_lexical_names_skip_var():
  body = parse_program("let a; const b = 1; var c; function d() {}")
  assert lexical_names(body) == {"a", "b", "d"}


def test_hoisted_var_names_skip_nested_functions():
  fn = parse_program(
    "function f() { if (x) { var a; } for (var i = 0; i < 1; i++) {} function g() { var hidden; } }"
  )[0]
  assert hoisted_var_names(fn.body) == {"a", "i"}


def test_function_scope_names():
  fn = parse_program("function f(p, { q }) { var v; let l; }")[0]
  assert function_scope_names(fn) == {"p", "q", "v", "l", "arguments"}


def test_arrow_has_no_arguments_binding(parse_fn):
  fn = parse_fn("(a) => a")
  assert function_scope_names(fn) == {"a"}


def test_named_function_expression_binds_its_name(parse_fn):
  fn = parse_fn("(function inner() {})")
  assert "inner" in function_scope_names(fn)


def test_scope_stack():
  scopes = ScopeStack()
  assert not scopes.is_bound("a")
  scopes.push(["a"])
  scopes.push()
  scopes.declare("b")
  assert scopes.is_bound("a") and scopes.is_bound("b")
  assert scopes.depth == 2
  scopes.pop()
  assert not scopes.is_bound("b")
  assert scopes.is_bound("a")
