"""
Tests for the JavaScript back-end.

Verifies:
1. Compact output drops optional whitespace but keeps required token gaps.
2. Parentheses follow operator precedence, including `??` mixing rules.
3. Statement-position expressions that would misparse are wrapped.
4. Pretty output layout (indentation, inline vs multi-line objects, base indent).
"""

import pytest

from workletizer.core.js import nodes as js
from workletizer.core.js.emitter import JsEmitter, to_source
from workletizer.core.js.parser import parse_expression, parse_program


def compact(code: str) -> str:
  return to_source(parse_expression(code), compact=True)


@pytest.mark.parametrize(
  "code, expected",
  [
    ("(a + b) * c", "(a+b)*c"),
    ("a - (b - c)", "a-(b-c)"),
    ("a ** b ** c", "a**b**c"),
    ("(-a) ** 2", "(-a)**2"),
    ("(a || b) ?? c", "(a||b)??c"),
    ("a + +b", "a+ +b"),
    ("typeof x === 'string'", "typeof x==='string'"),
    ("!(a && b)", "!(a&&b)"),
    ("x = y = 1", "x=y=1"),
    ("(a, b)", "a,b"),
    ("a ? b : c ? d : e", "a?b:c?d:e"),
    ("new (f())()", "new (f())()"),
    ("(1).toString()", "(1).toString()"),
    ("a?.b?.[0]", "a?.b?.[0]"),
    ("f?.(x)", "f?.(x)"),
    ("(a?.b).c", "(a?.b).c"),
    ("(a?.b)()", "(a?.b)()"),
    ("(a.b).c", "a.b.c"),
    ("`a${b}`", "`a${b}`"),
    ("() => ({ a: 1 })", "()=>({a:1})"),
    ("[1, , 2]", "[1,,2]"),
  ],
)
def test_compact_expressions(code, expected):
  assert compact(code) == expected


def test_compact_function():
  fn = parse_program("function f(a, b) { return a + b; }")[0]
  assert to_source(fn, compact=True) == "function f(a,b){return a+b;}"


def test_compact_keywords_only_space_before_words():
  fn = parse_program("function f() { return [1]; }")[0]
  assert to_source(fn, compact=True) == "function f(){return[1];}"
  decl = parse_program("const { a } = b;")[0]
  assert to_source(decl, compact=True) == "const{a}=b;"


def test_compact_drops_comments():
  fn = parse_program("function f() {\n  // note\n  return 1;\n}")[0]
  assert to_source(fn, compact=True) == "function f(){return 1;}"


def test_compact_if_else():
  stmt = parse_program("if (a) { b(); } else c();")[0]
  assert to_source(stmt, compact=True) == "if(a){b();}else c();"


@pytest.mark.parametrize(
  "code, expected",
  [
    ("for (var i = ('a' in o) ? 1 : 0; i < 2; i++) {}", "for(var i=('a' in o)?1:0;i<2;i++){}"),
    ("for (x = ('a' in o); ; ) break;", "for(x=('a' in o);;)break;"),
    ("for (; 'a' in o; ) break;", "for(;'a' in o;)break;"),
  ],
)
def test_in_operator_is_wrapped_in_for_init(code, expected):
  assert to_source(parse_program(code)[0], compact=True) == expected


def test_in_operator_in_pretty_for_init():
  stmt = parse_program("for (var i = ('a' in o) ? 1 : 0; i < 2; i++) {}")[0]
  assert to_source(stmt) == "for (var i = ('a' in o) ? 1 : 0; i < 2; i++) {}"


def test_iife_callee_is_parenthesized():
  iife = js.CallExpression(js.FunctionExpression(None, (), js.BlockStatement(())), ())
  assert to_source(iife, compact=True) == "(function(){})()"
  assert to_source(js.ExpressionStatement(iife)) == "(function () {})();"


def test_statement_starting_with_object_is_wrapped():
  stmt = js.ExpressionStatement(js.AssignmentExpression("=", js.ObjectPattern(()), js.Identifier("o")))
  assert to_source(stmt, compact=True) == "({}=o);"


def test_synthesized_string_is_quoted():
  assert to_source(js.StringLiteral('a"b')) == '"a\\"b"'


def test_pretty_function_layout():
  fn = parse_program("function f(a) { if (a) { return 1; } return 2; }")[0]
  assert to_source(fn) == "function f(a) {\n  if (a) {\n    return 1;\n  }\n  return 2;\n}"


def test_pretty_inline_object_and_array_hole():
  assert to_source(parse_expression("{ a: 1, b: [1, , 2] }")) == "{ a: 1, b: [1, , 2] }"
  assert to_source(parse_expression("[1, ,]")) == "[1, ,]"


def test_pretty_object_with_method_is_multiline():
  assert to_source(parse_expression("{ m() { return 1; } }")) == "{\n  m() {\n    return 1;\n  }\n}"


def test_base_indent_prefixes_continuation_lines():
  fn = parse_program("function f() { return 1; }")[0]
  text = JsEmitter(base_indent="    ").emit(fn)
  assert text == "function f() {\n      return 1;\n    }"
