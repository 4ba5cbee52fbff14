"""
Tests for the tree-sitter front-end.

Verifies:
1. Expressions map to their ESTree-shaped nodes (members, optional links, logical operators).
2. Function bodies split their directive prologue from their statements.
3. Locations are 1-based lines and 0-based character columns.
4. Syntax errors and unsupported constructs raise dedicated exceptions.
"""

import pytest

from workletizer.core.errors import JsSyntaxError, UnsupportedSyntaxError
from workletizer.core.js import nodes as js
from workletizer.core.js.parser import JsParser, parse_expression, parse_program, parse_tree, unescape_js


def test_member_chain():
  node = parse_expression("a.b[c]")
  assert node == js.MemberExpression(
    js.MemberExpression(js.Identifier("a"), js.Identifier("b")),
    js.Identifier("c"),
    computed=True,
  )


def test_optional_member_and_call():
  member = parse_expression("a?.b")
  assert isinstance(member, js.MemberExpression)
  assert member.optional

  call = parse_expression("f?.(x)")
  assert isinstance(call, js.CallExpression)
  assert call.optional
  assert call.arguments == (js.Identifier("x"),)


def test_parentheses_end_an_optional_chain():
  node = parse_expression("(a?.b).c")
  assert node == js.MemberExpression(
    js.ParenthesizedExpression(js.MemberExpression(js.Identifier("a"), js.Identifier("b"), optional=True)),
    js.Identifier("c"),
  )
  call = parse_expression("(o.m?.())()")
  assert isinstance(call.callee, js.ParenthesizedExpression)

  # Other parentheses are not kept.
  assert parse_expression("(a.b).c") == parse_expression("a.b.c")


def test_logical_and_binary_operators():
  node = parse_expression("a ?? b + c")
  assert isinstance(node, js.LogicalExpression)
  assert node.operator == "??"
  assert node.right == js.BinaryExpression("+", js.Identifier("b"), js.Identifier("c"))


def test_assignment_operators():
  plain = parse_expression("x = 1")
  assert plain == js.AssignmentExpression("=", js.Identifier("x"), js.NumericLiteral("1"))

  augmented = parse_expression("x.y += 2")
  assert augmented.operator == "+="
  assert isinstance(augmented.left, js.MemberExpression)


def test_string_literal_keeps_raw_and_cooks_value():
  node = parse_expression("'a\\nb'")
  assert node.raw == "'a\\nb'"
  assert node.value == "a\nb"


def test_template_literal_parts():
  node = parse_expression("`a${b}c`")
  assert isinstance(node, js.TemplateLiteral)
  assert [q.cooked for q in node.quasis] == ["a", "c"]
  assert node.expressions == (js.Identifier("b"),)


def test_object_members():
  node = parse_expression("{ a, b: 1, m() {}, get g() { return 1; }, ...rest }")
  shorthand, pair, method, getter, spread = node.properties
  assert shorthand.shorthand
  assert pair.key == js.Identifier("b")
  assert method.method and method.kind == "init"
  assert getter.kind == "get" and not getter.method
  assert isinstance(spread, js.SpreadElement)


def test_function_directives_are_split_from_body():
  fn = parse_program("function f(a) { 'worklet'; return a; }")[0]
  assert isinstance(fn, js.FunctionDeclaration)
  assert fn.id == js.Identifier("f")
  assert [d.value for d in fn.body.directives] == ["worklet"]
  assert fn.body.body == (js.ReturnStatement(js.Identifier("a")),)


def test_directive_prologue_ends_at_first_statement():
  fn = parse_program("function f() { x; 'worklet'; }")[0]
  assert fn.body.directives == ()
  assert len(fn.body.body) == 2


def test_arrow_function_shapes():
  expr_body = parse_expression("(a, b) => a + b")
  assert isinstance(expr_body, js.ArrowFunctionExpression)
  assert len(expr_body.params) == 2
  assert isinstance(expr_body.body, js.BinaryExpression)

  single = parse_expression("async x => { 'worklet'; }")
  assert single.is_async
  assert single.params == (js.Identifier("x"),)
  assert [d.value for d in single.body.directives] == ["worklet"]


def test_destructuring_patterns():
  decl = parse_program("const { a, b: [c, ...d], e = 1 } = obj;")[0]
  pattern = decl.declarations[0].id
  assert isinstance(pattern, js.ObjectPattern)
  a, b, e = pattern.properties
  assert a.shorthand
  assert isinstance(b.value, js.ArrayPattern)
  assert isinstance(b.value.elements[1], js.RestElement)
  assert isinstance(e.value, js.AssignmentPattern)


def test_statements():
  body = parse_program(
    """
    for (let i = 0; i < n; i++) { continue; }
    for (const k in o) {}
    for (const v of list) {}
    try { f(); } catch (e) { g(e); } finally { h(); }
    switch (x) { case 1: break; default: y(); }
    """
  )
  kinds = [type(s) for s in body]
  assert kinds == [js.ForStatement, js.ForInStatement, js.ForOfStatement, js.TryStatement, js.SwitchStatement]
  switch = body[-1]
  assert switch.cases[0].test == js.NumericLiteral("1")
  assert switch.cases[1].test is None


def test_comments_are_kept_as_statements():
  body = parse_program("// note\nx;")
  assert body[0] == js.Comment("// note")


def test_location_uses_character_columns():
  code = "const s = 'é'; const f = () => {};"
  tree = parse_tree(code)
  parser = JsParser(code)
  arrow = tree.root_node.named_children[1].named_children[0].child_by_field_name("value")
  assert arrow.type == "arrow_function"
  loc = parser.location(arrow)
  assert loc.line == 1
  assert loc.column == code.index("()")


def test_syntax_error_is_reported():
  with pytest.raises(JsSyntaxError):
    parse_program("function f( { return 1; }")


def test_class_is_unsupported_inside_converted_code():
  with pytest.raises(UnsupportedSyntaxError) as excinfo:
    parse_program("class A {}")
  assert excinfo.value.construct == "class_declaration"


def test_unescape_js_sequences():
  assert unescape_js("\\x41\\u0042\\u{43}") == "ABC"
  assert unescape_js("a\\\nb") == "ab"
  assert unescape_js("\\q") == "q"
