"""
JavaScript Front-end (tree-sitter -> Worklet AST).

This module provides the `JsParser`, which converts tree-sitter JavaScript syntax
trees into the immutable nodes of `workletizer.core.js.nodes`.

Capabilities:
1.  **Parsing**: Whole files are parsed once with tree-sitter; the engine hands
    individual subtrees (one per worklet) to the converter.
2.  **Conversion**: Expressions, patterns and statements are mapped to their
    ESTree-shaped counterparts. Function bodies get their directive prologue
    split out so the worklet marker can be found and stripped.
3.  **Validation**: Error or missing nodes raise `JsSyntaxError`; syntax that a
    worklet may not contain raises `UnsupportedSyntaxError`.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple, Union

import tree_sitter as ts
import tree_sitter_javascript as tsjs

from workletizer.core.errors import JsSyntaxError, UnsupportedSyntaxError
from workletizer.core.js import nodes as js

JS_LANGUAGE = ts.Language(tsjs.language())
_parser: Optional[ts.Parser] = None

FUNCTION_NODE_TYPES = {
  "function_declaration",
  "generator_function_declaration",
  "function_expression",
  "function",
  "generator_function",
  "arrow_function",
  "method_definition",
}

_LOGICAL_OPERATORS = {"&&", "||", "??"}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])")

_SIMPLE_ESCAPES = {
  "n": "\n",
  "r": "\r",
  "t": "\t",
  "b": "\b",
  "f": "\f",
  "v": "\v",
}

_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


def _get_parser() -> ts.Parser:
  global _parser
  if _parser is None:
    _parser = ts.Parser(JS_LANGUAGE)
  return _parser


def parse_tree(code: Union[str, bytes]) -> ts.Tree:
  """
  Parses JavaScript source with tree-sitter.

  Args:
      code: Source text (str or UTF-8 bytes).

  Returns:
      ts.Tree: The concrete syntax tree.
  """
  data = code.encode("utf-8") if isinstance(code, str) else code
  return _get_parser().parse(data)


def unescape_js(raw: str) -> str:
  """
  Evaluates JavaScript escape sequences in the body of a string or template.

  Args:
      raw: Literal text without the surrounding quotes.

  Returns:
      str: The cooked value.
  """

  def _replace(match: "re.Match[str]") -> str:
    seq = match.group(1)
    if seq in _LINE_CONTINUATIONS:
      return ""
    if seq in _SIMPLE_ESCAPES:
      return _SIMPLE_ESCAPES[seq]
    if seq.startswith("u{"):
      return chr(int(seq[2:-1], 16))
    if seq[0] == "u" and len(seq) == 5:
      return chr(int(seq[1:], 16))
    if seq[0] == "x" and len(seq) == 3:
      return chr(int(seq[1:], 16))
    if seq[0] in "01234567":
      return chr(int(seq, 8))
    return seq

  return _ESCAPE_RE.sub(_replace, raw)


def _ends_optional_chain(node: js.Node) -> bool:
  """True if a member/call chain ending at `node` has an optional link."""
  while isinstance(node, (js.MemberExpression, js.CallExpression)):
    if node.optional:
      return True
    node = node.object if isinstance(node, js.MemberExpression) else node.callee
  return False


class JsParser:
  """
  Converts tree-sitter nodes of one source buffer into worklet AST nodes.

  The parser is bound to the source bytes the tree was built from, because
  literal spellings and template chunks are sliced out of the buffer.
  """

  def __init__(self, source: Union[str, bytes]):
    self.source = source.encode("utf-8") if isinstance(source, str) else source
    self._expression_handlers: Dict[str, Callable[[ts.Node], js.Node]] = {
      "identifier": lambda n: js.Identifier(self.text(n)),
      "undefined": lambda n: js.Identifier("undefined"),
      "this": lambda n: js.ThisExpression(),
      "true": lambda n: js.BooleanLiteral(True),
      "false": lambda n: js.BooleanLiteral(False),
      "null": lambda n: js.NullLiteral(),
      "number": lambda n: js.NumericLiteral(self.text(n)),
      "string": self._string,
      "regex": lambda n: js.RegExpLiteral(self.text(n)),
      "template_string": self._template,
      "parenthesized_expression": self._parenthesized,
      "sequence_expression": self._sequence,
      "array": self._array,
      "object": self._object,
      "function_expression": self._function_expression,
      "function": self._function_expression,
      "generator_function": self._function_expression,
      "arrow_function": self._arrow,
      "unary_expression": self._unary,
      "update_expression": self._update,
      "binary_expression": self._binary,
      "assignment_expression": self._assignment,
      "augmented_assignment_expression": self._assignment,
      "ternary_expression": self._ternary,
      "call_expression": self._call,
      "new_expression": self._new,
      "member_expression": self._member,
      "subscript_expression": self._subscript,
      "spread_element": lambda n: js.SpreadElement(self._expression(self._single_child(n))),
      "await_expression": lambda n: js.AwaitExpression(self._expression(self._single_child(n))),
      "yield_expression": self._yield,
      "object_pattern": self._pattern,
      "array_pattern": self._pattern,
    }
    self._statement_handlers: Dict[str, Callable[[ts.Node], js.Node]] = {
      "expression_statement": lambda n: js.ExpressionStatement(self._expression(self._single_child(n))),
      "lexical_declaration": self._declaration,
      "variable_declaration": self._declaration,
      "function_declaration": self._function_declaration,
      "generator_function_declaration": self._function_declaration,
      "statement_block": lambda n: js.BlockStatement(self._statements(n)),
      "return_statement": self._return,
      "if_statement": self._if,
      "for_statement": self._for,
      "for_in_statement": self._for_in,
      "while_statement": lambda n: js.WhileStatement(
        self._expression(self._field(n, "condition")), self._statement(self._field(n, "body"))
      ),
      "do_statement": lambda n: js.DoWhileStatement(
        self._statement(self._field(n, "body")), self._expression(self._field(n, "condition"))
      ),
      "break_statement": lambda n: js.BreakStatement(self._label(n)),
      "continue_statement": lambda n: js.ContinueStatement(self._label(n)),
      "throw_statement": lambda n: js.ThrowStatement(self._expression(self._single_child(n))),
      "try_statement": self._try,
      "switch_statement": self._switch,
      "labeled_statement": lambda n: js.LabeledStatement(
        self.text(self._field(n, "label")), self._statement(self._field(n, "body"))
      ),
      "empty_statement": lambda n: js.EmptyStatement(),
      "debugger_statement": lambda n: js.DebuggerStatement(),
      "comment": lambda n: js.Comment(self.text(n)),
    }

  # --- Public API ---

  def convert_function(self, node: ts.Node) -> js.Node:
    """
    Converts any function-like tree-sitter node.

    Declarations become `FunctionDeclaration`, object methods become
    `FunctionExpression`, arrows stay arrows.
    """
    self._check_errors(node)
    if node.type in ("function_declaration", "generator_function_declaration"):
      return self._function_declaration(node)
    if node.type == "arrow_function":
      return self._arrow(node)
    if node.type == "method_definition":
      return self._method_function(node)
    if node.type in ("function_expression", "function", "generator_function"):
      return self._function_expression(node)
    raise self._unsupported(node)

  def convert_property(self, node: ts.Node) -> js.Property:
    """Converts an object-literal member (`pair` or `method_definition`)."""
    self._check_errors(node)
    return self._object_member(node)

  def convert_statement(self, node: ts.Node) -> js.Node:
    self._check_errors(node)
    return self._statement(node)

  def convert_expression(self, node: ts.Node) -> js.Node:
    self._check_errors(node)
    return self._expression(node)

  def text(self, node: ts.Node) -> str:
    """Source text of a tree-sitter node."""
    return self.source[node.start_byte : node.end_byte].decode("utf-8")

  def location(self, node: ts.Node) -> js.SourceLocation:
    """
    Computes the 1-based line and 0-based character column of a node.

    tree-sitter reports byte columns, the location string uses characters.
    """
    row, byte_column = node.start_point
    line_start = node.start_byte - byte_column
    prefix = self.source[line_start : node.start_byte].decode("utf-8", errors="replace")
    return js.SourceLocation(line=row + 1, column=len(prefix))

  # --- Helpers ---

  def _check_errors(self, node: ts.Node) -> None:
    if not node.has_error:
      return
    stack = [node]
    while stack:
      current = stack.pop()
      if current.type == "ERROR" or current.is_missing:
        loc = self.location(current)
        kind = "Missing token" if current.is_missing else "Unexpected syntax"
        raise JsSyntaxError(f"{kind} '{self.text(current)[:20]}'", loc.line, loc.column)
      stack.extend(reversed(current.children))
    loc = self.location(node)
    raise JsSyntaxError("Malformed syntax", loc.line, loc.column)

  def _unsupported(self, node: ts.Node) -> UnsupportedSyntaxError:
    loc = self.location(node)
    return UnsupportedSyntaxError(node.type, loc.line, loc.column)

  @staticmethod
  def _named(node: ts.Node) -> List[ts.Node]:
    return [c for c in node.named_children if c.type != "comment"]

  def _single_child(self, node: ts.Node) -> ts.Node:
    children = self._named(node)
    if not children:
      raise self._unsupported(node)
    return children[0]

  def _field(self, node: ts.Node, name: str) -> ts.Node:
    child = node.child_by_field_name(name)
    if child is None:
      raise self._unsupported(node)
    return child

  @staticmethod
  def _has_token(node: ts.Node, token: str, before: Optional[ts.Node] = None) -> bool:
    for child in node.children:
      if before is not None and child.start_byte >= before.start_byte:
        break
      if not child.is_named and child.type == token:
        return True
    return False

  def _label(self, node: ts.Node) -> Optional[str]:
    label = node.child_by_field_name("label")
    return self.text(label) if label is not None else None

  # --- Expressions ---

  def _expression(self, node: ts.Node) -> js.Node:
    handler = self._expression_handlers.get(node.type)
    if handler is None:
      raise self._unsupported(node)
    return handler(node)

  def _string(self, node: ts.Node) -> js.StringLiteral:
    raw = self.text(node)
    return js.StringLiteral(unescape_js(raw[1:-1]), raw)

  def _template(self, node: ts.Node) -> js.TemplateLiteral:
    quasis: List[js.TemplateElement] = []
    expressions: List[js.Node] = []
    pos = node.start_byte + 1
    for sub in node.named_children:
      if sub.type != "template_substitution":
        continue
      quasis.append(self._template_element(pos, sub.start_byte))
      expressions.append(self._expression(self._single_child(sub)))
      pos = sub.end_byte
    quasis.append(self._template_element(pos, node.end_byte - 1))
    return js.TemplateLiteral(tuple(quasis), tuple(expressions))

  def _template_element(self, start: int, end: int) -> js.TemplateElement:
    raw = self.source[start:end].decode("utf-8")
    cooked = unescape_js(raw.replace("\r\n", "\n").replace("\r", "\n"))
    return js.TemplateElement(raw, cooked)

  def _sequence(self, node: ts.Node) -> js.SequenceExpression:
    parts: List[js.Node] = []
    for child in self._named(node):
      converted = self._expression(child)
      if isinstance(converted, js.SequenceExpression) and child.type == "sequence_expression":
        parts.extend(converted.expressions)
      else:
        parts.append(converted)
    return js.SequenceExpression(tuple(parts))

  def _parenthesized(self, node: ts.Node) -> js.Node:
    inner = self._expression(self._single_child(node))
    if _ends_optional_chain(inner):
      return js.ParenthesizedExpression(inner)
    return inner

  def _elements(self, node: ts.Node, convert: Callable[[ts.Node], js.Node]) -> Tuple[Optional[js.Node], ...]:
    elements: List[Optional[js.Node]] = []
    expect_element = True
    for child in node.children:
      if child.type in ("[", "comment"):
        continue
      if child.type == "]":
        break
      if child.type == ",":
        if expect_element:
          elements.append(None)
        expect_element = True
        continue
      elements.append(convert(child))
      expect_element = False
    return tuple(elements)

  def _array(self, node: ts.Node) -> js.ArrayExpression:
    return js.ArrayExpression(self._elements(node, self._expression))

  def _object(self, node: ts.Node) -> js.ObjectExpression:
    return js.ObjectExpression(tuple(self._object_member(c) for c in self._named(node)))

  def _object_member(self, node: ts.Node) -> js.Node:
    if node.type == "pair":
      key, computed = self._property_key(self._field(node, "key"))
      return js.Property(key, self._expression(self._field(node, "value")), computed=computed)
    if node.type == "shorthand_property_identifier":
      name = js.Identifier(self.text(node))
      return js.Property(name, name, shorthand=True)
    if node.type == "method_definition":
      name_node = self._field(node, "name")
      key, computed = self._property_key(name_node)
      kind = "init"
      if self._has_token(node, "get", before=name_node):
        kind = "get"
      elif self._has_token(node, "set", before=name_node):
        kind = "set"
      return js.Property(key, self._method_function(node), kind=kind, computed=computed, method=kind == "init")
    if node.type == "spread_element":
      return js.SpreadElement(self._expression(self._single_child(node)))
    raise self._unsupported(node)

  def _property_key(self, node: ts.Node) -> Tuple[js.Node, bool]:
    if node.type in ("property_identifier", "identifier", "shorthand_property_identifier"):
      return js.Identifier(self.text(node)), False
    if node.type == "string":
      return self._string(node), False
    if node.type == "number":
      return js.NumericLiteral(self.text(node)), False
    if node.type == "computed_property_name":
      return self._expression(self._single_child(node)), True
    raise self._unsupported(node)

  def _params(self, node: ts.Node) -> Tuple[js.Node, ...]:
    single = node.child_by_field_name("parameter")
    if single is not None:
      return (self._pattern(single),)
    params = node.child_by_field_name("parameters")
    if params is None:
      return ()
    return tuple(self._pattern(p) for p in self._named(params))

  def _function_body(self, node: ts.Node) -> js.BlockStatement:
    """Converts a function body, separating the directive prologue."""
    if node.type != "statement_block":
      raise self._unsupported(node)
    directives: List[js.Directive] = []
    body: List[js.Node] = []
    in_prologue = True
    for child in node.named_children:
      if in_prologue and child.type == "expression_statement":
        inner = self._named(child)
        if len(inner) == 1 and inner[0].type == "string":
          raw = self.text(inner[0])
          directives.append(js.Directive(unescape_js(raw[1:-1]), raw))
          continue
      if child.type != "comment":
        in_prologue = False
      body.append(self._statement(child))
    return js.BlockStatement(tuple(body), tuple(directives))

  def _function_expression(self, node: ts.Node) -> js.FunctionExpression:
    name = node.child_by_field_name("name")
    params = self._field(node, "parameters")
    return js.FunctionExpression(
      id=js.Identifier(self.text(name)) if name is not None else None,
      params=self._params(node),
      body=self._function_body(self._field(node, "body")),
      is_async=self._has_token(node, "async", before=params),
      is_generator=node.type == "generator_function" or self._has_token(node, "*", before=params),
      loc=self.location(node),
    )

  def _method_function(self, node: ts.Node) -> js.FunctionExpression:
    name = self._field(node, "name")
    return js.FunctionExpression(
      id=None,
      params=self._params(node),
      body=self._function_body(self._field(node, "body")),
      is_async=self._has_token(node, "async", before=name),
      is_generator=self._has_token(node, "*", before=name),
      loc=self.location(node),
    )

  def _arrow(self, node: ts.Node) -> js.ArrowFunctionExpression:
    body_node = self._field(node, "body")
    if body_node.type == "statement_block":
      body: js.Node = self._function_body(body_node)
    else:
      body = self._expression(body_node)
    params_node = node.child_by_field_name("parameter") or node.child_by_field_name("parameters")
    return js.ArrowFunctionExpression(
      params=self._params(node),
      body=body,
      is_async=self._has_token(node, "async", before=params_node),
      loc=self.location(node),
    )

  def _unary(self, node: ts.Node) -> js.UnaryExpression:
    operator = self._field(node, "operator").type
    return js.UnaryExpression(operator, self._expression(self._field(node, "argument")))

  def _update(self, node: ts.Node) -> js.UpdateExpression:
    operator = self._field(node, "operator").type
    prefix = node.children[0].type in ("++", "--")
    return js.UpdateExpression(operator, self._target(self._field(node, "argument")), prefix)

  def _binary(self, node: ts.Node) -> js.Node:
    operator = self._field(node, "operator").type
    left = self._field(node, "left")
    if left.type == "private_property_identifier":
      raise self._unsupported(left)
    lhs = self._expression(left)
    rhs = self._expression(self._field(node, "right"))
    if operator in _LOGICAL_OPERATORS:
      return js.LogicalExpression(operator, lhs, rhs)
    return js.BinaryExpression(operator, lhs, rhs)

  def _assignment(self, node: ts.Node) -> js.AssignmentExpression:
    op_node = node.child_by_field_name("operator")
    operator = op_node.type if op_node is not None else "="
    return js.AssignmentExpression(
      operator,
      self._target(self._field(node, "left")),
      self._expression(self._field(node, "right")),
    )

  def _ternary(self, node: ts.Node) -> js.ConditionalExpression:
    return js.ConditionalExpression(
      self._expression(self._field(node, "condition")),
      self._expression(self._field(node, "consequence")),
      self._expression(self._field(node, "alternative")),
    )

  def _arguments(self, node: Optional[ts.Node]) -> Tuple[js.Node, ...]:
    if node is None:
      return ()
    return tuple(self._expression(a) for a in self._named(node))

  def _call(self, node: ts.Node) -> js.Node:
    callee_node = self._field(node, "function")
    if callee_node.type in ("import", "super"):
      raise self._unsupported(callee_node)
    callee = self._expression(callee_node)
    args_node = self._field(node, "arguments")
    if args_node.type == "template_string":
      return js.TaggedTemplateExpression(callee, self._template(args_node))
    optional = self._has_token(node, "?.") or any(c.type == "optional_chain" for c in node.children)
    return js.CallExpression(callee, self._arguments(args_node), optional)

  def _new(self, node: ts.Node) -> js.NewExpression:
    return js.NewExpression(
      self._expression(self._field(node, "constructor")),
      self._arguments(node.child_by_field_name("arguments")),
    )

  @staticmethod
  def _is_optional(node: ts.Node) -> bool:
    return any(c.type in ("optional_chain", "?.") for c in node.children)

  def _member(self, node: ts.Node) -> js.MemberExpression:
    prop = self._field(node, "property")
    if prop.type == "private_property_identifier":
      raise self._unsupported(prop)
    return js.MemberExpression(
      self._expression(self._field(node, "object")),
      js.Identifier(self.text(prop)),
      computed=False,
      optional=self._is_optional(node),
    )

  def _subscript(self, node: ts.Node) -> js.MemberExpression:
    return js.MemberExpression(
      self._expression(self._field(node, "object")),
      self._expression(self._field(node, "index")),
      computed=True,
      optional=self._is_optional(node),
    )

  def _yield(self, node: ts.Node) -> js.YieldExpression:
    children = self._named(node)
    argument = self._expression(children[0]) if children else None
    return js.YieldExpression(argument, delegate=self._has_token(node, "*"))

  # --- Patterns ---

  def _target(self, node: ts.Node) -> js.Node:
    """Converts the left-hand side of an assignment or update."""
    if node.type == "parenthesized_expression":
      return self._target(self._single_child(node))
    if node.type in ("object_pattern", "array_pattern"):
      return self._pattern(node)
    return self._expression(node)

  def _pattern(self, node: ts.Node) -> js.Node:
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
      return js.Identifier(self.text(node))
    if kind == "object_pattern":
      return js.ObjectPattern(tuple(self._pattern_member(c) for c in self._named(node)))
    if kind == "array_pattern":
      return js.ArrayPattern(self._elements(node, self._pattern))
    if kind == "assignment_pattern":
      return js.AssignmentPattern(
        self._pattern(self._field(node, "left")),
        self._expression(self._field(node, "right")),
      )
    if kind == "rest_pattern":
      return js.RestElement(self._pattern(self._single_child(node)))
    if kind in ("member_expression", "subscript_expression", "parenthesized_expression"):
      return self._target(node)
    raise self._unsupported(node)

  def _pattern_member(self, node: ts.Node) -> js.Node:
    if node.type == "pair_pattern":
      key, computed = self._property_key(self._field(node, "key"))
      return js.Property(key, self._pattern(self._field(node, "value")), computed=computed)
    if node.type == "shorthand_property_identifier_pattern":
      name = js.Identifier(self.text(node))
      return js.Property(name, name, shorthand=True)
    if node.type == "object_assignment_pattern":
      left = self._pattern(self._field(node, "left"))
      value = js.AssignmentPattern(left, self._expression(self._field(node, "right")))
      return js.Property(left, value, shorthand=True)
    if node.type == "rest_pattern":
      return js.RestElement(self._pattern(self._single_child(node)))
    raise self._unsupported(node)

  # --- Statements ---

  def _statement(self, node: ts.Node) -> js.Node:
    handler = self._statement_handlers.get(node.type)
    if handler is None:
      raise self._unsupported(node)
    return handler(node)

  def _statements(self, node: ts.Node) -> Tuple[js.Node, ...]:
    return tuple(self._statement(c) for c in node.named_children)

  def _declaration(self, node: ts.Node) -> js.VariableDeclaration:
    kind = node.children[0].type
    declarators = []
    for child in self._named(node):
      if child.type != "variable_declarator":
        continue
      value = child.child_by_field_name("value")
      declarators.append(
        js.VariableDeclarator(
          self._pattern(self._field(child, "name")),
          self._expression(value) if value is not None else None,
        )
      )
    return js.VariableDeclaration(kind, tuple(declarators))

  def _function_declaration(self, node: ts.Node) -> js.FunctionDeclaration:
    params = self._field(node, "parameters")
    return js.FunctionDeclaration(
      id=js.Identifier(self.text(self._field(node, "name"))),
      params=self._params(node),
      body=self._function_body(self._field(node, "body")),
      is_async=self._has_token(node, "async", before=params),
      is_generator=node.type == "generator_function_declaration",
      loc=self.location(node),
    )

  def _return(self, node: ts.Node) -> js.ReturnStatement:
    children = self._named(node)
    return js.ReturnStatement(self._expression(children[0]) if children else None)

  def _if(self, node: ts.Node) -> js.IfStatement:
    alternate = None
    else_clause = node.child_by_field_name("alternative")
    if else_clause is not None:
      alternate = self._statement(self._single_child(else_clause))
    return js.IfStatement(
      self._expression(self._field(node, "condition")),
      self._statement(self._field(node, "consequence")),
      alternate,
    )

  def _for_clause(self, node: Optional[ts.Node]) -> Optional[js.Node]:
    """Converts one clause of a C-style `for` header; empty clauses become None."""
    if node is None or node.type in ("empty_statement", ";"):
      return None
    if node.type in ("lexical_declaration", "variable_declaration"):
      return self._declaration(node)
    if node.type == "expression_statement":
      return self._expression(self._single_child(node))
    return self._expression(node)

  def _for(self, node: ts.Node) -> js.ForStatement:
    return js.ForStatement(
      init=self._for_clause(node.child_by_field_name("initializer")),
      test=self._for_clause(node.child_by_field_name("condition")),
      update=self._for_clause(node.child_by_field_name("increment")),
      body=self._statement(self._field(node, "body")),
    )

  def _for_in(self, node: ts.Node) -> js.Node:
    left_node = self._field(node, "left")
    kind = node.child_by_field_name("kind")
    if kind is not None:
      left: js.Node = js.VariableDeclaration(kind.type, (js.VariableDeclarator(self._pattern(left_node)),))
    else:
      left = self._target(left_node)
    right = self._expression(self._field(node, "right"))
    body = self._statement(self._field(node, "body"))
    operator = node.child_by_field_name("operator")
    is_of = operator.type == "of" if operator is not None else self._has_token(node, "of")
    if is_of:
      return js.ForOfStatement(left, right, body, is_await=self._has_token(node, "await"))
    return js.ForInStatement(left, right, body)

  def _try(self, node: ts.Node) -> js.TryStatement:
    handler = None
    catch = node.child_by_field_name("handler")
    if catch is not None:
      param = catch.child_by_field_name("parameter")
      handler = js.CatchClause(
        self._pattern(param) if param is not None else None,
        js.BlockStatement(self._statements(self._field(catch, "body"))),
      )
    finalizer = None
    finally_clause = node.child_by_field_name("finalizer")
    if finally_clause is not None:
      finalizer = js.BlockStatement(self._statements(self._field(finally_clause, "body")))
    return js.TryStatement(js.BlockStatement(self._statements(self._field(node, "body"))), handler, finalizer)

  def _switch(self, node: ts.Node) -> js.SwitchStatement:
    cases = []
    for clause in self._named(self._field(node, "body")):
      value = clause.child_by_field_name("value") if clause.type == "switch_case" else None
      consequent = []
      for child in clause.named_children:
        if value is not None and (child.start_byte, child.end_byte) == (value.start_byte, value.end_byte):
          continue
        consequent.append(self._statement(child))
      test = self._expression(value) if value is not None else None
      cases.append(js.SwitchCase(test, tuple(consequent)))
    return js.SwitchStatement(self._expression(self._field(node, "value")), tuple(cases))


def parse_program(code: str) -> Tuple[js.Node, ...]:
  """
  Parses a whole script into a tuple of statements.

  Args:
      code: JavaScript source.

  Returns:
      Tuple[Node, ...]: Top-level statements (comments included).
  """
  tree = parse_tree(code)
  parser = JsParser(code)
  return tuple(parser.convert_statement(child) for child in tree.root_node.named_children)


def parse_expression(code: str) -> js.Node:
  """
  Parses a single JavaScript expression.

  Args:
      code: Expression source, e.g. `"a?.b ?? c"`.

  Returns:
      Node: The converted expression.
  """
  wrapped = "(" + code + "\n)"
  tree = parse_tree(wrapped)
  parser = JsParser(wrapped)
  statement = tree.root_node.named_children[0]
  parser._check_errors(tree.root_node)
  return parser.convert_expression(parser._single_child(statement))
