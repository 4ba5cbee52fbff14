"""
JavaScript Back-end (Worklet AST -> Source Text).

`JsEmitter` renders nodes of `workletizer.core.js.nodes` in one of two styles:

1.  **Compact**: A single line without optional whitespace or comments. This is
    the form stored in `asString` and hashed, so it must be deterministic.
2.  **Pretty**: One statement per line with two-space indentation. Used for
    the runtime replacement code spliced back into the user's file.

Parentheses are derived from operator precedence. The tree only stores the
ones that end an optional chain (`ParenthesizedExpression`).
"""

import json
from typing import List, Optional

from workletizer.core.js import nodes as js

_PREC_SEQUENCE = 1
_PREC_ASSIGN = 2
_PREC_CONDITIONAL = 3
_PREC_UNARY = 15
_PREC_POSTFIX = 16
_PREC_MEMBER = 18
_PREC_PRIMARY = 19

_BINARY_PRECEDENCE = {
  "??": 4,
  "||": 4,
  "&&": 5,
  "|": 6,
  "^": 7,
  "&": 8,
  "==": 9,
  "!=": 9,
  "===": 9,
  "!==": 9,
  "<": 10,
  ">": 10,
  "<=": 10,
  ">=": 10,
  "in": 10,
  "instanceof": 10,
  "<<": 11,
  ">>": 11,
  ">>>": 11,
  "+": 12,
  "-": 12,
  "*": 13,
  "/": 13,
  "%": 13,
  "**": 14,
}

_WORD_OPERATORS = {"in", "instanceof", "typeof", "void", "delete"}


def _is_word_char(ch: str) -> bool:
  return ch.isalnum() or ch in "_$\\" or ord(ch) > 127


def precedence(node: js.Node) -> int:
  """Binding strength of an expression node; higher binds tighter."""
  if isinstance(node, js.SequenceExpression):
    return _PREC_SEQUENCE
  if isinstance(node, (js.AssignmentExpression, js.ArrowFunctionExpression, js.YieldExpression)):
    return _PREC_ASSIGN
  if isinstance(node, js.ConditionalExpression):
    return _PREC_CONDITIONAL
  if isinstance(node, (js.BinaryExpression, js.LogicalExpression)):
    return _BINARY_PRECEDENCE[node.operator]
  if isinstance(node, (js.UnaryExpression, js.AwaitExpression)):
    return _PREC_UNARY
  if isinstance(node, js.UpdateExpression):
    return _PREC_UNARY if node.prefix else _PREC_POSTFIX
  if isinstance(node, (js.CallExpression, js.NewExpression, js.MemberExpression, js.TaggedTemplateExpression)):
    return _PREC_MEMBER
  return _PREC_PRIMARY


def _leftmost(node: js.Node) -> js.Node:
  """Follows left operands down to the node that would open the printed text."""
  while True:
    if isinstance(node, (js.BinaryExpression, js.LogicalExpression, js.AssignmentExpression)):
      child = node.left
    elif isinstance(node, js.ConditionalExpression):
      child = node.test
    elif isinstance(node, js.CallExpression):
      if isinstance(node.callee, js.FunctionExpression):
        return node
      child = node.callee
    elif isinstance(node, js.MemberExpression):
      child = node.object
    elif isinstance(node, js.TaggedTemplateExpression):
      child = node.tag
    elif isinstance(node, js.SequenceExpression):
      child = node.expressions[0]
    elif isinstance(node, js.UpdateExpression) and not node.prefix:
      child = node.argument
    else:
      return node
    if precedence(child) < precedence(node):
      # The child will be parenthesized, so it cannot start the text.
      return node
    node = child


def _is_function_valued(node: js.Node) -> bool:
  """Functions and immediately invoked function expressions."""
  if isinstance(node, js.CallExpression):
    node = node.callee
  return isinstance(node, (js.FunctionExpression, js.ArrowFunctionExpression))


def _is_in_operator(node: js.Node) -> bool:
  return isinstance(node, js.BinaryExpression) and node.operator == "in"


def _contains_call(node: js.Node) -> bool:
  while True:
    if isinstance(node, js.CallExpression):
      return True
    if isinstance(node, js.MemberExpression):
      node = node.object
    elif isinstance(node, js.TaggedTemplateExpression):
      node = node.tag
    else:
      return False


class JsEmitter:
  """
  Renders worklet AST nodes to JavaScript source.

  Args:
      compact (bool): Emit the single-line serialized form.
      indent (str): Indentation unit for pretty output.
      base_indent (str): Prefix of every line after the first, so that pretty
          output can be spliced into an indented line of an existing file.
  """

  def __init__(self, compact: bool = False, indent: str = "  ", base_indent: str = ""):
    self.compact = compact
    self.indent = indent
    self.base_indent = base_indent
    self._level = 0
    self._no_in = False

  def emit(self, node: js.Node) -> str:
    """
    Renders a statement, expression, property or pattern.

    Args:
        node: Any node of the worklet AST.

    Returns:
        str: JavaScript source text.
    """
    if isinstance(node, js.Property):
      return self._property(node)
    if isinstance(node, js.SpreadElement):
      return "..." + self.expression(node.argument, _PREC_ASSIGN)
    if isinstance(node, (js.ObjectPattern, js.ArrayPattern, js.AssignmentPattern, js.RestElement)):
      return self._pattern(node)
    if self._is_statement(node):
      return self.statement(node)
    return self.expression(node)

  # --- Layout helpers ---

  @property
  def _sp(self) -> str:
    return "" if self.compact else " "

  @property
  def _comma(self) -> str:
    return "," if self.compact else ", "

  def _pad(self) -> str:
    return self.base_indent + self.indent * self._level

  def _keyword(self, keyword: str, rest: str) -> str:
    """Joins a keyword with what follows, keeping a space only where required."""
    if not rest:
      return keyword
    if self.compact and not _is_word_char(rest[0]):
      return keyword + rest
    return keyword + " " + rest

  @staticmethod
  def _is_statement(node: js.Node) -> bool:
    return isinstance(
      node,
      (
        js.BlockStatement,
        js.ExpressionStatement,
        js.EmptyStatement,
        js.DebuggerStatement,
        js.VariableDeclaration,
        js.FunctionDeclaration,
        js.ReturnStatement,
        js.IfStatement,
        js.ForStatement,
        js.ForInStatement,
        js.ForOfStatement,
        js.WhileStatement,
        js.DoWhileStatement,
        js.BreakStatement,
        js.ContinueStatement,
        js.ThrowStatement,
        js.TryStatement,
        js.SwitchStatement,
        js.LabeledStatement,
        js.Comment,
      ),
    )

  # --- Statements ---

  def block(self, node: js.BlockStatement) -> str:
    items: List[js.Node] = list(node.directives)
    items.extend(s for s in node.body if not (self.compact and isinstance(s, js.Comment)))
    if not items:
      return "{}"
    if self.compact:
      return "{" + "".join(self._block_item(s) for s in items) + "}"
    self._level += 1
    lines = [self._pad() + self._block_item(s) for s in items]
    self._level -= 1
    return "{\n" + "\n".join(lines) + "\n" + self._pad() + "}"

  def _block_item(self, node: js.Node) -> str:
    if isinstance(node, js.Directive):
      return node.raw + ";"
    return self.statement(node)

  def _body(self, node: js.Node) -> str:
    """A statement in the body position of `if`/loops, preceded by its separator."""
    return self._sp + self.statement(node)

  def statement(self, node: js.Node) -> str:
    if isinstance(node, js.BlockStatement):
      return self.block(node)
    if isinstance(node, js.ExpressionStatement):
      text = self.expression(node.expression)
      if isinstance(_leftmost(node.expression), (js.ObjectExpression, js.FunctionExpression, js.ObjectPattern)):
        text = "(" + text + ")"
      return text + ";"
    if isinstance(node, js.VariableDeclaration):
      return self._declaration(node) + ";"
    if isinstance(node, js.FunctionDeclaration):
      return self._function(node.id, node.params, node.body, node.is_async, node.is_generator)
    if isinstance(node, js.ReturnStatement):
      arg = self.expression(node.argument) if node.argument is not None else ""
      return self._keyword("return", arg) + ";"
    if isinstance(node, js.IfStatement):
      return self._if(node)
    if isinstance(node, js.ForStatement):
      init = ""
      # A bare `in` would read as a for-in head.
      outer_no_in, self._no_in = self._no_in, True
      try:
        if isinstance(node.init, js.VariableDeclaration):
          init = self._declaration(node.init)
        elif node.init is not None:
          init = self.expression(node.init)
      finally:
        self._no_in = outer_no_in
      test = self._sp + self.expression(node.test) if node.test is not None else ""
      update = self._sp + self.expression(node.update) if node.update is not None else ""
      return f"for{self._sp}({init};{test};{update})" + self._body(node.body)
    if isinstance(node, (js.ForInStatement, js.ForOfStatement)):
      if isinstance(node.left, js.VariableDeclaration):
        left = self._declaration(node.left)
      else:
        left = self.expression(node.left)
      keyword = "in" if isinstance(node, js.ForInStatement) else "of"
      head = "for await" if isinstance(node, js.ForOfStatement) and node.is_await else "for"
      right = self.expression(node.right, _PREC_ASSIGN)
      return f"{head}{self._sp}({left} {keyword} {right})" + self._body(node.body)
    if isinstance(node, js.WhileStatement):
      return f"while{self._sp}({self.expression(node.test)})" + self._body(node.body)
    if isinstance(node, js.DoWhileStatement):
      body = self.statement(node.body)
      return self._keyword("do", body) + f"{self._sp}while{self._sp}({self.expression(node.test)});"
    if isinstance(node, js.BreakStatement):
      return ("break " + node.label if node.label else "break") + ";"
    if isinstance(node, js.ContinueStatement):
      return ("continue " + node.label if node.label else "continue") + ";"
    if isinstance(node, js.ThrowStatement):
      return self._keyword("throw", self.expression(node.argument)) + ";"
    if isinstance(node, js.TryStatement):
      return self._try(node)
    if isinstance(node, js.SwitchStatement):
      return self._switch(node)
    if isinstance(node, js.LabeledStatement):
      return node.label + ":" + self._body(node.body)
    if isinstance(node, js.EmptyStatement):
      return ";"
    if isinstance(node, js.DebuggerStatement):
      return "debugger;"
    if isinstance(node, js.Comment):
      return "" if self.compact else node.text
    raise TypeError(f"Cannot emit statement of type {type(node).__name__}")

  def _declaration(self, node: js.VariableDeclaration) -> str:
    parts = []
    for decl in node.declarations:
      text = self._pattern(decl.id)
      if decl.init is not None:
        text += f"{self._sp}={self._sp}" + self.expression(decl.init, _PREC_ASSIGN)
      parts.append(text)
    return self._keyword(node.kind, self._comma.join(parts))

  def _if(self, node: js.IfStatement) -> str:
    text = f"if{self._sp}({self.expression(node.test)})" + self._body(node.consequent)
    if node.alternate is not None:
      if not self.compact and not isinstance(node.consequent, js.BlockStatement):
        text += "\n" + self._pad() + "else " + self.statement(node.alternate)
      else:
        text += self._sp + self._keyword("else", self.statement(node.alternate))
    return text

  def _try(self, node: js.TryStatement) -> str:
    text = "try" + self._sp + self.block(node.block)
    if node.handler is not None:
      text += self._sp + "catch"
      if node.handler.param is not None:
        text += f"{self._sp}({self._pattern(node.handler.param)})"
      text += self._sp + self.block(node.handler.body)
    if node.finalizer is not None:
      text += self._sp + "finally" + self._sp + self.block(node.finalizer)
    return text

  def _switch(self, node: js.SwitchStatement) -> str:
    head = f"switch{self._sp}({self.expression(node.discriminant)}){self._sp}"
    if not node.cases:
      return head + "{}"
    if self.compact:
      parts = []
      for case in node.cases:
        label = self._keyword("case", self.expression(case.test)) + ":" if case.test is not None else "default:"
        parts.append(label + "".join(self.statement(s) for s in case.consequent if not isinstance(s, js.Comment)))
      return head + "{" + "".join(parts) + "}"
    self._level += 1
    lines = []
    for case in node.cases:
      label = "case " + self.expression(case.test) + ":" if case.test is not None else "default:"
      lines.append(self._pad() + label)
      self._level += 1
      lines.extend(self._pad() + self.statement(s) for s in case.consequent)
      self._level -= 1
    self._level -= 1
    return head + "{\n" + "\n".join(lines) + "\n" + self._pad() + "}"

  # --- Functions ---

  def _params(self, params) -> str:
    return "(" + self._comma.join(self._pattern(p) for p in params) + ")"

  def _function(
    self,
    name: Optional[js.Identifier],
    params,
    body: js.BlockStatement,
    is_async: bool,
    is_generator: bool,
  ) -> str:
    text = "async function" if is_async else "function"
    if is_generator:
      text += "*"
    if name is not None:
      text += " " + name.name
    elif not self.compact:
      text += " "
    return text + self._params(params) + self._sp + self.block(body)

  def _arrow(self, node: js.ArrowFunctionExpression) -> str:
    head = ("async" + self._sp if node.is_async else "") + self._params(node.params) + f"{self._sp}=>{self._sp}"
    if isinstance(node.body, js.BlockStatement):
      return head + self.block(node.body)
    body = self.expression(node.body, _PREC_ASSIGN)
    if isinstance(_leftmost(node.body), js.ObjectExpression):
      body = "(" + body + ")"
    return head + body

  # --- Expressions ---

  def expression(self, node: js.Node, min_prec: int = _PREC_SEQUENCE) -> str:
    """
    Renders an expression, parenthesized if it binds looser than `min_prec`.
    """
    text = self._expression(node)
    if precedence(node) < min_prec or (self._no_in and _is_in_operator(node)):
      return "(" + text + ")"
    return text

  def _binary_operand_gap(self, op: str, left: str, right: str) -> str:
    if op in _WORD_OPERATORS:
      return f"{left} {op} {right}"
    if not self.compact:
      return f"{left} {op} {right}"
    # `a+ +b`, `a- -b` and `a+ ++b` must not fuse into other tokens.
    if op in ("+", "-") and right.startswith(op):
      return f"{left}{op} {right}"
    return f"{left}{op}{right}"

  def _expression(self, node: js.Node) -> str:
    if isinstance(node, js.Identifier):
      return node.name
    if isinstance(node, js.ThisExpression):
      return "this"
    if isinstance(node, js.StringLiteral):
      return node.raw if node.raw is not None else json.dumps(node.value)
    if isinstance(node, (js.NumericLiteral, js.RegExpLiteral)):
      return node.raw
    if isinstance(node, js.BooleanLiteral):
      return "true" if node.value else "false"
    if isinstance(node, js.NullLiteral):
      return "null"
    if isinstance(node, js.TemplateLiteral):
      return self._template(node)
    if isinstance(node, js.TaggedTemplateExpression):
      return self.expression(node.tag, _PREC_MEMBER) + self._template(node.quasi)
    if isinstance(node, js.ArrayExpression):
      return self._array(node.elements, lambda e: self.expression(e, _PREC_ASSIGN))
    if isinstance(node, js.ObjectExpression):
      return self._object(node.properties)
    if isinstance(node, js.SpreadElement):
      return "..." + self.expression(node.argument, _PREC_ASSIGN)
    if isinstance(node, js.FunctionExpression):
      return self._function(node.id, node.params, node.body, node.is_async, node.is_generator)
    if isinstance(node, js.ArrowFunctionExpression):
      return self._arrow(node)
    if isinstance(node, js.UnaryExpression):
      arg = self.expression(node.argument, _PREC_UNARY)
      if node.operator in _WORD_OPERATORS:
        return self._keyword(node.operator, arg) if self.compact else node.operator + " " + arg
      if node.operator in ("+", "-") and arg.startswith(node.operator):
        return node.operator + " " + arg
      return node.operator + arg
    if isinstance(node, js.UpdateExpression):
      if node.prefix:
        return node.operator + self.expression(node.argument, _PREC_UNARY)
      return self.expression(node.argument, _PREC_POSTFIX) + node.operator
    if isinstance(node, (js.BinaryExpression, js.LogicalExpression)):
      return self._binary(node)
    if isinstance(node, js.AssignmentExpression):
      left = self._pattern(node.left) if not isinstance(node.left, js.MemberExpression) else self.expression(node.left, _PREC_MEMBER)
      right = self.expression(node.right, _PREC_ASSIGN)
      return f"{left}{self._sp}{node.operator}{self._sp}{right}"
    if isinstance(node, js.ConditionalExpression):
      test = self.expression(node.test, _PREC_CONDITIONAL + 1)
      cons = self.expression(node.consequent, _PREC_ASSIGN)
      alt = self.expression(node.alternate, _PREC_ASSIGN)
      return f"{test}{self._sp}?{self._sp}{cons}{self._sp}:{self._sp}{alt}"
    if isinstance(node, js.CallExpression):
      if isinstance(node.callee, js.FunctionExpression):
        callee = "(" + self._expression(node.callee) + ")"
      else:
        callee = self.expression(node.callee, _PREC_MEMBER)
      return callee + ("?." if node.optional else "") + self._arguments(node.arguments)
    if isinstance(node, js.NewExpression):
      if _contains_call(node.callee):
        callee = "(" + self._expression(node.callee) + ")"
      else:
        callee = self.expression(node.callee, _PREC_MEMBER)
      return "new " + callee + self._arguments(node.arguments)
    if isinstance(node, js.MemberExpression):
      return self._member(node)
    if isinstance(node, js.ParenthesizedExpression):
      return "(" + self.expression(node.expression) + ")"
    if isinstance(node, js.SequenceExpression):
      return self._comma.join(self.expression(e, _PREC_ASSIGN) for e in node.expressions)
    if isinstance(node, js.AwaitExpression):
      return self._keyword("await", self.expression(node.argument, _PREC_UNARY))
    if isinstance(node, js.YieldExpression):
      keyword = "yield*" if node.delegate else "yield"
      if node.argument is None:
        return keyword
      return self._keyword(keyword, self.expression(node.argument, _PREC_ASSIGN))
    if isinstance(node, (js.ObjectPattern, js.ArrayPattern, js.AssignmentPattern, js.RestElement)):
      return self._pattern(node)
    raise TypeError(f"Cannot emit expression of type {type(node).__name__}")

  def _binary(self, node: js.Node) -> str:
    op = node.operator
    prec = _BINARY_PRECEDENCE[op]
    if op == "**":
      left_prec, right_prec = _PREC_POSTFIX, prec
    else:
      left_prec, right_prec = prec, prec + 1
    # `??` cannot be mixed with `&&`/`||` without parentheses.
    if self._mixes_nullish(op, node.left):
      left_prec = _PREC_PRIMARY
    if self._mixes_nullish(op, node.right):
      right_prec = _PREC_PRIMARY
    left = self.expression(node.left, left_prec)
    right = self.expression(node.right, right_prec)
    return self._binary_operand_gap(op, left, right)

  @staticmethod
  def _mixes_nullish(op: str, child: js.Node) -> bool:
    if op not in ("&&", "||", "??") or not isinstance(child, js.LogicalExpression):
      return False
    return (op == "??") != (child.operator == "??")

  def _member(self, node: js.MemberExpression) -> str:
    if isinstance(node.object, js.NumericLiteral) and not node.computed:
      obj = "(" + node.object.raw + ")"
    else:
      obj = self.expression(node.object, _PREC_MEMBER)
    if node.computed:
      return obj + ("?." if node.optional else "") + "[" + self.expression(node.property) + "]"
    return obj + ("?." if node.optional else ".") + node.property.name

  def _arguments(self, args) -> str:
    return "(" + self._comma.join(self.emit(a) if isinstance(a, js.SpreadElement) else self.expression(a, _PREC_ASSIGN) for a in args) + ")"

  def _template(self, node: js.TemplateLiteral) -> str:
    parts = ["`"]
    for i, quasi in enumerate(node.quasis):
      parts.append(quasi.raw)
      if i < len(node.expressions):
        parts.append("${" + self.expression(node.expressions[i]) + "}")
    parts.append("`")
    return "".join(parts)

  def _array(self, elements, render) -> str:
    items = ["" if e is None else render(e) for e in elements]
    text = self._comma.join(items)
    if elements and elements[-1] is None:
      text += ","
    return "[" + text + "]"

  def _object(self, properties) -> str:
    if not properties:
      return "{}"
    if self.compact:
      return "{" + ",".join(self.emit(p) for p in properties) + "}"
    multiline = any(
      isinstance(p, js.Property)
      and (p.kind != "init" or p.method or _is_function_valued(p.value))
      for p in properties
    )
    if not multiline:
      return "{ " + ", ".join(self.emit(p) for p in properties) + " }"
    self._level += 1
    lines = [self._pad() + self.emit(p) for p in properties]
    self._level -= 1
    return "{\n" + ",\n".join(lines) + "\n" + self._pad() + "}"

  def _key(self, prop: js.Property) -> str:
    if prop.computed:
      return "[" + self.expression(prop.key, _PREC_ASSIGN) + "]"
    return self._expression(prop.key)

  def _property(self, prop: js.Property) -> str:
    key = self._key(prop)
    if prop.kind in ("get", "set") or prop.method:
      fn = prop.value
      prefix = ""
      if prop.kind in ("get", "set"):
        prefix = prop.kind + " "
      else:
        if fn.is_async:
          prefix += "async "
        if fn.is_generator:
          prefix += "*"
      return prefix + key + self._params(fn.params) + self._sp + self.block(fn.body)
    if prop.shorthand:
      return self._pattern(prop.value)
    value = self._pattern(prop.value) if isinstance(prop.value, js.AssignmentPattern) else self.expression(prop.value, _PREC_ASSIGN)
    return f"{key}:{self._sp}{value}"

  # --- Patterns ---

  def _pattern(self, node: js.Node) -> str:
    if isinstance(node, js.ObjectPattern):
      if not node.properties:
        return "{}"
      inner = self._comma.join(self._property(p) if isinstance(p, js.Property) else self._pattern(p) for p in node.properties)
      return "{" + inner + "}" if self.compact else "{ " + inner + " }"
    if isinstance(node, js.ArrayPattern):
      return self._array(node.elements, self._pattern)
    if isinstance(node, js.AssignmentPattern):
      return f"{self._pattern(node.left)}{self._sp}={self._sp}{self.expression(node.right, _PREC_ASSIGN)}"
    if isinstance(node, js.RestElement):
      return "..." + self._pattern(node.argument)
    return self.expression(node, _PREC_MEMBER)


def to_source(node: js.Node, compact: bool = False) -> str:
  """
  Renders a node with a fresh emitter.

  Args:
      node: Any node of the worklet AST.
      compact: Emit the serialized single-line form.

  Returns:
      str: JavaScript source text.
  """
  return JsEmitter(compact=compact).emit(node)
