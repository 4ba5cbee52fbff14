"""
JavaScript Abstract Syntax Tree Nodes.

This module defines the immutable data structures used to represent the subset
of JavaScript that can appear inside a worklet. The shapes follow ESTree closely
so that each analysis pass reads like its Babel counterpart:

1.  **Expressions**: Literals, identifiers, operators, calls, member access, functions.
2.  **Patterns**: Destructuring targets used by declarations, parameters and assignments.
3.  **Statements**: Blocks, declarations and control flow.

All nodes are frozen dataclasses and all child sequences are tuples. Passes never
mutate a node; they build a new tree (see `workletizer.core.js.traversal`).
Source locations are carried by function nodes only and never take part in equality.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class SourceLocation:
  """
  Start position of a node in its original file.

  Attributes:
      line (int): 1-based line number.
      column (int): 0-based column (in characters).
  """

  line: int
  column: int


@dataclass(frozen=True)
class Node:
  """Base class for all JavaScript AST nodes."""


# --- Expressions ---


@dataclass(frozen=True)
class Identifier(Node):
  name: str


@dataclass(frozen=True)
class ThisExpression(Node):
  pass


@dataclass(frozen=True)
class StringLiteral(Node):
  """
  A string literal.

  `raw` keeps the original quoted spelling when the literal came from source.
  Synthesized literals leave it empty and are rendered from `value`.
  """

  value: str
  raw: Optional[str] = None


@dataclass(frozen=True)
class NumericLiteral(Node):
  raw: str


@dataclass(frozen=True)
class BooleanLiteral(Node):
  value: bool


@dataclass(frozen=True)
class NullLiteral(Node):
  pass


@dataclass(frozen=True)
class RegExpLiteral(Node):
  raw: str


@dataclass(frozen=True)
class TemplateElement(Node):
  """A static chunk of a template literal, both as written and as evaluated."""

  raw: str
  cooked: str


@dataclass(frozen=True)
class TemplateLiteral(Node):
  """
  A template literal. `quasis` always has exactly one more element than
  `expressions`.
  """

  quasis: Tuple[TemplateElement, ...]
  expressions: Tuple[Node, ...]


@dataclass(frozen=True)
class TaggedTemplateExpression(Node):
  tag: Node
  quasi: TemplateLiteral


@dataclass(frozen=True)
class ArrayExpression(Node):
  """Array literal. Holes are represented by `None` entries."""

  elements: Tuple[Optional[Node], ...]


@dataclass(frozen=True)
class Property(Node):
  """
  A property of an object literal or an object pattern.

  Attributes:
      key: Identifier, StringLiteral, NumericLiteral or (when computed) any expression.
      value: The property value, a function for methods, or a pattern inside patterns.
      kind: "init", "get" or "set".
      computed: True for `[key]: value`.
      shorthand: True for `{a}` (and `{a = 1}` in patterns).
      method: True for `{m() {}}`.
  """

  key: Node
  value: Node
  kind: str = "init"
  computed: bool = False
  shorthand: bool = False
  method: bool = False


@dataclass(frozen=True)
class ObjectExpression(Node):
  properties: Tuple[Node, ...]


@dataclass(frozen=True)
class SpreadElement(Node):
  argument: Node


@dataclass(frozen=True)
class FunctionExpression(Node):
  id: Optional[Identifier]
  params: Tuple[Node, ...]
  body: "BlockStatement"
  is_async: bool = False
  is_generator: bool = False
  loc: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class ArrowFunctionExpression(Node):
  params: Tuple[Node, ...]
  body: Node
  is_async: bool = False
  loc: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class UnaryExpression(Node):
  operator: str
  argument: Node


@dataclass(frozen=True)
class UpdateExpression(Node):
  operator: str
  argument: Node
  prefix: bool = False


@dataclass(frozen=True)
class BinaryExpression(Node):
  operator: str
  left: Node
  right: Node


@dataclass(frozen=True)
class LogicalExpression(Node):
  """`&&`, `||` and `??`."""

  operator: str
  left: Node
  right: Node


@dataclass(frozen=True)
class AssignmentExpression(Node):
  operator: str
  left: Node
  right: Node


@dataclass(frozen=True)
class ConditionalExpression(Node):
  test: Node
  consequent: Node
  alternate: Node


@dataclass(frozen=True)
class CallExpression(Node):
  callee: Node
  arguments: Tuple[Node, ...]
  optional: bool = False


@dataclass(frozen=True)
class NewExpression(Node):
  callee: Node
  arguments: Tuple[Node, ...]


@dataclass(frozen=True)
class MemberExpression(Node):
  """
  Property access. When `computed` is False, `property` is an Identifier that
  names the property and is not a variable reference.
  """

  object: Node
  property: Node
  computed: bool = False
  optional: bool = False


@dataclass(frozen=True)
class SequenceExpression(Node):
  expressions: Tuple[Node, ...]


@dataclass(frozen=True)
class ParenthesizedExpression(Node):
  """
  Parentheses that end an optional chain, as in `(a?.b).c`.

  Other parentheses are dropped by the parser; these change what a nullish
  link short-circuits.
  """

  expression: Node


@dataclass(frozen=True)
class AwaitExpression(Node):
  argument: Node


@dataclass(frozen=True)
class YieldExpression(Node):
  argument: Optional[Node] = None
  delegate: bool = False


# --- Patterns ---


@dataclass(frozen=True)
class ObjectPattern(Node):
  properties: Tuple[Node, ...]


@dataclass(frozen=True)
class ArrayPattern(Node):
  elements: Tuple[Optional[Node], ...]


@dataclass(frozen=True)
class AssignmentPattern(Node):
  left: Node
  right: Node


@dataclass(frozen=True)
class RestElement(Node):
  argument: Node


# --- Statements ---


@dataclass(frozen=True)
class Directive(Node):
  """A directive prologue entry such as `'use strict'` or `'worklet'`."""

  value: str
  raw: str


@dataclass(frozen=True)
class Comment(Node):
  """A standalone comment between statements, including its delimiters."""

  text: str


@dataclass(frozen=True)
class BlockStatement(Node):
  body: Tuple[Node, ...]
  directives: Tuple[Directive, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(Node):
  expression: Node


@dataclass(frozen=True)
class EmptyStatement(Node):
  pass


@dataclass(frozen=True)
class DebuggerStatement(Node):
  pass


@dataclass(frozen=True)
class VariableDeclarator(Node):
  id: Node
  init: Optional[Node] = None


@dataclass(frozen=True)
class VariableDeclaration(Node):
  kind: str
  declarations: Tuple[VariableDeclarator, ...]


@dataclass(frozen=True)
class FunctionDeclaration(Node):
  id: Identifier
  params: Tuple[Node, ...]
  body: BlockStatement
  is_async: bool = False
  is_generator: bool = False
  loc: Optional[SourceLocation] = field(default=None, compare=False)


@dataclass(frozen=True)
class ReturnStatement(Node):
  argument: Optional[Node] = None


@dataclass(frozen=True)
class IfStatement(Node):
  test: Node
  consequent: Node
  alternate: Optional[Node] = None


@dataclass(frozen=True)
class ForStatement(Node):
  init: Optional[Node]
  test: Optional[Node]
  update: Optional[Node]
  body: Node


@dataclass(frozen=True)
class ForInStatement(Node):
  left: Node
  right: Node
  body: Node


@dataclass(frozen=True)
class ForOfStatement(Node):
  left: Node
  right: Node
  body: Node
  is_await: bool = False


@dataclass(frozen=True)
class WhileStatement(Node):
  test: Node
  body: Node


@dataclass(frozen=True)
class DoWhileStatement(Node):
  body: Node
  test: Node


@dataclass(frozen=True)
class BreakStatement(Node):
  label: Optional[str] = None


@dataclass(frozen=True)
class ContinueStatement(Node):
  label: Optional[str] = None


@dataclass(frozen=True)
class ThrowStatement(Node):
  argument: Node


@dataclass(frozen=True)
class CatchClause(Node):
  param: Optional[Node]
  body: BlockStatement


@dataclass(frozen=True)
class TryStatement(Node):
  block: BlockStatement
  handler: Optional[CatchClause] = None
  finalizer: Optional[BlockStatement] = None


@dataclass(frozen=True)
class SwitchCase(Node):
  """A `case` clause; `test` is None for `default`."""

  test: Optional[Node]
  consequent: Tuple[Node, ...]


@dataclass(frozen=True)
class SwitchStatement(Node):
  discriminant: Node
  cases: Tuple[SwitchCase, ...]


@dataclass(frozen=True)
class LabeledStatement(Node):
  label: str
  body: Node


# --- Groupings ---

FunctionNode = Union[FunctionDeclaration, FunctionExpression, ArrowFunctionExpression]
FUNCTION_TYPES = (FunctionDeclaration, FunctionExpression, ArrowFunctionExpression)
PATTERN_TYPES = (Identifier, ObjectPattern, ArrayPattern, AssignmentPattern, RestElement, MemberExpression)
LITERAL_TYPES = (StringLiteral, NumericLiteral, BooleanLiteral, NullLiteral, RegExpLiteral)
