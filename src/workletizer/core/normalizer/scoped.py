"""
Function-Scoped Temporaries.

Base transformer for passes that cache a sub-expression in a temporary. The
temporary is declared with `var` at the top of the nearest enclosing function;
an expression-bodied arrow is given a block body to hold the declaration.
"""

from dataclasses import replace
from typing import List, Sequence

from workletizer.core.errors import NormalizationError
from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer
from workletizer.core.normalizer.context import NormalizationContext


def is_simple(node: js.Node) -> bool:
  """Expressions that can be evaluated twice without observable effects."""
  return isinstance(node, (js.Identifier, js.ThisExpression))


def void_zero() -> js.UnaryExpression:
  return js.UnaryExpression("void", js.NumericLiteral("0"))


def prepend_statements(fn: js.Node, statements: Sequence[js.Node]) -> js.Node:
  """
  Inserts statements at the top of a function body, after its directives.

  Args:
      fn: Any function node.
      statements: Statements to insert.

  Returns:
      The rebuilt function node.
  """
  if not statements:
    return fn
  body = fn.body
  if not isinstance(body, js.BlockStatement):
    body = js.BlockStatement((js.ReturnStatement(body),))
  return replace(fn, body=replace(body, body=tuple(statements) + body.body))


def var_declaration(names: Sequence[str]) -> js.VariableDeclaration:
  return js.VariableDeclaration("var", tuple(js.VariableDeclarator(js.Identifier(n)) for n in names))


class ScopedTempTransformer(NodeTransformer):
  """
  NodeTransformer that can allocate temporaries in the enclosing function.

  Args:
      context: Shared name allocator of the pipeline run.
  """

  def __init__(self, context: NormalizationContext):
    self.context = context
    self._temps: List[List[str]] = []

  def new_temp(self, base: str = "ref") -> js.Identifier:
    if not self._temps:
      raise NormalizationError("Temporary requested outside of a function")
    name = self.context.fresh(base)
    self._temps[-1].append(name)
    return js.Identifier(name)

  def _function(self, node: js.Node) -> js.Node:
    self._temps.append([])
    new_node = self.generic_visit(node)
    temps = self._temps.pop()
    if temps:
      new_node = prepend_statements(new_node, [var_declaration(temps)])
    return new_node

  def visit_FunctionExpression(self, node: js.FunctionExpression) -> js.Node:
    return self._function(node)

  def visit_FunctionDeclaration(self, node: js.FunctionDeclaration) -> js.Node:
    return self._function(node)

  def visit_ArrowFunctionExpression(self, node: js.ArrowFunctionExpression) -> js.Node:
    return self._function(node)
