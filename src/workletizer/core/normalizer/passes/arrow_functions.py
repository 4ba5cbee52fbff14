"""
Arrow Function Lowering.

Every arrow becomes a function expression; an expression body becomes
`{ return <expr>; }`. Arrows see the `this` and `arguments` of their enclosing
function, so uses inside nested arrows are redirected to `_this` / `_arguments`,
declared at the top of the nearest non-arrow function:

    function () { var _this = this; return function () { return _this.x; }; }

The root worklet keeps its own `this`: the worklet runtime binds it explicitly.
"""

from dataclasses import dataclass, replace
from typing import List, Optional

from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass
from workletizer.core.normalizer.scoped import prepend_statements


@dataclass
class _Frame:
  """Binding state of one non-arrow function."""

  arrow_depth: int = 0
  this_name: Optional[str] = None
  arguments_name: Optional[str] = None


def arrow_to_function(node: js.ArrowFunctionExpression) -> js.FunctionExpression:
  """Converts an arrow (already free of `this`/`arguments`) to a function expression."""
  body = node.body
  if not isinstance(body, js.BlockStatement):
    body = js.BlockStatement((js.ReturnStatement(body),))
  return js.FunctionExpression(None, node.params, body, is_async=node.is_async, loc=node.loc)


class _ArrowLowering(NodeTransformer):
  def __init__(self, context: NormalizationContext):
    self.context = context
    self._frames: List[_Frame] = []

  def lower(self, fn: js.Node) -> js.Node:
    self._frames.append(_Frame())
    if isinstance(fn, js.ArrowFunctionExpression):
      new_fn: js.Node = arrow_to_function(self.generic_visit(fn))
    else:
      new_fn = self.generic_visit(fn)
    return self._declare(new_fn, self._frames.pop())

  def _declare(self, fn: js.Node, frame: _Frame) -> js.Node:
    declarators = []
    if frame.this_name is not None:
      declarators.append(js.VariableDeclarator(js.Identifier(frame.this_name), js.ThisExpression()))
    if frame.arguments_name is not None:
      declarators.append(js.VariableDeclarator(js.Identifier(frame.arguments_name), js.Identifier("arguments")))
    if not declarators:
      return fn
    return prepend_statements(fn, [js.VariableDeclaration("var", tuple(declarators))])

  def _regular_function(self, node: js.Node) -> js.Node:
    self._frames.append(_Frame())
    new_node = self.generic_visit(node)
    return self._declare(new_node, self._frames.pop())

  def visit_FunctionExpression(self, node: js.FunctionExpression) -> js.Node:
    return self._regular_function(node)

  def visit_FunctionDeclaration(self, node: js.FunctionDeclaration) -> js.Node:
    return self._regular_function(node)

  def visit_ArrowFunctionExpression(self, node: js.ArrowFunctionExpression) -> js.Node:
    frame = self._frames[-1]
    frame.arrow_depth += 1
    new_node = self.generic_visit(node)
    frame.arrow_depth -= 1
    return arrow_to_function(new_node)

  def visit_ThisExpression(self, node: js.ThisExpression) -> js.Node:
    frame = self._frames[-1]
    if frame.arrow_depth == 0:
      return node
    if frame.this_name is None:
      frame.this_name = self.context.fresh("this")
    return js.Identifier(frame.this_name)

  def visit_Identifier(self, node: js.Identifier) -> js.Node:
    frame = self._frames[-1]
    if node.name != "arguments" or frame.arrow_depth == 0:
      return node
    if frame.arguments_name is None:
      frame.arguments_name = self.context.fresh("arguments")
    return js.Identifier(frame.arguments_name)

  def visit_MemberExpression(self, node: js.MemberExpression) -> js.Node:
    obj = self.visit(node.object)
    prop = self.visit(node.property) if node.computed else node.property
    if obj is node.object and prop is node.property:
      return node
    return replace(node, object=obj, property=prop)

  def visit_Property(self, node: js.Property) -> js.Node:
    key = self.visit(node.key) if node.computed else node.key
    value = self.visit(node.value)
    if key is node.key and value is node.value:
      return node
    return replace(node, key=key, value=value)


class ArrowFunctionPass(NormalizationPass):
  name = "arrow_functions"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _ArrowLowering(context).lower(fn)
