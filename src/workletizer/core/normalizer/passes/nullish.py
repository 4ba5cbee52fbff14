"""
Nullish Coalescing Lowering (loose).

*   `a ?? b` becomes `a != null ? a : b`.
*   A left operand that is not a plain name is cached first:
    `(_ref = f()) != null ? _ref : b`.
*   `a ??= b` becomes `a != null ? a : a = b` for names and simple members.
"""

from workletizer.core.errors import NormalizationError
from workletizer.core.js import nodes as js
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass
from workletizer.core.normalizer.scoped import ScopedTempTransformer, is_simple


def _not_null(node: js.Node) -> js.BinaryExpression:
  return js.BinaryExpression("!=", node, js.NullLiteral())


def _is_simple_member(node: js.Node) -> bool:
  return isinstance(node, js.MemberExpression) and not node.computed and is_simple(node.object)


class _NullishLowering(ScopedTempTransformer):
  def visit_LogicalExpression(self, node: js.LogicalExpression) -> js.Node:
    node = self.generic_visit(node)
    if node.operator != "??":
      return node
    if is_simple(node.left):
      return js.ConditionalExpression(_not_null(node.left), node.left, node.right)
    ref = self.new_temp()
    return js.ConditionalExpression(
      _not_null(js.AssignmentExpression("=", ref, node.left)),
      ref,
      node.right,
    )

  def visit_AssignmentExpression(self, node: js.AssignmentExpression) -> js.Node:
    node = self.generic_visit(node)
    if node.operator != "??=":
      return node
    if not (isinstance(node.left, js.Identifier) or _is_simple_member(node.left)):
      raise NormalizationError("Logical nullish assignment is only supported on names and simple members")
    return js.ConditionalExpression(
      _not_null(node.left),
      node.left,
      js.AssignmentExpression("=", node.left, node.right),
    )


class NullishCoalescingPass(NormalizationPass):
  name = "nullish"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _NullishLowering(context).visit(fn)
