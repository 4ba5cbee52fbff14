"""
Template Literal Lowering (loose).

`` `a${b}c` `` becomes `"a" + b + "c"`. When neither of the first two operands
is a string, a leading `""` keeps `+` a string concatenation. Tagged templates
hand their raw parts to a function and cannot be lowered this way.
"""

from typing import List

from workletizer.core.errors import NormalizationError
from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass


def concat_template(node: js.TemplateLiteral) -> js.Node:
  """
  Builds the `+` chain equivalent to a template literal.

  Args:
      node: A template literal whose expressions are already lowered.

  Returns:
      Node: A string literal or a left-associative `+` expression.
  """
  parts: List[js.Node] = []
  for index, quasi in enumerate(node.quasis):
    if quasi.cooked:
      parts.append(js.StringLiteral(quasi.cooked))
    if index < len(node.expressions):
      parts.append(node.expressions[index])

  if not parts:
    return js.StringLiteral("")

  first_is_string = isinstance(parts[0], js.StringLiteral)
  second_is_string = len(parts) > 1 and isinstance(parts[1], js.StringLiteral)
  if not first_is_string and not second_is_string:
    parts.insert(0, js.StringLiteral(""))

  result = parts[0]
  for part in parts[1:]:
    result = js.BinaryExpression("+", result, part)
  return result


class _TemplateLowering(NodeTransformer):
  def visit_TemplateLiteral(self, node: js.TemplateLiteral) -> js.Node:
    return concat_template(self.generic_visit(node))

  def visit_TaggedTemplateExpression(self, node: js.TaggedTemplateExpression) -> js.Node:
    raise NormalizationError("Tagged template literals cannot be used inside a worklet")


class TemplateLiteralPass(NormalizationPass):
  name = "template_literals"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _TemplateLowering().visit(fn)
