"""
Shorthand Property Expansion.

*   `{a}` becomes `{a: a}` (also in destructuring patterns, `{a = 1}` becomes
    `{a: a = 1}`).
*   `{m() {}}` becomes `{m: function () {}}`.

Getters and setters have no longhand form and are kept.
"""

from dataclasses import replace

from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass


class _ShorthandExpander(NodeTransformer):
  def visit_Property(self, node: js.Property) -> js.Node:
    node = self.generic_visit(node)
    if node.shorthand:
      return replace(node, shorthand=False)
    if node.method and node.kind == "init":
      return replace(node, method=False)
    return node


class ShorthandPropertyPass(NormalizationPass):
  name = "shorthand"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _ShorthandExpander().visit(fn)
