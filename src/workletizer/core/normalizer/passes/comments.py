"""
Comment Removal.

Serialized worklets are identity keys and are evaluated by an interpreter that
may not accept comments, so every `Comment` statement is dropped.
"""

from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import REMOVE, NodeTransformer
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass


class _CommentStripper(NodeTransformer):
  def visit_Comment(self, node: js.Comment):
    return REMOVE


class CommentStripPass(NormalizationPass):
  name = "comments"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _CommentStripper().visit(fn)
