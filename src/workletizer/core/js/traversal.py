"""
Generic traversal utilities for the JavaScript AST.

Provides the visitor and transformer base classes used by every analysis and
normalization pass. Dispatch follows the `ast.NodeVisitor` convention:
`visit_<ClassName>` if defined, `generic_visit` otherwise.

`NodeTransformer` never mutates: a visit method returns the node to keep, a new
node to substitute, a list of nodes to splice into the enclosing tuple field, or
`REMOVE` to drop the node from the enclosing tuple field.
"""

from dataclasses import fields, replace
from typing import Any, Iterator, List, Set, Tuple

from workletizer.core.js.nodes import Identifier, Node


class _RemoveSentinel:
  """Marker returned by a transformer to delete a node from a sequence."""

  def __repr__(self) -> str:
    return "REMOVE"


REMOVE = _RemoveSentinel()


def iter_fields(node: Node) -> Iterator[Tuple[str, Any]]:
  """Yields `(name, value)` for every dataclass field of the node."""
  for f in fields(node):
    yield f.name, getattr(node, f.name)


def iter_child_nodes(node: Node) -> Iterator[Node]:
  """
  Yields the direct children of a node in source order.

  Args:
      node: The parent node.

  Yields:
      Node: Each child node (None entries of tuple fields are skipped).
  """
  for _, value in iter_fields(node):
    if isinstance(value, Node):
      yield value
    elif isinstance(value, tuple):
      for item in value:
        if isinstance(item, Node):
          yield item


def walk(node: Node) -> Iterator[Node]:
  """Pre-order iteration over a node and all of its descendants."""
  stack: List[Node] = [node]
  while stack:
    current = stack.pop()
    yield current
    stack.extend(reversed(list(iter_child_nodes(current))))


def collect_names(node: Node) -> Set[str]:
  """
  Collects every identifier spelling used anywhere under a node.

  Used to allocate temporary names that cannot collide with user code.
  """
  return {n.name for n in walk(node) if isinstance(n, Identifier)}


class NodeVisitor:
  """Read-only depth-first visitor."""

  def visit(self, node: Node) -> Any:
    method = getattr(self, "visit_" + type(node).__name__, None)
    if method is None:
      return self.generic_visit(node)
    return method(node)

  def generic_visit(self, node: Node) -> Any:
    for child in iter_child_nodes(node):
      self.visit(child)
    return None


class NodeTransformer(NodeVisitor):
  """
  Depth-first rewriter producing a new tree.

  Unchanged subtrees are shared with the input tree, changed ones are rebuilt
  with `dataclasses.replace`.
  """

  def generic_visit(self, node: Node) -> Node:
    changes = {}
    for name, value in iter_fields(node):
      if isinstance(value, Node):
        new_value = self.visit(value)
        if new_value is REMOVE:
          new_value = None
        if new_value is not value:
          changes[name] = new_value
      elif isinstance(value, tuple):
        items, changed = self._visit_sequence(value)
        if changed:
          changes[name] = items
    if not changes:
      return node
    return replace(node, **changes)

  def _visit_sequence(self, values: Tuple[Any, ...]) -> Tuple[Tuple[Any, ...], bool]:
    items: List[Any] = []
    changed = False
    for item in values:
      if not isinstance(item, Node):
        items.append(item)
        continue
      new_item = self.visit(item)
      if new_item is REMOVE:
        changed = True
      elif isinstance(new_item, list):
        items.extend(new_item)
        changed = True
      else:
        changed = changed or new_item is not item
        items.append(new_item)
    return tuple(items), changed
