"""
Minimal Capture Trie.

Records, per captured variable, the property chains a worklet actually reads,
so the closure object carries `{ pos: { x: pos.x } }` instead of all of `pos`.

The trie is a tagged variant:

*   `Leaf(node)`: capture this expression verbatim.
*   `Branch(children)`: build an object literal from the children.

A `Leaf` is final. Inserting a path below an existing leaf is a no-op, and
inserting a path that ends at a branch replaces the branch with a leaf. Bare
use of a variable therefore always wins over a deeper path, whichever comes
first.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from workletizer.core.js import nodes as js
from workletizer.semantics.ambient import BLOCKED_PROPERTIES

# Property that ends a capture path after being included in it.
TERMINAL_PROPERTY = "value"


@dataclass(frozen=True)
class Leaf:
  node: js.Node


@dataclass
class Branch:
  children: Dict[str, "TrieNode"] = field(default_factory=dict)


TrieNode = Union[Leaf, Branch]


def capture_path(
  root: js.Identifier,
  chain: Sequence[js.MemberExpression],
  target: Optional[js.Node] = None,
) -> Tuple[List[str], js.Node]:
  """
  Computes the capture path for one reference.

  Args:
      root: The referenced identifier.
      chain: Member expressions enclosing `root`, innermost first
          (`x.a.b` gives `[x.a, x.a.b]`).
      target: The member node being assigned or updated at this site, if any.

  Returns:
      Tuple[List[str], Node]: The path (variable name first) and the deepest
      node along it, which becomes the leaf expression.
  """
  path = [root.name]
  node: js.Node = root
  for member in chain:
    if member.computed or member.optional or not isinstance(member.property, js.Identifier):
      break
    name = member.property.name
    if name in BLOCKED_PROPERTIES or member is target:
      break
    path.append(name)
    node = member
    if name == TERMINAL_PROPERTY:
      break
  return path, node


class CaptureTrie:
  """
  Shared trie for all captured variables of one worklet, keyed first by name.
  """

  def __init__(self) -> None:
    self.root = Branch()

  def insert(self, path: Sequence[str], node: js.Node) -> None:
    """
    Merges one occurrence into the trie.

    Args:
        path: Variable name followed by property names.
        node: Expression to capture at the end of the path.
    """
    parent: TrieNode = self.root
    for index, segment in enumerate(path):
      if isinstance(parent, Leaf):
        return
      if index == len(path) - 1:
        parent.children[segment] = Leaf(node)
        return
      child = parent.children.get(segment)
      if child is None:
        child = Branch()
        parent.children[segment] = child
      parent = child

  def names(self) -> List[str]:
    return list(self.root.children)

  def build(self) -> js.ObjectExpression:
    """
    Generates the closure object literal.

    Returns:
        ObjectExpression: One property per captured variable, in first-use order.
    """
    return self._object(self.root)

  def _object(self, branch: Branch) -> js.ObjectExpression:
    return js.ObjectExpression(
      tuple(js.Property(js.Identifier(name), self._value(child)) for name, child in branch.children.items())
    )

  def _value(self, node: TrieNode) -> js.Node:
    if isinstance(node, Leaf):
      return node.node
    return self._object(node)
