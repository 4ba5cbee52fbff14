"""
Identifier Classifier.

Walks a normalized worklet and decides, for every identifier reference, whether
it must travel with the worklet. A name is *not* captured when it is:

1.  Ambient (built-ins, host functions, configured globals) or the worklet's
    own name.
2.  A non-computed property name (`x.name`) or object key (`{name: 1}`).
3.  Bound inside the worklet (parameters, locals, nested function scopes).

Everything else is captured. The first occurrence of each captured name is kept
as its closure entry, and every occurrence is merged into the capture trie.
Separately, assignments of the form `x.value = ...` mark `x` as an output.
"""

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional

from workletizer.analysis.closure import CaptureTrie, capture_path
from workletizer.analysis.scopes import (
  ScopeStack,
  function_scope_names,
  lexical_names,
  pattern_names,
)
from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeVisitor


@dataclass
class ClassificationResult:
  """
  Outcome of classifying one worklet.

  Attributes:
      captured (Dict[str, Identifier]): Closure entries, first reference per name.
      trie (CaptureTrie): Property paths read through each captured name.
      outputs (List[str]): Names written through `.value` (in first-write order).
  """

  captured: Dict[str, js.Identifier] = field(default_factory=dict)
  trie: CaptureTrie = field(default_factory=CaptureTrie)
  outputs: List[str] = field(default_factory=list)

  @property
  def names(self) -> List[str]:
    return list(self.captured)


class IdentifierClassifier(NodeVisitor):
  """
  Scope-aware visitor collecting the free variables of a worklet.

  Args:
      ambient_names: Names never captured.
      own_name: The worklet's declared name, referenced for self-recursion.
  """

  def __init__(self, ambient_names: AbstractSet[str], own_name: Optional[str] = None):
    self.ambient_names = ambient_names
    self.own_name = own_name
    self.scopes = ScopeStack()
    self.result = ClassificationResult()
    self._target: Optional[js.Node] = None

  def classify(self, fn: js.Node) -> ClassificationResult:
    """
    Classifies all references inside a function node.

    Args:
        fn: FunctionExpression, FunctionDeclaration or ArrowFunctionExpression.

    Returns:
        ClassificationResult: Captures, trie and outputs.
    """
    self._function(fn)
    return self.result

  # --- References ---

  def _is_free(self, name: str) -> bool:
    if name in self.ambient_names or name == self.own_name:
      return False
    return not self.scopes.is_bound(name)

  def _reference(
    self,
    ident: js.Identifier,
    chain: List[js.MemberExpression],
    target: Optional[js.Node] = None,
  ) -> None:
    if not self._is_free(ident.name):
      return
    if ident.name not in self.result.captured:
      self.result.captured[ident.name] = ident
    path, node = capture_path(ident, chain, target)
    self.result.trie.insert(path, node)

  def visit_Identifier(self, node: js.Identifier) -> None:
    self._reference(node, [])

  def visit_MemberExpression(self, node: js.MemberExpression) -> None:
    chain: List[js.MemberExpression] = []
    current: js.Node = node
    while isinstance(current, js.MemberExpression):
      chain.append(current)
      current = current.object
    chain.reverse()
    target = self._target
    self._target = None
    if isinstance(current, js.Identifier):
      self._reference(current, chain, target if any(m is target for m in chain) else None)
    else:
      self.visit(current)
    for member in chain:
      if member.computed:
        self.visit(member.property)
    self._target = target

  # --- Writes ---

  def visit_AssignmentExpression(self, node: js.AssignmentExpression) -> None:
    left = node.left
    if isinstance(left, js.MemberExpression):
      if (
        not left.computed
        and isinstance(left.property, js.Identifier)
        and left.property.name == "value"
        and isinstance(left.object, js.Identifier)
        and self._is_free(left.object.name)
        and left.object.name not in self.result.outputs
      ):
        self.result.outputs.append(left.object.name)
      self._visit_target(left)
    elif not isinstance(left, js.Identifier):
      self._assignment_pattern(left)
    self.visit(node.right)

  def visit_UpdateExpression(self, node: js.UpdateExpression) -> None:
    if isinstance(node.argument, js.MemberExpression):
      self._visit_target(node.argument)
    else:
      self.visit(node.argument)

  def _visit_target(self, member: js.MemberExpression) -> None:
    saved = self._target
    self._target = member
    self.visit_MemberExpression(member)
    self._target = saved

  def _assignment_pattern(self, pattern: js.Node) -> None:
    """Visits a destructuring assignment target: bare names are writes, the rest are reads."""
    if isinstance(pattern, js.Identifier):
      return
    if isinstance(pattern, js.MemberExpression):
      self._visit_target(pattern)
    elif isinstance(pattern, js.ObjectPattern):
      for prop in pattern.properties:
        if isinstance(prop, js.Property):
          if prop.computed:
            self.visit(prop.key)
          self._assignment_pattern(prop.value)
        else:
          self._assignment_pattern(prop)
    elif isinstance(pattern, js.ArrayPattern):
      for element in pattern.elements:
        if element is not None:
          self._assignment_pattern(element)
    elif isinstance(pattern, js.AssignmentPattern):
      self._assignment_pattern(pattern.left)
      self.visit(pattern.right)
    elif isinstance(pattern, js.RestElement):
      self._assignment_pattern(pattern.argument)

  # --- Binding patterns ---

  def _binding_pattern(self, pattern: Optional[js.Node]) -> None:
    """Visits the default values and computed keys of a binding pattern."""
    if pattern is None or isinstance(pattern, js.Identifier):
      return
    if isinstance(pattern, js.ObjectPattern):
      for prop in pattern.properties:
        if isinstance(prop, js.Property):
          if prop.computed:
            self.visit(prop.key)
          self._binding_pattern(prop.value)
        else:
          self._binding_pattern(prop)
    elif isinstance(pattern, js.ArrayPattern):
      for element in pattern.elements:
        self._binding_pattern(element)
    elif isinstance(pattern, js.AssignmentPattern):
      self._binding_pattern(pattern.left)
      self.visit(pattern.right)
    elif isinstance(pattern, js.RestElement):
      self._binding_pattern(pattern.argument)

  def visit_VariableDeclarator(self, node: js.VariableDeclarator) -> None:
    self._binding_pattern(node.id)
    if node.init is not None:
      self.visit(node.init)

  # --- Object literals ---

  def visit_Property(self, node: js.Property) -> None:
    if node.computed:
      self.visit(node.key)
    self.visit(node.value)

  def visit_ObjectPattern(self, node: js.ObjectPattern) -> None:
    self._assignment_pattern(node)

  def visit_ArrayPattern(self, node: js.ArrayPattern) -> None:
    self._assignment_pattern(node)

  # --- Scopes ---

  def _function(self, fn: js.Node) -> None:
    self.scopes.push(function_scope_names(fn))
    for param in fn.params:
      self._binding_pattern(param)
    if isinstance(fn.body, js.BlockStatement):
      for stmt in fn.body.body:
        self.visit(stmt)
    else:
      self.visit(fn.body)
    self.scopes.pop()

  def visit_FunctionExpression(self, node: js.FunctionExpression) -> None:
    self._function(node)

  def visit_ArrowFunctionExpression(self, node: js.ArrowFunctionExpression) -> None:
    self._function(node)

  def visit_FunctionDeclaration(self, node: js.FunctionDeclaration) -> None:
    self._function(node)

  def visit_BlockStatement(self, node: js.BlockStatement) -> None:
    self.scopes.push(lexical_names(node.body))
    for stmt in node.body:
      self.visit(stmt)
    self.scopes.pop()

  def _loop_head(self, names: List[str], parts: List[Optional[js.Node]]) -> None:
    self.scopes.push(names)
    for part in parts:
      if part is not None:
        self.visit(part)
    self.scopes.pop()

  def visit_ForStatement(self, node: js.ForStatement) -> None:
    names = lexical_names([node.init]) if isinstance(node.init, js.VariableDeclaration) else set()
    self._loop_head(list(names), [node.init, node.test, node.update, node.body])

  def _for_each(self, node: js.Node) -> None:
    if isinstance(node.left, js.VariableDeclaration):
      names = list(lexical_names([node.left]))
      self._loop_head(names, [node.right, node.left, node.body])
    else:
      self._assignment_pattern(node.left)
      self._loop_head([], [node.right, node.body])

  def visit_ForInStatement(self, node: js.ForInStatement) -> None:
    self._for_each(node)

  def visit_ForOfStatement(self, node: js.ForOfStatement) -> None:
    self._for_each(node)

  def visit_CatchClause(self, node: js.CatchClause) -> None:
    self.scopes.push(pattern_names(node.param))
    self._binding_pattern(node.param)
    self.visit(node.body)
    self.scopes.pop()

  def visit_SwitchStatement(self, node: js.SwitchStatement) -> None:
    self.visit(node.discriminant)
    self.scopes.push(lexical_names(s for case in node.cases for s in case.consequent))
    for case in node.cases:
      if case.test is not None:
        self.visit(case.test)
      for stmt in case.consequent:
        self.visit(stmt)
    self.scopes.pop()


def classify(
  fn: js.Node,
  ambient_names: AbstractSet[str],
  own_name: Optional[str] = None,
) -> ClassificationResult:
  """
  Convenience wrapper around `IdentifierClassifier`.

  Args:
      fn: The (normalized) worklet function.
      ambient_names: Names never captured.
      own_name: The worklet's declared name.

  Returns:
      ClassificationResult: Captures, trie and outputs.
  """
  return IdentifierClassifier(ambient_names, own_name).classify(fn)
