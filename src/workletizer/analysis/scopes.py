"""
Scope Tracking.

Provides an explicit stack of binding sets for the analysis visitors. Scopes are
pushed when a visitor enters a function, block, loop head, catch clause or
switch body, and popped on exit; nodes never point back at their parents.

Declarations are collected eagerly on entry so hoisted names (`var`,
function declarations) resolve even when referenced before they appear.
"""

from typing import Iterable, Iterator, List, Optional, Set

from workletizer.core.js import nodes as js


def pattern_names(pattern: Optional[js.Node]) -> List[str]:
  """
  Lists the names bound by a declaration or parameter pattern.

  Args:
      pattern: Identifier, object/array pattern, default or rest element.

  Returns:
      List[str]: Bound names in source order. Member targets bind nothing.
  """
  if pattern is None:
    return []
  if isinstance(pattern, js.Identifier):
    return [pattern.name]
  if isinstance(pattern, js.ObjectPattern):
    names: List[str] = []
    for prop in pattern.properties:
      if isinstance(prop, js.Property):
        names.extend(pattern_names(prop.value))
      else:
        names.extend(pattern_names(prop))
    return names
  if isinstance(pattern, js.ArrayPattern):
    names = []
    for element in pattern.elements:
      names.extend(pattern_names(element))
    return names
  if isinstance(pattern, js.AssignmentPattern):
    return pattern_names(pattern.left)
  if isinstance(pattern, js.RestElement):
    return pattern_names(pattern.argument)
  return []


def _declaration_names(decl: js.VariableDeclaration) -> List[str]:
  names: List[str] = []
  for declarator in decl.declarations:
    names.extend(pattern_names(declarator.id))
  return names


def lexical_names(statements: Iterable[js.Node]) -> Set[str]:
  """
  Names declared directly in a statement list by `let`, `const` and function
  declarations.
  """
  names: Set[str] = set()
  for stmt in statements:
    if isinstance(stmt, js.VariableDeclaration) and stmt.kind != "var":
      names.update(_declaration_names(stmt))
    elif isinstance(stmt, js.FunctionDeclaration):
      names.add(stmt.id.name)
  return names


def _var_statements(node: js.Node) -> Iterator[js.VariableDeclaration]:
  if isinstance(node, js.VariableDeclaration):
    if node.kind == "var":
      yield node
    return
  if isinstance(node, js.FUNCTION_TYPES):
    return
  if isinstance(node, js.BlockStatement):
    children: Iterable[js.Node] = node.body
  elif isinstance(node, js.IfStatement):
    children = [node.consequent, node.alternate]
  elif isinstance(node, js.ForStatement):
    children = [node.init, node.body]
  elif isinstance(node, (js.ForInStatement, js.ForOfStatement)):
    children = [node.left, node.body]
  elif isinstance(node, (js.WhileStatement, js.DoWhileStatement, js.LabeledStatement)):
    children = [node.body]
  elif isinstance(node, js.TryStatement):
    children = [node.block, node.handler.body if node.handler else None, node.finalizer]
  elif isinstance(node, js.SwitchStatement):
    children = [s for case in node.cases for s in case.consequent]
  else:
    return
  for child in children:
    if child is not None:
      yield from _var_statements(child)


def hoisted_var_names(body: js.BlockStatement) -> Set[str]:
  """
  Collects `var` names declared anywhere in a function body, without entering
  nested functions.
  """
  names: Set[str] = set()
  for decl in _var_statements(body):
    names.update(_declaration_names(decl))
  return names


def function_scope_names(fn: js.Node) -> Set[str]:
  """
  Every name bound in a function's own scope.

  Includes parameters, hoisted `var` names, the body's lexical declarations,
  the name of a named function expression and, for non-arrow functions,
  `arguments`.
  """
  names: Set[str] = set()
  for param in fn.params:
    names.update(pattern_names(param))
  if isinstance(fn.body, js.BlockStatement):
    names.update(hoisted_var_names(fn.body))
    names.update(lexical_names(fn.body.body))
  if isinstance(fn, js.FunctionExpression) and fn.id is not None:
    names.add(fn.id.name)
  if not isinstance(fn, js.ArrowFunctionExpression):
    names.add("arguments")
  return names


class ScopeStack:
  """
  Stack of binding sets, innermost last.

  Attributes:
      _scopes (List[Set[str]]): The active scopes.
  """

  def __init__(self) -> None:
    self._scopes: List[Set[str]] = []

  def push(self, names: Iterable[str] = ()) -> None:
    self._scopes.append(set(names))

  def pop(self) -> None:
    self._scopes.pop()

  def declare(self, name: str) -> None:
    """Adds a binding to the innermost scope."""
    if self._scopes:
      self._scopes[-1].add(name)

  def is_bound(self, name: str) -> bool:
    """True if any active scope binds `name`."""
    return any(name in scope for scope in reversed(self._scopes))

  @property
  def depth(self) -> int:
    return len(self._scopes)
