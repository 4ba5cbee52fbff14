"""
Optimization-Flag Analyzer.

A read-only scan of a normalized worklet body that tells a downstream style
evaluator whether the worklet can take a fast path. The flags are advisory and
never change the emitted worklet.
"""

from typing import AbstractSet

from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import walk
from workletizer.enums import OptimizationFlag
from workletizer.semantics.ambient import INTERPOLATION_HELPERS


def _is_whitelisted_call(node: js.CallExpression, helpers: AbstractSet[str]) -> bool:
  return isinstance(node.callee, js.Identifier) and node.callee.name in helpers


def optimization_flags(
  fn: js.Node,
  helpers: AbstractSet[str] = INTERPOLATION_HELPERS,
) -> OptimizationFlag:
  """
  Computes the flag bit field of a worklet.

  Args:
      fn: The normalized worklet function (or any subtree).
      helpers: Callee names that do not count as function calls.

  Returns:
      OptimizationFlag: FUNCTIONLESS when every call targets a helper,
      STATEMENTLESS when no `if`/`switch` statement occurs.
  """
  functionless = True
  statementless = True
  for node in walk(fn):
    if isinstance(node, js.CallExpression) and not _is_whitelisted_call(node, helpers):
      functionless = False
    elif isinstance(node, (js.IfStatement, js.SwitchStatement)):
      statementless = False

  flags = OptimizationFlag.NONE
  if functionless:
    flags |= OptimizationFlag.FUNCTIONLESS
  if statementless:
    flags |= OptimizationFlag.STATEMENTLESS
  return flags
