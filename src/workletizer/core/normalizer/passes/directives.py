"""
Worklet Directive Removal.

Drops the `'worklet'` marker from the root function so it does not reappear in
the serialized text. Nested functions keep their own directives.
"""

from dataclasses import replace

from workletizer.core.js import nodes as js
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass
from workletizer.semantics.ambient import WORKLET_DIRECTIVE


def strip_worklet_directive(fn: js.Node) -> js.Node:
  """
  Returns `fn` without the worklet directive in its own body.

  Args:
      fn: Any function node.

  Returns:
      The same node if it carries no directive, else a rebuilt copy.
  """
  body = fn.body
  if not isinstance(body, js.BlockStatement):
    return fn
  kept = tuple(d for d in body.directives if d.value != WORKLET_DIRECTIVE)
  if len(kept) == len(body.directives):
    return fn
  return replace(fn, body=replace(body, directives=kept))


def has_worklet_directive(fn: js.Node) -> bool:
  body = getattr(fn, "body", None)
  return isinstance(body, js.BlockStatement) and any(d.value == WORKLET_DIRECTIVE for d in body.directives)


class DirectiveStripPass(NormalizationPass):
  name = "directives"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return strip_worklet_directive(fn)
