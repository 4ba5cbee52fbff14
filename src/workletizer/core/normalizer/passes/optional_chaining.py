"""
Optional Chaining Lowering (loose).

An optional link short-circuits the rest of its chain:

*   `a?.b.c` becomes `a == null ? void 0 : a.b.c`.
*   `f()?.x` becomes `(_ref = f()) == null ? void 0 : _ref.x`.
*   `a?.b?.c` lowers the inner link first and caches it for the outer one.
*   `o.m?.()` keeps `o` as the receiver: `(_ref = o.m) == null ? void 0 : _ref.call(o)`.
*   `delete a?.b` yields `true` instead of `undefined` when short-circuited.
*   `(a?.b).c` ends the chain at the parentheses: `(a == null ? void 0 : a.b).c`.
*   `(a?.b)()` still calls `b` on `a`: `(a == null ? void 0 : (_ref = a).b).call(_ref)`.

Temporaries are declared in the nearest enclosing function.
"""

from dataclasses import replace
from typing import Optional

from workletizer.core.js import nodes as js
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass
from workletizer.core.normalizer.scoped import ScopedTempTransformer, is_simple, void_zero


def _is_link(node: js.Node) -> bool:
  return isinstance(node, (js.MemberExpression, js.CallExpression))


def _base(link: js.Node) -> js.Node:
  return link.object if isinstance(link, js.MemberExpression) else link.callee


def _outermost_optional(node: js.Node) -> Optional[js.Node]:
  """First optional link found walking from the top of a chain towards its root."""
  current = node
  while _is_link(current):
    if current.optional:
      return current
    current = _base(current)
  return None


def _is_parenthesized_member_chain(node: js.Node) -> bool:
  return (
    isinstance(node, js.ParenthesizedExpression)
    and isinstance(node.expression, js.MemberExpression)
    and _outermost_optional(node.expression) is not None
  )


def _is_null(node: js.Node) -> js.BinaryExpression:
  return js.BinaryExpression("==", node, js.NullLiteral())


class _OptionalChainLowering(ScopedTempTransformer):
  def visit_MemberExpression(self, node: js.MemberExpression) -> js.Node:
    return self._chain(node)

  def visit_CallExpression(self, node: js.CallExpression) -> js.Node:
    if not node.optional and _is_parenthesized_member_chain(node.callee):
      return self._parenthesized_method_call(node)
    return self._chain(node)

  def visit_UnaryExpression(self, node: js.UnaryExpression) -> js.Node:
    if node.operator == "delete" and _outermost_optional(node.argument) is not None:
      return self._lower(node.argument, short_circuit=js.BooleanLiteral(True), wrap=lambda e: replace(node, argument=e))
    return self.generic_visit(node)

  def _parenthesized_method_call(self, node: js.CallExpression) -> js.Node:
    receiver = self.new_temp()
    callee = self._lower(node.callee.expression, receiver=receiver)
    args = tuple(self.visit(a) for a in node.arguments)
    return js.CallExpression(js.MemberExpression(callee, js.Identifier("call")), (receiver,) + args)

  def _chain(self, node: js.Node) -> js.Node:
    if _outermost_optional(node) is None:
      return self.generic_visit(node)
    return self._lower(node)

  def _lower(
    self,
    top: js.Node,
    short_circuit: Optional[js.Node] = None,
    wrap=None,
    receiver: Optional[js.Identifier] = None,
  ) -> js.Node:
    """
    Lowers the outermost optional link of the chain ending at `top`.

    Args:
        top: The outermost member/call of the chain.
        short_circuit: Value produced when the link's base is nullish.
        wrap: Applied to the non-short-circuited chain (used by `delete`).
        receiver: Temporary that keeps the object of the member `top`.

    Returns:
        Node: A conditional expression.
    """
    link = _outermost_optional(top)
    if isinstance(link, js.CallExpression) and isinstance(link.callee, js.MemberExpression):
      check, lowered_link = self._optional_method_call(link)
    else:
      base = self.visit(_base(link))
      if is_simple(base):
        check = base
        ref = base
      else:
        ref = self.new_temp()
        check = js.AssignmentExpression("=", ref, base)
      lowered_link = self._strip_link(link, ref)

    replacement = self._rebuild(top, link, lowered_link)
    if receiver is not None:
      replacement = replace(replacement, object=js.AssignmentExpression("=", receiver, replacement.object))
    if wrap is not None:
      replacement = wrap(replacement)
    return js.ConditionalExpression(
      _is_null(check),
      short_circuit if short_circuit is not None else void_zero(),
      replacement,
    )

  def _optional_method_call(self, link: js.CallExpression):
    callee = link.callee
    receiver = self.visit(callee.object)
    if is_simple(receiver):
      context = receiver
      member_object = receiver
    else:
      context = self.new_temp()
      member_object = js.AssignmentExpression("=", context, receiver)
    prop = self.visit(callee.property) if callee.computed else callee.property
    method: js.Node = js.MemberExpression(member_object, prop, callee.computed)
    if callee.optional:
      guard = member_object
      method = js.ConditionalExpression(
        _is_null(guard),
        void_zero(),
        js.MemberExpression(context, prop, callee.computed),
      )
    ref = self.new_temp()
    args = tuple(self.visit(a) for a in link.arguments)
    call = js.CallExpression(js.MemberExpression(ref, js.Identifier("call")), (context,) + args)
    return js.AssignmentExpression("=", ref, method), call

  def _strip_link(self, link: js.Node, base: js.Node) -> js.Node:
    """The link itself, non-optional and reading from `base`."""
    if isinstance(link, js.MemberExpression):
      prop = self.visit(link.property) if link.computed else link.property
      return replace(link, object=base, property=prop, optional=False)
    return replace(link, callee=base, arguments=tuple(self.visit(a) for a in link.arguments), optional=False)

  def _rebuild(self, node: js.Node, link: js.Node, lowered_link: js.Node) -> js.Node:
    """Rebuilds the chain from `node` down to `link`, substituting `lowered_link`."""
    if node is link:
      return lowered_link
    if isinstance(node, js.MemberExpression):
      prop = self.visit(node.property) if node.computed else node.property
      return replace(node, object=self._rebuild(node.object, link, lowered_link), property=prop)
    return replace(
      node,
      callee=self._rebuild(node.callee, link, lowered_link),
      arguments=tuple(self.visit(a) for a in node.arguments),
    )


class OptionalChainingPass(NormalizationPass):
  name = "optional_chaining"

  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    return _OptionalChainLowering(context).visit(fn)
