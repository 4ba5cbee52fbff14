"""
Method-Worklet Factory Builder.

A worklet written as an object method usually calls sibling methods of the same
object. Those siblings do not exist in the worklet runtime, so the property is
split in two:

    foo: function () { 'worklet'; ... }

becomes

    foo: function () { ... },
    _foo_worklet_factory_: function () {
      var _bar_ = this.bar.bind(this);
      var baz = this._baz_worklet_factory_();
      var f = <worklet built from the rewritten body>;
      return f;
    }

Inside the worklet body two call forms are rewritten:

*   `this.bar.bind(this)` -> `_bar_` (callback reference: calls back into the
    original object through a bound method).
*   `this.baz(...)` -> `baz(...)` (re-materialized: the sibling's own factory
    produces a runtime-local worklet).

Any other use of `this` is left alone.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from workletizer.core.conversion_result import WorkletRecord
from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer, collect_names
from workletizer.core.normalizer.passes.directives import has_worklet_directive, strip_worklet_directive
from workletizer.core.worklet.builder import NodeCallback, WorkletBuilder
from workletizer.enums import RoutingKind


def factory_key(name: str) -> str:
  return f"_{name}_worklet_factory_"


def callback_name(name: str) -> str:
  return f"_{name}_"


def property_key_name(prop: js.Property) -> Optional[str]:
  """Static key of an object property (identifier or string), else None."""
  if prop.computed:
    return None
  if isinstance(prop.key, js.Identifier):
    return prop.key.name
  if isinstance(prop.key, js.StringLiteral):
    return prop.key.value
  return None


def is_method_worklet(prop: js.Node) -> bool:
  """
  True for `key: function () {'worklet'}`, `key: () => {'worklet'}` and
  `key() {'worklet'}` with a static key.
  """
  if not isinstance(prop, js.Property) or prop.kind != "init":
    return False
  if not isinstance(prop.value, (js.FunctionExpression, js.ArrowFunctionExpression)):
    return False
  return property_key_name(prop) is not None and has_worklet_directive(prop.value)


def _this_member(node: js.Node) -> Optional[str]:
  """Name of a `this.<name>` access, else None."""
  if (
    isinstance(node, js.MemberExpression)
    and not node.computed
    and not node.optional
    and isinstance(node.object, js.ThisExpression)
    and isinstance(node.property, js.Identifier)
  ):
    return node.property.name
  return None


class SelfCallRewriter(NodeTransformer):
  """
  Rewrites calls routed through `this` and records the routing table.

  Nested non-arrow functions are not entered: their `this` is a different
  object.

  Attributes:
      routes (Dict[Tuple[str, RoutingKind], None]): Ordered set of
          (method name, routing kind) pairs in first-use order.
  """

  def __init__(self) -> None:
    self.routes: Dict[Tuple[str, RoutingKind], None] = {}

  def visit_FunctionExpression(self, node: js.FunctionExpression) -> js.Node:
    return node

  def visit_FunctionDeclaration(self, node: js.FunctionDeclaration) -> js.Node:
    return node

  def visit_CallExpression(self, node: js.CallExpression) -> js.Node:
    callee = node.callee
    # this.name.bind(this)
    if (
      isinstance(callee, js.MemberExpression)
      and not callee.computed
      and isinstance(callee.property, js.Identifier)
      and callee.property.name == "bind"
      and _this_member(callee.object) is not None
      and len(node.arguments) == 1
      and isinstance(node.arguments[0], js.ThisExpression)
    ):
      name = _this_member(callee.object)
      self.routes[(name, RoutingKind.CALLBACK_REFERENCE)] = None
      return js.Identifier(callback_name(name))

    # this.name(...)
    name = _this_member(callee)
    if name is not None and not node.optional:
      self.routes[(name, RoutingKind.RE_MATERIALIZED)] = None
      args = tuple(self.visit(a) for a in node.arguments)
      return replace(node, callee=js.Identifier(name), arguments=args)

    return self.generic_visit(node)


def binding_statement(name: str, kind: RoutingKind) -> js.VariableDeclaration:
  """
  Binding emitted ahead of the factory's worklet for one routed method.

  Args:
      name: Sibling method name.
      kind: Routing kind.

  Returns:
      VariableDeclaration: `var _name_ = this.name.bind(this);` or
      `var name = this._name_worklet_factory_();`.
  """
  this = js.ThisExpression()
  if kind is RoutingKind.CALLBACK_REFERENCE:
    bound = js.CallExpression(
      js.MemberExpression(js.MemberExpression(this, js.Identifier(name)), js.Identifier("bind")),
      (js.ThisExpression(),),
    )
    return js.VariableDeclaration("var", (js.VariableDeclarator(js.Identifier(callback_name(name)), bound),))
  factory_call = js.CallExpression(js.MemberExpression(this, js.Identifier(factory_key(name))), ())
  return js.VariableDeclaration("var", (js.VariableDeclarator(js.Identifier(name), factory_call),))


def _key_node(name: str) -> js.Node:
  if name.isidentifier() and name.isascii():
    return js.Identifier(name)
  return js.StringLiteral(name)


@dataclass
class BuiltFactory:
  """
  Result of building a method worklet.

  Attributes:
      properties (Tuple[Property, Property]): The original method and its factory.
      routes (List[Tuple[str, RoutingKind]]): The routing table.
      records (List[WorkletRecord]): The factory record followed by the
          record of the inner worklet.
  """

  properties: Tuple[js.Property, js.Property]
  routes: List[Tuple[str, RoutingKind]] = field(default_factory=list)
  records: List[WorkletRecord] = field(default_factory=list)


class MethodFactoryBuilder:
  """
  Builds the method/factory property pair.

  Args:
      builder: General worklet builder used for the inner worklet.
      transform_nested: Applied to the kept method so nested worklets inside
          it are transformed too.
  """

  def __init__(self, builder: WorkletBuilder, transform_nested: Optional[NodeCallback] = None):
    self.builder = builder
    self.transform_nested = transform_nested

  def build(self, prop: js.Property, with_flags: bool = False) -> BuiltFactory:
    """
    Splits a marked object method into the method and its factory.

    Args:
        prop: A property accepted by `is_method_worklet`.
        with_flags: Attach optimization flags to the inner worklet.

    Returns:
        BuiltFactory: The two replacement properties and metadata.
    """
    name = property_key_name(prop)
    method = prop.value

    kept = strip_worklet_directive(method)
    if self.transform_nested is not None:
      kept = self.transform_nested(kept)
    kept_prop = replace(prop, value=kept)

    rewriter = SelfCallRewriter()
    body = rewriter.visit(method.body)
    worklet = js.ArrowFunctionExpression(method.params, body, is_async=method.is_async, loc=method.loc)
    built = self.builder.build(worklet, with_flags=with_flags)

    routes = list(rewriter.routes)
    local = "f"
    used = collect_names(method)
    counter = 1
    while local in used:
      counter += 1
      local = f"f{counter}"

    statements: List[js.Node] = [binding_statement(n, k) for n, k in routes]
    statements.append(js.VariableDeclaration("var", (js.VariableDeclarator(js.Identifier(local), built.expression),)))
    statements.append(js.ReturnStatement(js.Identifier(local)))
    factory = js.FunctionExpression(None, (), js.BlockStatement(tuple(statements)))
    factory_prop = js.Property(_key_node(factory_key(name)), factory)

    factory_record = WorkletRecord(
      name=name,
      kind="method-factory",
      location=built.location,
      routes=[f"{n}:{k.value}" for n, k in routes],
    )
    return BuiltFactory(
      properties=(kept_prop, factory_prop),
      routes=routes,
      records=[factory_record, built.record()],
    )
