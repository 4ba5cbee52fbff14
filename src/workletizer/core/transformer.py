"""
Worklet Transformer.

Walks a converted subtree and replaces every function carrying the worklet
directive with its wrapped form:

*   Function expressions and arrows become the builder's IIFE.
*   Function declarations become `const <name> = <IIFE>;`.
*   Marked object properties with a static key become a method/factory pair.
*   Marked arguments of a style factory call get optimization flags attached.

The transformer is also handed to the builders as their `transform_nested`
callback, so worklets nested inside a worklet are transformed with the outer
one.
"""

from dataclasses import replace
from typing import AbstractSet, List, Optional

from workletizer.core.conversion_result import WorkletRecord
from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import NodeTransformer
from workletizer.core.normalizer.passes.directives import has_worklet_directive
from workletizer.core.normalizer.pipeline import NormalizationPipeline
from workletizer.core.worklet.builder import BuiltWorklet, WorkletBuilder, as_declaration
from workletizer.core.worklet.factory import MethodFactoryBuilder, is_method_worklet, property_key_name
from workletizer.semantics.ambient import STYLE_FACTORY_CALLEES


def is_marked_function(node: js.Node) -> bool:
  return isinstance(node, js.FUNCTION_TYPES) and has_worklet_directive(node)


def is_style_factory_call(node: js.Node) -> bool:
  return (
    isinstance(node, js.CallExpression)
    and isinstance(node.callee, js.Identifier)
    and node.callee.name in STYLE_FACTORY_CALLEES
  )


class WorkletTransformer(NodeTransformer):
  """
  Replaces marked functions in a tree.

  Args:
      ambient_names: Names never captured.
      filename: File name used in location strings.
      pipeline: Normalization pipeline shared by every worklet.

  Attributes:
      records (List[WorkletRecord]): One entry per worklet built, outer
          worklets before the worklets nested in them.
  """

  def __init__(
    self,
    ambient_names: AbstractSet[str],
    filename: str,
    pipeline: Optional[NormalizationPipeline] = None,
  ):
    self.records: List[WorkletRecord] = []
    self.builder = WorkletBuilder(ambient_names, filename, transform_nested=self.transform_nested, pipeline=pipeline)
    self.factories = MethodFactoryBuilder(self.builder, transform_nested=self.transform_nested)

  def transform_nested(self, node: js.Node) -> js.Node:
    """Transforms worklets strictly inside `node`, never `node` itself."""
    return self.generic_visit(node)

  # --- Entry points ---

  def transform_worklet(self, fn: js.Node, with_flags: bool = False, as_expression: bool = False) -> js.Node:
    """
    Transforms one marked function.

    Args:
        fn: The marked function.
        with_flags: Attach optimization flags (style worklets).
        as_expression: Return the bare IIFE even for a declaration.

    Returns:
        Node: The IIFE, or a `const` declaration for a declaration.
    """
    built = self._build(fn, with_flags=with_flags)
    if isinstance(fn, js.FunctionDeclaration) and not as_expression:
      return as_declaration(fn, built)
    return built.expression

  def transform_property(self, prop: js.Property, with_flags: bool = False) -> List[js.Node]:
    """
    Transforms one object property holding a marked function.

    Returns:
        List[Node]: The method/factory pair, or the single rewritten property
        when the key is not static.
    """
    if is_method_worklet(prop):
      position = len(self.records)
      built = self.factories.build(prop, with_flags=with_flags)
      self.records[position:position] = built.records
      return list(built.properties)
    if prop.kind != "init":
      # Accessors cannot hold a wrapper; only their nested worklets change.
      return [replace(prop, value=self.transform_nested(prop.value))]
    built = self._build(prop.value, key_name=property_key_name(prop), with_flags=with_flags)
    return [replace(prop, value=built.expression, method=False)]

  def _build(self, fn: js.Node, key_name: Optional[str] = None, with_flags: bool = False) -> BuiltWorklet:
    position = len(self.records)
    built = self.builder.build(fn, key_name=key_name, with_flags=with_flags)
    self.records.insert(position, built.record())
    return built

  # --- Visitors ---

  def visit_FunctionExpression(self, node: js.FunctionExpression) -> js.Node:
    if has_worklet_directive(node):
      return self.transform_worklet(node)
    return self.generic_visit(node)

  def visit_ArrowFunctionExpression(self, node: js.ArrowFunctionExpression) -> js.Node:
    if has_worklet_directive(node):
      return self.transform_worklet(node)
    return self.generic_visit(node)

  def visit_FunctionDeclaration(self, node: js.FunctionDeclaration) -> js.Node:
    if has_worklet_directive(node):
      return self.transform_worklet(node)
    return self.generic_visit(node)

  def visit_Property(self, node: js.Property) -> js.Node:
    if is_marked_function(node.value):
      return self.transform_property(node)
    return self.generic_visit(node)

  def visit_CallExpression(self, node: js.CallExpression) -> js.Node:
    if not is_style_factory_call(node):
      return self.generic_visit(node)
    args = []
    for arg in node.arguments:
      if is_marked_function(arg):
        args.append(self.transform_worklet(arg, with_flags=True, as_expression=True))
      else:
        args.append(self.visit(arg))
    return replace(node, arguments=tuple(args))
