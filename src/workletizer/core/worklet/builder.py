"""
Worklet Builder (general case).

Turns a marked function into a zero-argument IIFE that returns the runtime
function decorated with everything the worklet runtime needs:

    (function () {
      const _f = function (a) { return a + offset.x; };
      _f._closure = { offset: { x: offset.x } };
      _f.asString = "function _f(a){const{offset}=jsThis._closure;return a+offset.x;}";
      _f.__workletHash = 1234567890123;
      _f.__location = "src/App.js (12:4)";
      _f.__worklet = true;
      return _f;
    })()

The runtime function is the original, directive-stripped function; only the
serialized string is produced from the normalized copy.
"""

from dataclasses import dataclass
from typing import AbstractSet, Callable, List, Optional

from workletizer.analysis.classifier import ClassificationResult, classify
from workletizer.analysis.optimization import optimization_flags
from workletizer.core.conversion_result import WorkletRecord
from workletizer.core.js import nodes as js
from workletizer.core.js.emitter import JsEmitter
from workletizer.core.js.traversal import collect_names
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.passes.directives import strip_worklet_directive
from workletizer.core.normalizer.pipeline import NormalizationPipeline
from workletizer.core.worklet.hashing import string_hash_64
from workletizer.enums import OptimizationFlag
from workletizer.semantics.ambient import ANONYMOUS_NAME, CLOSURE_FIELD, CLOSURE_RECEIVER

NodeCallback = Callable[[js.Node], js.Node]


@dataclass
class BuiltWorklet:
  """
  Result of building one worklet.

  Attributes:
      expression (CallExpression): The IIFE replacing the function.
      name (str): Display name used in the serialized form.
      code (str): The serialized form (`asString`).
      hash (int): `string_hash_64(code)`.
      location (str): `file (line:column)` or just `file`.
      classification (ClassificationResult): Captures and outputs.
      flags (Optional[OptimizationFlag]): Set for style worklets only.
  """

  expression: js.CallExpression
  name: str
  code: str
  hash: int
  location: str
  classification: ClassificationResult
  flags: Optional[OptimizationFlag] = None

  def record(self) -> WorkletRecord:
    return WorkletRecord(
      name=self.name,
      location=self.location,
      hash=self.hash,
      code=self.code,
      captured=self.classification.names,
      outputs=list(self.classification.outputs),
      optimization_flags=int(self.flags) if self.flags is not None else None,
    )


def display_name(fn: js.Node, key_name: Optional[str] = None) -> str:
  """
  Chooses the name of the serialized function.

  Object-method key first, then the function's own name, else `_f`.
  """
  if key_name:
    return key_name
  fn_id = getattr(fn, "id", None)
  if fn_id is not None:
    return fn_id.name
  return ANONYMOUS_NAME


def format_location(filename: str, loc: Optional[js.SourceLocation]) -> str:
  if loc is None:
    return filename
  return f"{filename} ({loc.line}:{loc.column})"


def closure_binding(names: List[str]) -> js.VariableDeclaration:
  """`const {a, b} = jsThis._closure;`"""
  pattern = js.ObjectPattern(tuple(js.Property(js.Identifier(n), js.Identifier(n), shorthand=True) for n in names))
  source = js.MemberExpression(js.Identifier(CLOSURE_RECEIVER), js.Identifier(CLOSURE_FIELD))
  return js.VariableDeclaration("const", (js.VariableDeclarator(pattern, source),))


def _assign(target: js.Identifier, prop: str, value: js.Node) -> js.ExpressionStatement:
  return js.ExpressionStatement(js.AssignmentExpression("=", js.MemberExpression(target, js.Identifier(prop)), value))


class WorkletBuilder:
  """
  Builds the wrapper for a single worklet.

  Args:
      ambient_names: Names never captured.
      filename: File name used in location strings.
      transform_nested: Applied to the runtime copy so that worklets nested
          inside it are transformed too.
      pipeline: Normalization pipeline (defaults to the standard passes).
  """

  def __init__(
    self,
    ambient_names: AbstractSet[str],
    filename: str,
    transform_nested: Optional[NodeCallback] = None,
    pipeline: Optional[NormalizationPipeline] = None,
  ):
    self.ambient_names = ambient_names
    self.filename = filename
    self.transform_nested = transform_nested
    self.pipeline = pipeline or NormalizationPipeline()

  def serialize(self, normalized: js.Node, name: str, captured: List[str]) -> str:
    """
    Renders the compact serialized form of a normalized worklet.

    Args:
        normalized: Output of the normalization pipeline.
        name: Display name of the function.
        captured: Captured names; empty means no closure binding.

    Returns:
        str: `function name(params){...}` on a single line.
    """
    body = normalized.body
    if captured:
      body = js.BlockStatement((closure_binding(captured),) + body.body, body.directives)
    fn = js.FunctionExpression(
      js.Identifier(name),
      normalized.params,
      body,
      is_async=normalized.is_async,
      is_generator=getattr(normalized, "is_generator", False),
    )
    return JsEmitter(compact=True).emit(fn)

  def runtime_function(self, fn: js.Node) -> js.Node:
    """
    The function executed at the defining site.

    Directive-stripped, declarations turned into named function expressions,
    arrows kept as arrows, nested worklets transformed.
    """
    runtime = strip_worklet_directive(fn)
    if self.transform_nested is not None:
      runtime = self.transform_nested(runtime)
    if isinstance(runtime, js.FunctionDeclaration):
      runtime = js.FunctionExpression(
        runtime.id,
        runtime.params,
        runtime.body,
        is_async=runtime.is_async,
        is_generator=runtime.is_generator,
        loc=runtime.loc,
      )
    return runtime

  def build(self, fn: js.Node, key_name: Optional[str] = None, with_flags: bool = False) -> BuiltWorklet:
    """
    Builds the IIFE for a marked function.

    Args:
        fn: FunctionDeclaration, FunctionExpression or ArrowFunctionExpression.
        key_name: Object key when the function is an object method.
        with_flags: Attach `__optimalization` (style worklets).

    Returns:
        BuiltWorklet: The replacement expression and its metadata.

    Raises:
        NormalizationError: If the worklet cannot be lowered.
    """
    name = display_name(fn, key_name)
    own_name = fn.id.name if getattr(fn, "id", None) is not None else None

    normalized = self.pipeline.run(strip_worklet_directive(fn))
    classification = classify(normalized, self.ambient_names, own_name)
    captured = classification.names

    code = self.serialize(normalized, name, captured)
    code_hash = string_hash_64(code)
    location = format_location(self.filename, fn.loc)
    flags = optimization_flags(normalized) if with_flags else None

    runtime = self.runtime_function(fn)
    local = js.Identifier(NormalizationContext(collect_names(fn)).fresh("f"))

    statements: List[js.Node] = [
      js.VariableDeclaration("const", (js.VariableDeclarator(local, runtime),)),
      _assign(local, CLOSURE_FIELD, classification.trie.build()),
      _assign(local, "asString", js.StringLiteral(code)),
      _assign(local, "__workletHash", js.NumericLiteral(str(code_hash))),
      _assign(local, "__location", js.StringLiteral(location)),
    ]
    if flags is not None:
      statements.append(_assign(local, "__optimalization", js.NumericLiteral(str(int(flags)))))
    statements.append(_assign(local, "__worklet", js.BooleanLiteral(True)))
    statements.append(js.ReturnStatement(local))

    wrapper = js.FunctionExpression(None, (), js.BlockStatement(tuple(statements)))
    return BuiltWorklet(
      expression=js.CallExpression(wrapper, ()),
      name=name,
      code=code,
      hash=code_hash,
      location=location,
      classification=classification,
      flags=flags,
    )


def as_declaration(fn: js.FunctionDeclaration, built: BuiltWorklet) -> js.VariableDeclaration:
  """`const <name> = <wrapper>;` for a worklet declared as a statement."""
  return js.VariableDeclaration("const", (js.VariableDeclarator(fn.id, built.expression),))
