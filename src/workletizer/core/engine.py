"""
Core Transformation Engine.

The `WorkletEngine` drives one source file through the transformer:

1.  **Parse**: The whole file is parsed once with tree-sitter. Code outside
    worklets is never converted, so syntax the worklet AST cannot express
    (classes, JSX, modules) is fine anywhere else.
2.  **Locate**: A depth-first walk finds the outermost marked functions. A
    worklet nested in another one is handled together with its parent.
3.  **Transform**: Each site is converted, transformed and rendered in pretty
    mode, indented to match the line it starts on.
4.  **Splice**: Rendered text replaces the site's byte range. Everything else
    is preserved byte for byte.

A failing worklet is reported and keeps its original text; the remaining
worklets of the file are still transformed.
"""

from dataclasses import dataclass
from typing import List, Optional

import tree_sitter as ts
from rich.markup import escape

from workletizer.config import RuntimeConfig
from workletizer.core.conversion_result import TransformResult, WorkletRecord
from workletizer.core.errors import WorkletError
from workletizer.core.js.emitter import JsEmitter
from workletizer.core.js.parser import JsParser, parse_tree, unescape_js
from workletizer.core.normalizer.pipeline import NormalizationPipeline
from workletizer.core.transformer import WorkletTransformer
from workletizer.core.worklet.builder import format_location
from workletizer.semantics.ambient import STYLE_FACTORY_CALLEES, WORKLET_DIRECTIVE
from workletizer.utils.console import log_debug, log_warning

_FUNCTION_TYPES = {
  "function_declaration",
  "generator_function_declaration",
  "function_expression",
  "function",
  "generator_function",
  "arrow_function",
}

_DECLARATION_TYPES = {"function_declaration", "generator_function_declaration"}

# Tokens that continue an expression across a line break.
_CONTINUATION_STARTS = (b"(", b"[", b"`", b"+", b"-", b"/")


@dataclass
class _Site:
  """One outermost worklet found in the file."""

  node: ts.Node
  is_property: bool = False
  with_flags: bool = False
  as_expression: bool = False


class WorkletEngine:
  """
  Transforms every worklet of a source file.

  Args:
      config: Runtime configuration (ambient names, location root).
      pipeline: Normalization pipeline; the standard passes when omitted.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None, pipeline: Optional[NormalizationPipeline] = None):
    self.config = config or RuntimeConfig()
    self.ambient_names = self.config.ambient_names
    self.pipeline = pipeline or NormalizationPipeline()

  def run(self, code: str, filename: str = "unknown.js") -> TransformResult:
    """
    Transforms one file.

    Args:
        code: The JavaScript source.
        filename: Path of the file; made relative to the configured root
            for location strings.

    Returns:
        TransformResult: Rewritten code, per-worklet errors and records.
    """
    display = self.config.relative_filename(filename)
    source = code.encode("utf-8")
    tree = parse_tree(source)
    parser = JsParser(source)

    replacements = []
    errors: List[str] = []
    records: List[WorkletRecord] = []

    for site in self.find_sites(tree.root_node, parser):
      transformer = WorkletTransformer(self.ambient_names, display, pipeline=self.pipeline)
      try:
        text = self._render_site(site, parser, transformer, source)
      except WorkletError as e:
        location = format_location(display, parser.location(site.node))
        message = f"{location}: {e}"
        errors.append(message)
        log_warning(f"Skipped worklet: {escape(message)}")
        continue
      replacements.append((site.node.start_byte, site.node.end_byte, text.encode("utf-8")))
      for record in transformer.records:
        log_debug(f"Transformed {record.kind} '{escape(record.name)}' at {escape(record.location)}")
      records.extend(transformer.records)

    output = source
    for start, end, text in sorted(replacements, reverse=True):
      output = output[:start] + text + output[end:]

    return TransformResult(
      code=output.decode("utf-8"),
      errors=errors,
      success=not errors,
      worklets=records,
    )

  # --- Locating ---

  def find_sites(self, root: ts.Node, parser: JsParser) -> List[_Site]:
    """
    Finds the outermost marked functions and object properties, in source order.

    Class methods are not worklet sites; their bodies are still searched.
    """
    sites: List[_Site] = []
    stack = [root]
    while stack:
      node = stack.pop()
      site = self._site(node, parser)
      if site is not None:
        sites.append(site)
        continue
      stack.extend(reversed(node.children))
    return sites

  def _site(self, node: ts.Node, parser: JsParser) -> Optional[_Site]:
    parent = node.parent
    if node.type == "pair" and parent is not None and parent.type == "object":
      value = node.child_by_field_name("value")
      if value is not None and value.type in _FUNCTION_TYPES and is_marked(value, parser):
        return _Site(node, is_property=True)
      return None
    if node.type == "method_definition":
      if parent is not None and parent.type == "object" and is_marked(node, parser):
        return _Site(node, is_property=True)
      return None
    if node.type in _FUNCTION_TYPES and is_marked(node, parser):
      return _Site(
        node,
        with_flags=_is_style_argument(node, parser),
        as_expression=node.type in _DECLARATION_TYPES and _is_default_export(parent),
      )
    return None

  # --- Rendering ---

  def _render_site(self, site: _Site, parser: JsParser, transformer: WorkletTransformer, source: bytes) -> str:
    emitter = JsEmitter(base_indent=_line_indent(source, site.node.start_byte))
    if site.is_property:
      prop = parser.convert_property(site.node)
      properties = transformer.transform_property(prop)
      return (",\n" + emitter.base_indent).join(emitter.emit(p) for p in properties)

    fn = parser.convert_function(site.node)
    result = transformer.transform_worklet(fn, with_flags=site.with_flags, as_expression=site.as_expression)
    text = emitter.emit(result)
    if site.as_expression:
      text += ";"
    elif site.node.type == "arrow_function" and _next_token(source, site.node.end_byte).startswith(_CONTINUATION_STARTS):
      # An arrow ends its statement here, the call replacing it would not.
      text += ";"
    return text


def is_marked(node: ts.Node, parser: JsParser) -> bool:
  """
  Checks the directive prologue of a tree-sitter function node for the
  worklet marker.
  """
  body = node.child_by_field_name("body")
  if body is None or body.type != "statement_block":
    return False
  for child in body.named_children:
    if child.type == "comment":
      continue
    if child.type != "expression_statement":
      return False
    inner = [c for c in child.named_children if c.type != "comment"]
    if len(inner) != 1 or inner[0].type != "string":
      return False
    if unescape_js(parser.text(inner[0])[1:-1]) == WORKLET_DIRECTIVE:
      return True
  return False


def _is_style_argument(node: ts.Node, parser: JsParser) -> bool:
  args = node.parent
  if args is None or args.type != "arguments":
    return False
  call = args.parent
  if call is None or call.type != "call_expression":
    return False
  callee = call.child_by_field_name("function")
  return callee is not None and callee.type == "identifier" and parser.text(callee) in STYLE_FACTORY_CALLEES


def _is_default_export(parent: Optional[ts.Node]) -> bool:
  if parent is None or parent.type != "export_statement":
    return False
  return any(not c.is_named and c.type == "default" for c in parent.children)


def _next_token(source: bytes, offset: int) -> bytes:
  """Source from the first character after `offset` that is not blank or a comment."""
  while offset < len(source):
    if source[offset : offset + 1].isspace():
      offset += 1
    elif source.startswith(b"//", offset):
      end = source.find(b"\n", offset)
      offset = len(source) if end == -1 else end
    elif source.startswith(b"/*", offset):
      end = source.find(b"*/", offset + 2)
      offset = len(source) if end == -1 else end + 2
    else:
      break
  return source[offset:]


def _line_indent(source: bytes, offset: int) -> str:
  """Leading whitespace of the line containing `offset`."""
  start = source.rfind(b"\n", 0, offset) + 1
  end = start
  while end < len(source) and source[end : end + 1] in (b" ", b"\t"):
    end += 1
  return source[start:end].decode("utf-8")
