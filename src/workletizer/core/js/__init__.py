"""
JavaScript Syntax Package.

Immutable ESTree-style nodes, the tree-sitter front-end that produces them,
traversal helpers and the source emitter.
"""

from workletizer.core.js.emitter import JsEmitter, to_source
from workletizer.core.js.parser import JsParser, parse_expression, parse_program

__all__ = ["JsEmitter", "JsParser", "parse_expression", "parse_program", "to_source"]
