"""
Normalization Passes.

One module per lowering. The default order is defined by `DEFAULT_PASSES`.
"""

from workletizer.core.normalizer.passes.arrow_functions import ArrowFunctionPass
from workletizer.core.normalizer.passes.comments import CommentStripPass
from workletizer.core.normalizer.passes.directives import DirectiveStripPass
from workletizer.core.normalizer.passes.nullish import NullishCoalescingPass
from workletizer.core.normalizer.passes.optional_chaining import OptionalChainingPass
from workletizer.core.normalizer.passes.shorthand import ShorthandPropertyPass
from workletizer.core.normalizer.passes.template_literals import TemplateLiteralPass

DEFAULT_PASSES = (
  DirectiveStripPass,
  OptionalChainingPass,
  NullishCoalescingPass,
  TemplateLiteralPass,
  ShorthandPropertyPass,
  ArrowFunctionPass,
  CommentStripPass,
)

__all__ = [
  "DEFAULT_PASSES",
  "ArrowFunctionPass",
  "CommentStripPass",
  "DirectiveStripPass",
  "NullishCoalescingPass",
  "OptionalChainingPass",
  "ShorthandPropertyPass",
  "TemplateLiteralPass",
]
