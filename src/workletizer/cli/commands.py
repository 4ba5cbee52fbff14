"""
CLI Command Handlers Facade.

Re-exports the handlers from `workletizer.cli.handlers` so the dispatcher and
tests have a single import point.
"""

from workletizer.cli.handlers.inspect import handle_inspect
from workletizer.cli.handlers.transform import (
  collect_sources,
  handle_transform,
  _print_batch_summary,
  _transform_single_file,
)

__all__ = [
  "_print_batch_summary",
  "_transform_single_file",
  "collect_sources",
  "handle_inspect",
  "handle_transform",
]
