"""
Orchestration logic for executing sequential normalization passes.

This module provides the ``NormalizationPipeline``, which runs the lowering
passes in their fixed order over a shared context.
"""

from typing import List, Optional, Sequence

from workletizer.core.js import nodes as js
from workletizer.core.js.traversal import collect_names
from workletizer.core.normalizer.context import NormalizationContext
from workletizer.core.normalizer.interface import NormalizationPass
from workletizer.core.normalizer.passes import DEFAULT_PASSES


class NormalizationPipeline:
  """
  Manages a sequence of lowering passes and executes them in order.
  """

  def __init__(self, passes: Optional[Sequence[NormalizationPass]] = None) -> None:
    """
    Initializes the pipeline with a list of passes.

    Args:
        passes: Sequenced passes to execute. Defaults to the standard lowering order.
    """
    self.passes: List[NormalizationPass] = list(passes) if passes is not None else [p() for p in DEFAULT_PASSES]

  def run(self, fn: js.Node, context: Optional[NormalizationContext] = None) -> js.Node:
    """
    Executes all registered passes sequentially on the worklet function.

    Args:
        fn: The worklet function (declaration, expression or arrow).
        context: Shared state. A fresh one, seeded with every name in `fn`,
            is created when omitted.

    Returns:
        The fully lowered function.

    Raises:
        NormalizationError: Propagated from the first failing pass.
    """
    ctx = context or NormalizationContext(collect_names(fn))
    current = fn
    for pass_instance in self.passes:
      current = pass_instance.transform(current, ctx)
    return current


def normalize(fn: js.Node) -> js.Node:
  """Runs the default pipeline over a worklet function."""
  return NormalizationPipeline().run(fn)
