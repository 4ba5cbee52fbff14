"""
Interface definition for Normalization Passes.

This module defines the abstract base class that all lowering passes must
implement to be compatible with the ``NormalizationPipeline``.
"""

from abc import ABC, abstractmethod

from workletizer.core.js import nodes as js
from workletizer.core.normalizer.context import NormalizationContext


class NormalizationPass(ABC):
  """
  Abstract contract for one lowering step.

  A pass receives the worklet function and returns a new, equivalent function
  without the construct it lowers. It must not mutate its input.
  """

  name: str = "pass"

  @abstractmethod
  def transform(self, fn: js.Node, context: NormalizationContext) -> js.Node:
    """
    Executes the lowering on the given function.

    Args:
        fn: The worklet function node.
        context: Shared state (temporary-name allocation).

    Returns:
        The lowered function node.

    Raises:
        NormalizationError: If the input contains syntax the pass cannot lower.
    """
    pass
