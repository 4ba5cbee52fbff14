"""
Enumerations for workletizer.

Routing kinds used by the method-factory builder and the advisory flag bits
attached to style worklets.
"""

from enum import Enum, IntFlag


class RoutingKind(str, Enum):
  """
  How a sibling method referenced from a method worklet is made available
  inside the worklet runtime.
  """

  CALLBACK_REFERENCE = "callback-reference"  # this.name.bind(this)
  RE_MATERIALIZED = "re-materialized"  # this.name(...)


class OptimizationFlag(IntFlag):
  """
  Bit field attached as `__optimalization` to style worklets.

  A consumer may evaluate flagged worklets on a fast path; the flags never
  change what the worklet computes.
  """

  NONE = 0
  FUNCTIONLESS = 1  # No calls besides interpolation helpers
  STATEMENTLESS = 2  # No if/switch statements
