"""
Exception hierarchy for the worklet transformer.

1.  **JsSyntaxError**: The JavaScript source could not be parsed.
2.  **UnsupportedSyntaxError**: The source parsed, but uses a construct outside
    the syntax model a worklet may contain (classes, JSX, ...).
3.  **NormalizationError**: A lowering pass rejected the worklet.
4.  **WorkletTransformError**: Raised to callers when one or more worklets of a
    file could not be transformed. Carries the location string(s).
"""

from typing import List, Optional


class WorkletError(Exception):
  """Base class for all transformer failures."""


class JsSyntaxError(WorkletError):
  """Raised when tree-sitter reports an error node inside the converted region."""

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    self.line = line
    self.column = column
    if line is not None:
      message = f"{message} at {line}:{column}"
    super().__init__(message)


class UnsupportedSyntaxError(WorkletError):
  """Raised when a worklet uses syntax the worklet AST cannot represent."""

  def __init__(self, construct: str, line: Optional[int] = None, column: Optional[int] = None):
    self.construct = construct
    self.line = line
    self.column = column
    where = f" at {line}:{column}" if line is not None else ""
    super().__init__(f"Unsupported syntax in worklet: {construct}{where}")


class NormalizationError(WorkletError):
  """Raised by a normalization pass that cannot lower its input."""


class WorkletTransformError(WorkletError):
  """
  Raised when a worklet (or several) failed to transform.

  Attributes:
      location (str): `file (line:column)` of the first failing worklet.
      errors (List[str]): One message per failing worklet.
  """

  def __init__(self, location: str, errors: List[str]):
    self.location = location
    self.errors = errors
    super().__init__("Worklet transformation failed:\n" + "\n".join(errors))
