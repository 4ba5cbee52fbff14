"""
Data structures representing the output of the transformation pipeline.

This module defines the `TransformResult` Pydantic model, which encapsulates the
rewritten code, the per-worklet failures and a record of every worklet built.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class WorkletRecord(BaseModel):
  """
  Metadata of one transformed worklet.
  """

  name: str = Field(description="Display name used in the serialized form ('_f' if anonymous).")
  kind: str = Field("worklet", description="'worklet' for the general case, 'method-factory' for object methods.")
  location: str = Field(description="'<file> (<line>:<column>)' of the original function.")
  hash: Optional[int] = Field(None, description="Content hash of the serialized form.")
  code: Optional[str] = Field(None, description="The serialized (compact) worklet source.")
  captured: List[str] = Field(default_factory=list, description="Captured names in first-use order.")
  outputs: List[str] = Field(default_factory=list, description="Names written through '.value'.")
  optimization_flags: Optional[int] = Field(None, description="Flag bit field for style worklets.")
  routes: List[str] = Field(default_factory=list, description="'name:kind' routing entries of a method factory.")


class TransformResult(BaseModel):
  """
  Container for the results of transforming one file.
  """

  code: str = Field(default="", description="The rewritten source code.")
  errors: List[str] = Field(default_factory=list, description="One message per worklet that failed.")
  success: bool = Field(default=True, description="True if every worklet transformed.")
  worklets: List[WorkletRecord] = Field(default_factory=list, description="Every worklet built, in source order.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0
