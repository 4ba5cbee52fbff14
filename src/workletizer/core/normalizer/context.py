"""
Normalization Context Module.

Holds the state shared by all passes of one pipeline run. Currently this is the
temporary-name allocator: temporaries introduced by one pass (`_ref`, `_this`)
must not collide with user names or with temporaries of an earlier pass.
"""

from typing import Iterable, Set


class NormalizationContext:
  """
  Shared state container for a normalization run.

  Attributes:
      used_names (Set[str]): Every identifier spelling already present.
  """

  def __init__(self, used_names: Iterable[str] = ()):
    self.used_names: Set[str] = set(used_names)

  def fresh(self, base: str) -> str:
    """
    Allocates an unused temporary name.

    Names follow the `_base`, `_base2`, `_base3` sequence.

    Args:
        base (str): Hint such as "ref" or "this".

    Returns:
        str: A name not used anywhere in the worklet.
    """
    stem = "_" + base.lstrip("_")
    candidate = stem
    counter = 1
    while candidate in self.used_names:
      counter += 1
      candidate = f"{stem}{counter}"
    self.used_names.add(candidate)
    return candidate
