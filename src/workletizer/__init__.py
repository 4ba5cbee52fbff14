"""
workletizer Package.

A source-to-source transformer for JavaScript worklets: functions marked with a
`'worklet'` directive are rewritten so they can be shipped to, and executed in,
a separate JavaScript runtime. Each worklet is wrapped with its captured
closure, its serialized source, a content hash and its source location.

Usage
-----

Simple String Transformation
^^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import workletizer
    code = "const f = () => { 'worklet'; return shared.value; };"
    print(workletizer.transform(code, filename="App.js"))

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from workletizer import RuntimeConfig, WorkletEngine

    engine = WorkletEngine(RuntimeConfig(globals=["myHelper"]))
    res = engine.run(code, filename="App.js")

    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import List, Optional

from workletizer.config import RuntimeConfig
from workletizer.core.conversion_result import TransformResult, WorkletRecord
from workletizer.core.engine import WorkletEngine
from workletizer.core.errors import WorkletTransformError

__version__ = "0.1.0"


def transform(code: str, filename: str = "unknown.js", globals: Optional[List[str]] = None) -> str:
  """
  Transforms every worklet of a JavaScript source string.

  This is a convenience wrapper around `WorkletEngine`. For batch processing
  use the CLI or the engine directly.

  Args:
      code (str): The JavaScript source.
      filename (str): File name used in location strings.
      globals (List[str], optional): Extra ambient names that are never captured.

  Returns:
      str: The rewritten source.

  Raises:
      WorkletTransformError: If one or more worklets could not be transformed.
  """
  config = RuntimeConfig(globals=globals or [])
  result = WorkletEngine(config).run(code, filename)
  if not result.success:
    location = result.errors[0].split(": ", 1)[0]
    raise WorkletTransformError(location, result.errors)
  return result.code


__all__ = [
  "RuntimeConfig",
  "TransformResult",
  "WorkletEngine",
  "WorkletRecord",
  "WorkletTransformError",
  "transform",
  "__version__",
]
