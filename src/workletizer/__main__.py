"""
Entry point for module execution (``python -m workletizer``).

This module delegates execution to the CLI handler in ``workletizer.cli.__main__``.
"""

import sys
from workletizer.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
