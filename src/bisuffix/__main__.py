"""
Entry point for module execution (``python -m bisuffix``).

This module delegates execution to the CLI handler in ``bisuffix.cli.__main__``.
"""

import sys
from bisuffix.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
