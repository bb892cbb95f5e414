"""
CLI Command Handlers Facade.

Re-exports handlers from `bisuffix.cli.handlers` so the dispatcher and tests
have one import location.
"""

from bisuffix.cli.handlers.expand import handle_expand
from bisuffix.cli.handlers.mode import handle_mode
from bisuffix.cli.handlers.rewrite import handle_rewrite, handle_variants

__all__ = [
  "handle_expand",
  "handle_mode",
  "handle_rewrite",
  "handle_variants",
]
