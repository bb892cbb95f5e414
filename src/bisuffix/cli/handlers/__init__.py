from .expand import handle_expand
from .mode import handle_mode
from .rewrite import handle_rewrite, handle_variants

__all__ = [
  "handle_expand",
  "handle_mode",
  "handle_rewrite",
  "handle_variants",
]
