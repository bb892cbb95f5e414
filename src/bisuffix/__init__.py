"""
bisuffix Package.

Compiles one piece of call-site code into two API variants. Inside an
``await``, the called method gets a suffix in the async build and keeps its
name in the blocking build:

.. code-block:: python

    import bisuffix

    bisuffix.suffix("await conn.read()", "_async", mode="suffixed")
    # 'await conn.read_async()'

    bisuffix.suffix("await conn.read()", "_async", mode="unsuffixed")
    # 'await conn.read()'

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from bisuffix import BuildConfig, SuffixEngine

    config = BuildConfig(features=["async"], suffix="_async")
    engine = SuffixEngine(config=config)
    res = engine.run_invocation('suffix("_async", await a + await b.open())')
    print(res.code)          # await a + await b.open_async()
    print(res.diagnostics)   # ["Skipped 'a': awaited identifier is not a named call"]
"""

from typing import Union

from bisuffix.config import BuildConfig
from bisuffix.core.emitter import emit
from bisuffix.core.engine import SuffixEngine, expand_variants
from bisuffix.core.expander import expand_module
from bisuffix.core.mode import resolve_mode
from bisuffix.core.parser import parse_expression, parse_invocation
from bisuffix.core.result import RewriteResult, VariantExpansion
from bisuffix.core.rewriter import rewrite
from bisuffix.enums import Mode
from bisuffix.errors import (
  BisuffixError,
  ConfigError,
  ConflictingModesError,
  EmitError,
  InvalidSuffixError,
  NoModeSelectedError,
  ParseError,
)

__version__ = "0.1.0"


def suffix(code: str, suffix: str, mode: Union[Mode, str]) -> str:
  """
  Rewrites a single expression string.

  Convenience wrapper around `SuffixEngine` for callers that already know
  the mode. For mode selection from build flags use `BuildConfig` and
  `SuffixEngine` directly.

  Args:
      code (str): Expression source containing ``await`` sites.
      suffix (str): Text appended to awaited call identifiers.
      mode (Mode): ``"suffixed"`` or ``"unsuffixed"``.

  Returns:
      str: The rewritten expression source.

  Raises:
      ParseError: If ``code`` is not a valid expression.
      InvalidSuffixError: If ``suffix`` cannot continue an identifier.
  """
  engine = SuffixEngine(mode=mode, suffix=suffix)
  return engine.run(code).code


__all__ = [
  "BisuffixError",
  "BuildConfig",
  "ConfigError",
  "ConflictingModesError",
  "EmitError",
  "InvalidSuffixError",
  "Mode",
  "NoModeSelectedError",
  "ParseError",
  "RewriteResult",
  "SuffixEngine",
  "VariantExpansion",
  "__version__",
  "emit",
  "expand_module",
  "expand_variants",
  "parse_expression",
  "parse_invocation",
  "resolve_mode",
  "rewrite",
  "suffix",
]
