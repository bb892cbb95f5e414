"""
Orchestration Engine for a single expansion.

The pipeline is a straight line:

1.  **Parse**: expression text (or the two-argument invocation form) to a
    LibCST expression tree.
2.  **Resolve Mode**: done once, when the engine is constructed, from an
    explicit `Mode` or the `BuildConfig` flags.
3.  **Rewrite**: `AwaitSuffixRewriter` renames eligible awaited calls.
4.  **Emit**: tree back to source, optionally verified by a re-parse.

Errors propagate as `BisuffixError` subclasses; no partial result is ever
returned.
"""

import logging
from typing import Optional, Union

import libcst as cst

from bisuffix.config import BuildConfig
from bisuffix.core.emitter import emit, verify_roundtrip
from bisuffix.core.nodes import validate_suffix
from bisuffix.core.parser import parse_expression, parse_invocation
from bisuffix.core.result import RewriteResult, VariantExpansion
from bisuffix.core.rewriter import AwaitSuffixRewriter
from bisuffix.core.tracer import TraceLogger
from bisuffix.enums import Mode
from bisuffix.errors import InvalidSuffixError

logger = logging.getLogger(__name__)


class SuffixEngine:
  """
  Runs parse, rewrite and emit for one expression at a time.

  The engine holds only the resolved mode and the defaults it was built
  with; every `run` is independent of the previous one.
  """

  def __init__(
    self,
    config: Optional[BuildConfig] = None,
    mode: Optional[Union[Mode, str]] = None,
    suffix: Optional[str] = None,
  ):
    """
    Initializes the Engine and resolves the mode.

    Args:
        config (BuildConfig, optional): Build configuration. Defaults to an
            empty config, which requires an explicit ``mode``.
        mode (Mode, optional): Explicit mode; takes precedence over the
            config flags.
        suffix (str, optional): Default suffix; takes precedence over
            ``config.suffix``.

    Raises:
        ConfigError: If no explicit mode is given and the config flags
            select none or both.
        InvalidSuffixError: If the default suffix is invalid.
    """
    self.config = config or BuildConfig()
    self.mode = Mode(mode) if mode is not None else self.config.mode

    default_suffix = suffix if suffix is not None else self.config.suffix
    self.suffix = validate_suffix(default_suffix) if default_suffix is not None else None
    self.verify = self.config.verify_roundtrip

  def _require_suffix(self, suffix: Optional[str]) -> str:
    chosen = suffix if suffix is not None else self.suffix
    if chosen is None:
      raise InvalidSuffixError("No suffix given and none configured")
    return validate_suffix(chosen)

  def _transform(self, expr: cst.BaseExpression, mode: Mode, suffix: str, tracer: TraceLogger) -> RewriteResult:
    tracer.start_phase("Rewrite", f"mode={mode.value} suffix={suffix}")
    rewriter = AwaitSuffixRewriter(mode, suffix, tracer=tracer)
    new_expr = expr.visit(rewriter)
    for message in rewriter.diagnostics:
      tracer.log_diagnostic(message)
    tracer.end_phase()

    tracer.start_phase("Emit", "CST -> Source")
    code = verify_roundtrip(new_expr) if self.verify else emit(new_expr)
    tracer.end_phase()

    if rewriter.renamed:
      tracer.log_mutation("Expression", emit(expr), code)

    return RewriteResult(
      code=code,
      mode=mode,
      suffix=suffix,
      renamed=rewriter.renamed,
      diagnostics=rewriter.diagnostics,
      trace_events=tracer.export(),
    )

  def rewrite_node(self, expr: cst.BaseExpression, suffix: Optional[str] = None) -> RewriteResult:
    """
    Rewrites an already parsed expression under the engine's mode.

    Args:
        expr (cst.BaseExpression): Parsed expression.
        suffix (str, optional): Overrides the engine default.

    Returns:
        RewriteResult: Emitted code plus renames and diagnostics.
    """
    return self._transform(expr, self.mode, self._require_suffix(suffix), TraceLogger())

  def run(self, code: str, suffix: Optional[str] = None) -> RewriteResult:
    """
    Expands a bare expression.

    Args:
        code (str): Expression source, e.g. ``await conn.read()``.
        suffix (str, optional): Overrides the engine default.

    Returns:
        RewriteResult: Emitted code plus renames and diagnostics.

    Raises:
        ParseError: Malformed expression.
        InvalidSuffixError: No usable suffix.
        EmitError: Internal serialization failure.
    """
    chosen = self._require_suffix(suffix)
    tracer = TraceLogger()
    tracer.start_phase("Expansion", f"{self.mode.value}")

    tracer.start_phase("Parse", "Source -> CST")
    expr = parse_expression(code)
    tracer.end_phase()

    result = self._transform(expr, self.mode, chosen, tracer)
    tracer.end_phase()
    logger.debug("Expanded %r -> %r", code, result.code)
    return result.model_copy(update={"trace_events": tracer.export()})

  def run_invocation(self, code: str) -> RewriteResult:
    """
    Expands the two-argument form ``"<suffix>", <expr>`` or
    ``<marker>("<suffix>", <expr>)``. The literal suffix wins over the
    engine default.

    Args:
        code (str): Invocation source.

    Returns:
        RewriteResult: Emitted code plus renames and diagnostics.
    """
    tracer = TraceLogger()
    tracer.start_phase("Expansion", f"{self.mode.value}")

    tracer.start_phase("Parse", "Invocation -> CST")
    invocation = parse_invocation(code, marker=self.config.marker)
    tracer.end_phase()

    result = self._transform(invocation.expression, self.mode, invocation.suffix, tracer)
    tracer.end_phase()
    return result.model_copy(update={"trace_events": tracer.export()})


def expand_variants(code: str, suffix: Optional[str] = None, config: Optional[BuildConfig] = None) -> VariantExpansion:
  """
  Produces both API variants of an expression, whatever mode the build
  flags select.

  Args:
      code (str): Expression source.
      suffix (str, optional): Suffix; defaults to ``config.suffix``.
      config (BuildConfig, optional): Supplies the default suffix and the
          round-trip setting. Its feature flags are ignored.

  Returns:
      VariantExpansion: The suffixed and unsuffixed code.
  """
  expr = parse_expression(code)
  suffixed = SuffixEngine(config, mode=Mode.SUFFIXED, suffix=suffix).rewrite_node(expr)
  unsuffixed = SuffixEngine(config, mode=Mode.UNSUFFIXED, suffix=suffix).rewrite_node(expr)
  return VariantExpansion(suffix=suffixed.suffix, suffixed=suffixed.code, unsuffixed=unsuffixed.code)
