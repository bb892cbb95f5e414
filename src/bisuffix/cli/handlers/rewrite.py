"""
Rewrite and Variants Command Handlers.

``bisuffix rewrite`` expands one expression under the configured mode.
``bisuffix variants`` prints both API variants side by side.
"""

import sys
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from bisuffix.cli.handlers.common import load_build_config, report_error, write_trace
from bisuffix.core.engine import SuffixEngine, expand_variants
from bisuffix.errors import BisuffixError
from bisuffix.utils.console import console, log_info


def _read_source(expression: str) -> str:
  if expression == "-":
    return sys.stdin.read()
  return expression


def handle_rewrite(
  expression: str,
  suffix: Optional[str],
  features: Dict[str, bool],
  invocation: bool = False,
  verify: Optional[bool] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'rewrite' command.

  Args:
      expression: Expression text, or '-' to read standard input.
      suffix: Suffix override; otherwise taken from pyproject.toml.
      features: Build flag overrides, e.g. {'async': True}.
      invocation: Parse ``"<suffix>", <expr>`` instead of a bare expression.
      verify: Round-trip check the emitted code.
      json_trace_path: Optional path to dump the execution trace.

  Returns:
      int: Exit code (0 for success).
  """
  code = _read_source(expression)

  try:
    config = load_build_config(features=features, suffix=suffix, verify=verify)
    engine = SuffixEngine(config=config)
    result = engine.run_invocation(code) if invocation else engine.run(code)
  except (BisuffixError, ValidationError) as e:
    return report_error(e)

  if json_trace_path:
    write_trace(json_trace_path, result.trace_events)

  for note in result.diagnostics:
    log_info(escape(note))

  print(result.code)
  return 0


def handle_variants(expression: str, suffix: Optional[str]) -> int:
  """
  Handles the 'variants' command. The build flags are not consulted.

  Args:
      expression: Expression text, or '-' to read standard input.
      suffix: Suffix override; otherwise taken from pyproject.toml.

  Returns:
      int: Exit code (0 for success).
  """
  code = _read_source(expression)

  try:
    config = load_build_config(suffix=suffix)
    pair = expand_variants(code, config=config)
  except (BisuffixError, ValidationError) as e:
    return report_error(e)

  table = Table(title=f"Variants (suffix [code]{pair.suffix}[/code])")
  table.add_column("Mode", style="cyan")
  table.add_column("Expression")
  table.add_row("suffixed", escape(pair.suffixed))
  table.add_row("unsuffixed", escape(pair.unsuffixed))
  console.print(table)
  return 0
