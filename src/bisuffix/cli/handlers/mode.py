"""
Mode Command Handler.

Shows which mode the current build configuration selects.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError
from rich.table import Table

from bisuffix.cli.handlers.common import load_build_config, report_error
from bisuffix.config import config_summary
from bisuffix.errors import BisuffixError
from bisuffix.utils.console import console


def handle_mode(features: Dict[str, bool], search_path: Optional[Path] = None) -> int:
  """
  Handles the 'mode' command.

  Args:
      features: Build flag overrides.
      search_path: Directory to start the pyproject.toml search from.

  Returns:
      int: 0 if exactly one mode is selected, the ConfigError exit code otherwise.
  """
  try:
    config = load_build_config(features=features, search_path=search_path)
    mode = config.mode
  except (BisuffixError, ValidationError) as e:
    return report_error(e)

  table = Table(title="Build Configuration")
  table.add_column("Setting", style="cyan")
  table.add_column("Value")
  for key, value in config_summary(config).items():
    table.add_row(key, str(value))
  table.add_row("mode", f"[bold]{mode.value}[/bold]")
  console.print(table)
  return 0
