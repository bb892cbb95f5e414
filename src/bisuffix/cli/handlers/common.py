"""
Shared helpers for CLI handlers: config loading and error reporting.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.markup import escape

from bisuffix.config import BuildConfig
from bisuffix.errors import BisuffixError
from bisuffix.utils.console import log_error, log_info

# Exit code for configuration values rejected by pydantic validation.
INVALID_CONFIG_EXIT = 2


def load_build_config(
  features: Optional[Dict[str, bool]] = None,
  suffix: Optional[str] = None,
  verify: Optional[bool] = None,
  search_path: Optional[Path] = None,
) -> BuildConfig:
  """
  Loads pyproject.toml settings with CLI overrides.

  Raises:
      pydantic.ValidationError: If a value (e.g. the suffix) is invalid.
  """
  return BuildConfig.load(
    features=features,
    suffix=suffix,
    verify_roundtrip=verify,
    search_path=search_path,
  )


def report_error(err: Exception) -> int:
  """
  Logs a failure and returns the matching exit code.

  Args:
      err: A `BisuffixError` or a pydantic `ValidationError`.

  Returns:
      int: Process exit code.
  """
  if isinstance(err, BisuffixError):
    log_error(f"{type(err).__name__}: {escape(str(err))}")
    return err.exit_code
  if isinstance(err, ValidationError):
    for issue in err.errors():
      loc = ".".join(str(p) for p in issue["loc"])
      log_error(f"Invalid configuration '{loc}': {escape(issue['msg'])}")
    return INVALID_CONFIG_EXIT
  raise err


def write_trace(path: Path, events: List[Dict[str, Any]]) -> None:
  """
  Dumps trace events as JSON, creating parent directories.
  """
  path.parent.mkdir(parents=True, exist_ok=True)
  with open(path, "wt", encoding="utf-8") as f:
    json.dump(events, f, indent=2)
  log_info(f"Trace saved to [path]{path}[/path]")
