"""
Expand Command Handler.

Implements ``bisuffix expand``: replaces every marker call in a Python file,
or in every ``.py`` file of a directory tree, with its rewritten operand for
the configured mode.
"""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, ValidationError
from rich.markup import escape
from rich.table import Table

from bisuffix.cli.handlers.common import load_build_config, report_error
from bisuffix.config import BuildConfig
from bisuffix.core.expander import expand_module
from bisuffix.enums import Mode
from bisuffix.errors import BisuffixError
from bisuffix.utils.console import console, log_error, log_info, log_success, log_warning


class FileReport(BaseModel):
  """
  Outcome of expanding one file.
  """

  expanded: int = 0
  renamed: int = 0
  error: Optional[str] = None

  @property
  def success(self) -> bool:
    return self.error is None


class BatchReport(BaseModel):
  files: Dict[str, FileReport] = Field(default_factory=dict)

  @property
  def failures(self) -> int:
    return sum(1 for r in self.files.values() if not r.success)


def handle_expand(
  input_path: Path,
  output_path: Optional[Path],
  features: Dict[str, bool],
  verify: Optional[bool] = None,
) -> int:
  """
  Handles the 'expand' command.

  A single file without ``--out`` is printed to stdout. A directory requires
  ``--out`` and mirrors its layout there.

  Args:
      input_path: Source file or directory.
      output_path: Destination file or directory.
      features: Build flag overrides.
      verify: Round-trip check every replacement.

  Returns:
      int: Exit code (0 if every file expanded).
  """
  if not input_path.exists():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = load_build_config(
      features=features,
      verify=verify,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
    mode = config.mode
  except (BisuffixError, ValidationError) as e:
    return report_error(e)

  log_info(f"Expanding [code]{config.marker}(...)[/code] calls for mode [bold]{mode.value}[/bold]")

  if input_path.is_file():
    file_report = _expand_single_file(input_path, output_path, config, mode)
    return 0 if file_report.success else 1

  if not output_path:
    log_error("Directory expansion requires --out destination directory.")
    return 1

  py_files = sorted(input_path.rglob("*.py"))
  if not py_files:
    log_warning(f"No .py files found in {input_path}")
    return 0

  report = BatchReport()
  for src_file in py_files:
    rel_path = src_file.relative_to(input_path)
    report.files[str(rel_path)] = _expand_single_file(src_file, output_path / rel_path, config, mode)

  _print_batch_summary(report)
  return 1 if report.failures else 0


def _expand_single_file(input_path: Path, output_path: Optional[Path], config: BuildConfig, mode: Mode) -> FileReport:
  """
  Expands one file and writes or prints the result.

  Args:
      input_path: Source file path.
      output_path: Destination file path; stdout when None.
      config: Loaded build configuration.
      mode: The resolved mode.

  Returns:
      FileReport: Counts, or the error message on failure.
  """
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      source = f.read()
    result = expand_module(source, mode, marker=config.marker, verify=config.verify_roundtrip)
  except (BisuffixError, UnicodeDecodeError) as e:
    log_error(f"[path]{input_path}[/path]: {type(e).__name__}: {escape(str(e))}")
    return FileReport(error=str(e))

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wt", encoding="utf-8") as f:
      f.write(result.code)
    log_success(f"Expanded: [path]{input_path}[/path] -> [path]{output_path}[/path]")
  else:
    print(result.code, end="")

  return FileReport(expanded=result.expanded, renamed=len(result.renamed))


def _print_batch_summary(report: BatchReport) -> None:
  """
  Renders a summary table of a directory expansion.
  """
  table = Table(title="Expansion Report")
  table.add_column("File", style="cyan")
  table.add_column("Marker Calls", justify="right")
  table.add_column("Renamed", justify="right")
  table.add_column("Status", justify="center")

  for filename, res in report.files.items():
    status = "✅" if res.success else f"❌ {escape(res.error)}"
    table.add_row(filename, str(res.expanded), str(res.renamed), status)

  console.print(table)
  total = len(report.files)
  console.print(f"\n[bold]Summary:[/bold] {total - report.failures} Passed, {report.failures} Failed.")
