"""
Main Entry Point for the bisuffix CLI.

This module handles argument parsing and dispatches to the command handlers
re-exported by `bisuffix.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from bisuffix import __version__
from bisuffix.cli import commands
from bisuffix.config import parse_feature_flags
from bisuffix.utils.console import log_error, set_verbose


def _add_features_arg(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument(
    "--features",
    nargs="*",
    default=None,
    help="Build flags, e.g. 'async' or 'blocking=false' (merged over pyproject.toml)",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="bisuffix: async/blocking call-site suffix expander")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Log every await site decision")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: REWRITE ---
  cmd_rw = subparsers.add_parser("rewrite", help="Rewrite a single expression")
  cmd_rw.add_argument("expression", help="Expression source, or '-' to read stdin")
  cmd_rw.add_argument("--suffix", default=None, help="Suffix to append (default: from toml)")
  cmd_rw.add_argument(
    "--invocation",
    action="store_true",
    help='Parse \'"<suffix>", <expr>\' or \'suffix("<suffix>", <expr>)\' instead of a bare expression',
  )
  cmd_rw.add_argument("--verify", action="store_true", default=None, help="Re-parse and compare emitted code")
  cmd_rw.add_argument("--json-trace", type=Path, default=None, help="Dump the execution trace to a JSON file.")
  _add_features_arg(cmd_rw)

  # --- Command: VARIANTS ---
  cmd_var = subparsers.add_parser("variants", help="Show both API variants of an expression")
  cmd_var.add_argument("expression", help="Expression source, or '-' to read stdin")
  cmd_var.add_argument("--suffix", default=None, help="Suffix to append (default: from toml)")

  # --- Command: EXPAND ---
  cmd_exp = subparsers.add_parser("expand", help="Expand marker calls in a Python file or directory")
  cmd_exp.add_argument("path", type=Path, help="Input source file or directory")
  cmd_exp.add_argument("--out", type=Path, help="Output destination (file or dir)")
  cmd_exp.add_argument("--verify", action="store_true", default=None, help="Re-parse and compare every replacement")
  _add_features_arg(cmd_exp)

  # --- Command: MODE ---
  cmd_mode = subparsers.add_parser("mode", help="Show the mode selected by the build flags")
  _add_features_arg(cmd_mode)

  args = parser.parse_args(argv)
  set_verbose(args.verbose)

  features = {}
  if hasattr(args, "features"):
    try:
      features = parse_feature_flags(args.features)
    except ValueError as e:
      log_error(str(e))
      return 2

  if args.command == "rewrite":
    return commands.handle_rewrite(
      args.expression, args.suffix, features, args.invocation, args.verify, args.json_trace
    )

  elif args.command == "variants":
    return commands.handle_variants(args.expression, args.suffix)

  elif args.command == "expand":
    return commands.handle_expand(args.path, args.out, features, args.verify)

  elif args.command == "mode":
    return commands.handle_mode(features)

  return 0


if __name__ == "__main__":
  sys.exit(main())
