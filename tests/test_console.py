"""
Tests for the console proxy and log helpers.
"""

import logging
from io import StringIO

from rich.console import Console

from bisuffix.utils.console import console, log_error, log_success, set_console, set_verbose


def test_print_goes_to_injected_console():
  buf = StringIO()
  set_console(Console(file=buf, width=120, color_system=None))
  console.print("expanded 3 files")
  assert "expanded 3 files" in buf.getvalue()


def test_log_helpers_follow_injected_console(log_buffer):
  log_success("Expanded a.py")
  log_error("Broken b.py")
  output = log_buffer.getvalue()
  assert "Expanded a.py" in output
  assert "Broken b.py" in output


def test_set_verbose_toggles_package_logger():
  set_verbose(True)
  assert logging.getLogger("bisuffix").level == logging.DEBUG
  set_verbose(False)
  assert logging.getLogger("bisuffix").level == logging.NOTSET
