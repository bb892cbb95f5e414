"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console capture so Rich log output does not mix with printed results.
- A working directory without a pyproject.toml for CLI tests.
"""

import sys
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'bisuffix' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from bisuffix.utils.console import reset_console, set_console, set_verbose  # noqa: E402


@pytest.fixture(autouse=True)
def log_buffer():
  """
  Routes console and log output into an in-memory buffer for every test.
  Yields the buffer so tests can assert on logged messages.
  """
  buf = StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False, color_system=None))
  yield buf
  reset_console()
  set_verbose(False)


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
  """Runs the test from an empty directory so no pyproject.toml is picked up."""
  work = tmp_path / "work"
  work.mkdir()
  monkeypatch.chdir(work)
  return work
