"""
Tests for the 'expand' command on files and directory trees.
"""

import pytest

from bisuffix.cli.__main__ import main
from bisuffix.cli.handlers.expand import handle_expand

MODULE = 'async def load(bus, addr):\n    return suffix("_async", await bus.read(addr))\n'
BROKEN = "async def load(bus):\n    return suffix(bus, await bus.read())\n"


@pytest.fixture
def project(tmp_path):
  """A source tree with two marker modules and one plain module."""
  src = tmp_path / "src"
  (src / "pkg").mkdir(parents=True)
  (src / "a.py").write_text(MODULE)
  (src / "pkg" / "b.py").write_text(MODULE.replace("read", "write"))
  (src / "pkg" / "plain.py").write_text("x = 1\n")
  return tmp_path


def test_single_file_to_stdout(project, capsys):
  rc = main(["expand", str(project / "src" / "a.py"), "--features", "async"])
  assert rc == 0
  assert capsys.readouterr().out == "async def load(bus, addr):\n    return await bus.read_async(addr)\n"


def test_single_file_to_out(project):
  out = project / "build" / "a.py"
  rc = main(["expand", str(project / "src" / "a.py"), "--out", str(out), "--features", "blocking"])
  assert rc == 0
  assert out.read_text() == "async def load(bus, addr):\n    return await bus.read(addr)\n"


def test_directory_mirrors_layout(project, log_buffer):
  out = project / "build"
  rc = main(["expand", str(project / "src"), "--out", str(out), "--features", "async"])
  assert rc == 0
  assert "read_async(addr)" in (out / "a.py").read_text()
  assert "write_async(addr)" in (out / "pkg" / "b.py").read_text()
  assert (out / "pkg" / "plain.py").read_text() == "x = 1\n"
  assert "3 Passed, 0 Failed" in log_buffer.getvalue()


def test_directory_requires_out(project, log_buffer):
  rc = main(["expand", str(project / "src"), "--features", "async"])
  assert rc == 1
  assert "requires --out" in log_buffer.getvalue()


def test_directory_continues_after_failure(project, log_buffer):
  (project / "src" / "pkg" / "broken.py").write_text(BROKEN)
  out = project / "build"
  rc = main(["expand", str(project / "src"), "--out", str(out), "--features", "async"])
  assert rc == 1
  assert (out / "a.py").exists()
  assert not (out / "pkg" / "broken.py").exists()
  assert "3 Passed, 1 Failed" in log_buffer.getvalue()


def test_empty_directory_warns(tmp_path, log_buffer):
  empty = tmp_path / "empty"
  empty.mkdir()
  rc = main(["expand", str(empty), "--out", str(tmp_path / "out"), "--features", "async"])
  assert rc == 0
  assert "No .py files" in log_buffer.getvalue()


def test_missing_input(tmp_path):
  assert main(["expand", str(tmp_path / "missing.py"), "--features", "async"]) == 1


def test_mode_error_exit_code(project):
  assert main(["expand", str(project / "src" / "a.py")]) == 3


def test_flags_from_project_pyproject(project, capsys):
  (project / "pyproject.toml").write_text('[tool.bisuffix]\nfeatures = ["async"]\n')
  rc = handle_expand(project / "src" / "a.py", None, {})
  assert rc == 0
  assert "read_async" in capsys.readouterr().out


def test_configured_marker(project, capsys):
  (project / "pyproject.toml").write_text('[tool.bisuffix]\nfeatures = ["async"]\nmarker = "bisync"\n')
  path = project / "src" / "c.py"
  path.write_text('async def f(c):\n    return bisync("_nb", await c.go())\n')
  assert handle_expand(path, None, {}) == 0
  assert "return await c.go_nb()" in capsys.readouterr().out


def test_directory_records_undecodable_file(project, log_buffer):
  (project / "src" / "latin1.py").write_bytes(b"# caf\xe9\nx = 1\n")
  out = project / "build"
  rc = main(["expand", str(project / "src"), "--out", str(out), "--features", "async"])
  assert rc == 1
  assert "read_async(addr)" in (out / "a.py").read_text()
  assert not (out / "latin1.py").exists()
  output = log_buffer.getvalue()
  assert "UnicodeDecodeError" in output
  assert "3 Passed, 1 Failed" in output
