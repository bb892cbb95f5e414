"""
Tests for the public package API.
"""

import pytest

import bisuffix
from bisuffix import BuildConfig, Mode, ParseError, SuffixEngine


def test_suffix_helper_both_modes():
  assert bisuffix.suffix("await conn.read()", "_async", mode="suffixed") == "await conn.read_async()"
  assert bisuffix.suffix("await conn.read()", "_async", mode=Mode.UNSUFFIXED) == "await conn.read()"


def test_suffix_helper_parse_error():
  with pytest.raises(ParseError):
    bisuffix.suffix("await (", "_async", mode="suffixed")


def test_documented_engine_example():
  config = BuildConfig(features=["async"], suffix="_async")
  res = SuffixEngine(config=config).run_invocation('suffix("_async", await a + await b.open())')
  assert res.code == "await a + await b.open_async()"
  assert res.diagnostics == ["Skipped 'a': awaited identifier is not a named call"]


def test_exports():
  for name in bisuffix.__all__:
    assert hasattr(bisuffix, name)


def test_error_exit_codes():
  assert bisuffix.BisuffixError.exit_code == 1
  assert bisuffix.ParseError.exit_code == 2
  assert bisuffix.InvalidSuffixError.exit_code == 2
  assert bisuffix.ConfigError.exit_code == 3
  assert bisuffix.EmitError.exit_code == 4
