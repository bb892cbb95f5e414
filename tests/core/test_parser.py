"""
Tests for the expression and invocation parsers.
"""

import libcst as cst
import pytest

from bisuffix.core.parser import invocation_from_call, parse_expression, parse_invocation
from bisuffix.errors import ParseError


def test_parse_simple_await():
  expr = parse_expression("await conn.read()")
  assert isinstance(expr, cst.Await)
  assert isinstance(expr.expression, cst.Call)


def test_parse_strips_surrounding_whitespace():
  expr = parse_expression("  await conn.read()\n")
  assert isinstance(expr, cst.Await)


def test_parse_empty_input():
  with pytest.raises(ParseError) as excinfo:
    parse_expression("   ")
  assert "empty input" in excinfo.value.message


def test_parse_syntax_error_has_position():
  with pytest.raises(ParseError) as excinfo:
    parse_expression("conn.read(")
  err = excinfo.value
  assert err.line == 1
  assert err.column >= 1
  assert str(err).startswith(f"{err.line}:{err.column}: ")


def test_parse_statement_is_rejected():
  with pytest.raises(ParseError):
    parse_expression("x = await conn.read()")


def test_invocation_bare_form():
  inv = parse_invocation('"_async", await conn.read()')
  assert inv.suffix == "_async"
  assert isinstance(inv.expression, cst.Await)


def test_invocation_marker_form():
  inv = parse_invocation('suffix("_async", await conn.read())')
  assert inv.suffix == "_async"
  assert isinstance(inv.expression, cst.Await)


def test_invocation_custom_marker():
  inv = parse_invocation('bisync("_a", await x.y())', marker="bisync")
  assert inv.suffix == "_a"


def test_invocation_single_quotes_and_raw_prefix():
  assert parse_invocation("'_async', await conn.read()").suffix == "_async"
  assert parse_invocation("r'_async', await conn.read()").suffix == "_async"


def test_invocation_non_literal_suffix_reports_position():
  with pytest.raises(ParseError) as excinfo:
    parse_invocation("suffix(x, await y())")
  err = excinfo.value
  assert "string literal" in err.message
  assert (err.line, err.column) == (1, 8)


def test_invocation_bytes_literal_rejected():
  with pytest.raises(ParseError, match="string literal"):
    parse_invocation('b"_async", await conn.read()')


def test_invocation_fstring_rejected():
  with pytest.raises(ParseError, match="string literal"):
    parse_invocation('f"_async", await conn.read()')


def test_invocation_invalid_suffix():
  with pytest.raises(ParseError, match="cannot continue an identifier"):
    parse_invocation('"-async", await conn.read()')


def test_invocation_empty_suffix():
  with pytest.raises(ParseError, match="must not be empty"):
    parse_invocation('"", await conn.read()')


def test_invocation_wrong_argument_count():
  with pytest.raises(ParseError, match="got 1"):
    parse_invocation('suffix("_async")')
  with pytest.raises(ParseError, match="got 3"):
    parse_invocation('"_a", await x(), await y()')


def test_invocation_keyword_argument_rejected():
  with pytest.raises(ParseError, match="positional arguments only"):
    parse_invocation('suffix("_async", expr=await conn.read())')


def test_invocation_starred_element_rejected():
  with pytest.raises(ParseError, match="positional arguments only"):
    parse_invocation('"_async", *items')


def test_invocation_statement_rejected():
  with pytest.raises(ParseError, match="single expression"):
    parse_invocation('x = suffix("_async", await conn.read())')


def test_invocation_plain_expression_rejected():
  with pytest.raises(ParseError, match="Expected"):
    parse_invocation("await conn.read()")


def test_invocation_parenthesized_tuple_rejected():
  with pytest.raises(ParseError):
    parse_invocation('("_async", await conn.read())')


def test_invocation_from_call_without_positions():
  call = cst.parse_expression('suffix(1, await conn.read())')
  with pytest.raises(ParseError) as excinfo:
    invocation_from_call(call)
  assert (excinfo.value.line, excinfo.value.column) == (1, 1)


def test_parse_error_position_counts_leading_lines():
  with pytest.raises(ParseError) as excinfo:
    parse_expression("\n\n    await conn.read(")
  assert excinfo.value.line == 3


def test_parse_expression_with_leading_lines_still_parses():
  expr = parse_expression("\n\n    await conn.read()\n")
  assert isinstance(expr, cst.Await)


def test_invocation_error_position_counts_leading_lines():
  with pytest.raises(ParseError) as excinfo:
    parse_invocation("\n\nsuffix(1, await x.read())")
  assert (excinfo.value.line, excinfo.value.column) == (3, 8)


def test_invocation_error_position_counts_indentation():
  with pytest.raises(ParseError) as excinfo:
    parse_invocation("  suffix(1, await x.read())")
  assert (excinfo.value.line, excinfo.value.column) == (1, 10)


def test_invocation_error_after_first_line_keeps_column():
  with pytest.raises(ParseError) as excinfo:
    parse_invocation('\n  suffix(\n    1,\n    await x.read(),\n  )')
  assert (excinfo.value.line, excinfo.value.column) == (3, 5)
