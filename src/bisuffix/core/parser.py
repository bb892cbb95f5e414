"""
Expression Parser.

A thin adapter over the LibCST parser. It turns expression source text into
a LibCST expression tree and converts LibCST syntax errors into `ParseError`
with a source position.

It also parses the two-argument invocation surface, either as a bare
argument list::

    "_async", await conn.read()

or as a full marker call::

    suffix("_async", await conn.read())
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

import libcst as cst
from libcst.metadata import CodeRange, MetadataWrapper, PositionProvider

from bisuffix.core.nodes import validate_suffix
from bisuffix.errors import InvalidSuffixError, ParseError

DEFAULT_MARKER = "suffix"


@dataclass(frozen=True)
class SuffixInvocation:
  """
  The validated arguments of one marker invocation.

  Attributes:
      suffix (str): The literal suffix text, e.g. ``"_async"``.
      expression (cst.BaseExpression): The expression to rewrite.
  """

  suffix: str
  expression: cst.BaseExpression


def syntax_error_to_parse_error(err: cst.ParserSyntaxError) -> ParseError:
  return ParseError(err.message, err.editor_line, err.editor_column)


def _strip_source(code: str) -> Tuple[str, int, int]:
  """
  Strips surrounding whitespace and returns the line and column offsets of
  the first remaining character in ``code``.
  """
  text = code.strip()
  lead = code[: len(code) - len(code.lstrip())]
  return text, lead.count("\n"), len(lead) - (lead.rfind("\n") + 1)


def _shift_error(err: ParseError, line_offset: int, column_offset: int) -> ParseError:
  """Maps a position in stripped text back onto the caller's input."""
  if not line_offset and not column_offset:
    return err
  column = err.column + column_offset if err.line == 1 else err.column
  return ParseError(err.message, err.line + line_offset, column)


def parse_expression(code: str) -> cst.BaseExpression:
  """
  Parses a single Python expression.

  Args:
      code (str): Expression source. Leading and trailing whitespace is ignored.

  Returns:
      cst.BaseExpression: The parsed tree.

  Raises:
      ParseError: If the text is empty or not a valid expression. The
          position refers to ``code`` as given, leading whitespace included.
  """
  text, line_offset, column_offset = _strip_source(code)
  if not text:
    raise ParseError("Expected an expression, got empty input")
  try:
    return cst.parse_expression(text)
  except cst.ParserSyntaxError as e:
    raise _shift_error(syntax_error_to_parse_error(e), line_offset, column_offset) from e


def _position(positions: Optional[Mapping[cst.CSTNode, CodeRange]], node: cst.CSTNode) -> Tuple[int, int]:
  if positions is None or node not in positions:
    return 1, 1
  start = positions[node].start
  return start.line, start.column + 1


def _invocation_from_args(
  args: Sequence[Tuple[cst.CSTNode, cst.BaseExpression]],
  anchor: cst.CSTNode,
  positions: Optional[Mapping[cst.CSTNode, CodeRange]],
  marker: str,
) -> SuffixInvocation:
  if len(args) != 2:
    line, col = _position(positions, anchor)
    raise ParseError(f"{marker}() takes exactly 2 arguments (suffix, expression), got {len(args)}", line, col)

  (lit_holder, literal), (_, expression) = args

  if not isinstance(literal, cst.SimpleString) or "b" in literal.prefix.lower():
    line, col = _position(positions, lit_holder)
    raise ParseError(f"{marker}() expects a string literal as its first argument", line, col)

  try:
    suffix = validate_suffix(literal.evaluated_value)
  except InvalidSuffixError as e:
    line, col = _position(positions, lit_holder)
    raise ParseError(str(e), line, col) from e

  return SuffixInvocation(suffix=suffix, expression=expression)


def invocation_from_call(
  call: cst.Call,
  marker: str = DEFAULT_MARKER,
  positions: Optional[Mapping[cst.CSTNode, CodeRange]] = None,
) -> SuffixInvocation:
  """
  Validates an already parsed marker call.

  Args:
      call (cst.Call): The ``suffix(...)`` call node.
      marker (str): Marker name, used in messages.
      positions (Mapping, optional): PositionProvider metadata for error locations.

  Returns:
      SuffixInvocation: The suffix and expression.

  Raises:
      ParseError: On keyword or starred arguments, a wrong argument count,
          a non-literal suffix or an invalid suffix.
  """
  for arg in call.args:
    if arg.keyword is not None or arg.star:
      line, col = _position(positions, arg)
      raise ParseError(f"{marker}() accepts positional arguments only", line, col)
  return _invocation_from_args([(a, a.value) for a in call.args], call, positions, marker)


def _is_marker_call(node: cst.BaseExpression, marker: str) -> bool:
  return isinstance(node, cst.Call) and isinstance(node.func, cst.Name) and node.func.value == marker


def parse_invocation(code: str, marker: str = DEFAULT_MARKER) -> SuffixInvocation:
  """
  Parses the two-argument invocation surface.

  Args:
      code (str): Either ``"<suffix>", <expr>`` or ``<marker>("<suffix>", <expr>)``.
      marker (str): Name of the marker function for the second form.

  Returns:
      SuffixInvocation: The suffix and expression.

  Raises:
      ParseError: If the text is malformed. The position refers to ``code``
          as given, leading whitespace included.
  """
  text, line_offset, column_offset = _strip_source(code)
  if not text:
    raise ParseError("Expected an invocation, got empty input")

  try:
    return _parse_stripped_invocation(text, marker)
  except ParseError as e:
    shifted = _shift_error(e, line_offset, column_offset)
    if shifted is e:
      raise
    raise shifted from e


def _parse_stripped_invocation(text: str, marker: str) -> SuffixInvocation:
  try:
    module = cst.parse_module(text)
  except cst.ParserSyntaxError as e:
    raise syntax_error_to_parse_error(e) from e

  wrapper = MetadataWrapper(module)
  positions = wrapper.resolve(PositionProvider)
  body = wrapper.module.body

  if (
    len(body) != 1
    or not isinstance(body[0], cst.SimpleStatementLine)
    or len(body[0].body) != 1
    or not isinstance(body[0].body[0], cst.Expr)
  ):
    raise ParseError("Expected a single expression invocation")

  root = body[0].body[0].value

  if _is_marker_call(root, marker):
    return invocation_from_call(root, marker, positions)

  if isinstance(root, cst.Tuple) and not root.lpar:
    for el in root.elements:
      if isinstance(el, cst.StarredElement):
        line, col = _position(positions, el)
        raise ParseError(f"{marker}() accepts positional arguments only", line, col)
    return _invocation_from_args([(el, el.value) for el in root.elements], root, positions, marker)

  raise ParseError(f'Expected \'"<suffix>", <expression>\' or \'{marker}("<suffix>", <expression>)\'')
