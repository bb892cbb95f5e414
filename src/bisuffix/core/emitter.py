"""
Expression Emitter.

Serializes a (possibly rewritten) LibCST expression back into source text.
LibCST is lossless, so parsed nodes keep their original formatting and
constructed nodes use LibCST defaults.

A failure here means the rewriter produced a tree it should not have; it is
reported as `EmitError` naming the offending node type.
"""

import libcst as cst

from bisuffix.core.nodes import node_source
from bisuffix.core.parser import parse_expression
from bisuffix.errors import EmitError, ParseError


def emit(node: cst.CSTNode) -> str:
  """
  Renders an expression tree to source.

  Args:
      node (cst.CSTNode): The expression to serialize.

  Returns:
      str: Python expression source.

  Raises:
      EmitError: If ``node`` is not an expression or cannot be rendered.
  """
  if not isinstance(node, cst.BaseExpression):
    raise EmitError(type(node).__name__, "not an expression node")
  try:
    return node_source(node)
  except Exception as e:
    raise EmitError(type(node).__name__, str(e)) from e


def verify_roundtrip(node: cst.BaseExpression) -> str:
  """
  Emits ``node`` and checks that re-parsing yields the same tree.

  Args:
      node (cst.BaseExpression): The expression to serialize.

  Returns:
      str: The emitted source.

  Raises:
      EmitError: If the emitted text does not parse, or parses to a
          different tree.
  """
  code = emit(node)
  try:
    reparsed = parse_expression(code)
  except ParseError as e:
    raise EmitError(type(node).__name__, f"emitted code does not parse: {e}") from e

  if not reparsed.deep_equals(node):
    raise EmitError(type(node).__name__, f"emitted code does not round-trip: {code!r}")
  return code
