"""
Expression Node Helpers.

LibCST nodes are frozen dataclasses, so the parsed tree and any rewritten
tree can coexist. This module adds the small vocabulary the rewriter needs
on top of them: which node kind an expression is, and where the method
identifier of a call lives.
"""

from typing import Optional

import libcst as cst

from bisuffix.enums import NodeKind
from bisuffix.errors import InvalidSuffixError


def callee_name(call: cst.Call) -> Optional[cst.Name]:
  """
  Returns the identifier node naming the invoked method or function.

  ``conn.read()`` yields ``read``, ``fetch()`` yields ``fetch``. Callees that
  do not end in an identifier (``handlers[0]()``, ``make()()``) yield None.

  Args:
      call (cst.Call): The call node.

  Returns:
      Optional[cst.Name]: The identifier, or None.
  """
  func = call.func
  if isinstance(func, cst.Attribute):
    return func.attr
  if isinstance(func, cst.Name):
    return func
  return None


def with_callee_name(call: cst.Call, new_name: str) -> cst.Call:
  """
  Builds a copy of ``call`` whose callee identifier reads ``new_name``.

  Receiver, arguments, parentheses and whitespace are carried over untouched.

  Args:
      call (cst.Call): A call for which `callee_name` is not None.
      new_name (str): The replacement identifier text.

  Returns:
      cst.Call: The new call node.
  """
  func = call.func
  if isinstance(func, cst.Attribute):
    return call.with_changes(func=func.with_changes(attr=func.attr.with_changes(value=new_name)))
  if isinstance(func, cst.Name):
    return call.with_changes(func=func.with_changes(value=new_name))
  raise TypeError(f"Call callee has no identifier: {type(func).__name__}")


def _receiver(node: cst.BaseExpression) -> Optional[cst.BaseExpression]:
  if isinstance(node, cst.Call):
    func = node.func
    return func.value if isinstance(func, cst.Attribute) else None
  if isinstance(node, (cst.Attribute, cst.Subscript)):
    return node.value
  return None


def is_method_chain(node: cst.BaseExpression) -> bool:
  """
  True when the receiver of ``node`` contains a call, e.g. ``a.b().c()``.
  """
  current = _receiver(node)
  while current is not None:
    if isinstance(current, cst.Call):
      return True
    current = _receiver(current)
  return False


def classify(node: cst.CSTNode) -> NodeKind:
  """
  Maps a LibCST node onto the coarse `NodeKind` categories.

  Args:
      node (cst.CSTNode): Any node.

  Returns:
      NodeKind: The category.
  """
  if isinstance(node, cst.Await):
    return NodeKind.AWAIT
  if isinstance(node, (cst.Call, cst.Attribute)) and is_method_chain(node):
    return NodeKind.METHOD_CHAIN
  if isinstance(node, cst.Call):
    return NodeKind.CALL
  if isinstance(node, (cst.Attribute, cst.Subscript)):
    return NodeKind.FIELD_ACCESS
  if isinstance(node, cst.Name):
    return NodeKind.IDENTIFIER
  if isinstance(node, (cst.BaseNumber, cst.BaseString, cst.Ellipsis)):
    return NodeKind.LITERAL
  return NodeKind.OTHER


def is_eligible_call(node: cst.BaseExpression) -> bool:
  """
  True when ``node`` can be renamed as the direct operand of an await.

  Parentheses around the call are stored on the node itself, so
  ``await (conn.read())`` is still eligible.
  """
  return isinstance(node, cst.Call) and callee_name(node) is not None


def validate_suffix(suffix: str) -> str:
  """
  Checks that ``suffix`` can be appended to any identifier.

  Args:
      suffix (str): Candidate suffix, e.g. ``"_async"``.

  Returns:
      str: The suffix, unchanged.

  Raises:
      InvalidSuffixError: If the suffix is empty or contains characters that
          cannot continue an identifier.
  """
  if not isinstance(suffix, str):
    raise InvalidSuffixError(f"Suffix must be a string, got {type(suffix).__name__}")
  if not suffix:
    raise InvalidSuffixError("Suffix must not be empty")
  if not f"a{suffix}".isidentifier():
    raise InvalidSuffixError(f"Suffix {suffix!r} cannot continue an identifier")
  return suffix


_RENDER_CTX = cst.parse_module("")


def node_source(node: cst.CSTNode) -> str:
  """
  Renders a detached node to source text. Errors propagate to the caller.
  """
  return _RENDER_CTX.code_for_node(node)
