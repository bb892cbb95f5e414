"""
Module Expander.

Build-time surface for whole Python modules. Every marker call::

    data = suffix("_async", await self.bus.read(addr))

is replaced by its rewritten operand::

    data = await self.bus.read_async(addr)       # Mode.SUFFIXED
    data = await self.bus.read(addr)             # Mode.UNSUFFIXED

Everything outside marker calls is preserved byte for byte. Marker calls are
expanded outermost-first: the outer rewrite treats nested marker calls as
opaque, then each nested call is expanded with its own suffix.

The replacement is parenthesized where precedence around the former call
site would otherwise change (``x * suffix("_a", a + b)`` becomes
``x * (a + b)``). A marker call that fills a whole statement value, call
argument or container element is replaced without parentheses.
"""

import logging
from typing import List, Optional, Set, Union

import libcst as cst
from libcst.metadata import PositionProvider

from bisuffix.core.emitter import emit, verify_roundtrip
from bisuffix.core.parser import DEFAULT_MARKER, invocation_from_call, syntax_error_to_parse_error
from bisuffix.core.result import ExpansionResult, RenamedCall
from bisuffix.core.rewriter import AwaitSuffixRewriter
from bisuffix.enums import Mode

logger = logging.getLogger(__name__)

_ATOMS = (
  cst.Name,
  cst.Attribute,
  cst.Call,
  cst.Subscript,
  cst.BaseNumber,
  cst.SimpleString,
  cst.Ellipsis,
  cst.List,
  cst.Dict,
  cst.Set,
)


def _is_marker(node: cst.Call, marker: str) -> bool:
  return isinstance(node.func, cst.Name) and node.func.value == marker


class _MarkerValidator(cst.CSTVisitor):
  """
  Checks every marker call against the invocation rules before anything is
  rewritten, so errors carry the position in the original module.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(self, marker: str):
    super().__init__()
    self.marker = marker
    self.count = 0

  def visit_Call(self, node: cst.Call) -> Optional[bool]:
    if _is_marker(node, self.marker):
      invocation_from_call(node, self.marker, self.metadata[PositionProvider])
      self.count += 1
    return True


class MarkerExpander(cst.CSTTransformer):
  """
  Replaces marker calls with their rewritten operand.

  Call sites must have passed `_MarkerValidator`; this transformer does not
  re-report positions.

  Attributes:
      renamed (List[RenamedCall]): All renames, across all marker calls.
      diagnostics (List[str]): All skipped await sites.
      expanded (int): Number of marker calls replaced.
  """

  def __init__(self, mode: Union[Mode, str], marker: str = DEFAULT_MARKER, verify: bool = False):
    super().__init__()
    self.mode = Mode(mode)
    self.marker = marker
    self.verify = verify
    self.renamed: List[RenamedCall] = []
    self.diagnostics: List[str] = []
    self.expanded = 0
    # ids of nodes sitting where any expression may appear unparenthesized
    self._free_slots: Set[int] = set()

  def _mark_free(self, node: Optional[cst.CSTNode]) -> None:
    if node is not None:
      self._free_slots.add(id(node))

  def visit_Assign(self, node: cst.Assign) -> None:
    self._mark_free(node.value)

  def visit_AnnAssign(self, node: cst.AnnAssign) -> None:
    self._mark_free(node.value)

  def visit_AugAssign(self, node: cst.AugAssign) -> None:
    self._mark_free(node.value)

  def visit_Return(self, node: cst.Return) -> None:
    self._mark_free(node.value)

  def visit_Expr(self, node: cst.Expr) -> None:
    self._mark_free(node.value)

  def visit_Arg(self, node: cst.Arg) -> None:
    self._mark_free(node.value)

  def visit_Element(self, node: cst.Element) -> None:
    self._mark_free(node.value)

  def visit_Call(self, node: cst.Call) -> Optional[bool]:
    # Marker operands are handled in leave_Call, outer call first.
    return not _is_marker(node, self.marker)

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.BaseExpression:
    if not _is_marker(original_node, self.marker):
      return updated_node
    return self._expand(original_node, free_slot=id(original_node) in self._free_slots)

  def _expand(self, call: cst.Call, free_slot: bool = False) -> cst.BaseExpression:
    invocation = invocation_from_call(call, self.marker)

    rewriter = AwaitSuffixRewriter(self.mode, invocation.suffix, opaque_calls=[self.marker])
    new_expr = invocation.expression.visit(rewriter)
    self.renamed.extend(rewriter.renamed)
    self.diagnostics.extend(rewriter.diagnostics)
    self.expanded += 1

    # Nested marker calls were left untouched by the rewriter above.
    new_expr = new_expr.visit(self)
    new_expr = self._parenthesize(new_expr, call, free_slot)

    if self.verify:
      verify_roundtrip(new_expr)

    logger.debug("Expanded marker call -> %s", emit(new_expr))
    return new_expr

  @staticmethod
  def _parenthesize(expr: cst.BaseExpression, call: cst.Call, free_slot: bool) -> cst.BaseExpression:
    if expr.lpar:
      needs_parens = False
    elif "\n" in emit(expr):
      needs_parens = True
    elif free_slot:
      needs_parens = isinstance(expr, cst.NamedExpr)
    else:
      needs_parens = not isinstance(expr, _ATOMS)

    if needs_parens:
      expr = expr.with_changes(lpar=[cst.LeftParen()], rpar=[cst.RightParen()])
    if call.lpar:
      expr = expr.with_changes(lpar=[*call.lpar, *expr.lpar], rpar=[*expr.rpar, *call.rpar])
    return expr


def expand_module(
  source: str,
  mode: Union[Mode, str],
  marker: str = DEFAULT_MARKER,
  verify: bool = False,
) -> ExpansionResult:
  """
  Expands all marker calls in a Python module.

  Args:
      source (str): Module source code.
      mode (Mode): Build mode applied to every marker call.
      marker (str): Name of the marker function.
      verify (bool): Round-trip check each replacement.

  Returns:
      ExpansionResult: The new module source and per-site records.

  Raises:
      ParseError: If the module does not parse or a marker call is malformed.
      EmitError: If ``verify`` is set and a replacement does not round-trip.
  """
  try:
    module = cst.parse_module(source)
  except cst.ParserSyntaxError as e:
    raise syntax_error_to_parse_error(e) from e

  wrapper = cst.MetadataWrapper(module)
  validator = _MarkerValidator(marker)
  wrapper.visit(validator)

  if validator.count == 0:
    return ExpansionResult(code=source, mode=Mode(mode))

  expander = MarkerExpander(mode, marker=marker, verify=verify)
  new_module = wrapper.module.visit(expander)

  return ExpansionResult(
    code=new_module.code,
    mode=expander.mode,
    expanded=expander.expanded,
    renamed=expander.renamed,
    diagnostics=expander.diagnostics,
  )
