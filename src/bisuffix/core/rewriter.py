"""
Suffix Rewriter.

Walks an expression tree and renames the callee identifier of every call
that is the direct operand of an ``await``:

    await conn.read()            ->  await conn.read_async()
    await (await x).method()     ->  await (await x).method_async()
    await a + await b.open()     ->  await a + await b.open_async()

Rules:

1.  Children are rewritten before their parent, so nested awaits are handled
    innermost-first and each site is judged on its own.
2.  Only the call immediately under ``await`` is eligible. In
    ``await a.b().c()`` only ``c`` is renamed; calls that are not awaited are
    never touched, in either mode.
3.  Awaited expressions that are not calls (``await a``, ``await x.field``)
    pass through and produce a diagnostic, not an error.
4.  There is no detection of an existing suffix. Rewriting an already
    suffixed expression again appends the suffix a second time.

Nodes are immutable; the transformer returns new nodes and leaves the input
tree intact.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional, Union

import libcst as cst

from bisuffix.core.nodes import callee_name, classify, is_eligible_call, node_source, validate_suffix, with_callee_name
from bisuffix.core.result import RenamedCall
from bisuffix.core.tracer import TraceLogger
from bisuffix.enums import Mode

logger = logging.getLogger(__name__)


class AwaitSuffixRewriter(cst.CSTTransformer):
  """
  LibCST transformer applying the await-site rename rule.

  Attributes:
      mode (Mode): Active build mode.
      suffix (str): Text appended to eligible identifiers.
      renamed (List[RenamedCall]): Sites renamed during the last walk, in
          visitation order (innermost first).
      diagnostics (List[str]): Await sites that were not eligible.
  """

  def __init__(
    self,
    mode: Union[Mode, str],
    suffix: str,
    tracer: Optional[TraceLogger] = None,
    opaque_calls: Iterable[str] = (),
  ):
    """
    Initializes the rewriter.

    Args:
        mode: The build mode, a `Mode` or its string value.
        suffix: The suffix, validated on construction.
        tracer: Optional trace logger for rename and inspection events.
        opaque_calls: Names of plain function calls whose arguments are
            left unvisited and which are never renamed (nested marker calls).

    Raises:
        InvalidSuffixError: If the suffix is not a valid identifier continuation.
        ValueError: If ``mode`` is not a known mode.
    """
    super().__init__()
    self.mode = Mode(mode)
    self.suffix = validate_suffix(suffix)
    self.tracer = tracer
    self.opaque_calls: FrozenSet[str] = frozenset(opaque_calls)
    self.renamed: List[RenamedCall] = []
    self.diagnostics: List[str] = []

  def _is_opaque(self, node: cst.BaseExpression) -> bool:
    return isinstance(node, cst.Call) and isinstance(node.func, cst.Name) and node.func.value in self.opaque_calls

  def visit_Call(self, node: cst.Call) -> Optional[bool]:
    return not self._is_opaque(node)

  def leave_Await(self, original_node: cst.Await, updated_node: cst.Await) -> cst.BaseExpression:
    """
    Renames the awaited call, if there is one and the mode asks for it.

    ``updated_node.expression`` already has its own nested awaits rewritten.
    """
    inner = updated_node.expression

    if not is_eligible_call(inner) or self._is_opaque(inner):
      kind = classify(inner)
      snippet = node_source(inner)
      if self._is_opaque(inner):
        message = f"Skipped '{snippet}': nested marker call is expanded on its own"
      else:
        message = f"Skipped '{snippet}': awaited {kind.value} is not a named call"
      self.diagnostics.append(message)
      logger.debug(message)
      if self.tracer:
        self.tracer.log_inspection(snippet, "skipped", f"awaited {kind.value}")
      return updated_node

    name = callee_name(inner).value

    if self.mode is Mode.UNSUFFIXED:
      if self.tracer:
        self.tracer.log_inspection(name, "kept", "unsuffixed mode")
      return updated_node

    new_name = f"{name}{self.suffix}"
    self.renamed.append(RenamedCall(before=name, after=new_name))
    logger.debug("Renamed awaited call %s -> %s", name, new_name)
    if self.tracer:
      self.tracer.log_rename(name, new_name)

    return updated_node.with_changes(expression=with_callee_name(inner, new_name))


def rewrite(expr: cst.BaseExpression, mode: Union[Mode, str], suffix: str) -> cst.BaseExpression:
  """
  Applies the await-site rename rule to an expression tree.

  Pure function: the input tree is not modified and identical inputs always
  produce identical outputs.

  Args:
      expr (cst.BaseExpression): Parsed expression.
      mode (Mode): Build mode.
      suffix (str): Suffix for eligible identifiers.

  Returns:
      cst.BaseExpression: The rewritten tree.
  """
  return expr.visit(AwaitSuffixRewriter(mode, suffix))
