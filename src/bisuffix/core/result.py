"""
Data structures returned by the expansion pipeline.

`RewriteResult` is created per invocation and consumed immediately; nothing
here is persisted.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field

from bisuffix.enums import Mode


class RenamedCall(BaseModel):
  """
  One call site whose identifier received the suffix.
  """

  before: str = Field(description="Identifier as written in the input.")
  after: str = Field(description="Identifier in the emitted expression.")


class RewriteResult(BaseModel):
  """
  Output of a single expansion.
  """

  code: str = Field(description="The emitted expression source.")
  mode: Mode = Field(description="Mode the expression was rewritten under.")
  suffix: str = Field(description="Suffix applied at eligible call sites.")
  renamed: List[RenamedCall] = Field(default_factory=list, description="Call sites that were renamed.")
  diagnostics: List[str] = Field(default_factory=list, description="Informational notes, e.g. skipped await sites.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def changed(self) -> bool:
    """
    True if at least one identifier was renamed.

    Returns:
        bool: Whether the output differs from the input.
    """
    return len(self.renamed) > 0


class VariantExpansion(BaseModel):
  """
  Both API variants of one expression, side by side.
  """

  suffix: str
  suffixed: str = Field(description="Expression for the async build.")
  unsuffixed: str = Field(description="Expression for the blocking build.")


class ExpansionResult(BaseModel):
  """
  Result of expanding every marker call in a module.
  """

  code: str = Field(description="The module source with marker calls expanded.")
  mode: Mode
  expanded: int = Field(default=0, description="Number of marker calls replaced.")
  renamed: List[RenamedCall] = Field(default_factory=list)
  diagnostics: List[str] = Field(default_factory=list)
