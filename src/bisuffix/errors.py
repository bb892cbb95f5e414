"""
Exception hierarchy for bisuffix.

Every failure aborts the single invocation that raised it. Each class carries
the process exit code the CLI returns when it surfaces the error.
"""

from typing import Optional


class BisuffixError(Exception):
  """Base error for all expansion failures."""

  exit_code: int = 1


class ParseError(BisuffixError):
  """
  Malformed input expression or invocation.

  Attributes:
      message (str): Human-readable description.
      line (int): 1-based line of the offending token.
      column (int): 1-based column of the offending token.
  """

  exit_code: int = 2

  def __init__(self, message: str, line: int = 1, column: int = 1):
    self.message = message
    self.line = line
    self.column = column
    super().__init__(f"{line}:{column}: {message}")


class InvalidSuffixError(BisuffixError, ValueError):
  """Suffix is empty or cannot continue an identifier."""

  exit_code: int = 2


class ConfigError(BisuffixError):
  """The build configuration does not select exactly one mode."""

  exit_code: int = 3


class NoModeSelectedError(ConfigError):
  """Neither the async nor the blocking flag is set."""


class ConflictingModesError(ConfigError):
  """Both the async and the blocking flag are set."""


class EmitError(BisuffixError):
  """
  A tree could not be serialized back to source.

  This indicates a defect in the parser or rewriter, not bad user input.

  Attributes:
      node_kind (str): Class name of the node that failed to render.
  """

  exit_code: int = 4

  def __init__(self, node_kind: str, message: Optional[str] = None):
    self.node_kind = node_kind
    detail = message or "no serialization defined"
    super().__init__(f"Cannot emit {node_kind}: {detail}")
