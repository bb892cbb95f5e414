"""
Enumerations for bisuffix.

This module defines the build modes and the node categories used by the
rewriter and its diagnostics.
"""

from enum import Enum


class Mode(str, Enum):
  """
  The two mutually exclusive API variants a call site can be compiled into.
  """

  SUFFIXED = "suffixed"  # async variant, identifiers get the suffix
  UNSUFFIXED = "unsuffixed"  # blocking variant, identifiers kept verbatim


class FeatureFlag(str, Enum):
  """
  Names of the build flags that select a Mode.
  """

  ASYNC = "async"
  BLOCKING = "blocking"


class NodeKind(str, Enum):
  """
  Coarse categorization of expression nodes.

  Used for diagnostics and error reporting; the rewriter itself works on
  the LibCST node types directly.
  """

  CALL = "call"
  AWAIT = "await"
  METHOD_CHAIN = "method_chain"
  FIELD_ACCESS = "field_access"
  IDENTIFIER = "identifier"
  LITERAL = "literal"
  OTHER = "other"
