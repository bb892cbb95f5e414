"""
Mode Resolver.

Reduces a snapshot of named boolean build flags to exactly one `Mode`.
Invalid configurations fail fast, there is no silent default.
"""

import logging
from typing import Mapping

from bisuffix.enums import FeatureFlag, Mode
from bisuffix.errors import ConflictingModesError, NoModeSelectedError

logger = logging.getLogger(__name__)


def resolve_mode(flags: Mapping[str, bool]) -> Mode:
  """
  Selects the active mode from build flags.

  ``async`` selects `Mode.SUFFIXED`, ``blocking`` selects `Mode.UNSUFFIXED`.
  Flags other than these two are ignored.

  Args:
      flags (Mapping[str, bool]): Flag name to enabled state.

  Returns:
      Mode: The single selected mode.

  Raises:
      ConflictingModesError: If both flags are set.
      NoModeSelectedError: If neither flag is set.
  """
  suffixed = bool(flags.get(FeatureFlag.ASYNC.value, False))
  unsuffixed = bool(flags.get(FeatureFlag.BLOCKING.value, False))

  if suffixed and unsuffixed:
    raise ConflictingModesError(
      f"Build flags '{FeatureFlag.ASYNC.value}' and '{FeatureFlag.BLOCKING.value}' are mutually exclusive"
    )
  if suffixed:
    mode = Mode.SUFFIXED
  elif unsuffixed:
    mode = Mode.UNSUFFIXED
  else:
    raise NoModeSelectedError(
      f"No mode selected: enable exactly one of '{FeatureFlag.ASYNC.value}' or '{FeatureFlag.BLOCKING.value}'"
    )

  logger.debug("Resolved mode %s from flags %s", mode.value, dict(flags))
  return mode
