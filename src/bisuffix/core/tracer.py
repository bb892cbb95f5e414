"""
Expansion Trace Logger.

Records the step-by-step execution of a single expansion:
1. Pipeline phases (Parse, Resolve Mode, Rewrite, Emit).
2. Call-site renames (`read` -> `read_async`).
3. Await sites that were inspected but left untouched.

The output is a list of plain dictionaries suitable for JSON serialization.
"""

import time
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field, asdict


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  RENAME = "rename"
  INSPECTION = "inspection"
  DIAGNOSTIC = "diagnostic"
  MUTATION = "mutation"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Collects events for one expansion.
  Phases nest; every other event is attached to the innermost open phase.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  def start_phase(self, name: str, description: str = "") -> str:
    """Opens a nested phase and returns its ID."""
    phase_id = str(uuid.uuid4())
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=self._current_parent(),
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self):
    """Closes the innermost phase. No-op when nothing is open."""
    if not self._active_phases:
      return

    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_rename(self, before: str, after: str):
    """Logs a call identifier that received the suffix."""
    self._log_simple(TraceEventType.RENAME, f"Renamed {before} -> {after}", {"before": before, "after": after})

  def log_inspection(self, node_str: str, outcome: str, detail: str = ""):
    """Logs an await site where no change occurred."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{node_str}'", {"outcome": outcome, "detail": detail})

  def log_diagnostic(self, message: str):
    self._log_simple(TraceEventType.DIAGNOSTIC, message, {"level": "info"})

  def log_mutation(self, label: str, before: str, after: str):
    """Logs a whole-expression transformation."""
    self._log_simple(TraceEventType.MUTATION, f"Transformed {label}", {"before": before, "after": after})

  def _current_parent(self) -> Optional[str]:
    return self._active_phases[-1] if self._active_phases else None

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]):
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=evt_type,
        timestamp=time.time(),
        description=desc,
        parent_id=self._current_parent(),
        metadata=meta,
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]
