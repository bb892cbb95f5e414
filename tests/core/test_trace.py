"""
Tests for the Tracing System.
"""

import json

from bisuffix.core.tracer import TraceEventType, TraceLogger


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_end_phase_without_open_phase_is_noop():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_rename_attached_to_active_phase():
  logger = TraceLogger()
  phase = logger.start_phase("Rewrite")
  logger.log_rename("read", "read_async")

  events = logger.export()
  assert events[1]["type"] == TraceEventType.RENAME
  assert events[1]["parent_id"] == phase
  assert events[1]["metadata"] == {"before": "read", "after": "read_async"}


def test_inspection_and_mutation_metadata():
  logger = TraceLogger()
  logger.log_inspection("a", "skipped", "awaited identifier")
  logger.log_mutation("Expression", "await x.y()", "await x.y_async()")

  events = logger.export()
  assert events[0]["metadata"]["outcome"] == "skipped"
  assert events[1]["metadata"]["after"] == "await x.y_async()"


def test_export_is_json_serializable():
  logger = TraceLogger()
  logger.start_phase("Parse", "Source -> CST")
  logger.log_diagnostic("Skipped 'a'")
  logger.end_phase()

  payload = json.loads(json.dumps(logger.export()))
  assert [e["type"] for e in payload] == ["phase_start", "diagnostic", "phase_end"]
