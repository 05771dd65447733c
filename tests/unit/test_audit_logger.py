"""Tests for audit logger module."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from recdist.audit import AuditLogger, generate_run_id
from recdist.errors import ParseError


@pytest.fixture
def logger(tmp_path: Path) -> Iterator[AuditLogger]:
    """Create a logger that auto-closes after test."""
    lg = AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl")
    yield lg
    lg.close()


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


@pytest.mark.unit
def test_logger_event_writes_valid_jsonl(logger: AuditLogger) -> None:
    """Test event() writes a valid JSONL line with correct envelope."""
    logger.event("test_event", data={"key": "value"}, level="INFO")

    events = _read_events(logger.log_path)

    assert len(events) == 1
    evt = events[0]
    assert evt["run_id"] == "test_run"
    assert evt["event"] == "test_event"
    assert evt["level"] == "INFO"
    assert evt["data"] == {"key": "value"}
    assert evt["stage"] is None
    assert evt["ts"].endswith("Z")


@pytest.mark.unit
def test_logger_stage_context(logger: AuditLogger) -> None:
    """Test events between stage start and finish inherit the stage."""
    logger.stage_started("pair_scoring", parameters={"double_range": True})
    logger.event("inside")
    logger.stage_finished("pair_scoring", 0.5, counters={"pairs_in": 2})
    logger.event("after")

    events = _read_events(logger.log_path)

    assert [e["event"] for e in events] == ["stage_started", "inside", "stage_finished", "after"]
    assert events[0]["data"] == {"parameters": {"double_range": True}}
    assert events[1]["stage"] == "pair_scoring"
    assert events[2]["data"] == {"duration_seconds": 0.5, "counters": {"pairs_in": 2}}
    assert events[3]["stage"] is None


@pytest.mark.unit
def test_logger_artifact_written(logger: AuditLogger) -> None:
    """Test artifact_written records path and count."""
    logger.artifact_written("out/distances.jsonl", record_count=3)

    event = _read_events(logger.log_path)[0]

    assert event["event"] == "artifact_written"
    assert event["data"] == {"path": "out/distances.jsonl", "record_count": 3}


@pytest.mark.unit
def test_logger_pair_failed_includes_ordinal(logger: AuditLogger) -> None:
    """Test pair_failed is an ERROR event carrying the failing ordinal."""
    logger.pair_failed(4, ParseError("Field is not a valid integer", ordinal=2, value="x"))

    event = _read_events(logger.log_path)[0]

    assert event["event"] == "pair_failed"
    assert event["level"] == "ERROR"
    assert event["data"]["index"] == 4
    assert event["data"]["exception_class"] == "ParseError"
    assert event["data"]["ordinal"] == 2


@pytest.mark.unit
def test_logger_close_and_context_manager(tmp_path: Path) -> None:
    """Test close() flushes and context manager auto-closes."""
    log_path = tmp_path / "events.jsonl"

    with AuditLogger(run_id="r1", log_path=log_path) as lg:
        lg.event("inside")

    with AuditLogger(run_id="r2", log_path=log_path) as lg2:
        lg2.event("second")

    events = _read_events(log_path)
    assert [e["run_id"] for e in events] == ["r1", "r2"]


@pytest.mark.unit
def test_logger_creates_parent_directories(tmp_path: Path) -> None:
    """Test logger creates nested parent directories."""
    nested = tmp_path / "a" / "b" / "events.jsonl"
    lg = AuditLogger(run_id="test", log_path=nested)
    lg.event("test")
    lg.close()

    assert nested.exists()
    assert len(_read_events(nested)) == 1


@pytest.mark.unit
def test_generate_run_id_unique() -> None:
    """Test run ids are timestamped and unique."""
    first, second = generate_run_id(), generate_run_id()

    assert first != second
    assert "__" in first
