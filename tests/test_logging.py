"""Tests for log setup and the structured JSON output."""

import json
import logging

import pytest

from justicechain.db.models import ActivityAction
from justicechain.logging_utils import (
    JsonFormatter,
    RequestContextFilter,
    actor_fields,
    request_id_var,
    setup_logging,
)


def _record(message="Pinning failed for %s", args=("a.txt",)):
    return logging.LogRecord("justicechain.workflow", logging.WARNING, __file__, 1, message, args, None)


@pytest.fixture
def restore_root():
    handlers, level = logging.root.handlers[:], logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def test_json_formatter_includes_context_fields():
    """Test actor and case ids passed via extra appear in the JSON object."""
    record = _record()
    record.actor_id = 7
    record.actor_role = "POLICE"
    record.case_id = "CASE_1_1"

    data = json.loads(JsonFormatter().format(record))
    assert data["message"] == "Pinning failed for a.txt"
    assert data["level"] == "WARNING"
    assert data["logger"] == "justicechain.workflow"
    assert data["actor_id"] == 7
    assert data["actor_role"] == "POLICE"
    assert data["case_id"] == "CASE_1_1"
    assert "evidence_id" not in data
    assert "request_id" not in data


def test_request_filter_stamps_current_request():
    record = _record()
    token = request_id_var.set("req-1")
    try:
        assert RequestContextFilter().filter(record) is True
    finally:
        request_id_var.reset(token)
    assert record.request_id == "req-1"
    assert json.loads(JsonFormatter().format(record))["request_id"] == "req-1"

    outside = _record()
    RequestContextFilter().filter(outside)
    assert outside.request_id is None


def test_actor_fields(police):
    assert actor_fields(police) == {"actor_id": police.user_id, "actor_role": "POLICE"}
    assert actor_fields(None) == {"actor_role": "SYSTEM"}


def test_setup_logging_json(restore_root):
    setup_logging("debug", json_logs=True)
    (handler,) = logging.root.handlers
    assert isinstance(handler.formatter, JsonFormatter)
    assert any(isinstance(f, RequestContextFilter) for f in handler.filters)
    assert logging.root.level == logging.DEBUG


def test_activity_records_log_the_actor(ctx, police, caplog):
    caplog.set_level(logging.DEBUG, logger="justicechain.activity")
    ctx.activity.record(police, ActivityAction.CASE_CREATED, "Registered case")

    (record,) = [r for r in caplog.records if r.name == "justicechain.activity"]
    assert record.actor_id == police.user_id
    assert record.actor_role == "POLICE"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
