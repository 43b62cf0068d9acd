from __future__ import annotations

import json
import logging

from multi_llm_orchestrator.logging import JsonFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="multi_llm_orchestrator.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Workflow %s",
        args=("published",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_renders_one_object() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert payload["message"] == "Workflow published"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "multi_llm_orchestrator.test"
    assert "timestamp" in payload
    assert "extra" not in payload


def test_json_formatter_promotes_correlation_and_error_code() -> None:
    record = _record(correlation_id="corr-1", error_code="WORKFLOW_CYCLE", workflow_id="acme:w")
    payload = json.loads(JsonFormatter().format(record))

    assert payload["correlation_id"] == "corr-1"
    assert payload["error_code"] == "WORKFLOW_CYCLE"
    assert payload["extra"] == {"workflow_id": "acme:w"}


def test_json_formatter_stringifies_unknown_values() -> None:
    payload = json.loads(JsonFormatter().format(_record(node=object())))
    assert isinstance(payload["extra"]["node"], str)
