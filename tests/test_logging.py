import json
import logging

from leavedesk.core.logging import CustomJsonFormatter, LOG_FORMAT, request_id_var

def _format(**extra):
    record = logging.LogRecord("leavedesk.test", logging.INFO, __file__, 1, "GET /health -> 200", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return json.loads(CustomJsonFormatter(LOG_FORMAT).format(record))

def test_log_line_carries_request_id_and_middleware_extras():
    token = request_id_var.set("abc-123")
    try:
        line = _format(duration_ms=4.2, code="NOT_FOUND")
    finally:
        request_id_var.reset(token)

    assert line["message"] == "GET /health -> 200"
    assert line["level"] == "INFO"
    assert line["request_id"] == "abc-123"
    assert line["duration_ms"] == 4.2
    assert line["code"] == "NOT_FOUND"
    assert line["service"] == "Leave Desk"

def test_log_line_without_request_context():
    line = _format()
    assert "request_id" not in line
    assert "duration_ms" not in line
    assert line["timestamp"]
