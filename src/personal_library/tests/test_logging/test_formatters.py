import json
import logging
import sys

from personal_library.core.logging.formatters import ColorFormatter, JsonFormatter


def make_record(exc_info=None):
    return logging.LogRecord("personal_library", logging.INFO, __file__, 10, "hello %s", ("tester",), exc_info)


def test_json_formatter_basic_fields():
    rec = make_record()
    rec.book_id = "b-1"
    rec.request_id = "req-1"

    data = json.loads(JsonFormatter(env="testing", service="svc").format(rec))

    assert data["message"] == "hello tester"
    assert data["level"] == "INFO"
    assert data["service"] == "svc"
    assert data["env"] == "testing"
    assert data["request_id"] == "req-1"
    assert data["book_id"] == "b-1"
    assert "timestamp" in data
    assert "version" in data
    # standard LogRecord attributes are not repeated as extras
    assert "args" not in data and "levelno" not in data


def test_json_formatter_non_serializable_extra():
    rec = make_record()

    class X:
        def __repr__(self):
            return "<X>"

    rec.obj = X()
    data = json.loads(JsonFormatter(env="dev", service="svc").format(rec))
    assert isinstance(data["obj"], str)


def test_json_formatter_includes_traceback():
    try:
        raise ValueError("bad value")
    except ValueError:
        rec = make_record(exc_info=sys.exc_info())

    data = json.loads(JsonFormatter().format(rec))
    assert "ValueError: bad value" in data["exc_info"]


def test_color_formatter_line_layout():
    rec = make_record()
    rec.request_id = "req-9"

    line = ColorFormatter().format(rec)

    assert "INFO" in line
    assert "req-9" in line
    assert line.endswith("hello tester")
    assert ColorFormatter.COLOR_CODES["INFO"] in line
