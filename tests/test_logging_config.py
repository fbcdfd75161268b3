import json
import logging

import pytest

from hostwait.logging_config import JsonFormatter, TextFormatter, configure_logging, resolve_level


def _record(**extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {"name": "hostwait", "levelno": logging.INFO, "levelname": "INFO", "msg": "Host is available"}
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_text_formatter_appends_extra_fields():
    line = TextFormatter().format(_record(host="db", port="5432"))
    assert "INFO hostwait Host is available" in line
    assert line.endswith("host=db port=5432")


def test_text_formatter_without_extra_fields():
    line = TextFormatter().format(_record())
    assert line.endswith("Host is available")


def test_json_formatter_emits_one_object():
    payload = json.loads(JsonFormatter().format(_record(host="db", port="5432")))

    assert payload["level"] == "info"
    assert payload["logger"] == "hostwait"
    assert payload["msg"] == "Host is available"
    assert payload["host"] == "db"
    assert payload["port"] == "5432"
    assert "time" in payload


@pytest.mark.parametrize(
    "quiet, debug, expected",
    [
        (False, False, logging.INFO),
        (False, True, logging.DEBUG),
        (True, False, logging.WARNING),
        (True, True, logging.WARNING),
    ],
)
def test_resolve_level(quiet, debug, expected):
    assert resolve_level(quiet, debug) == expected


def test_configure_logging_installs_selected_formatter():
    configure_logging(debug=True, log_format="json")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JsonFormatter)

    configure_logging(quiet=True)
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, TextFormatter)
