import json
import logging
import sys

from meteo_scraping.common.logging import JsonLineFormatter


def _record(exc_info=None, **extra) -> logging.LogRecord:
    record = logging.LogRecord("meteo_scraping.test", logging.ERROR, __file__, 1, "interval failed", None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_fixed_fields():
    payload = json.loads(JsonLineFormatter().format(_record(stage="aggregate", error_code="EMPTY_RANGE")))

    assert payload["message"] == "interval failed"
    assert payload["stage"] == "aggregate"
    assert payload["error_code"] == "EMPTY_RANGE"
    assert payload["location"] is None
    assert "exc" not in payload


def test_formatter_includes_exception_traceback():
    try:
        raise KeyError("boom")
    except KeyError:
        record = _record(exc_info=sys.exc_info())

    payload = json.loads(JsonLineFormatter().format(record))

    assert "KeyError: 'boom'" in payload["exc"]
