"""Unit tests for logging configuration."""

import logging

import orjson

from utils.logging import JsonFormatter, setup_logging


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord(
        "apps.video_mapper", logging.WARNING, __file__, 1, "Mapping error: [%s]", ("boom",), None
    )
    record.request_id = "req-1"

    entry = orjson.loads(JsonFormatter().format(record))

    assert entry["level"] == "WARNING"
    assert entry["logger"] == "apps.video_mapper"
    assert entry["message"] == "Mapping error: [boom]"
    assert entry["request_id"] == "req-1"
    assert "args" not in entry


def test_setup_logging_replaces_root_handlers():
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    try:
        setup_logging(level="debug", format_type="text")
        setup_logging(level="debug", format_type="json")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)
