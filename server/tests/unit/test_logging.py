from __future__ import annotations

import logging

from calcpad.core import context
from calcpad.core.logging import RequestContextFilter, _build_logging_config


def _record() -> logging.LogRecord:
    return logging.LogRecord("calcpad.test", logging.INFO, __file__, 1, "calculator.evaluate", None, None)


def test_filter_uses_placeholders_without_context() -> None:
    record = _record()

    assert RequestContextFilter().filter(record) is True
    assert record.request_id == "-"
    assert record.session_id == "-"


def test_filter_stamps_request_and_session_ids() -> None:
    request_token = context.set_request_id("req-1")
    session_token = context.set_session_id("pad-7")
    try:
        record = _record()
        RequestContextFilter().filter(record)
    finally:
        context.reset_request_id(request_token)
        context.reset_session_id(session_token)

    assert record.request_id == "req-1"
    assert record.session_id == "pad-7"


def test_logging_config_applies_level_to_package_logger() -> None:
    config = _build_logging_config("DEBUG")

    assert config["loggers"]["calcpad"]["level"] == "DEBUG"
    assert config["handlers"]["default"]["filters"] == ["request_context"]


def test_filter_keeps_session_id_passed_as_extra() -> None:
    record = _record()
    record.session_id = "pad-3"

    RequestContextFilter().filter(record)

    assert record.session_id == "pad-3"
