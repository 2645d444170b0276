"""
Test suite for logging helpers, correlation ids and middleware.

System role: Verification of the observability layer
"""

import logging
from enum import Enum

from convoquota.core.exceptions import StoreUnavailableError
from convoquota.observability.correlation import (
    clear_correlation_id,
    correlation_scope,
    get_correlation_id,
    set_correlation_id,
)
from convoquota.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    render_value,
    text_summary,
)
from convoquota.observability.logger import CorrelationIdFilter, configure_logging


class _Color(Enum):
    RED = "red"


def test_render_value_bounds_and_summarises():
    assert render_value(None) == "None"
    assert render_value(_Color.RED) == "red"
    assert render_value([1, 2, 3]) == "list(3 items)"
    assert render_value({"a": 1}) == "dict(1 keys)"
    assert render_value("x" * 300).endswith("(300 chars)")


def test_text_summary_hides_content():
    summary = text_summary("my secret revenue numbers")
    assert "secret" not in summary
    assert summary.startswith("len=25 ")
    assert text_summary("") == "empty"


def test_log_with_context_attaches_extra(caplog):
    logger = logging.getLogger("tests.observability")
    with caplog.at_level(logging.INFO, logger="tests.observability"):
        log_with_context(logger, logging.INFO, "hello", session_id="s-1", message="clash")

    record = caplog.records[-1]
    assert record.session_id == "s-1"
    assert record.ctx_message == "clash"


def test_log_exception_includes_details(caplog):
    logger = logging.getLogger("tests.observability")
    error = StoreUnavailableError("down", operation="ping")
    with caplog.at_level(logging.ERROR, logger="tests.observability"):
        log_exception_with_context(logger, "failed", error, session_id="s-1")

    record = caplog.records[-1]
    assert record.error_type == "StoreUnavailableError"
    assert record.operation == "ping"
    assert record.exc_info is not None


def test_correlation_id_lifecycle():
    assert set_correlation_id("abc") == "abc"
    assert get_correlation_id() == "abc"
    clear_correlation_id()
    assert get_correlation_id() == ""
    assert set_correlation_id()


def test_filter_adds_correlation_id():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    clear_correlation_id()
    CorrelationIdFilter().filter(record)
    assert record.correlation_id == "-"


def test_correlation_scope_restores_previous_value():
    clear_correlation_id()
    with correlation_scope("outer"):
        with correlation_scope("inner") as inner:
            assert inner == "inner"
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
    assert get_correlation_id() == ""


def test_oversized_inbound_id_is_replaced():
    with correlation_scope("x" * 500) as value:
        assert value != "x" * 500


def test_configure_logging_installs_single_handler():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging("DEBUG")
        configure_logging("warning")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
