"""
Tests for the logging module.

Tests verify:
- configure_logging accepts both renderers
- get_logger events carry their key/value pairs
- bind/unbind/clear and LogContext manage contextvars
"""

import structlog
from structlog.contextvars import get_contextvars
from structlog.testing import capture_logs

from cadence.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


class TestConfigureLogging:
    def test_json_format(self):
        configure_logging(level="INFO", json_format=True, service="cadence-test")
        assert structlog.is_configured()

    def test_console_format(self):
        configure_logging(level="DEBUG", json_format=False)
        assert structlog.is_configured()


class TestGetLogger:
    def test_events_are_structured(self):
        with capture_logs() as logs:
            get_logger("test").info("worker_run_admitted", worker="Mailer", force=False)
        assert logs == [
            {"event": "worker_run_admitted", "log_level": "info", "worker": "Mailer", "force": False}
        ]


class TestContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_bind_unbind_clear(self):
        bind_context(worker="Mailer", run=1)
        assert get_contextvars() == {"worker": "Mailer", "run": 1}
        unbind_context("run")
        assert get_contextvars() == {"worker": "Mailer"}
        clear_context()
        assert get_contextvars() == {}

    def test_log_context_unbinds(self):
        with LogContext(worker="Mailer"):
            assert get_contextvars() == {"worker": "Mailer"}
        assert get_contextvars() == {}

    def test_log_context_restores_outer_value(self):
        bind_context(worker="Outer", run=1)
        with LogContext(worker="Inner"):
            assert get_contextvars() == {"worker": "Inner", "run": 1}
        assert get_contextvars() == {"worker": "Outer", "run": 1}

    def test_log_context_restores_on_error(self):
        bind_context(worker="Outer")
        try:
            with LogContext(worker="Inner"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_contextvars() == {"worker": "Outer"}
