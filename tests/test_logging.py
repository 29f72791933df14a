"""
Tests for structured logging.

Tests verify:
- Provider lifecycle events are logged with their context
- Connection secrets are masked before rendering
- configure_logging renders JSON and filters by level
"""

from __future__ import annotations

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from conftest import CONNECTION_PARAMS, lost_connection
from tramway_mysql.logging import configure_logging, get_logger, redact_secrets
from tramway_mysql.providers import MySQLProvider


class TestProviderEvents:
    @pytest.mark.asyncio
    async def test_connect_and_close(self, server) -> None:
        with capture_logs() as logs:
            provider = MySQLProvider(CONNECTION_PARAMS)
            await provider.close_connection()

        events = [entry["event"] for entry in logs]
        assert events == ["connect", "connection_closed"]
        assert logs[0]["host"] == "db.test"
        assert logs[0]["database"] == "app"
        assert "password" not in logs[0]

    @pytest.mark.asyncio
    async def test_reset_logged_as_warning(self, server, provider) -> None:
        server.on("SELECT", lost_connection())

        with capture_logs() as logs:
            with pytest.raises(Exception):
                await provider.get("users")

        reset = next(entry for entry in logs if entry["event"] == "connection_reset")
        assert reset["log_level"] == "warning"
        assert reset["errno"] == 2013
        assert any(entry["event"] == "connect" for entry in logs)

    @pytest.mark.asyncio
    async def test_rollback_logged(self, server, provider) -> None:
        server.on("INSERT", RuntimeError("boom"))

        with capture_logs() as logs:
            with pytest.raises(RuntimeError):
                await provider.create_many([{"name": "a"}], "users")

        rolled_back = next(e for e in logs if e["event"] == "transaction_rolled_back")
        assert rolled_back["statements"] == 1
        assert rolled_back["error"] == "boom"




class TestRedactSecrets:
    def test_top_level_keys(self) -> None:
        event = redact_secrets(None, "info", {"event": "connect", "password": "s3cret", "passwd": "x"})

        assert event == {"event": "connect", "password": "***", "passwd": "***"}

    def test_nested_parameter_maps(self) -> None:
        event = redact_secrets(
            None,
            "info",
            {"event": "connect", "params": {"host": "db", "options": {"passwd": "x"}, "password": "p"}},
        )

        assert event["params"] == {"host": "db", "options": {"passwd": "***"}, "password": "***"}

    def test_caller_mapping_not_mutated(self) -> None:
        params = {"host": "db", "password": "s3cret"}

        redact_secrets(None, "info", {"event": "connect", "params": params})

        assert params["password"] == "s3cret"

    def test_other_values_untouched(self) -> None:
        event = {"event": "execute", "sql": "SELECT 1", "handle": 3}

        assert redact_secrets(None, "debug", dict(event)) == event


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def restore(self):
        yield
        structlog.reset_defaults()

    @pytest.fixture
    def stream_to_stderr(self):
        handlers = []

        def attach(name: str) -> None:
            handler = logging.StreamHandler()
            stdlib_logger = logging.getLogger(name)
            stdlib_logger.setLevel(logging.DEBUG)
            stdlib_logger.addHandler(handler)
            handlers.append((stdlib_logger, handler))

        yield attach
        for stdlib_logger, handler in handlers:
            stdlib_logger.removeHandler(handler)

    def test_json_output_is_redacted(self, capsys, stream_to_stderr) -> None:
        configure_logging(level="INFO", json_format=True)
        stream_to_stderr("tramway.test")

        get_logger("tramway.test").info("connect", port=3306, params={"password": "s3cret"})

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "connect"
        assert record["port"] == 3306
        assert record["params"] == {"password": "***"}
        assert record["level"] == "info"
        assert record["logger"] == "tramway.test"
        assert "timestamp" in record

    def test_debug_filtered_at_info(self, capsys, stream_to_stderr) -> None:
        configure_logging(level="INFO", json_format=True)
        stream_to_stderr("tramway.quiet")

        get_logger("tramway.quiet").debug("noise")

        assert "noise" not in capsys.readouterr().err
