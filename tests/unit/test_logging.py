"""Tests for structured logging and the request logging middleware."""

import json
import logging
import sys
from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from aihub.middleware.logging import (
    JsonFormatter,
    LoggingMiddleware,
    TextFormatter,
    configure_logging,
    request_id_var,
)
from aihub.middleware.request_id import RequestIdMiddleware


def make_record(msg="Test message", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_basic_log_format(self):
        """Test basic log formatting."""
        data = json.loads(JsonFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["logger"] == "test"
        assert data["timestamp"].endswith("Z")
        datetime.fromisoformat(data["timestamp"].replace("Z", "+00:00"))

    def test_includes_request_id_from_context(self):
        """Test request ID from context variable."""
        token = request_id_var.set("test-request-id")
        try:
            data = json.loads(JsonFormatter().format(make_record()))
            assert data["request_id"] == "test-request-id"
        finally:
            request_id_var.reset(token)

    def test_includes_failover_fields(self):
        """Test provider, model and attempt extras are included."""
        record = make_record(
            "Trying AI service 2/3...", provider="Claude", model="claude-3-5-haiku", attempt=2
        )
        data = json.loads(JsonFormatter().format(record))

        assert data["provider"] == "Claude"
        assert data["model"] == "claude-3-5-haiku"
        assert data["attempt"] == 2

    def test_includes_request_fields(self):
        """Test request extras are included and unset ones omitted."""
        record = make_record(method="POST", path="/api/ai/chat", status_code=200)
        data = json.loads(JsonFormatter().format(record))

        assert data["method"] == "POST"
        assert data["path"] == "/api/ai/chat"
        assert "duration_ms" not in data

    def test_includes_exception_info(self):
        """Test exception info is included."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JsonFormatter().format(record))
        assert "ValueError" in data["exception"]


class TestTextFormatter:
    """Tests for TextFormatter."""

    def test_basic_format(self):
        """Test basic text formatting."""
        output = TextFormatter().format(make_record())
        assert "INFO" in output
        assert "Test message" in output

    def test_includes_request_id_prefix(self):
        """Test the short request ID is prefixed."""
        token = request_id_var.set("abc12345def67890")
        try:
            output = TextFormatter().format(make_record())
            assert output.startswith("[abc12345] ")
        finally:
            request_id_var.reset(token)

    def test_appends_provider_context(self):
        """Test provider context is appended after the message."""
        output = TextFormatter().format(
            make_record("Service 1 failed: boom", provider="OpenAI", model="gpt-4o", attempt=1)
        )
        assert output.endswith("Service 1 failed: boom (provider=OpenAI model=gpt-4o attempt=1)")


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_json_format(self):
        """Test JSON format configuration."""
        configure_logging(level="INFO", format="json")
        assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)

    def test_text_format(self):
        """Test text format configuration."""
        configure_logging(level="DEBUG", format="text")
        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, TextFormatter)
        assert root.level == logging.DEBUG

    def test_quiets_vendor_sdks(self):
        """Test vendor SDK loggers are raised to WARNING."""
        configure_logging(level="DEBUG", format="json")
        assert logging.getLogger("openai").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    @pytest.fixture
    def client(self):
        """Create test client with request ID and logging middleware."""
        app = FastAPI()
        app.add_middleware(LoggingMiddleware)
        app.add_middleware(RequestIdMiddleware)

        @app.get("/ok")
        async def ok_endpoint():
            return {"status": "ok"}

        @app.get("/error")
        async def error_endpoint():
            raise RuntimeError("Test error")

        return TestClient(app, raise_server_exceptions=False)

    def test_logs_request_completion(self, client, caplog):
        """Test completion is logged with status and request ID."""
        with caplog.at_level(logging.INFO, logger="aihub.access"):
            response = client.get("/ok")

        completed = [r for r in caplog.records if r.getMessage() == "Request completed"]
        assert len(completed) == 1
        assert completed[0].status_code == 200
        assert completed[0].request_id == response.headers["X-Request-ID"]

    def test_logs_error_requests(self, client, caplog):
        """Test failed requests are logged with the error type."""
        with caplog.at_level(logging.ERROR, logger="aihub.access"):
            client.get("/error")

        failed = [r for r in caplog.records if r.getMessage() == "Request failed"]
        assert failed[0].error_type == "RuntimeError"
