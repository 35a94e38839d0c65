"""Tests for structured logging context."""

import pytest
import structlog
from asgi_correlation_id import correlation_id
from starlette.requests import Request
from starlette.responses import Response
from structlog.testing import CapturingLogger

from src.director.api.middlewares import logging_context_middleware
from src.director.core.logging import (
    bind_automation_context,
    bind_request_context,
    clear_request_context,
    unbind_automation_context,
)
from src.director.services.run_engine import RunEngine
from tests.factories import AutomationCreateFactory

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Create a capturing logger for tests."""
    cap_logger = CapturingLogger()

    # Save original configuration to restore later
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def make_request(method: str, path: str) -> Request:
    return Request(
        {"type": "http", "method": method, "path": path, "headers": [], "query_string": b""}
    )


def test_bind_request_context(capturing_logger):
    """Test binding request_id to log context."""
    bind_request_context("test-request-123")
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert entries[0].kwargs["request_id"] == "test-request-123"


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs


def test_bind_request_method_and_path(capturing_logger):
    """Test that method and path are bound alongside request_id."""
    bind_request_context("req-1", method="POST", path="/api/v1/automations")
    structlog.get_logger().info("test message")

    (entry,) = capturing_logger.calls
    assert entry.kwargs["method"] == "POST"
    assert entry.kwargs["path"] == "/api/v1/automations"


def test_bind_and_unbind_automation_context(capturing_logger):
    """Test that unbinding the automation keeps request context."""
    bind_request_context("req-1")
    bind_automation_context("automation-1")
    structlog.get_logger().info("inside")

    unbind_automation_context()
    structlog.get_logger().info("outside")

    inside, outside = capturing_logger.calls
    assert inside.kwargs["automation_id"] == "automation-1"
    assert "automation_id" not in outside.kwargs
    # Request context survives the unbind
    assert outside.kwargs["request_id"] == "req-1"


def test_clear_request_context(capturing_logger):
    """Test clearing request context."""
    bind_request_context("test-request-123")
    bind_automation_context("automation-1")

    clear_request_context()

    structlog.get_logger().info("test message")
    entries = capturing_logger.calls
    assert len(entries) == 1
    assert "request_id" not in entries[0].kwargs
    assert "automation_id" not in entries[0].kwargs


async def test_run_logs_carry_automation_id(capturing_logger, service, store, clock, settings):
    """Test that run events carry the automation id and do not leak it."""
    automation = await service.create(AutomationCreateFactory.with_steps("Only step"))
    engine = RunEngine(store, clock=clock, settings=settings)

    await engine.run(automation.id)

    run_events = [
        call for call in capturing_logger.calls if call.kwargs["event"].startswith("Run ")
    ]
    assert [call.kwargs["event"] for call in run_events] == ["Run started", "Run finished"]
    assert all(call.kwargs["automation_id"] == automation.id for call in run_events)
    # The binding does not leak past the run
    structlog.get_logger().info("after")
    assert "automation_id" not in capturing_logger.calls[-1].kwargs


class TestLoggingContextMiddleware:
    """Tests for the request logging middleware."""

    async def test_binds_request_fields_and_logs_completion(self, capturing_logger):
        """Handler logs carry request fields; completion records the status."""
        request = make_request("PATCH", "/api/v1/automations/abc")

        async def call_next(request):
            structlog.get_logger().info("handler")
            return Response(status_code=204)

        token = correlation_id.set("req-42")
        try:
            await logging_context_middleware(request, call_next)
        finally:
            correlation_id.reset(token)

        handler, completed = capturing_logger.calls
        assert handler.kwargs["request_id"] == "req-42"
        assert handler.kwargs["method"] == "PATCH"
        assert handler.kwargs["path"] == "/api/v1/automations/abc"
        assert completed.kwargs["event"] == "Request completed"
        assert completed.kwargs["status_code"] == 204
        assert completed.kwargs["duration_ms"] >= 0

    async def test_clears_automation_context_after_response(self, capturing_logger):
        """Automation context bound while handling does not outlive the request."""
        request = make_request("POST", "/api/v1/automations/abc/run")

        async def call_next(request):
            bind_automation_context("abc")
            return Response(status_code=200)

        await logging_context_middleware(request, call_next)

        structlog.get_logger().info("after")
        after = capturing_logger.calls[-1].kwargs
        assert "automation_id" not in after
        assert "path" not in after

    async def test_health_check_not_logged(self, capturing_logger):
        """Health checks produce no completion line."""

        async def call_next(request):
            return Response(status_code=200)

        await logging_context_middleware(make_request("GET", "/health"), call_next)

        assert capturing_logger.calls == []
