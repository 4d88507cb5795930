"""
Unit tests for the middleware pipeline and access logging.
"""

import json
import logging

import pytest

from catalogserver.http import ResponseBuilder
from catalogserver.middleware import (
    LoggingMiddleware,
    Middleware,
    MiddlewarePipeline,
    RequestLog,
)


class Recorder(Middleware):
    """Appends its tag before and after the inner handler runs."""

    def __init__(self, tag, calls):
        self.tag = tag
        self.calls = calls

    async def __call__(self, request, next):
        self.calls.append(f"{self.tag}:in")
        response = await next(request)
        self.calls.append(f"{self.tag}:out")
        return response


async def _ok(request):
    return ResponseBuilder().text("ok").build()


async def _boom(request):
    raise RuntimeError("boom")


class TestMiddlewarePipeline:

    @pytest.mark.asyncio
    async def test_first_added_is_outermost(self, make_request):
        calls = []
        pipeline = MiddlewarePipeline()
        pipeline.add(Recorder("a", calls)).add(Recorder("b", calls))

        await pipeline.wrap(_ok)(make_request("/"))

        assert calls == ["a:in", "b:in", "b:out", "a:out"]
        assert len(pipeline) == 2
        assert [m.name for m in pipeline] == ["Recorder", "Recorder"]

    @pytest.mark.asyncio
    async def test_empty_pipeline_is_the_handler(self, make_request):
        response = await MiddlewarePipeline().wrap(_ok)(make_request("/"))

        assert response.body == b"ok"


class TestLoggingMiddleware:

    @pytest.mark.asyncio
    async def test_sets_request_id(self, make_request):
        response = await LoggingMiddleware()(make_request("/api"), _ok)

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_can_be_disabled(self, make_request):
        response = await LoggingMiddleware(include_request_id=False)(make_request("/"), _ok)

        assert "X-Request-ID" not in response.headers

    @pytest.mark.asyncio
    async def test_text_access_line(self, make_request, caplog):
        caplog.set_level(logging.INFO, logger="catalogserver.access")

        await LoggingMiddleware()(make_request("/api", limit="2"), _ok)

        assert len(caplog.records) == 1
        line = caplog.records[0].getMessage()
        assert '"GET /api" 200 2' in line
        assert "{'limit': '2'}" in line

    @pytest.mark.asyncio
    async def test_json_access_line(self, make_request, caplog):
        caplog.set_level(logging.INFO, logger="catalogserver.access")

        await LoggingMiddleware(log_format="json")(make_request("/api", category="books"), _ok)

        entry = json.loads(caplog.records[0].getMessage())
        assert entry["path"] == "/api"
        assert entry["query"] == {"category": "books"}
        assert entry["status_code"] == 200

    @pytest.mark.asyncio
    async def test_skip_paths(self, make_request, caplog):
        caplog.set_level(logging.INFO, logger="catalogserver.access")

        await LoggingMiddleware(skip_paths=["/"])(make_request("/"), _ok)

        assert caplog.records == []

    @pytest.mark.asyncio
    async def test_handler_error_is_logged_and_reraised(self, make_request, caplog):
        caplog.set_level(logging.INFO, logger="catalogserver.access")

        with pytest.raises(RuntimeError):
            await LoggingMiddleware()(make_request("/api"), _boom)

        assert caplog.records[0].levelno == logging.ERROR
        assert "RuntimeError: boom" in caplog.records[0].getMessage()


def test_request_log_text_without_query():
    entry = RequestLog(
        request_id="abcd1234",
        method="GET",
        path="/",
        query={},
        client_ip="",
        status_code=200,
        content_length=10,
        duration_ms=1.234,
        timestamp="18/Oct/2026:10:00:00 +0000",
    )

    assert entry.to_text() == '- - - [18/Oct/2026:10:00:00 +0000] "GET /" 200 10 1.23ms'
    assert entry.to_dict()["duration_ms"] == 1.23
