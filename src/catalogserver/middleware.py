"""
=============================================================================
MIDDLEWARE
=============================================================================

Middleware wraps the router with behaviour every request needs but no
handler should have to implement, such as access logging.

=============================================================================
THE CHAIN
=============================================================================

    pipeline.add(LoggingMiddleware())
    handler = pipeline.wrap(router.dispatch)

    request ──► LoggingMiddleware ──► router.dispatch ──► handler
                    │                                        │
    response ◄──────┴─── adds X-Request-ID, logs ◄───────────┘

Each middleware receives the request and `next`, the rest of the chain.
It may look at the request, MUST await next(request) to continue (unless it
answers by itself), and may adjust the response on the way back.

Everything here is async because router.dispatch is: the catalog handler
awaits its data source.

=============================================================================
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional
import json
import logging
import time
import uuid

from .http import HTTPRequest, HTTPResponse


logger = logging.getLogger(__name__)

# Access lines go to their own logger so they can be routed or silenced
# separately:  logging.getLogger("catalogserver.access").setLevel(logging.WARNING)
access_logger = logging.getLogger("catalogserver.access")


NextHandler = Callable[[HTTPRequest], Awaitable[HTTPResponse]]


class Middleware(ABC):
    """
    Base class for middleware.

        class AddHeader(Middleware):
            async def __call__(self, request, next):
                response = await next(request)
                response.set_header("X-Served-By", "catalog")
                return response
    """

    @abstractmethod
    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        """Process the request, usually by awaiting next(request)."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered list of middleware. The first one added is the outermost.
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Build the chain around `handler`.

        Given [A, B] the result calls A → B → handler. We wrap in reverse
        so the first-added middleware ends up outermost.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        async def wrapped(request: HTTPRequest) -> HTTPResponse:
            return await middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)


@dataclass
class RequestLog:
    """One access log entry."""

    request_id: str
    method: str
    path: str
    query: dict
    client_ip: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "query": self.query,
            "client_ip": self.client_ip,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """
        Apache-like access line, with the parsed query appended:

            127.0.0.1 - - [18/Oct/2026:10:00:00 +0000] "GET /api" 200 312 1.07ms {'limit': '2'}
        """
        line = (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )
        if self.query:
            line += f" {self.query}"
        return line


class LoggingMiddleware(Middleware):
    """
    Logs one line per request and tags the response with X-Request-ID.

    Add it FIRST so the timing covers everything after it:

        pipeline.add(LoggingMiddleware(log_format="json"))
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    async def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()

        try:
            response = await next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            access_logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000

        if self.include_request_id:
            response.set_header("X-Request-ID", request_id)

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            query=dict(request.query_params),
            client_ip=request.client_address[0],
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            access_logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            access_logger.log(self.log_level, entry.to_text())

        return response
