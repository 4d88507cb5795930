"""
=============================================================================
HTTP PROTOCOL LAYER
=============================================================================

The three pieces every request passes through:

    raw bytes ──► RequestParser ──► HTTPRequest
                                        │
                                        ▼
                                     Router ──► handler
                                                   │
                                                   ▼
    raw bytes ◄── HTTPResponse.to_bytes() ◄── HTTPResponse

    ┌─────────────────────────────────────────────────────────────────────┐
    │ request.py   HTTPRequest, RequestParser, HTTPParseError             │
    │ response.py  HTTPResponse, ResponseBuilder, ok_json, error_json     │
    │ router.py    Route, Router (exact path match, first match wins)     │
    └─────────────────────────────────────────────────────────────────────┘

Status codes come straight from the standard library's http.HTTPStatus,
which already carries the reason phrase (HTTPStatus.NOT_FOUND.phrase).

=============================================================================
"""

from http import HTTPStatus

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    ok_json,
    error_json,
    internal_error,
)
from .router import Router, Route, Handler

__all__ = [
    # Request parsing
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",

    # Response building
    "HTTPResponse",
    "ResponseBuilder",
    "ok_json",
    "error_json",
    "internal_error",

    # Routing
    "Router",
    "Route",
    "Handler",

    # Status codes
    "HTTPStatus",
]
