"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

Every handler in this server returns an HTTPResponse. The transport turns
it into bytes with to_bytes() and writes it to the socket.

=============================================================================
WHAT A RESPONSE LOOKS LIKE ON THE WIRE
=============================================================================

    HTTP/1.1 200 OK\r\n                         ← status line
    Content-Type: application/json; charset=utf-8\r\n
    Content-Length: 46\r\n                      ← added automatically
    Date: Sun, 18 Oct 2026 10:00:00 GMT\r\n     ← added automatically
    Server: CatalogServer/1.0\r\n               ← added automatically
    \r\n                                        ← blank line
    [{"name": "Laptop", "category": "electronics"}]

=============================================================================
THE BUILDER
=============================================================================

Instead of spelling out status, headers and encoded body by hand:

    HTTPResponse(
        status=HTTPStatus.OK,
        headers={"Content-Type": "application/json; charset=utf-8"},
        body=json.dumps(data).encode("utf-8"),
    )

handlers chain small, named steps:

    ResponseBuilder().status(HTTPStatus.OK).json(data).build()

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Dict, Union
import json


@dataclass
class HTTPResponse:
    """
    An HTTP response waiting to be sent.

    status is an http.HTTPStatus, so both the number and the reason phrase
    are at hand:

        HTTPStatus.NOT_FOUND          → 404
        HTTPStatus.NOT_FOUND.phrase   → "Not Found"
    """

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        """e.g. "HTTP/1.1 200 OK"."""
        return f"{self.version} {self.status.value} {self.status.phrase}"

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a header and return self for chaining."""
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = "CatalogServer/1.0") -> bytes:
        """
        Serialize the response for socket writes.

        Content-Length, Date and Server are filled in unless the handler
        already set them. The stored headers are left untouched.
        """
        response_headers = dict(self.headers)

        # Without Content-Length a keep-alive client can't tell where
        # this body ends and the next response begins.
        response_headers.setdefault("Content-Length", str(len(self.body)))
        response_headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        response_headers.setdefault("Server", server_name)

        lines = [self.status_line]
        for name, value in response_headers.items():
            lines.append(f"{name}: {value}")
        lines.append("")

        header_bytes = "\r\n".join(lines).encode("latin-1") + b"\r\n"
        return header_bytes + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Every method except build() returns self:

        (ResponseBuilder()
            .status(HTTPStatus.NOT_FOUND)
            .json({"error": "Data file not found"})
            .build())
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body: bytes = b""

    # =========================================================================
    # STATUS / HEADERS
    # =========================================================================

    def status(self, status: Union[HTTPStatus, int]) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def content_type(self, content_type: str) -> "ResponseBuilder":
        return self.header("Content-Type", content_type)

    def close_connection(self) -> "ResponseBuilder":
        """Tell the client this is the last response on the connection."""
        return self.header("Connection", "close")

    # =========================================================================
    # BODY
    # =========================================================================

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        """Raw body; strings are UTF-8 encoded."""
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str) -> "ResponseBuilder":
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = "text/plain; charset=utf-8"
        return self

    def html(self, html: str) -> "ResponseBuilder":
        self._body = html.encode("utf-8")
        self._headers["Content-Type"] = "text/html; charset=utf-8"
        return self

    def json(self, data: Any) -> "ResponseBuilder":
        """
        Serialize data as JSON.

        ensure_ascii=False keeps non-ASCII product names readable
        ("Café Table" instead of "Caf\\u00e9 Table").
        """
        self._body = json.dumps(data, ensure_ascii=False).encode("utf-8")
        self._headers["Content-Type"] = "application/json; charset=utf-8"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231), always in GMT.

    Example: Sun, 18 Oct 2026 10:00:00 GMT

    Day and month names are spelled out here instead of using strftime,
    whose %a/%b follow the process locale.
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def ok_json(data: Any) -> HTTPResponse:
    """200 OK with a JSON body."""
    return ResponseBuilder().status(HTTPStatus.OK).json(data).build()


def error_json(status: Union[HTTPStatus, int], message: str) -> HTTPResponse:
    """
    An error with the structured body every JSON failure in this server
    uses:

        {"error": "<message>"}
    """
    return ResponseBuilder().status(status).json({"error": message}).build()


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    """500 with a generic message. Details belong in the log, not the body."""
    return error_json(HTTPStatus.INTERNAL_SERVER_ERROR, message)
