"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes a client sends into an immutable HTTPRequest.

=============================================================================
WHAT A REQUEST LOOKS LIKE ON THE WIRE
=============================================================================

    GET /api?category=electronics&limit=5 HTTP/1.1\r\n     ← request line
    Host: localhost:3000\r\n                                ← headers
    Accept: application/json\r\n
    \r\n                                                    ← blank line
    (no body for a GET)

The interesting part for this server is the request target:

    /api?category=electronics&limit=5
    ──┬─ ────────────┬───────────────
      │              │
    path       query string
                     │
                     ▼
        {"category": "electronics", "limit": "5"}

=============================================================================
ONE VALUE PER QUERY KEY
=============================================================================

A query string may repeat a key: ?limit=2&limit=9. Rather than handing
handlers a list for every parameter, we keep ONE value per key and the LAST
occurrence wins, the same rule a browser's URLSearchParams follows when it
is flattened into a plain object. Blank values are kept, so ?category=
arrives as "" and handlers can tell "present but empty" from "absent".

=============================================================================
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlsplit
import re


class HTTPParseError(Exception):
    """
    Raised when HTTP request parsing fails.

    Carries the status code the client should receive:

        400 Bad Request                - Malformed request syntax
        405 Method Not Allowed         - Unknown method
        413 Payload Too Large          - Request exceeds size limit
        505 HTTP Version Not Supported - Unknown HTTP version
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class HTTPRequest:
    """
    A parsed HTTP request.

    =========================================================================
    IMMUTABILITY
    =========================================================================

    The request is frozen once parsed. Handlers can read anything but can
    not change what the router or the logging middleware will see:

        request.path = "/other"              → FrozenInstanceError
        request.query_params["limit"] = "1"  → TypeError (read-only mapping)

    =========================================================================
    ATTRIBUTES
    =========================================================================

        method:         "GET", "POST", ...
        path:           URL path WITHOUT the query string ("/api")
        query_params:   {"category": "electronics", "limit": "5"}
        version:        "HTTP/1.1" or "HTTP/1.0"
        headers:        lowercase header name → value
        client_address: (ip, port) of the peer, for logging

    =========================================================================
    """

    method: str
    path: str
    query_params: Mapping[str, str] = field(default_factory=dict)
    version: str = "HTTP/1.1"
    headers: Mapping[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    def __post_init__(self):
        # Copy, then wrap in a read-only view. object.__setattr__ is the
        # documented way to assign inside a frozen dataclass.
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def host(self) -> str:
        """The Host header (required by HTTP/1.1)."""
        return self.headers.get("host", "")

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_keep_alive(self) -> bool:
        """
        Should the connection stay open after this request?

            HTTP/1.1: keep alive unless "Connection: close"
            HTTP/1.0: close unless "Connection: keep-alive"
        """
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get a query parameter.

        Example:
            # URL: /api?limit=5
            request.get_query("limit")             # "5"
            request.get_query("category")          # None
            request.get_query("category", "all")   # "all"
        """
        return self.query_params.get(name, default)


class RequestParser:
    """
    Parses raw HTTP request bytes into HTTPRequest objects.

        Raw bytes
            │
            ▼
        1. Size check ............... too large?     → 413
        2. Split at \\r\\n\\r\\n ...... no separator?  → 400
        3. Request line ............. bad syntax?    → 400
                                      bad method?    → 405
                                      bad version?   → 505
        4. Headers (lowercased)
        5. Query string → one value per key
            │
            ▼
        HTTPRequest
    """

    VALID_METHODS = {
        "GET", "POST", "PUT", "DELETE", "PATCH",
        "HEAD", "OPTIONS", "TRACE", "CONNECT",
    }

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse raw HTTP request data.

        Args:
            data: Raw request bytes as read from the connection.
            client_address: Peer (ip, port), kept for logging.

        Returns:
            Parsed, immutable HTTPRequest.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        # ─────────────────────────────────────────────────────────────────
        # STEP 1: Size limit
        # ─────────────────────────────────────────────────────────────────
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413,
            )

        # ─────────────────────────────────────────────────────────────────
        # STEP 2: Header section ends at the first blank line
        # ─────────────────────────────────────────────────────────────────
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("latin-1")
        lines = header_section.split("\r\n")

        # ─────────────────────────────────────────────────────────────────
        # STEP 3 + 4: Request line, then headers
        # ─────────────────────────────────────────────────────────────────
        method, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        return HTTPRequest(
            method=method,
            path=path,
            query_params=query_params,
            version=version,
            headers=headers,
            client_address=client_address,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, str], str]:
        """
        Parse "METHOD SP REQUEST-TARGET SP HTTP-VERSION".

            "GET /api?limit=5 HTTP/1.1"
             ─┬─ ──────┬───── ───┬────
              │        │         │
           method    target   version
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method, target, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505,
            )

        # ---------------------------------------------------------------------
        # Split the target into path and query
        # ---------------------------------------------------------------------
        # "/api?category=books&limit=2"
        #   path  → "/api"
        #   query → {"category": "books", "limit": "2"}
        #
        # The path stays percent-encoded, so "/%61pi" is not "/api".
        # dict() over parse_qsl keeps the LAST value of a repeated key.
        parts = urlsplit(target)
        path = parts.path or "/"
        query_params = dict(parse_qsl(parts.query, keep_blank_values=True))

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines into a dict with lowercase names.

        Repeated headers are joined with ", " (RFC 7230 section 3.2.2).
        Lines that do not look like headers are skipped.
        """
        headers: Dict[str, str] = {}

        for line in lines:
            if not line:
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 1024 * 1024
) -> HTTPRequest:
    """Parse one request with a throwaway RequestParser."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
