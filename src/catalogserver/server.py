"""
=============================================================================
CATALOG HTTP SERVER
=============================================================================

The transport: accepts TCP connections, reads HTTP requests off them,
hands each one to the router and writes the response back.

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   asyncio.start_server ──► one task per connection                  │
    │                                   │                                  │
    │                                   ▼                                  │
    │                          ┌─────────────────┐                        │
    │                          │ _read_request() │  headers, then body    │
    │                          └────────┬────────┘                        │
    │                                   ▼                                  │
    │                          ┌─────────────────┐                        │
    │                          │  RequestParser  │  bytes → HTTPRequest   │
    │                          └────────┬────────┘                        │
    │                                   ▼                                  │
    │                  LoggingMiddleware → Router.dispatch                 │
    │                                   │                                  │
    │                                   ▼                                  │
    │                       HTTPResponse.to_bytes() → socket               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY ASYNCIO?
=============================================================================

Serving /api means reading a file. With one thread per connection, a slow
disk parks a whole thread. With an event loop, the read is an `await`: the
connection's task pauses there, and the loop serves every other
connection in the meantime. All the other steps (parsing, routing,
filtering, serializing) are plain synchronous code.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. READ     headers up to \\r\\n\\r\\n, then Content-Length body bytes
    2. PARSE    malformed? → error response, close
    3. DISPATCH middleware + router; an unexpected exception → 500
    4. WRITE    serialize and drain
    5. REPEAT   if keep-alive, else close

=============================================================================
"""

from http import HTTPStatus
from typing import Optional
import asyncio
import contextlib
import logging

from .app import create_app
from .config import ServerConfig
from .http import (
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    RequestParser,
    ResponseBuilder,
    Router,
    internal_error,
)
from .middleware import Middleware, MiddlewarePipeline, NextHandler


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    asyncio HTTP/1.1 server for the catalog app.

    =========================================================================
    USAGE
    =========================================================================

        # Blocking, from a script or the CLI
        server = HTTPServer(ServerConfig(port=3000))
        server.use(LoggingMiddleware())
        server.run()

        # Inside an existing event loop (tests)
        server = HTTPServer(ServerConfig(port=0))
        await server.start()
        host, port = server.address
        ...
        await server.stop()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, app: Optional[Router] = None):
        """
        Args:
            config: Server configuration; validated immediately.
            app: Router to serve. Defaults to create_app(config).
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._router = app or create_app(self.config)
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._middleware = MiddlewarePipeline()

        # Built in start(): middleware wrapped around router.dispatch
        self._handler: Optional[NextHandler] = None
        self._server: Optional[asyncio.AbstractServer] = None

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def use(self, middleware: Middleware) -> "HTTPServer":
        """Add middleware. The first one added runs outermost."""
        self._middleware.add(middleware)
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> tuple[str, int]:
        """
        The (host, port) actually bound. Useful with port=0.

        Raises:
            RuntimeError: If the server has not been started.
        """
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not running")
        return self._server.sockets[0].getsockname()[:2]

    @property
    def is_running(self) -> bool:
        return self._server is not None and self._server.is_serving()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> None:
        """Bind the listening socket and start accepting connections."""
        self._handler = self._middleware.wrap(self._router.dispatch)

        # limit caps how much a single readuntil() may buffer
        self._server = await asyncio.start_server(
            self._handle_connection,
            host=self.config.host,
            port=self.config.port,
            limit=self.config.max_request_size,
        )

        host, port = self.address
        logger.info(f"Server is running on http://{host}:{port}")
        logger.info(f"Serving catalog from {self.config.data_file}")
        for line in self._router.describe():
            logger.info(f"  route {line}")

    async def serve_forever(self) -> None:
        """start() and then serve until cancelled."""
        await self.start()
        try:
            await self._server.serve_forever()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop accepting connections and close the listening socket."""
        if self._server is None:
            return
        logger.info("Shutting down server...")
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("Server stopped")

    def run(self) -> None:
        """
        Configure logging and serve until Ctrl+C.
        """
        self._setup_logging()
        try:
            asyncio.run(self.serve_forever())
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")

    def _setup_logging(self) -> None:
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("catalogserver").setLevel(level)

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    async def _handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """
        Serve one client connection (runs as its own task).

        Loops for as long as the client keeps the connection alive.
        """
        peer = writer.get_extra_info("peername") or ("", 0)
        client_address = (str(peer[0]), int(peer[1]))
        requests_handled = 0

        try:
            while True:
                # The first request gets the full timeout; an idle
                # keep-alive connection only gets keep_alive_timeout.
                timeout = self.config.keep_alive_timeout if requests_handled else self.config.timeout

                try:
                    raw = await asyncio.wait_for(self._read_request(reader), timeout)
                except asyncio.TimeoutError:
                    if requests_handled == 0:
                        await self._send_error(writer, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except HTTPParseError as e:
                    await self._send_error(writer, e.status_code, str(e))
                    break

                if raw is None:
                    break  # Client closed the connection

                try:
                    request = self._parser.parse(raw, client_address)
                except HTTPParseError as e:
                    logger.debug(f"Rejected request from {client_address[0]}: {e}")
                    await self._send_error(writer, e.status_code, str(e))
                    break

                response = await self._respond(request)
                keep_alive = request.is_keep_alive and self.config.keep_alive

                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                data = response.to_bytes(self.config.server_name)
                if request.method == "HEAD":
                    # Same headers as GET, no body
                    data = data[:len(data) - len(response.body)]

                writer.write(data)
                await writer.drain()
                requests_handled += 1

                if not keep_alive:
                    break

        except (ConnectionResetError, BrokenPipeError) as e:
            logger.debug(f"Client {client_address[0]} disconnected: {e}")

        finally:
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()

    async def _read_request(self, reader: asyncio.StreamReader) -> Optional[bytes]:
        """
        Read one complete request: headers, then Content-Length body.

        Returns:
            Raw request bytes, or None if the client closed the connection
            before sending a complete header block.

        Raises:
            HTTPParseError: 413 if the request exceeds max_request_size,
                            400 for a bad Content-Length.
        """
        try:
            head = await reader.readuntil(b"\r\n\r\n")
        except asyncio.IncompleteReadError:
            return None
        except asyncio.LimitOverrunError:
            raise HTTPParseError("Request headers too large", status_code=413)

        content_length = _content_length(head)
        if len(head) + content_length > self.config.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(head) + content_length} bytes",
                status_code=413,
            )

        body = b""
        if content_length:
            try:
                body = await reader.readexactly(content_length)
            except asyncio.IncompleteReadError:
                return None

        return head + body

    async def _respond(self, request: HTTPRequest) -> HTTPResponse:
        """Run the handler chain; turn an unexpected exception into a 500."""
        try:
            return await self._handler(request)
        except Exception as e:
            logger.exception(f"Handler error for {request.method} {request.path}: {e}")
            return internal_error()

    async def _send_error(
        self,
        writer: asyncio.StreamWriter,
        status: int,
        message: str,
    ) -> None:
        """Send an error raised before a request reached the router."""
        response = (ResponseBuilder()
            .status(status)
            .json({"error": message})
            .close_connection()
            .build())

        writer.write(response.to_bytes(self.config.server_name))
        with contextlib.suppress(ConnectionError):
            await writer.drain()


def _content_length(head: bytes) -> int:
    """
    Content-Length from a raw header block, 0 if absent.

    We need this BEFORE full parsing, to know how many body bytes to read.

    Raises:
        HTTPParseError: If the header is present but not a non-negative int.
    """
    for line in head.decode("latin-1").split("\r\n")[1:]:
        name, sep, value = line.partition(":")
        if sep and name.strip().lower() == "content-length":
            try:
                length = int(value.strip())
            except ValueError:
                raise HTTPParseError(f"Invalid Content-Length: {value.strip()!r}")
            if length < 0:
                raise HTTPParseError(f"Invalid Content-Length: {length}")
            return length
    return 0
