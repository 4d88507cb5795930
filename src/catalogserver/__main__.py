"""
=============================================================================
CATALOG SERVER CLI ENTRY POINT
=============================================================================

    # Defaults (127.0.0.1:3000, packaged sample catalog)
    python -m catalogserver

    # Your own catalog on another port
    python -m catalogserver --port 8080 --data ./products.json

    # Listen on all interfaces (containers)
    python -m catalogserver --host 0.0.0.0

    # Custom home page, JSON access logs
    python -m catalogserver --home-page ./index.html --log-format json

Settings are layered: defaults, then environment variables
(ServerConfig.from_env), then the flags given here.

=============================================================================
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig, VALID_LOG_FORMATS, VALID_LOG_LEVELS
from .middleware import LoggingMiddleware
from .server import HTTPServer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-server",
        description="Product catalog HTTP server built from scratch in Python",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m catalogserver                          # Run with defaults
  python -m catalogserver --port 8080              # Custom port
  python -m catalogserver --data ./products.json   # Custom catalog
  python -m catalogserver --host 0.0.0.0           # Listen on all interfaces
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--host", "-H", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: 3000)")

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--data", "-d", help="Catalog JSON file served on /api")
    parser.add_argument("--home-page", help="HTML file served on / (read once at startup)")

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument("--log-level", "-l", choices=VALID_LOG_LEVELS, help="Logging level (default: INFO)")
    parser.add_argument("--log-format", choices=VALID_LOG_FORMATS, help="Access log format (default: text)")

    parser.add_argument("--version", "-v", action="version", version=f"CatalogServer {__version__}")

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Environment-based config with any given flags laid on top."""
    config = ServerConfig.from_env()

    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.data is not None:
        config.data_file = Path(args.data)
    if args.home_page is not None:
        config.home_page = Path(args.home_page)
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format

    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = HTTPServer(config)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    server.use(LoggingMiddleware(log_format=config.log_format))

    # start() logs the bound address once the socket is listening
    try:
        server.run()
    except OSError as e:
        print(f"Error: could not serve on {config.host}:{config.port}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
