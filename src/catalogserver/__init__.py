"""
=============================================================================
CATALOGSERVER - A Small Product Catalog Server Built From Scratch
=============================================================================

An HTTP server on raw asyncio streams that shows the basics every web
framework hides from you:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /                           → HTML home page                  │
    │   GET /api                        → every product, as JSON          │
    │   GET /api?category=electronics   → one category                    │
    │   GET /api?limit=5                → the first five                  │
    │   GET /anything-else              → 404 page                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    catalogserver/
    ├── __init__.py        # This file - package exports
    ├── __main__.py        # CLI entry point (python -m catalogserver)
    ├── config.py          # ServerConfig dataclass
    ├── app.py             # create_app(): builds the route table
    ├── server.py          # HTTPServer: asyncio transport
    ├── middleware.py      # Middleware pipeline + access logging
    ├── pages.py           # Static home / 404 pages
    ├── http/              # Protocol pieces
    │   ├── request.py     # HTTPRequest + parser
    │   ├── response.py    # HTTPResponse + builder
    │   └── router.py      # Exact-match router
    ├── catalog/           # The product API
    │   ├── source.py      # Loading the JSON collection
    │   ├── query.py       # category filter + limit
    │   └── handler.py     # The /api handler
    └── data/
        └── products.json  # Sample catalog

=============================================================================
QUICK START
=============================================================================

    from catalogserver import HTTPServer, ServerConfig
    from catalogserver.middleware import LoggingMiddleware

    server = HTTPServer(ServerConfig(port=3000, data_file="products.json"))
    server.use(LoggingMiddleware())
    server.run()

=============================================================================
"""

__version__ = "1.0.0"

from .app import create_app
from .config import ServerConfig
from .server import HTTPServer

__all__ = ["HTTPServer", "ServerConfig", "create_app", "__version__"]
