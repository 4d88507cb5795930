"""
=============================================================================
STATIC PAGES
=============================================================================

The home page and the 404 page never change while the server runs, so
they are built ONCE at startup into a StaticPages object and handed to the
router. No request ever reads a page from disk.

    startup                              every request
    ───────                              ─────────────
    StaticPages.from_config(config)      pages.home(request)
        │  (reads home_page file,            │
        │   if one is configured)            ▼
        ▼                                 200 text/html, same body every time
    StaticPages(home_html=...,
                not_found_html=...)

=============================================================================
"""

from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path
from typing import Optional
import logging

from .http import HTTPRequest, HTTPResponse, ResponseBuilder


logger = logging.getLogger(__name__)


DEFAULT_HOME_HTML = """<!DOCTYPE html>
<html>
  <head>
    <title>Home Page</title>
  </head>
  <body>
    <h1>Welcome to the Home Page</h1>
    <p>This is the home page content.</p>
    <p>Try the product API:</p>
    <ul>
      <li><a href="/api">/api</a> - every product</li>
      <li><a href="/api?category=electronics">/api?category=electronics</a> - one category</li>
      <li><a href="/api?limit=2">/api?limit=2</a> - the first two products</li>
    </ul>
  </body>
</html>
"""

DEFAULT_NOT_FOUND_HTML = "<h1>404 - Page Not Found</h1>"


@dataclass(frozen=True)
class StaticPages:
    """
    Fixed page bodies, keyed by route.

        "home"       → 200, home_html
        "not_found"  → 404, not_found_html
    """

    home_html: str = DEFAULT_HOME_HTML
    not_found_html: str = DEFAULT_NOT_FOUND_HTML

    @classmethod
    def from_config(cls, home_page: Optional[Path] = None) -> "StaticPages":
        """
        Build the pages, reading home_page if one is given.

        Raises:
            OSError: If home_page is set but can't be read. This happens at
                     startup, so a bad path stops the server right away.
        """
        if home_page is None:
            return cls()

        logger.info(f"Loading home page from {home_page}")
        return cls(home_html=Path(home_page).read_text(encoding="utf-8"))

    def respond(self, route_key: str) -> HTTPResponse:
        """
        Response for a static route key.

        Raises:
            KeyError: For a key other than "home" or "not_found".
        """
        if route_key == "home":
            status, body = HTTPStatus.OK, self.home_html
        elif route_key == "not_found":
            status, body = HTTPStatus.NOT_FOUND, self.not_found_html
        else:
            raise KeyError(route_key)

        return ResponseBuilder().status(status).html(body).build()

    # Handler-shaped views for the router

    def home(self, request: HTTPRequest) -> HTTPResponse:
        return self.respond("home")

    def not_found(self, request: HTTPRequest) -> HTTPResponse:
        return self.respond("not_found")
