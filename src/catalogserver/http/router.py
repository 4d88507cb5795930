"""
=============================================================================
URL ROUTER
=============================================================================

Maps a request path to the handler that answers it.

=============================================================================
A TABLE, NOT AN IF/ELIF CHAIN
=============================================================================

The smallest possible server routes like this:

    if path == "/":
        ...home page...
    elif path == "/api":
        ...data...
    else:
        ...404...

It works, but every new page means editing that one block, and none of
the branches can be tested on its own. The router keeps the same logic as
DATA, an ordered table of (path, handler) pairs:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTE TABLE                                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   #   path      handler                                             │
    │   ─   ────      ───────                                             │
    │   0   /         home        ◄── GET /        matches here           │
    │   1   /api      catalog     ◄── GET /api?... matches here           │
    │                                                                      │
    │   (no match)    not_found   ◄── GET /anything-else                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
MATCHING RULES
=============================================================================

1. EXACT match on the path only. The query string never takes part:
   "/api?limit=2" is routed as "/api".

2. No prefixes, wildcards or trailing-slash cleanup:
   "/api/" and "/api/v1" do NOT match "/api".

3. The method is ignored. GET /api and POST /api reach the same handler.

4. First match wins. Registering the same path twice leaves the second
   entry unreachable.

=============================================================================
SYNC AND ASYNC HANDLERS
=============================================================================

A handler may be a plain function or an `async def`. dispatch() calls it
and awaits the result only when there is something to await, so pure
handlers (static pages) stay plain functions and are trivial to test:

    def home(request):            → returns HTTPResponse
    async def catalog(request):   → returns a coroutine, awaited by dispatch

=============================================================================
"""

from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Union
import inspect

from .request import HTTPRequest
from .response import HTTPResponse


# A handler takes a request and returns a response, directly or awaitably.
Handler = Callable[[HTTPRequest], Union[HTTPResponse, Awaitable[HTTPResponse]]]


@dataclass(frozen=True)
class Route:
    """
    One row of the route table.

        Route(path="/api", handler=catalog, name="api")
    """

    path: str
    handler: Handler
    name: Optional[str] = None


class Router:
    """
    Ordered, exact-match router.

    =========================================================================
    LIFECYCLE
    =========================================================================

        router = Router(not_found=pages.not_found)   # 1. construct
        router.add_route("/", pages.home)             # 2. register
        router.add_route("/api", catalog)
        router.freeze()                               # 3. lock
        response = await router.dispatch(request)     # 4. serve

    After freeze() the table can no longer change, so every request sees
    the same routes no matter how many connections are being served.

    =========================================================================
    """

    def __init__(self, not_found: Handler):
        """
        Args:
            not_found: Handler used when no route matches.
        """
        self._routes: List[Route] = []
        self._named_routes: Dict[str, Route] = {}
        self._not_found = not_found
        self._frozen = False

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, name: Optional[str] = None) -> Route:
        """
        Append a route to the table.

        Raises:
            RuntimeError: If the router has been frozen.
            ValueError: If path does not start with "/".
        """
        if self._frozen:
            raise RuntimeError("Router is frozen; routes can not be added after startup")
        if not path.startswith("/"):
            raise ValueError(f"Route path must start with '/': {path!r}")

        route = Route(path=path, handler=handler, name=name)
        self._routes.append(route)
        if name:
            self._named_routes[name] = route
        return route

    def route(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """
        Decorator form of add_route():

            @router.route("/api")
            async def catalog(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, name)
            return handler
        return decorator

    def freeze(self) -> "Router":
        """Lock the route table. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def routes(self) -> tuple[Route, ...]:
        """Read-only snapshot of the table, in match order."""
        return tuple(self._routes)

    # =========================================================================
    # MATCHING AND DISPATCH
    # =========================================================================

    def match(self, path: str) -> Optional[Route]:
        """
        Return the first route whose path equals `path`, or None.

        A linear scan: with a handful of routes it is as fast as anything
        cleverer and keeps the first-match-wins order obvious.
        """
        for route in self._routes:
            if route.path == path:
                return route
        return None

    async def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request and produce its response.

        1. Look the path up in the table
        2. Fall back to the not-found handler
        3. Call the handler, awaiting the result if it is awaitable
        """
        route = self.match(request.path)
        handler = route.handler if route else self._not_found

        result = handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def url_for(self, name: str) -> Optional[str]:
        """Path of a named route, or None if no route has that name."""
        route = self._named_routes.get(name)
        return route.path if route else None

    def describe(self) -> list[str]:
        """
        One line per route, handy for a startup log:

            /      → home
            /api   → CatalogHandler
        """
        width = max((len(r.path) for r in self._routes), default=0)
        lines = []
        for route in self._routes:
            target = getattr(route.handler, "__name__", type(route.handler).__name__)
            lines.append(f"{route.path:<{width}}  → {target}")
        return lines
