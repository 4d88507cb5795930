"""
=============================================================================
APPLICATION WIRING
=============================================================================

create_app() builds the whole request-handling side of the server from a
ServerConfig, with no globals involved:

    ServerConfig
        │
        ├── data_file ──► JSONFileSource ──► CatalogHandler ─┐
        │                                                      │
        └── home_page ──► StaticPages ──┬── home ─────────────┤
                                        └── not_found ─────┐  │
                                                           ▼  ▼
                                                         Router
                                                     /     → home
                                                     /api  → catalog
                                                     else  → not_found

The returned router is frozen: the route table is fixed for the life of
the process.

=============================================================================
"""

from typing import Optional

from .catalog import CatalogHandler, DataSource, JSONFileSource
from .config import ServerConfig
from .http import Router
from .pages import StaticPages


def create_app(
    config: Optional[ServerConfig] = None,
    source: Optional[DataSource] = None,
    pages: Optional[StaticPages] = None,
) -> Router:
    """
    Build the frozen router for the catalog server.

    Args:
        config: Server configuration (defaults to ServerConfig()).
        source: Catalog source override, e.g. a MemorySource in tests.
                Defaults to a JSONFileSource on config.data_file.
        pages: Static pages override. Defaults to
               StaticPages.from_config(config.home_page).

    Returns:
        A frozen Router ready for dispatch().

    Example:
        router = create_app(ServerConfig(data_file="products.json"))
        response = await router.dispatch(request)
    """
    config = config or ServerConfig()
    source = source or JSONFileSource(config.data_file)
    pages = pages or StaticPages.from_config(config.home_page)

    router = Router(not_found=pages.not_found)
    router.add_route("/", pages.home, name="home")
    router.add_route("/api", CatalogHandler(source), name="api")
    return router.freeze()
