"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the catalog server.

Everything the server needs to know at startup lives in ONE object that is
built once and then handed to the pieces that need it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE CONFIG COMES FROM                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m catalogserver --port 4000                       │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── HTTP_PORT=4000 python -m catalogserver                    │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHY NOT MODULE-LEVEL CONSTANTS?
=============================================================================

A tiny server could just write PORT = 3000 at the top of a file. That works
until a test wants a different port, or a data file in a temp directory.
Passing a ServerConfig around keeps every collaborator testable: the test
builds its own config and nothing global has to be patched.

=============================================================================
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


# The sample catalog shipped inside the package (catalogserver/data/).
DEFAULT_DATA_FILE = Path(__file__).parent / "data" / "products.json"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the catalog server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, timeout

    HTTP SETTINGS
    - keep_alive, keep_alive_timeout, max_request_size

    CONTENT
    - data_file, home_page

    LOGGING
    - log_level, log_format

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces (containers)
    """

    port: int = 3000
    """
    The port number to listen on.
    0 asks the OS for any free port (handy in tests).
    """

    timeout: float = 30.0
    """
    Seconds to wait for a client to finish sending a request.
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    keep_alive: bool = True
    """
    Allow several requests on the same TCP connection.
    """

    keep_alive_timeout: float = 5.0
    """
    Idle seconds before a kept-alive connection is closed.
    """

    max_request_size: int = 1024 * 1024  # 1 MB
    """
    Largest request (headers + body) we are willing to buffer.
    The catalog API only serves GETs, so this can stay small.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT
    # ─────────────────────────────────────────────────────────────────────

    data_file: Path = field(default_factory=lambda: DEFAULT_DATA_FILE)
    """
    JSON file holding the product collection served on /api.
    Re-read on every request, so edits show up without a restart.
    """

    home_page: Optional[Path] = None
    """
    Optional HTML file served on /. Read once at startup.
    None means the built-in welcome page.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    log_format: str = "text"
    """
    Access log format: 'text' (Apache-like) or 'json'.
    """

    server_name: str = "CatalogServer/1.0"
    """
    Value of the Server response header.
    """

    def __post_init__(self):
        # Accept plain strings from the CLI/env and normalize to Path
        self.data_file = Path(self.data_file)
        if self.home_page is not None:
            self.home_page = Path(self.home_page)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTP_HOST          Server host (default: 127.0.0.1)
        HTTP_PORT          Server port (default: 3000)
        HTTP_TIMEOUT       Request read timeout in seconds (default: 30)
        HTTP_LOG_LEVEL     Logging level (default: INFO)
        HTTP_LOG_FORMAT    Access log format (default: text)
        CATALOG_DATA_FILE  Product JSON file (default: packaged sample)
        CATALOG_HOME_PAGE  HTML file for / (default: built-in page)

        =====================================================================
        """
        return cls(
            host=os.getenv("HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("HTTP_PORT", "3000")),
            timeout=float(os.getenv("HTTP_TIMEOUT", "30")),
            log_level=os.getenv("HTTP_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTP_LOG_FORMAT", "text"),
            data_file=os.getenv("CATALOG_DATA_FILE", str(DEFAULT_DATA_FILE)),
            home_page=os.getenv("CATALOG_HOME_PAGE") or None,
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        We validate at startup, not at first use, so a typo in HTTP_PORT
        stops the server immediately instead of on the first request.

        Note that data_file is NOT required to exist here: a missing data
        file is a per-request condition answered with a 404, not a startup
        failure.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.keep_alive_timeout <= 0:
            raise ValueError("keep_alive_timeout must be > 0")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")

        if self.log_format not in VALID_LOG_FORMATS:
            raise ValueError(f"Unknown log format: {self.log_format}")


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# 1. Type-safe configuration with a dataclass
# 2. Environment variable support (from_env)
# 3. Fail-fast validation at startup
# 4. Defaults that run out of the box against the packaged sample catalog
# =============================================================================
