"""
pytest configuration and fixtures.
"""

import json
import socket
from pathlib import Path

import pytest

from catalogserver import ServerConfig
from catalogserver.catalog import MemorySource
from catalogserver.http import HTTPRequest


SAMPLE_RECORDS = [
    {"id": 1, "name": "Laptop", "category": "electronics"},
    {"id": 2, "name": "Mug", "category": "kitchen"},
    {"id": 3, "name": "Headphones", "category": "electronics"},
    {"id": 4, "name": "Novel", "category": "books"},
    {"id": 5, "name": "Phone", "category": "electronics"},
    {"id": 6, "name": "Knife", "category": "kitchen"},
]


def _make_request(path: str = "/", method: str = "GET", **query: str) -> HTTPRequest:
    """Build a request descriptor without going through the parser."""
    return HTTPRequest(method=method, path=path, query_params=query)


@pytest.fixture
def make_request():
    """Factory fixture: make_request("/api", limit="2")."""
    return _make_request


@pytest.fixture
def records() -> list:
    """A fresh copy of the sample catalog."""
    return [dict(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def memory_source(records) -> MemorySource:
    return MemorySource(records)


@pytest.fixture
def data_file(tmp_path: Path, records) -> Path:
    """The sample catalog written to a temp JSON file."""
    path = tmp_path / "products.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture
def config(data_file: Path) -> ServerConfig:
    """Test configuration pointing at the temp catalog."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let the OS pick a free port
        timeout=5.0,
        data_file=data_file,
        log_level="WARNING",
    )


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request for the catalog API."""
    return (
        b"GET /api?category=electronics&limit=2 HTTP/1.1\r\n"
        b"Host: localhost:3000\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: application/json\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
