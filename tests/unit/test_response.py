"""
Unit tests for HTTP response building.
"""

from datetime import datetime, timezone
import json

import pytest

from catalogserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    HTTPStatus,
    ok_json,
    error_json,
    internal_error,
    format_http_date,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        """Test status line generation."""
        response = HTTPResponse(status=HTTPStatus.OK)
        assert response.status_line == "HTTP/1.1 200 OK"

        response = HTTPResponse(status=HTTPStatus.NOT_FOUND)
        assert response.status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes_includes_headers(self):
        """Test that to_bytes includes all headers."""
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"X-Custom": "value"},
            body=b"test",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"X-Custom: value\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert b"Server: CatalogServer/1.0\r\n" in result
        assert b"Date: " in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_to_bytes_counts_encoded_length(self):
        """Test that Content-Length counts bytes, not characters."""
        response = ResponseBuilder().text("café").build()

        assert b"Content-Length: 5\r\n" in response.to_bytes()

    def test_to_bytes_keeps_explicit_headers(self):
        """Test that handler-set headers are not overwritten."""
        response = HTTPResponse(headers={"Server": "custom"}, body=b"x")
        result = response.to_bytes(server_name="ignored")

        assert b"Server: custom\r\n" in result
        assert b"ignored" not in result

    def test_to_bytes_does_not_mutate_headers(self):
        """Test that serializing leaves the stored headers alone."""
        response = HTTPResponse(body=b"abc")
        response.to_bytes()

        assert "Content-Length" not in response.headers

    def test_set_header_chaining(self):
        """Test method chaining for headers."""
        response = (HTTPResponse()
            .set_header("X-One", "1")
            .set_header("X-Two", "2"))

        assert response.headers == {"X-One": "1", "X-Two": "2"}


class TestResponseBuilder:
    """Tests for ResponseBuilder class."""

    def test_default_is_empty_200(self):
        response = ResponseBuilder().build()

        assert response.status == HTTPStatus.OK
        assert response.body == b""

    def test_status_accepts_int(self):
        """Test that plain ints are converted to HTTPStatus."""
        response = ResponseBuilder().status(404).build()

        assert response.status is HTTPStatus.NOT_FOUND

    def test_status_rejects_unknown_code(self):
        with pytest.raises(ValueError):
            ResponseBuilder().status(999)

    def test_html_sets_content_type(self):
        response = ResponseBuilder().html("<h1>Hi</h1>").build()

        assert response.content_type == "text/html; charset=utf-8"
        assert response.body == b"<h1>Hi</h1>"

    def test_json_body(self):
        """Test JSON serialization and content type."""
        data = [{"name": "Café Table", "category": "kitchen"}]
        response = ResponseBuilder().json(data).build()

        assert response.content_type == "application/json; charset=utf-8"
        assert json.loads(response.body.decode("utf-8")) == data
        assert "Café".encode("utf-8") in response.body

    def test_close_connection(self):
        response = ResponseBuilder().close_connection().build()

        assert response.headers["Connection"] == "close"

    def test_build_copies_headers(self):
        """Test that each build() gets its own header dict."""
        builder = ResponseBuilder().header("X-A", "1")
        first = builder.build()
        first.set_header("X-B", "2")

        assert "X-B" not in builder.build().headers


class TestConvenienceFunctions:
    """Tests for the JSON response helpers."""

    def test_ok_json(self):
        response = ok_json([])

        assert response.status == HTTPStatus.OK
        assert response.body == b"[]"

    def test_error_json_body_shape(self):
        """Test the structured {"error": ...} body."""
        response = error_json(HTTPStatus.NOT_FOUND, "Data file not found")

        assert response.status == HTTPStatus.NOT_FOUND
        assert json.loads(response.body) == {"error": "Data file not found"}

    def test_internal_error(self):
        response = internal_error()

        assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"error": "Internal Server Error"}


def test_format_http_date():
    """Test RFC 7231 date formatting."""
    dt = datetime(2026, 10, 18, 9, 5, 3, tzinfo=timezone.utc)

    assert format_http_date(dt) == "Sun, 18 Oct 2026 09:05:03 GMT"
