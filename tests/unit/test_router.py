"""
Unit tests for URL routing.
"""

import pytest

from catalogserver.http.router import Router, Route
from catalogserver.http.response import ResponseBuilder, HTTPStatus


def _text_handler(body):
    def handler(request):
        return ResponseBuilder().text(body).build()
    handler.__name__ = f"handler_{body}"
    return handler


def _not_found(request):
    return ResponseBuilder().status(HTTPStatus.NOT_FOUND).text("missing").build()


@pytest.fixture
def router():
    router = Router(not_found=_not_found)
    router.add_route("/", _text_handler("home"), name="home")
    router.add_route("/api", _text_handler("api"), name="api")
    return router


class TestRouteMatching:
    """Tests for exact path matching."""

    def test_exact_match(self, router):
        route = router.match("/api")

        assert isinstance(route, Route)
        assert route.path == "/api"
        assert route.name == "api"

    def test_root_match(self, router):
        assert router.match("/").name == "home"

    @pytest.mark.parametrize("path", ["/api/", "/api/v1", "/ap", "/API", "//", ""])
    def test_no_prefix_or_normalized_match(self, router, path):
        """Test that only the exact path matches."""
        assert router.match(path) is None

    def test_first_match_wins(self):
        router = Router(not_found=_not_found)
        first = router.add_route("/dup", _text_handler("first"))
        router.add_route("/dup", _text_handler("second"))

        assert router.match("/dup") is first


class TestRouteRegistration:
    """Tests for building the route table."""

    def test_routes_in_order(self, router):
        assert [r.path for r in router.routes] == ["/", "/api"]

    def test_route_decorator(self):
        router = Router(not_found=_not_found)

        @router.route("/hello", name="hello")
        def hello(request):
            return ResponseBuilder().text("hi").build()

        assert router.match("/hello").handler is hello
        assert router.url_for("hello") == "/hello"

    def test_path_must_start_with_slash(self):
        router = Router(not_found=_not_found)

        with pytest.raises(ValueError):
            router.add_route("api", _text_handler("api"))

    def test_frozen_router_rejects_routes(self, router):
        assert router.freeze() is router
        assert router.frozen is True

        with pytest.raises(RuntimeError):
            router.add_route("/late", _text_handler("late"))

    def test_routes_snapshot_is_immutable(self, router):
        assert isinstance(router.routes, tuple)

    def test_url_for_unknown(self, router):
        assert router.url_for("nope") is None

    def test_describe(self, router):
        lines = router.describe()

        assert len(lines) == 2
        assert "handler_home" in lines[0]
        assert lines[1].startswith("/api")


class TestDispatch:
    """Tests for Router.dispatch()."""

    @pytest.mark.asyncio
    async def test_dispatch_sync_handler(self, router, make_request):
        response = await router.dispatch(make_request("/api"))

        assert response.status == HTTPStatus.OK
        assert response.body == b"api"

    @pytest.mark.asyncio
    async def test_dispatch_async_handler(self, make_request):
        router = Router(not_found=_not_found)

        async def slow(request):
            return ResponseBuilder().text("async").build()

        router.add_route("/slow", slow)
        response = await router.dispatch(make_request("/slow"))

        assert response.body == b"async"

    @pytest.mark.asyncio
    async def test_dispatch_ignores_query(self, router, make_request):
        response = await router.dispatch(make_request("/api", limit="2", category="x"))

        assert response.body == b"api"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE", "HEAD"])
    async def test_dispatch_ignores_method(self, router, make_request, method):
        response = await router.dispatch(make_request("/api", method=method))

        assert response.body == b"api"

    @pytest.mark.asyncio
    async def test_dispatch_not_found(self, router, make_request):
        response = await router.dispatch(make_request("/nonexistent"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b"missing"

    @pytest.mark.asyncio
    async def test_dispatch_first_match_wins(self, make_request):
        router = Router(not_found=_not_found)
        router.add_route("/dup", _text_handler("first"))
        router.add_route("/dup", _text_handler("second"))

        response = await router.dispatch(make_request("/dup"))

        assert response.body == b"first"
