"""
Unit tests for URL router.
"""

import pytest

from minihttp.http.router import Router, RoutingError
from minihttp.http.request import HTTPRequest, Method
from minihttp.http.response import HTTPResponse, ok
from minihttp.http.status_codes import HTTPStatus


def make_request(path: str, method: Method = Method.GET) -> HTTPRequest:
    """Helper to create a request for testing."""
    return HTTPRequest(method=method, path=path)


def named_handler(name: str):
    """Handler that answers with its own name."""
    def handler(request: HTTPRequest) -> HTTPResponse:
        return ok(name)
    handler.__name__ = name
    return handler


@pytest.fixture
def router() -> Router:
    router = Router()
    router.add("", named_handler("home"))
    router.add("echo", named_handler("echo"))
    router.add("user-agent", named_handler("user-agent"))
    router.add("files", named_handler("files"))
    return router


class TestDispatchKey:
    """Tests for first-segment extraction."""

    @pytest.mark.parametrize("path,key", [
        ("/", ""),
        ("/echo/abc", "echo"),
        ("/echo/", "echo"),
        ("/echo", "echo"),
        ("/files/a/b", "files"),
        ("//echo", ""),
        ("/unknown/x", "unknown"),
    ])
    def test_keys(self, path: str, key: str):
        assert Router.dispatch_key(path) == key

    @pytest.mark.parametrize("path", ["*", "echo", ""])
    def test_no_segment(self, path: str):
        with pytest.raises(RoutingError, match="InvalidRequest"):
            Router.dispatch_key(path)


class TestRouter:
    """Tests for Router class."""

    @pytest.mark.parametrize("path,expected", [
        ("/", b"home"),
        ("/echo/abc", b"echo"),
        ("/user-agent", b"user-agent"),
        ("/files/a.txt", b"files"),
    ])
    def test_dispatch(self, router: Router, path: str, expected: bytes):
        response = router.dispatch(make_request(path))

        assert response.status == HTTPStatus.OK
        assert response.body == expected

    def test_dispatch_ignores_method(self, router: Router):
        response = router.dispatch(make_request("/echo/x", Method.DELETE))
        assert response.body == b"echo"

    def test_unknown_segment_is_404(self, router: Router):
        response = router.dispatch(make_request("/unknown"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b""

    def test_segment_match_is_exact(self, router: Router):
        assert router.dispatch(make_request("/Echo/x")).status == HTTPStatus.NOT_FOUND
        assert router.dispatch(make_request("/echoes")).status == HTTPStatus.NOT_FOUND

    def test_no_segment_raises(self, router: Router):
        with pytest.raises(RoutingError) as exc_info:
            router.dispatch(make_request("*"))

        assert exc_info.value.path == "*"

    def test_custom_fallback(self):
        router = Router(fallback=named_handler("fallback"))
        assert router.dispatch(make_request("/nope")).body == b"fallback"

    def test_route_decorator(self):
        router = Router()

        @router.route("ping")
        def ping(request):
            return ok("pong")

        assert router.segments == ["ping"]
        assert router.resolve("/ping") is ping
        assert router.dispatch(make_request("/ping")).body == b"pong"

    def test_add_replaces_and_chains(self):
        first, second = named_handler("first"), named_handler("second")
        router = Router().add("x", first).add("x", second)

        assert router.segments == ["x"]
        assert router.resolve("/x") is second
