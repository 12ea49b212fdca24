"""
Unit tests for route handlers.
"""

from pathlib import Path

import pytest

from minihttp.handlers import FileHandler, home, echo, user_agent
from minihttp.http.request import HTTPRequest, Method
from minihttp.http.status_codes import HTTPStatus, ContentType


class RecordingStorage:
    """In-memory stand-in for FileStorage."""

    def __init__(self, files=None, fail_writes: bool = False):
        self.files = dict(files or {})
        self.fail_writes = fail_writes

    def read(self, path):
        try:
            return self.files[str(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write(self, path, data):
        if self.fail_writes:
            raise OSError("disk full")
        self.files[str(path)] = data


class TestBasicHandlers:
    """Tests for home, echo and user_agent."""

    def test_home(self):
        response = home(HTTPRequest(method=Method.GET, path="/"))

        assert response.status == HTTPStatus.OK
        assert response.body == b""

    def test_echo(self):
        response = echo(HTTPRequest(method=Method.GET, path="/echo/abc"))

        assert response.status == HTTPStatus.OK
        assert response.content_type is ContentType.TEXT_PLAIN
        assert response.body == b"abc"

    def test_echo_keeps_rest_of_path(self):
        response = echo(HTTPRequest(method=Method.GET, path="/echo/a/b%20c"))
        assert response.body == b"a/b%20c"

    def test_echo_empty(self):
        assert echo(HTTPRequest(method=Method.GET, path="/echo/")).body == b""

    def test_user_agent(self):
        request = HTTPRequest(method=Method.GET, path="/user-agent", headers={"User-Agent": "foobar/1.2.3"})
        response = user_agent(request)

        assert response.status == HTTPStatus.OK
        assert response.body == b"foobar/1.2.3"

    def test_user_agent_missing(self):
        response = user_agent(HTTPRequest(method=Method.GET, path="/user-agent"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b""

    def test_user_agent_lookup_is_exact(self):
        request = HTTPRequest(method=Method.GET, path="/user-agent", headers={"user-agent": "x"})
        assert user_agent(request).status == HTTPStatus.NOT_FOUND


class TestFileHandler:
    """Tests for FileHandler against a real directory."""

    def test_get_existing(self, tmp_path: Path):
        (tmp_path / "foo").write_bytes(b"Hello, World!")
        handler = FileHandler(directory=str(tmp_path))

        response = handler(HTTPRequest(method=Method.GET, path="/files/foo"))

        assert response.status == HTTPStatus.OK
        assert response.content_type is ContentType.OCTET_STREAM
        assert response.body == b"Hello, World!"
        assert response.content_length == 13

    def test_get_binary(self, tmp_path: Path):
        data = bytes(range(256))
        (tmp_path / "blob").write_bytes(data)

        response = FileHandler(str(tmp_path))(HTTPRequest(method=Method.GET, path="/files/blob"))
        assert response.body == data

    def test_get_missing(self, tmp_path: Path):
        response = FileHandler(str(tmp_path))(HTTPRequest(method=Method.GET, path="/files/missing"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.content_type is ContentType.TEXT_PLAIN
        assert response.body == b""

    def test_get_directory_is_404(self, tmp_path: Path):
        (tmp_path / "sub").mkdir()
        response = FileHandler(str(tmp_path))(HTTPRequest(method=Method.GET, path="/files/sub"))

        assert response.status == HTTPStatus.NOT_FOUND

    def test_post_writes_file(self, tmp_path: Path):
        handler = FileHandler(directory=str(tmp_path))
        request = HTTPRequest(method=Method.POST, path="/files/test.txt", body="hello")

        response = handler(request)

        assert response.status == HTTPStatus.CREATED
        assert response.content_type is ContentType.OCTET_STREAM
        assert response.body == b""
        assert (tmp_path / "test.txt").read_bytes() == b"hello"

    def test_post_overwrites(self, tmp_path: Path):
        (tmp_path / "a").write_bytes(b"old contents")
        handler = FileHandler(str(tmp_path))

        handler(HTTPRequest(method=Method.POST, path="/files/a", body="new"))

        assert (tmp_path / "a").read_bytes() == b"new"

    def test_post_then_get(self, tmp_path: Path):
        handler = FileHandler(str(tmp_path))
        handler(HTTPRequest(method=Method.POST, path="/files/note", body="héllo"))

        response = handler(HTTPRequest(method=Method.GET, path="/files/note"))
        assert response.body == "héllo".encode("utf-8")

    def test_post_missing_parent_raises(self, tmp_path: Path):
        handler = FileHandler(str(tmp_path))

        with pytest.raises(OSError):
            handler(HTTPRequest(method=Method.POST, path="/files/nodir/x", body="x"))

    @pytest.mark.parametrize("method", [Method.PUT, Method.DELETE])
    def test_other_methods_404(self, tmp_path: Path, method: Method):
        (tmp_path / "a").write_bytes(b"x")
        response = FileHandler(str(tmp_path))(HTTPRequest(method=method, path="/files/a"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert (tmp_path / "a").read_bytes() == b"x"

    def test_get_traversal_is_404(self, tmp_path: Path):
        base = tmp_path / "base"
        base.mkdir()
        (tmp_path / "secret").write_bytes(b"secret")

        response = FileHandler(str(base))(HTTPRequest(method=Method.GET, path="/files/../secret"))

        assert response.status == HTTPStatus.NOT_FOUND
        assert response.body == b""

    def test_post_traversal_refused(self, tmp_path: Path):
        base = tmp_path / "base"
        base.mkdir()

        with pytest.raises(PermissionError):
            FileHandler(str(base))(HTTPRequest(method=Method.POST, path="/files/../escape", body="x"))

        assert not (tmp_path / "escape").exists()


class TestFileHandlerPaths:
    """Path construction and storage interaction."""

    def test_full_path_joins_with_slash(self):
        assert FileHandler("/tmp/d").full_path("test.txt") == "/tmp/d/test.txt"

    def test_default_base_is_cwd(self):
        handler = FileHandler()

        assert handler.base_dir == "."
        assert handler.full_path("a") == "./a"

    def test_cwd_base_used_per_request(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "here").write_bytes(b"cwd")

        response = FileHandler()(HTTPRequest(method=Method.GET, path="/files/here"))
        assert response.body == b"cwd"

    def test_is_inside_base(self, tmp_path: Path):
        handler = FileHandler(str(tmp_path))

        assert handler.is_inside_base(handler.full_path("a"))
        assert handler.is_inside_base(handler.full_path("sub/../a"))
        assert not handler.is_inside_base(handler.full_path("../a"))

    def test_reads_through_storage(self, tmp_path: Path):
        storage = RecordingStorage({f"{tmp_path}/a": b"stored"})
        handler = FileHandler(str(tmp_path), storage=storage)

        response = handler(HTTPRequest(method=Method.GET, path="/files/a"))
        assert response.body == b"stored"

    def test_writes_through_storage(self, tmp_path: Path):
        storage = RecordingStorage()
        handler = FileHandler(str(tmp_path), storage=storage)

        handler(HTTPRequest(method=Method.POST, path="/files/a", body="data"))

        assert storage.files == {f"{tmp_path}/a": b"data"}
        assert not (tmp_path / "a").exists()

    def test_write_failure_propagates(self, tmp_path: Path):
        handler = FileHandler(str(tmp_path), storage=RecordingStorage(fail_writes=True))

        with pytest.raises(OSError, match="disk full"):
            handler(HTTPRequest(method=Method.POST, path="/files/a", body="data"))
