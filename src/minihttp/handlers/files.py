"""
=============================================================================
FILE HANDLER
=============================================================================

Reads and writes files under the configured base directory.

    GET  /files/{name}   → 200 application/octet-stream, file bytes
                           404 if missing or unreadable
    POST /files/{name}   → write request body, 201 with empty body
                           OSError propagates (connection is dropped)
    other methods        → 404

=============================================================================
PATH RESOLUTION
=============================================================================

    --directory /tmp/d     GET /files/test.txt   →  /tmp/d/test.txt
    (no --directory)       GET /files/test.txt   →  ./test.txt

The name is appended to the base directory with a "/". The result must
still be inside the base directory once ".." and symlinks are resolved:

    GET  /files/../../etc/passwd     → 404
    POST /files/../outside.txt       → PermissionError

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..http.request import HTTPRequest, Method
from ..http.response import HTTPResponse, ok, created, not_found
from ..http.status_codes import ContentType
from ..storage import FileStorage


logger = logging.getLogger(__name__)

FILES_PREFIX = "/files/"


class FileHandler:
    """
    Handler for the /files routes.

    Usage:
        handler = FileHandler(directory="/tmp/d")
        router.add("files", handler)
    """

    def __init__(self, directory: Optional[str] = None, storage: Optional[FileStorage] = None):
        """
        Args:
            directory: Base directory. None means the current working
                       directory, looked up per request.
            storage: Collaborator doing the actual file I/O.
        """
        self.directory = directory
        self.storage = storage or FileStorage()

    @property
    def base_dir(self) -> str:
        return self.directory if self.directory is not None else "."

    def __call__(self, request: HTTPRequest) -> HTTPResponse:
        return self.handle(request)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        filename = request.path[len(FILES_PREFIX):]
        full_path = self.full_path(filename)
        logger.debug(f"{request.method} file {filename!r} → {full_path}")

        if request.method is Method.GET:
            return self._get(full_path)
        if request.method is Method.POST:
            return self._post(full_path, request.body)
        return not_found()

    def full_path(self, filename: str) -> str:
        """Join the base directory and a file name ("<base>/<name>")."""
        return f"{self.base_dir}/{filename}"

    def is_inside_base(self, full_path: str) -> bool:
        """Check that full_path does not escape the base directory."""
        base = Path(self.base_dir).resolve()
        try:
            Path(full_path).resolve().relative_to(base)
        except ValueError:
            return False
        return True

    def _get(self, full_path: str) -> HTTPResponse:
        if not self.is_inside_base(full_path):
            logger.warning(f"Path traversal attempt: {full_path}")
            return not_found()

        try:
            content = self.storage.read(full_path)
        except OSError as e:
            logger.debug(f"Cannot read {full_path}: {e}")
            return not_found()

        return ok(content, ContentType.OCTET_STREAM)

    def _post(self, full_path: str, body: str) -> HTTPResponse:
        if not self.is_inside_base(full_path):
            logger.warning(f"Path traversal attempt: {full_path}")
            raise PermissionError(f"Refusing to write outside {self.base_dir}: {full_path}")

        self.storage.write(full_path, body.encode("utf-8"))
        return created(ContentType.OCTET_STREAM)
