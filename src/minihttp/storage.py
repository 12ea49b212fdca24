"""
File storage used by the /files routes.

Whole-file reads and writes, nothing else. Errors are plain OSError
subclasses (FileNotFoundError, PermissionError, IsADirectoryError, ...)
and are left for the caller to interpret.
"""

import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileStorage:
    """Reads and writes complete files on the local filesystem."""

    def read(self, path: PathLike) -> bytes:
        """
        Return the full contents of a file.

        Raises:
            OSError: Missing, unreadable, or not a regular file.
        """
        logger.debug(f"Reading {path}")
        with open(path, "rb") as f:
            return f.read()

    def write(self, path: PathLike, data: bytes) -> None:
        """
        Create or truncate a file and write data to it.

        Parent directories are not created. There is no temp-file-and-rename
        step, so a failure halfway leaves a partial file behind.

        Raises:
            OSError: The file cannot be created or written.
        """
        logger.debug(f"Writing {len(data)} bytes to {path}")
        with open(path, "wb") as f:
            f.write(data)
