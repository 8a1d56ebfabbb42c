"""Filesystem helpers for kituradocker."""

import logging
import os

from kituradocker.errors import DirectoryError, FileWriteError


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def ensure_dir(self, path: str):
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as exc:
            raise DirectoryError(path, f"Could not create directory {path}: {exc}") from exc
        self.logger.debug("Ensured directory: %s", path)

    def write_file(self, path: str, content: str):
        """Replaces any existing file at ``path`` with ``content``, byte for byte."""
        try:
            if os.path.lexists(path):
                os.remove(path)
            with open(path, "w", encoding="utf-8", newline="") as file_obj:
                file_obj.write(content)
        except OSError as exc:
            raise FileWriteError(path, f"Could not write file {path}: {exc}") from exc
        self.logger.debug("Wrote file: %s", path)
