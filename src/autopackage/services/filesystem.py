"""Filesystem helpers for AutoPackage."""

import logging
import os
import shutil
import tempfile

from autopackage.errors import ReleaseError

# Undecodable bytes survive a read/write cycle unchanged.
TEXT_ERRORS = "surrogateescape"


class FileSystemService:
    """Encapsulates file side effects on the installer script."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def exists(self, path) -> bool:
        return bool(path) and os.path.isfile(path)

    def read_text(self, path: str) -> str:
        try:
            with open(path, "r", encoding="utf-8", errors=TEXT_ERRORS, newline="") as file_obj:
                return file_obj.read()
        except OSError as exc:
            raise ReleaseError(f"Could not read '{path}': {exc}") from exc

    def write_text_atomic(self, path: str, text: str):
        directory = os.path.dirname(os.path.abspath(path))
        name = os.path.basename(path)
        try:
            fd, temp_path = tempfile.mkstemp(prefix=f".{name}-", suffix=".tmp", dir=directory)
        except OSError as exc:
            raise ReleaseError(f"Could not write '{path}': {exc}") from exc

        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors=TEXT_ERRORS, newline="") as file_obj:
                file_obj.write(text)
            if os.path.exists(path):
                shutil.copymode(path, temp_path)
            os.replace(temp_path, path)
            self.logger.debug("Wrote %s", path)
        except OSError as exc:
            raise ReleaseError(f"Could not write '{path}': {exc}") from exc
        finally:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass
