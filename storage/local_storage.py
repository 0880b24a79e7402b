"""Local filesystem storage implementation."""

from __future__ import annotations

import os
from pathlib import Path

from werkzeug.utils import secure_filename

from config import Config

from .abstract_storage import AbstractStorage

UPLOADS_URL_PATH = "/uploads"


class LocalStorage(AbstractStorage):
    """Persist files to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | None = None, public_base_url: str = ""):
        self.base_directory = Path(upload_dir or Config.UPLOAD_DIR)
        self.public_base_url = (public_base_url or "").rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def _safe_path(self, filename: str) -> Path:
        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")
        return self.base_directory / safe_name

    def save_bytes(self, data: bytes, filename: str) -> str:
        """Write ``data`` and return the path relative to the upload directory."""

        destination = self._safe_path(filename)
        with open(destination, "wb") as output:
            output.write(data)
        return str(destination.relative_to(self.base_directory))

    def delete(self, path: str) -> None:
        try:
            self._safe_path(path).unlink()
        except (FileNotFoundError, ValueError):
            pass

    def url(self, path: str) -> str:
        return f"{self.public_base_url}{UPLOADS_URL_PATH}/{path}"

    def path_from_url(self, url: str | None) -> str | None:
        """Return the stored path for a URL produced by :meth:`url`, if any."""

        prefix = f"{self.public_base_url}{UPLOADS_URL_PATH}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None
