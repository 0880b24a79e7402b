"""Storage abstraction layer for uploaded profile photos."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractStorage(ABC):
    """Interface for storage backends."""

    @abstractmethod
    def save_bytes(self, data: bytes, filename: str) -> str:
        """Persist raw bytes and return the stored (relative) path."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a stored file; missing files are ignored."""

    @abstractmethod
    def url(self, path: str) -> str:
        """Return the public URL a client can fetch the stored file from."""

    @abstractmethod
    def path_from_url(self, url: str | None) -> str | None:
        """Map a URL produced by :meth:`url` back to its stored path."""
