"""Account store abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from models.user import User

DEFAULT_CONFLICT_MESSAGE = "Email already in use."


class AbstractUserRepository(ABC):
    """Interface for user record persistence.

    Services receive an implementation at construction time and never reach for
    a module-level session themselves. Mutations are staged on the returned
    ``User`` objects and made durable with :meth:`save`, so a single call
    persists every field changed by one operation together.
    """

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        """Return the user with the given id, or ``None``."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        """Return the user owning ``email`` (case-insensitive), or ``None``."""

    @abstractmethod
    def list(self) -> list[User]:
        """Return every user record."""

    @abstractmethod
    def find_by_verification_token(self, digest: str, now: datetime) -> Optional[User]:
        """Return the user holding an unexpired verification token digest."""

    @abstractmethod
    def find_by_reset_token(self, digest: str, now: datetime) -> Optional[User]:
        """Return the user holding an unexpired password reset token digest."""

    @abstractmethod
    def add(self, user: User, *, conflict_message: str = DEFAULT_CONFLICT_MESSAGE) -> User:
        """Persist a new user record.

        A unique-email violation is raised as 409 carrying ``conflict_message``.
        """

    @abstractmethod
    def save(self, *users: User, conflict_message: str = DEFAULT_CONFLICT_MESSAGE) -> None:
        """Persist pending changes on the given users in one unit of work."""

    @abstractmethod
    def delete(self, user: User) -> None:
        """Remove a user record and its relationship edges."""
