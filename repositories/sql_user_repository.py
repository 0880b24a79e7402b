"""User repository backed by Flask-SQLAlchemy."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import Conflict

from models import db
from models.user import User

from .abstract_repository import DEFAULT_CONFLICT_MESSAGE, AbstractUserRepository


class SQLUserRepository(AbstractUserRepository):
    """CRUD helpers wrapping the Flask-SQLAlchemy session."""

    def __init__(self, database=db):
        self.db = database

    @property
    def session(self):
        return self.db.session

    def get(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        return User.query.filter(func.lower(User.email) == normalized).first()

    def list(self) -> list[User]:
        return User.query.order_by(User.created_at.asc()).all()

    def find_by_verification_token(self, digest: str, now: datetime) -> Optional[User]:
        return User.query.filter(
            User.account_verification_token == digest,
            User.account_verification_expires > now,
        ).first()

    def find_by_reset_token(self, digest: str, now: datetime) -> Optional[User]:
        return User.query.filter(
            User.password_reset_token == digest,
            User.password_reset_expires > now,
        ).first()

    def add(self, user: User, *, conflict_message: str = DEFAULT_CONFLICT_MESSAGE) -> User:
        self.session.add(user)
        self._commit(conflict_message)
        return user

    def save(self, *users: User, conflict_message: str = DEFAULT_CONFLICT_MESSAGE) -> None:
        for user in users:
            self.session.add(user)
        self._commit(conflict_message)

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self._commit(DEFAULT_CONFLICT_MESSAGE)

    def _commit(self, conflict_message: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            # The unique email index is the only constraint a client can trip.
            raise Conflict(conflict_message) from exc
