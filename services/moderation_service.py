"""Admin block/unblock toggles."""

from __future__ import annotations

import logging

from werkzeug.exceptions import NotFound

from models.user import User
from repositories.abstract_repository import AbstractUserRepository
from utils.identifiers import validate_user_id

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(self, repository: AbstractUserRepository):
        self.repository = repository

    def set_blocked(self, user_id: object, blocked: bool) -> User:
        """Set ``is_blocked``; repeating the same value is a successful no-op."""

        user = self.repository.get(validate_user_id(user_id))
        if user is None:
            raise NotFound("User not found")
        if user.is_blocked != blocked:
            user.is_blocked = blocked
            self.repository.save(user)
            logger.info("User %s %s", user.id, "blocked" if blocked else "unblocked")
        return user

    def block(self, user_id: object) -> User:
        return self.set_blocked(user_id, True)

    def unblock(self, user_id: object) -> User:
        return self.set_blocked(user_id, False)
