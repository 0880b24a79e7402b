"""Follow/unfollow use cases."""

from __future__ import annotations

import logging

from werkzeug.exceptions import BadRequest, Conflict, NotFound

from models.user import User
from repositories.abstract_repository import AbstractUserRepository
from utils.identifiers import validate_user_id

logger = logging.getLogger(__name__)


class RelationshipService:
    """Mutates the follower/following sets of two users.

    A single association row stands for both sides of the relationship, so the
    target's followers and the actor's following are always written together.
    """

    def __init__(self, repository: AbstractUserRepository):
        self.repository = repository

    def _load_pair(self, actor_id: str, target_id: object) -> tuple[User, User]:
        target_id = validate_user_id(target_id)
        actor = self.repository.get(actor_id)
        if actor is None:
            raise NotFound("User not found")
        target = self.repository.get(target_id)
        if target is None:
            raise NotFound("User not found")
        if actor.id == target.id:
            raise BadRequest("You cannot follow or unfollow yourself")
        return actor, target

    def follow(self, actor_id: str, target_id: object) -> str:
        actor, target = self._load_pair(actor_id, target_id)
        if actor in target.followers:
            raise Conflict(f"You already followed {target.full_name}")

        target.followers.add(actor)
        target.is_following = True
        self.repository.save(actor, target)
        logger.info("User %s followed %s", actor.id, target.id)
        return f"You have successfully followed {target.full_name}"

    def unfollow(self, actor_id: str, target_id: object) -> str:
        actor, target = self._load_pair(actor_id, target_id)
        if actor not in target.followers:
            raise Conflict(f"You are not following {target.full_name}")

        target.followers.discard(actor)
        target.is_following = False
        self.repository.save(actor, target)
        logger.info("User %s unfollowed %s", actor.id, target.id)
        return f"You have successfully unfollowed {target.full_name}"
