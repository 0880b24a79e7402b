"""Helpers shared by the account blueprints."""

from __future__ import annotations

from flask import current_app
from flask_jwt_extended import get_jwt_identity
from werkzeug.exceptions import Forbidden, NotFound

from models.user import User
from repositories.abstract_repository import AbstractUserRepository
from services.account_service import AccountService
from storage.abstract_storage import AbstractStorage

REPOSITORY_EXTENSION = "user_repository"
STORAGE_EXTENSION = "upload_storage"


def user_repository() -> AbstractUserRepository:
    return current_app.extensions[REPOSITORY_EXTENSION]


def upload_storage() -> AbstractStorage:
    return current_app.extensions[STORAGE_EXTENSION]


def account_service() -> AccountService:
    return AccountService(
        user_repository(),
        config=current_app.config,
        storage=upload_storage(),
    )


def current_user_id() -> str:
    return str(get_jwt_identity())


def require_user() -> User:
    """Return the user behind the current access token."""

    user = user_repository().get(current_user_id())
    if user is None:
        raise NotFound("User not found.")
    return user


def require_admin() -> User:
    user = require_user()
    if not user.is_admin:
        raise Forbidden("Admin privileges required.")
    return user
