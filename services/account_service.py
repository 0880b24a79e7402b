"""
Registration, login, email verification, password reset and profile use cases.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from typing import Mapping, Optional

from flask_jwt_extended import create_access_token
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest, Conflict, NotFound, Unauthorized

from models.user import User
from repositories.abstract_repository import DEFAULT_CONFLICT_MESSAGE, AbstractUserRepository
from storage.abstract_storage import AbstractStorage
from utils.identifiers import validate_user_id
from utils.images import resize_profile_photo
from utils.mailer import send_email
from utils.request_validation import normalize_email, validate_email
from utils.tokens import DEFAULT_TTL_MINUTES, hash_token, utcnow

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
USER_ALREADY_REGISTERED = "User already registered"
INVALID_CREDENTIALS = "Invalid login credentials"
TOKEN_EXPIRED = "Token expired, try again later"
EMAIL_IN_USE = DEFAULT_CONFLICT_MESSAGE

PROFILE_FIELDS = ("first_name", "last_name", "email", "bio")
REQUIRED_PROFILE_FIELDS = ("first_name", "last_name", "email")
ALLOWED_PHOTO_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
MAX_UPLOAD_SIZE_DEFAULT = 1024 * 1024  # 1 MB


@dataclass
class LoginResult:
    user: User
    access_token: str


@dataclass
class TokenDispatch:
    recipient: str
    link: str
    email_sent: bool


class AccountService:
    """Handles registration, login, verification, password reset and profile flows."""

    def __init__(
        self,
        repository: AbstractUserRepository,
        *,
        config: Mapping | None = None,
        storage: AbstractStorage | None = None,
    ):
        self.repository = repository
        self.config = config or {}
        self.storage = storage

    # -------------------------------------- helpers --------------------------------------
    @property
    def token_ttl_minutes(self) -> int:
        return int(self.config.get("TOKEN_TTL_MINUTES") or DEFAULT_TTL_MINUTES)

    @property
    def frontend_url(self) -> str:
        return (self.config.get("FRONTEND_URL") or "http://localhost:3000").rstrip("/")

    def get_user(self, user_id: object) -> User:
        """Validate ``user_id`` and load the user, raising 400/404 as needed."""

        user = self.repository.get(validate_user_id(user_id))
        if user is None:
            raise NotFound(USER_NOT_FOUND)
        return user

    # -------------------------------------- registration --------------------------------------
    def register(self, *, first_name: str, last_name: str, email: str, password: str) -> User:
        if not normalize_email(email):
            raise BadRequest("Email is required.")
        raw_email = validate_email(email)
        if self.repository.get_by_email(raw_email) is not None:
            raise Conflict(USER_ALREADY_REGISTERED)

        user = User(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=raw_email,
            profile_photo=self.config.get("DEFAULT_PROFILE_PHOTO"),
        )
        user.set_password(password)
        self.repository.add(user, conflict_message=USER_ALREADY_REGISTERED)
        logger.info("Registered user %s", user.id)
        return user

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> LoginResult:
        user = self.repository.get_by_email(email)
        # Unknown email and wrong password are reported identically.
        if user is None or not user.check_password(password):
            raise Unauthorized(INVALID_CREDENTIALS)
        token = create_access_token(identity=user.id)
        logger.info("User %s logged in", user.id)
        return LoginResult(user=user, access_token=token)

    # -------------------------------------- verification --------------------------------------
    def generate_verification_token(self, user_id: object) -> TokenDispatch:
        user = self.get_user(user_id)
        raw_token = user.create_account_verification_token(self.token_ttl_minutes)
        self.repository.save(user)

        link = f"{self.frontend_url}/verify-account/{raw_token}"
        html_body = (
            "If you were requested to verify your account, verify now within "
            f"{self.token_ttl_minutes} minutes, otherwise ignore this message. "
            f'<a href="{link}">Click to verify</a>'
        )
        recipient = self.config.get("VERIFICATION_EMAIL_RECIPIENT") or user.email
        sent = send_email(recipient, "Verify Account", html_body, f"Verify your account: {link}")
        logger.info("Issued verification token for user %s", user.id)
        return TokenDispatch(recipient=recipient, link=link, email_sent=sent)

    def verify_account(self, raw_token: Optional[str]) -> User:
        token = (raw_token or "").strip()
        if not token:
            raise BadRequest(TOKEN_EXPIRED)
        user = self.repository.find_by_verification_token(hash_token(token), utcnow())
        if user is None:
            raise BadRequest(TOKEN_EXPIRED)
        user.mark_verified()
        self.repository.save(user)
        logger.info("Verified account for user %s", user.id)
        return user

    # -------------------------------------- password reset --------------------------------------
    def forget_password_token(self, email: str) -> TokenDispatch:
        user = self.repository.get_by_email(email)
        if user is None:
            raise NotFound(USER_NOT_FOUND)
        raw_token = user.create_password_reset_token(self.token_ttl_minutes)
        self.repository.save(user)

        link = f"{self.frontend_url}/reset-password/{raw_token}"
        html_body = (
            "If you were requested to reset your password, reset now within "
            f"{self.token_ttl_minutes} minutes, otherwise ignore this message. "
            f'<a href="{link}">Click to reset</a>'
        )
        sent = send_email(user.email, "Reset Password", html_body, f"Reset your password: {link}")
        logger.info("Issued password reset token for user %s", user.id)
        return TokenDispatch(recipient=user.email, link=link, email_sent=sent)

    def reset_password(self, raw_token: Optional[str], password: str) -> User:
        token = (raw_token or "").strip()
        if not token:
            raise BadRequest(TOKEN_EXPIRED)
        user = self.repository.find_by_reset_token(hash_token(token), utcnow())
        if user is None:
            raise BadRequest(TOKEN_EXPIRED)
        user.reset_password(password)
        self.repository.save(user)
        logger.info("Password reset for user %s", user.id)
        return user

    # -------------------------------------- profile --------------------------------------
    def list_users(self) -> list[User]:
        return self.repository.list()

    def delete_user(self, user_id: object) -> dict:
        """Delete a user and return the record as it was before deletion."""

        user = self.get_user(user_id)
        snapshot = user.to_dict()
        photo_path = self.storage.path_from_url(user.profile_photo) if self.storage else None
        self.repository.delete(user)
        if photo_path:
            self.storage.delete(photo_path)
        logger.info("Deleted user %s", snapshot["id"])
        return snapshot

    def update_profile(self, user_id: object, payload: Mapping) -> User:
        user = self.get_user(user_id)
        for field in PROFILE_FIELDS:
            if field not in payload:
                continue
            value = payload[field]
            if value is not None and not isinstance(value, str):
                raise BadRequest(f"{field} must be a string.")
            value = (value or "").strip()
            if field in REQUIRED_PROFILE_FIELDS and not value:
                raise BadRequest(f"{field} must not be empty.")
            if field == "email":
                value = validate_email(value)
                owner = self.repository.get_by_email(value)
                if owner is not None and owner.id != user.id:
                    raise Conflict(EMAIL_IN_USE)
            setattr(user, field, value or None)
        self.repository.save(user, conflict_message=EMAIL_IN_USE)
        return user

    def update_password(self, user_id: object, password: Optional[str]) -> User:
        user = self.get_user(user_id)
        if password:
            user.set_password(password)
            self.repository.save(user)
            logger.info("Password updated for user %s", user.id)
        return user

    def upload_profile_photo(self, user_id: object, file: Optional[FileStorage]) -> User:
        if self.storage is None:
            raise RuntimeError("Profile photo upload requires a storage backend.")
        user = self.get_user(user_id)
        data = self._read_photo(file)
        resized = resize_profile_photo(data)

        previous = self.storage.path_from_url(user.profile_photo)
        stored_path = self.storage.save_bytes(resized, f"{uuid.uuid4().hex}.jpg")
        user.profile_photo = self.storage.url(stored_path)
        self.repository.save(user)
        if previous:
            self.storage.delete(previous)
        logger.info("Stored profile photo %s for user %s", stored_path, user.id)
        return user

    def _read_photo(self, file: Optional[FileStorage]) -> bytes:
        if not isinstance(file, FileStorage) or not (file.filename or "").strip():
            raise BadRequest("An image file is required.")

        extension = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
        if extension not in ALLOWED_PHOTO_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_PHOTO_EXTENSIONS))
            raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

        max_size = int(self.config.get("MAX_UPLOAD_SIZE") or MAX_UPLOAD_SIZE_DEFAULT)
        file.stream.seek(0, os.SEEK_END)
        size = file.stream.tell()
        file.stream.seek(0)
        if size > max_size:
            raise BadRequest(f"File exceeds the maximum upload size of {max_size} bytes.")
        return file.stream.read()
