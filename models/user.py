"""User model definition."""

import uuid
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from utils.tokens import DEFAULT_TTL_MINUTES, issue_token, utcnow

from . import db


def _new_user_id() -> str:
    return uuid.uuid4().hex


user_follows = db.Table(
    "user_follows",
    db.Column(
        "follower_id",
        db.String(32),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "followed_id",
        db.String(32),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    db.Column(
        "created_at",
        db.DateTime,
        nullable=False,
        default=utcnow,
        server_default=db.func.now(),
    ),
)


class User(db.Model):
    """Represents a registered account."""

    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=_new_user_id)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    profile_photo = db.Column(db.String(512), nullable=True)
    bio = db.Column(db.Text, nullable=True)

    is_admin = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    is_blocked = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())
    is_account_verified = db.Column(
        db.Boolean, nullable=False, default=False, server_default=db.false()
    )
    is_following = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())

    account_verification_token = db.Column(db.String(64), nullable=True, index=True)
    account_verification_expires = db.Column(db.DateTime, nullable=True)
    password_reset_token = db.Column(db.String(64), nullable=True, index=True)
    password_reset_expires = db.Column(db.DateTime, nullable=True)
    password_changed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    following = db.relationship(
        "User",
        secondary=user_follows,
        primaryjoin=lambda: User.id == user_follows.c.follower_id,
        secondaryjoin=lambda: User.id == user_follows.c.followed_id,
        collection_class=set,
        backref=db.backref("followers", collection_class=set),
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)
        self.password_changed_at = utcnow()

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def create_account_verification_token(self, ttl_minutes: int = DEFAULT_TTL_MINUTES) -> str:
        """Store a fresh verification digest and return the raw token."""

        token = issue_token(ttl_minutes)
        self.account_verification_token = token.digest
        self.account_verification_expires = token.expires_at
        return token.raw

    def create_password_reset_token(self, ttl_minutes: int = DEFAULT_TTL_MINUTES) -> str:
        """Store a fresh password reset digest and return the raw token."""

        token = issue_token(ttl_minutes)
        self.password_reset_token = token.digest
        self.password_reset_expires = token.expires_at
        return token.raw

    def mark_verified(self) -> None:
        self.is_account_verified = True
        self.account_verification_token = None
        self.account_verification_expires = None

    def reset_password(self, password: str) -> None:
        self.set_password(password)
        self.password_reset_token = None
        self.password_reset_expires = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_login_dict(self) -> dict:
        """Public projection returned alongside a session token."""

        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "profile_photo": self.profile_photo,
            "is_admin": self.is_admin,
        }

    def to_dict(self) -> dict:
        """Serialize the user without password or token material."""

        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "profile_photo": self.profile_photo,
            "bio": self.bio,
            "is_admin": self.is_admin,
            "is_blocked": self.is_blocked,
            "is_account_verified": self.is_account_verified,
            "is_following": self.is_following,
            "followers": sorted(follower.id for follower in self.followers),
            "following": sorted(followed.id for followed in self.following),
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None
