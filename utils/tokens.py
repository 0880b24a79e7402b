"""Time-boxed one-time tokens for account verification and password reset.

Only the SHA-256 digest of a token is ever persisted; the raw value leaves the
process once, inside the email link, and is hashed again when presented back.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

TOKEN_BYTES = 32
DEFAULT_TTL_MINUTES = 10


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the ``DateTime`` columns are stored."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class IssuedToken:
    raw: str
    digest: str
    expires_at: datetime


def issue_token(ttl_minutes: int = DEFAULT_TTL_MINUTES, *, now: datetime | None = None) -> IssuedToken:
    """Generate a random token together with its digest and expiry."""

    raw = secrets.token_hex(TOKEN_BYTES)
    issued_at = now or utcnow()
    return IssuedToken(
        raw=raw,
        digest=hash_token(raw),
        expires_at=issued_at + timedelta(minutes=ttl_minutes),
    )
