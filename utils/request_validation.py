"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from flask import Request
from werkzeug.exceptions import BadRequest

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        if allow_empty and not req.get_data():
            return {}
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not _clean(data.get(key))]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(", ".join(sorted(missing)))
            )

    return data


def optional_string(payload: dict, key: str) -> Optional[str]:
    """Return a stripped string for ``key``; ``None`` when absent or blank."""

    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string.")
    return value.strip() or None


def password_field(payload: dict, key: str = "password", *, required: bool = True) -> Optional[str]:
    """Return the password under ``key`` exactly as sent.

    Whitespace is part of the credential, so the value is never stripped. An
    absent or empty value raises 400 when ``required``, else yields ``None``.
    """

    value = payload.get(key)
    if value is None or value == "":
        if required:
            raise BadRequest(f"Missing required fields: {key}.")
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string.")
    return value


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    return (raw_email or "").strip().lower()


def validate_email(raw_email: str | None) -> str:
    """Return the normalized email, raising 400 when it is not address-shaped."""

    email = normalize_email(raw_email)
    if not EMAIL_PATTERN.match(email):
        raise BadRequest("Email address is not valid.")
    return email


def _clean(value: object) -> object:
    if isinstance(value, str):
        return value.strip()
    return value
