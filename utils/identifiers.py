"""Identifier validation shared by routes and services."""

from __future__ import annotations

import re

from werkzeug.exceptions import BadRequest

USER_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def is_valid_user_id(value: object) -> bool:
    return isinstance(value, str) and bool(USER_ID_PATTERN.match(value))


def validate_user_id(value: object) -> str:
    """Return ``value`` when it is a well-formed user id, else raise a 400."""

    if not is_valid_user_id(value):
        raise BadRequest("The id is not valid or found")
    return value  # type: ignore[return-value]
