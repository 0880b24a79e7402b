"""
Tests for the SQL-backed account store.
"""
from __future__ import annotations

from datetime import timedelta

import pytest
from werkzeug.exceptions import Conflict

from models.user import User
from repositories.sql_user_repository import SQLUserRepository
from utils.tokens import hash_token, utcnow


def _new_user(email: str) -> User:
    user = User(first_name="Repo", last_name="User", email=email)
    user.set_password("password")
    return user


def test_add_get_and_case_insensitive_lookup(app):
    with app.app_context():
        repo = SQLUserRepository()
        user = repo.add(_new_user("repo@example.com"))

        assert repo.get(user.id) is user
        assert repo.get_by_email(" REPO@example.com ") is user
        assert repo.get_by_email("") is None
        assert [u.email for u in repo.list()] == ["repo@example.com"]


def test_unique_email_constraint_maps_to_conflict(app):
    with app.app_context():
        repo = SQLUserRepository()
        repo.add(_new_user("dup@example.com"))

        with pytest.raises(Conflict) as excinfo:
            repo.add(_new_user("dup@example.com"), conflict_message="User already registered")

        assert excinfo.value.description == "User already registered"

        assert len(repo.list()) == 1


def test_token_lookup_respects_expiry(app):
    with app.app_context():
        repo = SQLUserRepository()
        user = _new_user("token@example.com")
        raw = user.create_account_verification_token()
        repo.add(user)
        digest = hash_token(raw)

        assert repo.find_by_verification_token(digest, utcnow()) is user
        later = utcnow() + timedelta(minutes=11)
        assert repo.find_by_verification_token(digest, later) is None
        assert repo.find_by_reset_token(digest, utcnow()) is None


def test_delete_removes_user(app):
    with app.app_context():
        repo = SQLUserRepository()
        user = repo.add(_new_user("delete@example.com"))
        user_id = user.id

        repo.delete(user)

        assert repo.get(user_id) is None


def test_save_conflict_uses_default_message(app):
    with app.app_context():
        repo = SQLUserRepository()
        repo.add(_new_user("first@example.com"))
        second = repo.add(_new_user("second@example.com"))

        second.email = "first@example.com"
        with pytest.raises(Conflict) as excinfo:
            repo.save(second)

        assert excinfo.value.description == "Email already in use."
