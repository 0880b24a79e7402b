"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.user import User  # noqa: E402
import services.account_service as account_service  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    RATE_LIMIT = "1000 per minute"
    FRONTEND_URL = "http://frontend.test"
    PUBLIC_BASE_URL = ""
    VERIFICATION_EMAIL_RECIPIENT = ""
    TOKEN_TTL_MINUTES = 10
    SMTP_HOST = ""
    SMTP_USER = ""
    SMTP_PASSWORD = ""


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def outbox(monkeypatch) -> list[dict]:
    """Capture outgoing emails instead of talking to SMTP."""

    sent: list[dict] = []

    def _fake_send(to_email, subject, html_body, text_body=None):
        sent.append({"to": to_email, "subject": subject, "html": html_body, "text": text_body})
        return True

    monkeypatch.setattr(account_service, "send_email", _fake_send)
    return sent


def create_user(
    app: Flask,
    email: str,
    password: str = "secret123",
    *,
    first_name: str = "Test",
    last_name: str = "User",
    admin: bool = False,
) -> str:
    """Persist a user directly and return its id."""

    with app.app_context():
        user = User(first_name=first_name, last_name=last_name, email=email, is_admin=admin)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def auth_headers(app: Flask, user_id: str) -> dict[str, str]:
    with app.app_context():
        token = create_access_token(identity=user_id)
    return {"Authorization": f"Bearer {token}"}
