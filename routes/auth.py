"""Authentication blueprint: registration, login, verification and password reset."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest

from routes.common import account_service, current_user_id
from utils.request_validation import optional_string, parse_json_request, password_field

auth_bp = Blueprint("auth", __name__)


def _required_string(payload: dict, key: str) -> str:
    value = optional_string(payload, key)
    if value is None:
        raise BadRequest(f"Missing required fields: {key}.")
    return value


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new user with names, an email and a password."""

    payload = parse_json_request(
        request, required_keys=("first_name", "last_name", "email")
    )
    user = account_service().register(
        first_name=_required_string(payload, "first_name"),
        last_name=_required_string(payload, "last_name"),
        email=_required_string(payload, "email"),
        password=password_field(payload),
    )
    return jsonify(user.to_dict()), HTTPStatus.CREATED


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a JWT access token."""

    payload = parse_json_request(request, required_keys=("email",))
    result = account_service().login(
        _required_string(payload, "email"),
        password_field(payload),
    )
    return (
        jsonify({"access_token": result.access_token, "user": result.user.to_login_dict()}),
        HTTPStatus.OK,
    )


@auth_bp.route("/generate-verify-email-token", methods=["POST"])
@jwt_required()
def generate_verification_token():
    """Email a fresh account verification link to the configured recipient."""

    dispatch = account_service().generate_verification_token(current_user_id())
    return jsonify(
        {
            "message": f"A verification email has been sent to {dispatch.recipient}.",
            "email_sent": dispatch.email_sent,
        }
    )


@auth_bp.route("/verify-account", methods=["PUT"])
def verify_account():
    payload = parse_json_request(request, required_keys=("token",))
    user = account_service().verify_account(_required_string(payload, "token"))
    return jsonify({"message": "Account verified successfully", "user": user.to_dict()})


@auth_bp.route("/forget-password-token", methods=["POST"])
def forget_password_token():
    """Email a password reset link to the account owner."""

    payload = parse_json_request(request, required_keys=("email",))
    service = account_service()
    dispatch = service.forget_password_token(_required_string(payload, "email"))
    return jsonify(
        {
            "message": (
                f"A verification email has been sent to {dispatch.recipient}. "
                f"Reset now within {service.token_ttl_minutes} minutes, otherwise ignore this message."
            ),
            "email_sent": dispatch.email_sent,
        }
    )


@auth_bp.route("/reset-password", methods=["PUT"])
def reset_password():
    payload = parse_json_request(request, required_keys=("token",))
    user = account_service().reset_password(
        _required_string(payload, "token"),
        password_field(payload),
    )
    return jsonify({"message": "Password updated successfully", "user": user.to_dict()})
