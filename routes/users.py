"""Users blueprint: profiles, follow graph, moderation and profile photos."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import Forbidden

from routes.common import (
    account_service,
    current_user_id,
    require_admin,
    require_user,
    user_repository,
)
from services.moderation_service import ModerationService
from services.relationship_service import RelationshipService
from utils.identifiers import validate_user_id
from utils.request_validation import parse_json_request, password_field

users_bp = Blueprint("users", __name__)


@users_bp.route("/", methods=["GET"])
@jwt_required()
def list_users():
    users = account_service().list_users()
    return jsonify([user.to_dict() for user in users])


@users_bp.route("/<user_id>", methods=["GET"])
def user_detail(user_id: str):
    return jsonify(account_service().get_user(user_id).to_dict())


@users_bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id: str):
    """Delete a user and return the removed record."""

    return jsonify(account_service().delete_user(user_id))


@users_bp.route("/profile/<user_id>", methods=["GET"])
@jwt_required()
def user_profile(user_id: str):
    return jsonify(account_service().get_user(user_id).to_dict())


@users_bp.route("/update/<user_id>", methods=["PUT"])
@jwt_required()
def update_profile(user_id: str):
    """Update name, email and bio. Owners edit themselves, admins anyone."""

    validate_user_id(user_id)
    actor = require_user()
    if actor.id != user_id and not actor.is_admin:
        raise Forbidden("You can only update your own profile.")
    payload = parse_json_request(request)
    user = account_service().update_profile(user_id, payload)
    return jsonify(user.to_dict())


@users_bp.route("/password", methods=["PUT"])
@jwt_required()
def update_password():
    payload = parse_json_request(request, allow_empty=True)
    user = account_service().update_password(
        current_user_id(), password_field(payload, required=False)
    )
    return jsonify(user.to_dict())


@users_bp.route("/follow", methods=["PUT"])
@jwt_required()
def follow():
    payload = parse_json_request(request, required_keys=("follow_id",))
    message = RelationshipService(user_repository()).follow(current_user_id(), payload.get("follow_id"))
    return jsonify({"message": message})


@users_bp.route("/unfollow", methods=["PUT"])
@jwt_required()
def unfollow():
    payload = parse_json_request(request, required_keys=("unfollow_id",))
    message = RelationshipService(user_repository()).unfollow(
        current_user_id(), payload.get("unfollow_id")
    )
    return jsonify({"message": message})


@users_bp.route("/block/<user_id>", methods=["PUT"])
@jwt_required()
def block_user(user_id: str):
    validate_user_id(user_id)
    require_admin()
    user = ModerationService(user_repository()).block(user_id)
    return jsonify(user.to_dict())


@users_bp.route("/unblock/<user_id>", methods=["PUT"])
@jwt_required()
def unblock_user(user_id: str):
    validate_user_id(user_id)
    require_admin()
    user = ModerationService(user_repository()).unblock(user_id)
    return jsonify(user.to_dict())


@users_bp.route("/profile-photo-upload", methods=["PUT"])
@jwt_required()
def profile_photo_upload():
    """Resize an uploaded image and set it as the caller's profile photo."""

    user = account_service().upload_profile_photo(current_user_id(), request.files.get("image"))
    return jsonify(user.to_dict())
