# Overview: User administration pages (admin only).

from flask import Blueprint, current_app, jsonify, request

from ..decorators import get_client, require_roles, require_route_access, json_object
from ..permissions import Role
from ..services import auth_service, user_service
from ..services.resource_client import ResourceError
from ..validation import ValidationError


users_bp = Blueprint("users", __name__, url_prefix="/users")


@users_bp.get("")
@require_route_access
@require_roles(Role.ADMIN)
def list_users_route():
    return jsonify({"items": user_service.list_users(get_client(), role=request.args.get("role"))})


@users_bp.post("")
@require_route_access
@require_roles(Role.ADMIN)
def create_user_route():
    """Same rules as self-registration (name, username, email, password, role)."""
    data = json_object()
    try:
        user = auth_service.register(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ResourceError as e:
        current_app.logger.exception("User creation failed")
        return jsonify({"error": str(e)}), 502
    return jsonify(user), 201


@users_bp.get("/<int:user_id>")
@require_route_access
@require_roles(Role.ADMIN)
def get_user_route(user_id: int):
    user = user_service.get_user(get_client(), user_id)
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user)


@users_bp.route("/<int:user_id>", methods=["PUT", "PATCH"])
@require_route_access
@require_roles(Role.ADMIN)
def update_user_route(user_id: int):
    data = json_object()
    try:
        user = user_service.update_user(get_client(), user_id, data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user)


@users_bp.delete("/<int:user_id>")
@require_route_access
@require_roles(Role.ADMIN)
def delete_user_route(user_id: int):
    user_service.delete_user(get_client(), user_id)
    return "", 204
