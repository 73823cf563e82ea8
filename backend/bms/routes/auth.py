# Overview: Login, logout, registration and session/menu endpoints.

"""
Authentication routes

The login page is the only unguarded page. A successful login stores the
identity and the data API token in the durable session store and tells the
client where the role lands.
"""

from flask import Blueprint, current_app, jsonify, redirect

from ..decorators import LOGIN_PATH, current_session, get_client, json_object
from ..permissions import ALL_ROLES, landing_path, role_description, visible_menu
from ..services import auth_service
from ..services.auth_service import AuthenticationError
from ..services.resource_client import ResourceError
from ..validation import ValidationError


auth_bp = Blueprint("auth", __name__)


@auth_bp.get("/login")
def login_page_route():
    """Already signed in users go straight to their landing page."""
    ctx = current_session()
    if ctx.is_authenticated:
        return redirect(landing_path(ctx.role))
    return jsonify({"roles": list(ALL_ROLES)})


@auth_bp.post("/login")
def login_route():
    """
    Request body:
    {
        "username": "...",
        "password": "...",
        "role": "admin|sales|accounts|purchase",
        "token": "..."   // optional data API JWT
    }
    """
    data = json_object()
    ctx = current_session()

    try:
        identity = auth_service.login(
            get_client(),
            data.get("username"),
            data.get("password"),
            data.get("role"),
            allow_dev_fallback=current_app.config.get("DEV_LOGIN_FALLBACK", False),
        )
    except AuthenticationError as e:
        return jsonify({"error": str(e)}), 401
    except ResourceError:
        current_app.logger.exception("Login lookup failed")
        return jsonify({"error": "Login failed. Please try again."}), 502

    token = data.get("token") or current_app.config["DEMO_TOKEN"]
    ctx.login(identity, token)

    return jsonify({
        "user": identity.to_dict(),
        "redirect": landing_path(identity.role),
        "message": "Login successful",
    }), 200


@auth_bp.post("/logout")
def logout_route():
    current_session().clear()
    return jsonify({"message": "Logged out", "redirect": "/login"})


@auth_bp.post("/register")
def register_route():
    """Self-registration; the new account still has to sign in."""
    data = json_object()
    try:
        user = auth_service.register(get_client(), data)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ResourceError as e:
        current_app.logger.exception("Registration failed")
        return jsonify({"error": str(e) or "Registration failed. Please try again."}), 502
    return jsonify(user), 201


@auth_bp.get("/session")
def session_route():
    ctx = current_session()
    if not ctx.is_authenticated:
        return jsonify({"authenticated": False}), 200
    return jsonify({
        "authenticated": True,
        "user": ctx.identity.to_dict(),
        "landing_path": landing_path(ctx.role),
        "role": role_description(ctx.role),
    })


@auth_bp.get("/menu")
def menu_route():
    """Navigation entries for the signed-in role (not itself a page)."""
    ctx = current_session()
    if not ctx.is_authenticated:
        return redirect(LOGIN_PATH)
    return jsonify({"items": visible_menu(ctx.role)})
