# Overview: Login and self-registration against the users resource.

"""
Authentication Service

Accounts live in the data store's `users` collection. Passwords are stored
as bcrypt hashes in `password_hash`; the plaintext never leaves this module.

LOGIN RULES:
- The username must exist and the password must verify
- The role chosen on the login form must equal the account's role
- admin/admin is accepted as a development fallback only when
  DEV_LOGIN_FALLBACK is enabled
"""

from __future__ import annotations

import logging

import bcrypt

from .resource_client import ResourceClient
from .session_service import Identity
from ..permissions import ALL_ROLES, Role, validate_role
from ..time_utils import to_utc_z, utcnow
from ..validation import EMAIL_RE, ValidationError


logger = logging.getLogger(__name__)


NAME_MIN_LENGTH = 6
NAME_MAX_LENGTH = 25
USERNAME_MIN_LENGTH = 6
USERNAME_MAX_LENGTH = 25
PASSWORD_MIN_LENGTH = 6

DEV_FALLBACK_IDENTITY = Identity(id="dev-admin", username="admin", role=Role.ADMIN, name="Administrator")


class AuthenticationError(Exception):
    """Login rejected; the message is safe to show to the user."""


def hash_password(password: str) -> str:
    """bcrypt hash, cost factor 12."""
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the store
        return False


def login(
    client: ResourceClient,
    username: str,
    password: str,
    selected_role: str,
    *,
    allow_dev_fallback: bool = False,
) -> Identity:
    """
    Authenticate and return the identity.

    Raises AuthenticationError on bad credentials or role mismatch, and
    ValidationError when a field is not a string.
    """
    for value in (username, password, selected_role):
        if value is not None and not isinstance(value, str):
            raise ValidationError("Username, password and role must be strings")
    if not username or not password or not selected_role:
        raise AuthenticationError("Username, password and role are required")

    rows = client.find("users", username=username.strip().lower())
    candidate = rows[0] if rows else None

    if candidate and verify_password(password, candidate.get("password_hash")):
        if candidate.get("role") != selected_role:
            raise AuthenticationError("Selected role does not match your account role")
        if candidate.get("status") and candidate.get("status") != "active":
            raise AuthenticationError("Account is not active")
        try:
            return Identity.from_record(candidate)
        except ValidationError:
            logger.error("User %s has an unknown role %r", username, candidate.get("role"))
            raise AuthenticationError("Account role is not recognised")

    if allow_dev_fallback and username == "admin" and password == "admin" and selected_role == Role.ADMIN:
        logger.warning("Development login fallback used for admin")
        return DEV_FALLBACK_IDENTITY

    raise AuthenticationError("Invalid credentials or role mismatch")


def _text(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def validate_registration(data: dict) -> dict:
    """
    Check registration fields and return the normalized user payload
    (without the password hash).
    """
    name = _text(data, "name").strip()
    username = _text(data, "username").strip().lower()
    email = _text(data, "email").strip().lower()
    password = _text(data, "password")
    role = data.get("role")

    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be between {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters")
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(f"Username must be between {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters")
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not validate_role(role):
        raise ValidationError(f"Role must be one of: {', '.join(ALL_ROLES)}")

    return {"name": name, "username": username, "email": email, "role": role}


def register(client: ResourceClient, data: dict) -> dict:
    """
    Create a user account.

    Raises ValidationError for bad input or a taken username/email.
    """
    user = validate_registration(data)

    if client.find("users", username=user["username"]):
        raise ValidationError("Username already exists")
    if client.find("users", email=user["email"]):
        raise ValidationError("Email already exists")

    user.update({
        "password_hash": hash_password(data["password"]),
        "status": "active",
        "created_at": to_utc_z(utcnow()),
    })
    created = client.create("users", user)
    if not created:
        raise ValidationError("Failed to create user account")

    logger.info("Registered user %s (%s)", user["username"], user["role"])
    created.pop("password_hash", None)
    return created
