# Overview: Admin user management over the users resource.

from __future__ import annotations

from .resource_client import ResourceClient
from ..permissions import ALL_ROLES, validate_role
from ..validation import EMAIL_RE, ValidationError


EDITABLE_FIELDS = ("name", "email", "role", "status")
USER_STATUSES = ("active", "inactive")


def _public(user: dict | None) -> dict | None:
    if user is None:
        return None
    return {k: v for k, v in user.items() if k not in ("password", "password_hash")}


def list_users(client: ResourceClient, *, role: str | None = None):
    filters = {"role": f"eq.{role}"} if role else None
    result = client.list("users", filters=filters, order="username.asc")
    return [_public(u) for u in result.items]


def get_user(client: ResourceClient, user_id) -> dict | None:
    return _public(client.get("users", user_id))


def update_user(client: ResourceClient, user_id, data: dict) -> dict | None:
    """Edit name/email/role/status. Passwords are not editable here."""
    patch = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    if not patch:
        raise ValidationError("Nothing to update")
    if "role" in patch and not validate_role(patch["role"]):
        raise ValidationError(f"Role must be one of: {', '.join(ALL_ROLES)}")
    if "status" in patch and patch["status"] not in USER_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(USER_STATUSES)}")
    if "email" in patch:
        patch["email"] = (patch["email"] or "").strip().lower()
        if not EMAIL_RE.match(patch["email"]):
            raise ValidationError("Please enter a valid email address")
    return _public(client.update("users", user_id, patch))


def delete_user(client: ResourceClient, user_id) -> None:
    client.delete("users", user_id)
