# Overview: Pure access-policy functions over the route permission table.

from .definitions import (
    DEFAULT_LANDING_PATH,
    LANDING_PATHS,
    MENU_ITEMS,
    ROLE_DESCRIPTIONS,
    ROUTE_PERMISSIONS,
)
from .roles import ALL_ROLES, UNRESTRICTED


def allowed_routes(role):
    """Route prefixes granted to a role. Unknown roles get an empty set."""
    return ROUTE_PERMISSIONS.get(role, frozenset())


def is_route_allowed(role, path):
    """
    True if the role may open `path`.

    A grant matches when it equals the path or is a prefix followed by "/".
    Absence of a grant is a plain False, never an exception.
    """
    permissions = allowed_routes(role)
    if UNRESTRICTED in permissions:
        return True
    return any(path == prefix or path.startswith(prefix + "/") for prefix in permissions)


def landing_path(role):
    """Where a role lands after login or after a denied navigation."""
    return LANDING_PATHS.get(role, DEFAULT_LANDING_PATH)


def has_role(role, required_roles):
    """
    Action-level check: admin satisfies every requirement, otherwise the
    role must be listed.
    """
    if role not in ALL_ROLES:
        return False
    if UNRESTRICTED in allowed_routes(role):
        return True
    if isinstance(required_roles, str):
        required_roles = (required_roles,)
    return role in required_roles


def visible_menu(role):
    """Menu entries the role can navigate to, in display order."""
    return [
        {"path": path, "label": label}
        for path, label in MENU_ITEMS
        if is_route_allowed(role, path)
    ]


def role_description(role):
    return ROLE_DESCRIPTIONS.get(role)


def validate_role(role):
    """Check if a role name is one of the known roles."""
    return role in ALL_ROLES
