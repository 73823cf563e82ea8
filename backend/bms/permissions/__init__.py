# Overview: Access policy package.
# Every authorization decision (routes, menus, actions) goes through these helpers.

from .roles import Role, ALL_ROLES, UNRESTRICTED
from .definitions import (
    ROUTE_PERMISSIONS,
    LANDING_PATHS,
    DEFAULT_LANDING_PATH,
    ROLE_DESCRIPTIONS,
    MENU_ITEMS,
)
from .helpers import (
    allowed_routes,
    is_route_allowed,
    landing_path,
    has_role,
    visible_menu,
    role_description,
    validate_role,
)

__all__ = [
    "Role",
    "ALL_ROLES",
    "UNRESTRICTED",
    "ROUTE_PERMISSIONS",
    "LANDING_PATHS",
    "DEFAULT_LANDING_PATH",
    "ROLE_DESCRIPTIONS",
    "MENU_ITEMS",
    "allowed_routes",
    "is_route_allowed",
    "landing_path",
    "has_role",
    "visible_menu",
    "role_description",
    "validate_role",
]
