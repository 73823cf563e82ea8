"""
Access policy tests.

Verifies:
- Admin may open every path
- Prefix grants match the exact path and sub-paths only
- Unknown roles are denied everywhere and land on "/"
- Menus and action checks follow the same table
"""

import pytest

from bms.permissions import (
    ALL_ROLES,
    MENU_ITEMS,
    ROUTE_PERMISSIONS,
    allowed_routes,
    has_role,
    is_route_allowed,
    landing_path,
    visible_menu,
)


ALL_PATHS = [path for path, _ in MENU_ITEMS] + ["/orders/new", "/users/5/edit", "/nowhere", ""]


class TestRouteAccess:

    @pytest.mark.parametrize("path", ALL_PATHS)
    def test_admin_allowed_everywhere(self, path):
        assert is_route_allowed("admin", path) is True

    def test_prefix_match_allows_sub_paths(self):
        assert is_route_allowed("sales", "/inventory/adjust") is True

    def test_sales_denied_users(self):
        assert is_route_allowed("sales", "/users") is False

    def test_prefix_requires_separator(self):
        assert is_route_allowed("sales", "/inventory-report") is False
        assert is_route_allowed("sales", "/salesforce") is False

    def test_root_grant_does_not_open_everything(self):
        # "/" is granted to every role but only matches itself
        assert is_route_allowed("purchase", "/") is True
        assert is_route_allowed("purchase", "/payments") is False

    @pytest.mark.parametrize("path", ALL_PATHS)
    def test_unknown_role_denied_everywhere(self, path):
        assert is_route_allowed("unknown-role", path) is False
        assert is_route_allowed(None, path) is False

    def test_unknown_role_has_no_routes(self):
        assert allowed_routes("intern") == frozenset()

    def test_accounts_reaches_ledger_and_trial_balance(self):
        assert is_route_allowed("accounts", "/accounts/ledger") is True
        assert is_route_allowed("accounts", "/accounts/trial-balance") is True
        assert is_route_allowed("accounts", "/accounts") is False

    def test_table_covers_every_role(self):
        assert set(ROUTE_PERMISSIONS) == set(ALL_ROLES)


class TestLandingPath:

    @pytest.mark.parametrize("role,path", [
        ("admin", "/"),
        ("sales", "/sales"),
        ("accounts", "/accounts/ledger"),
        ("purchase", "/orders"),
    ])
    def test_known_roles(self, role, path):
        assert landing_path(role) == path

    def test_unknown_role_defaults_to_root(self):
        assert landing_path("unknown-role") == "/"

    @pytest.mark.parametrize("role", ALL_ROLES)
    def test_landing_path_is_reachable(self, role):
        assert is_route_allowed(role, landing_path(role))


class TestActionsAndMenu:

    def test_admin_satisfies_any_requirement(self):
        assert has_role("admin", ("accounts",)) is True

    def test_listed_role_passes(self):
        assert has_role("accounts", ("accounts", "purchase")) is True
        assert has_role("sales", "sales") is True

    def test_unlisted_or_unknown_role_fails(self):
        assert has_role("sales", ("admin",)) is False
        assert has_role("root", ("root",)) is False

    def test_admin_menu_is_complete(self):
        assert [item["path"] for item in visible_menu("admin")] == [path for path, _ in MENU_ITEMS]

    def test_sales_menu(self):
        paths = [item["path"] for item in visible_menu("sales")]
        assert paths == ["/", "/analytics", "/inventory", "/sales", "/products", "/reports"]

    def test_unknown_role_menu_is_empty(self):
        assert visible_menu("guest") == []
