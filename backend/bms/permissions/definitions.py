"""
Route Permission Table

All role -> route-prefix grants and role landing pages live here. Routing,
menus and action checks read this table through the helpers module; nothing
else compares role strings.

A prefix grants the exact path and everything below it: "/inventory" allows
"/inventory" and "/inventory/adjust" but not "/inventory-report".
"""

from .roles import Role, UNRESTRICTED


# =============================================================================
# ROUTE PERMISSIONS
# =============================================================================

ROUTE_PERMISSIONS = {
    Role.ADMIN: frozenset({UNRESTRICTED}),
    Role.SALES: frozenset({
        "/", "/sales", "/inventory", "/products", "/analytics", "/reports",
    }),
    Role.ACCOUNTS: frozenset({
        "/", "/accounts/ledger", "/accounts/trial-balance", "/bills", "/orders",
        "/payments", "/reports", "/analytics", "/vendors",
    }),
    Role.PURCHASE: frozenset({
        "/", "/orders", "/vendors", "/products", "/inventory", "/bills", "/reports",
    }),
}


# =============================================================================
# LANDING PAGES
# =============================================================================

LANDING_PATHS = {
    Role.ADMIN: "/",                    # Admin dashboard - full overview
    Role.SALES: "/sales",               # Sales dashboard
    Role.ACCOUNTS: "/accounts/ledger",  # Accounts ledger
    Role.PURCHASE: "/orders",           # Purchase orders
}

DEFAULT_LANDING_PATH = "/"


ROLE_DESCRIPTIONS = {
    Role.ADMIN: {
        "title": "Admin Dashboard",
        "description": "Complete system overview with all modules access",
        "primary_actions": ["User Management", "System Settings", "All Reports"],
    },
    Role.SALES: {
        "title": "Sales Dashboard",
        "description": "Sales performance, inventory, and customer management",
        "primary_actions": ["Sales Orders", "Inventory Management", "Sales Analytics"],
    },
    Role.ACCOUNTS: {
        "title": "Accounts Dashboard",
        "description": "Financial management, ledgers, and accounting reports",
        "primary_actions": ["Account Ledger", "Trial Balance", "Financial Reports"],
    },
    Role.PURCHASE: {
        "title": "Purchase Dashboard",
        "description": "Procurement, vendor management, and purchase orders",
        "primary_actions": ["Purchase Orders", "Vendor Management", "Inventory Tracking"],
    },
}


# =============================================================================
# NAVIGATION MENU
# =============================================================================

# (path, label); visibility is decided by is_route_allowed
MENU_ITEMS = [
    ("/", "Dashboard"),
    ("/analytics", "Analytics"),
    ("/inventory", "Inventory"),
    ("/sales", "Sales"),
    ("/orders", "Purchase Orders"),
    ("/bills", "Bills"),
    ("/payments", "Payments"),
    ("/accounts/ledger", "Ledger"),
    ("/accounts/trial-balance", "Trial Balance"),
    ("/vendors", "Vendors"),
    ("/products", "Products"),
    ("/users", "Users"),
    ("/reports", "Reports"),
    ("/settings", "Settings"),
]
