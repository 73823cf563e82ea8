# Overview: Role constants for the four account roles.


class Role:
    """Account roles. A user's role is fixed for the lifetime of a login."""
    ADMIN = "admin"
    SALES = "sales"
    ACCOUNTS = "accounts"
    PURCHASE = "purchase"


ALL_ROLES = (Role.ADMIN, Role.SALES, Role.ACCOUNTS, Role.PURCHASE)

# Grants access to every route
UNRESTRICTED = "*"
