"""
Client-side routes and the route guard.

resolve_route() is the whole guard: it turns the requested path and the
current user into the path that actually gets rendered.
"""

from typing import Optional

from expense_tracker.models.invoice import UserProfile


LOGIN = "/login"
DASHBOARD = "/"
INVOICES = "/invoices"
SETTINGS = "/settings"
PROFILE = "/profile"

PUBLIC_ROUTES = frozenset({LOGIN})
PROTECTED_ROUTES = frozenset({DASHBOARD, INVOICES, SETTINGS, PROFILE})

# Sidebar order: (label, path)
NAVIGATION = (
    ("Dashboard", DASHBOARD),
    ("Invoices", INVOICES),
    ("Settings", SETTINGS),
    ("Profile", PROFILE),
)


def normalize_path(path: Optional[str]) -> str:
    """'invoices', '/invoices/' and '/invoices' all mean the same route."""
    if not path:
        return DASHBOARD
    path = "/" + path.strip().strip("/")
    return path


def resolve_route(path: Optional[str], user: Optional[UserProfile]) -> str:
    """
    Decide which route to render.

    Unknown paths fall back to the dashboard; protected paths without a
    signed-in user redirect to the login page.
    """
    path = normalize_path(path)
    if path not in PUBLIC_ROUTES and path not in PROTECTED_ROUTES:
        path = DASHBOARD
    if path in PROTECTED_ROUTES and user is None:
        return LOGIN
    return path
