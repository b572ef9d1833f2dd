"""
Route Classification and Page Access

Each path falls into one class:
- PUBLIC_ONLY: pages for signed-out visitors (landing, sign-in, sign-up, verify)
- PROTECTED: pages that need a session (dashboard)
- OPEN: everything else, including the JSON API, which enforces its own auth

authorize() is evaluated once per request and says where, if anywhere, the
caller should be redirected.
"""

import enum

from whisperbox.services.auth import Principal


class RouteClass(enum.Enum):
    PUBLIC_ONLY = "public_only"
    PROTECTED = "protected"
    OPEN = "open"


SIGN_IN_PATH = "/sign-in"
DASHBOARD_PATH = "/dashboard"

# (exact paths, path prefixes)
PUBLIC_ONLY_ROUTES = ({"/", "/sign-in", "/sign-up"}, ("/verify",))
PROTECTED_ROUTES = ({"/dashboard"}, ("/dashboard/",))


def _matches(path: str, routes) -> bool:
    exact, prefixes = routes
    return path in exact or path.startswith(prefixes)


def classify(path: str) -> RouteClass:
    if _matches(path, PROTECTED_ROUTES):
        return RouteClass.PROTECTED
    if _matches(path, PUBLIC_ONLY_ROUTES):
        return RouteClass.PUBLIC_ONLY
    return RouteClass.OPEN


def authorize(path: str, principal: Principal | None) -> str | None:
    """
    Return the path to redirect to, or None to let the request through.

    Signed-in callers are sent from public-only pages to the dashboard;
    anonymous callers are sent from protected pages to sign-in.
    """
    route_class = classify(path)
    if route_class is RouteClass.PUBLIC_ONLY and principal is not None:
        return DASHBOARD_PATH
    if route_class is RouteClass.PROTECTED and principal is None:
        return SIGN_IN_PATH
    return None
