"""
Authentication Dependencies for FastAPI Routes

This module provides dependency injection functions for authentication.
They resolve the caller's session into a Principal, which route handlers
receive as an explicit parameter.

The session token is read from the "access_token" cookie set at sign-in,
or from an "Authorization: Bearer <jwt>" header for API clients.
"""

from fastapi import Request

from whisperbox.errors import AuthError
from whisperbox.services.auth import Principal, verify_token


COOKIE_NAME = "access_token"


def _extract_token(request: Request) -> str | None:
    # Both use "Bearer <jwt_token>" format; an explicit header wins over the cookie
    raw = request.headers.get("authorization") or request.cookies.get(COOKIE_NAME)
    if not raw:
        return None

    scheme, _, param = raw.partition(" ")
    if scheme.lower() != "bearer" or not param:
        return None
    return param


def principal_from_request(request: Request) -> Principal | None:
    """Resolve the request's session without touching the database."""
    token = _extract_token(request)
    if not token:
        return None
    return verify_token(token)


async def get_current_principal(request: Request) -> Principal:
    """
    Dependency that requires an authenticated caller.

    Usage in routes:
        @router.get("/protected")
        async def protected_route(principal: Principal = Depends(get_current_principal)):
            return {"username": principal.username}

    Raises:
        AuthError: 401 if there is no session or it is invalid/expired
    """
    if not _extract_token(request):
        raise AuthError("Not authenticated")

    principal = principal_from_request(request)
    if principal is None:
        raise AuthError("Invalid or expired session")
    return principal

