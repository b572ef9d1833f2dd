"""
Authentication Routes

This module implements password sign-up gated by an emailed one-time code.
The flow:
1. User submits username, email and password
2. System stores an unverified account and emails a 6-digit code
3. User submits the code before it expires and the account is verified
4. Verified users sign in; a JWT is stored in an HTTP-only cookie

Every handler is one try-scope: expected failures are raised as typed
errors, anything unexpected is logged and reported as a generic 500.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from whisperbox.config import settings
from whisperbox.database import get_db
from whisperbox.dependencies import COOKIE_NAME, get_current_principal
from whisperbox.errors import InternalError, NotFoundError, ValidationError
from whisperbox.schemas import (
    AccountOut,
    ResendCodeRequest,
    SignInRequest,
    SignUpRequest,
    VerifyCodeRequest,
    dump,
)
from whisperbox.services import accounts
from whisperbox.services.auth import Principal, create_access_token
from whisperbox.utils.validators import normalize_username, username_errors


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def set_session_cookie(response: Response, principal: Principal) -> str:
    """Issue a fresh session token for the principal and store it in the cookie."""
    token = create_access_token(principal)
    response.set_cookie(
        key=COOKIE_NAME,
        value=f"Bearer {token}",  # OAuth 2.0 standard format
        httponly=True,  # JavaScript can't access (prevents XSS attacks)
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",  # CSRF protection
        secure=settings.COOKIE_SECURE
    )
    return token


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(data: SignUpRequest, db: AsyncSession = Depends(get_db)):
    """
    Register a new account, or refresh an unfinished signup for the same email.

    Returns:
        201 with a prompt to verify the emailed code
    """
    try:
        await accounts.register_account(db, data.username, data.email, data.password)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error registering user")
        raise InternalError("Error registering user")

    return {
        "success": True,
        "message": "User registered successfully. Please verify your account."
    }


@router.post("/verify-code")
async def verify_code(data: VerifyCodeRequest, db: AsyncSession = Depends(get_db)):
    try:
        await accounts.verify_account(db, data.username, data.code)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error verifying user")
        raise InternalError("Error verifying user")

    return {"success": True, "message": "Account verified successfully"}


@router.post("/resend-code")
async def resend_code(data: ResendCodeRequest, db: AsyncSession = Depends(get_db)):
    """Send a fresh code to an account whose signup was never verified."""
    try:
        await accounts.resend_verify_code(db, data.email)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error resending verification code")
        raise InternalError("Error resending verification code")

    return {"success": True, "message": "A new verification code has been sent"}


@router.get("/check-username-unique")
async def check_username_unique(
    username: str = Query(""),
    db: AsyncSession = Depends(get_db)
):
    """
    Report whether a username is free. Only verified accounts hold a name.
    """
    username = normalize_username(username)
    errors = username_errors(username)
    if errors:
        raise ValidationError(", ".join(errors), errors={"username": errors})

    try:
        available = await accounts.is_username_available(db, username)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error checking username")
        raise InternalError("Error checking username")

    if not available:
        # Informational: the lookup itself succeeded
        return {"success": False, "message": "Username is already taken"}
    return {"success": True, "message": "Username is unique"}


@router.post("/sign-in")
async def sign_in(data: SignInRequest, response: Response, db: AsyncSession = Depends(get_db)):
    """
    Start a session for a verified account.

    Accepts either the username or the email as identifier. The token is
    set as an HTTP-only cookie and also returned in the body.
    """
    try:
        account = await accounts.authenticate(db, data.identifier, data.password)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error signing in")
        raise InternalError("Error signing in")

    principal = Principal.from_account(account)
    token = set_session_cookie(response, principal)
    logger.info(f"Account id={account.id} signed in")

    return {
        "success": True,
        "message": "Signed in successfully",
        "accessToken": token,
        "user": dump(AccountOut.model_validate(account)),
    }


@router.post("/sign-out")
async def sign_out(response: Response):
    response.delete_cookie(COOKIE_NAME)
    return {"success": True, "message": "Signed out"}


@router.get("/me")
async def me(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """Return the stored account behind the current session."""
    try:
        account = await accounts.get_account(db, principal.id)
        if account is None:
            raise NotFoundError("User not found")
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error loading current user")
        raise InternalError("Error loading current user")

    return {"success": True, "message": "OK", "user": dump(AccountOut.model_validate(account))}
