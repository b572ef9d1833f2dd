"""
Session Token and Password Service

This module handles:
- Password hashing with bcrypt (the raw password is never stored)
- Creation and verification of JSON Web Tokens for stateless sessions
- The Principal value that carries the caller's identity through a request

The token caches the account's profile flags, so most requests can be
authorized without a database lookup. Handlers that need the stored record
still load it by the principal's id.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import jwt, JWTError

from whisperbox.config import settings


# HMAC-SHA256 algorithm for signing JWT tokens
ALGORITHM = "HS256"

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, as established at sign-in."""
    id: int
    username: str
    is_verified: bool
    is_accepting_messages: bool

    @classmethod
    def from_account(cls, account) -> "Principal":
        return cls(
            id=account.id,
            username=account.username,
            is_verified=account.is_verified,
            is_accepting_messages=account.is_accepting_messages,
        )

    def to_claims(self) -> dict:
        # "sub" must be a string per the JWT spec
        return {
            "sub": str(self.id),
            "username": self.username,
            "is_verified": self.is_verified,
            "is_accepting_messages": self.is_accepting_messages,
        }

    @classmethod
    def from_claims(cls, claims: dict) -> "Principal | None":
        try:
            return cls(
                id=int(claims["sub"]),
                username=claims["username"],
                is_verified=bool(claims["is_verified"]),
                is_accepting_messages=bool(claims["is_accepting_messages"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored hash is malformed
        return False


def create_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT for the given principal.

    Args:
        principal: The signed-in account's identity and flags
        expires_delta: Optional custom lifetime;
                       defaults to ACCESS_TOKEN_EXPIRE_MINUTES

    Returns:
        Encoded JWT string that can be sent to the client
    """
    to_encode = principal.to_claims()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Principal | None:
    """
    Verify a JWT and rebuild the principal it carries.

    This checks the signature, the expiration and the claim shape.

    Returns:
        Principal if the token is valid, None if invalid/expired
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        # Don't expose the specific error to prevent information leakage
        return None
    return Principal.from_claims(payload)
