"""
Account Service - Registration, Verification and Message Acceptance

This module holds the account lifecycle:

    unverified (code pending)  --correct code, not expired-->  verified

There is no way back to unverified, and no limit on verification attempts.
Codes are not cleared after a successful verification, so re-submitting the
same code keeps succeeding until it expires.

Functions here commit their own writes and raise the typed errors from
whisperbox.errors for expected failures; route handlers only translate the
result into a response.
"""

import logging

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from whisperbox.errors import AuthError, ConflictError, DependencyError, NotFoundError, ValidationError
from whisperbox.models import Account
from whisperbox.services.auth import hash_password, verify_password
from whisperbox.services.codes import generate_verify_code, is_code_expired
from whisperbox.services.email import send_verification_email
from whisperbox.utils import clock
from whisperbox.utils.validators import normalize_email


logger = logging.getLogger(__name__)


# --- Lookups ---------------------------------------------------------------

async def get_account(db: AsyncSession, account_id: int) -> Account | None:
    result = await db.execute(select(Account).filter(Account.id == account_id))
    return result.scalars().first()


async def find_verified_by_username(db: AsyncSession, username: str) -> Account | None:
    result = await db.execute(
        select(Account).filter(Account.username == username, Account.is_verified.is_(True))
    )
    return result.scalars().first()


async def find_by_email(db: AsyncSession, email: str) -> Account | None:
    result = await db.execute(select(Account).filter(Account.email == email))
    return result.scalars().first()


async def find_by_username(db: AsyncSession, username: str) -> Account | None:
    """
    Return the account holding a username, preferring the verified one.

    Unverified signups may share a username with each other and with a
    verified account; only the verified holder is addressable by name.
    """
    result = await db.execute(
        select(Account)
        .filter(Account.username == username)
        .order_by(Account.is_verified.desc(), Account.id.desc())
    )
    return result.scalars().first()


async def find_by_identifier(db: AsyncSession, identifier: str) -> Account | None:
    """Look an account up by email or username, whichever matches."""
    if "@" in identifier:
        identifier = normalize_email(identifier)
    result = await db.execute(
        select(Account)
        .filter(or_(Account.email == identifier, Account.username == identifier))
        .order_by(Account.is_verified.desc(), Account.id.desc())
    )
    return result.scalars().first()


async def is_username_available(db: AsyncSession, username: str) -> bool:
    return await find_verified_by_username(db, username) is None


# --- Registration ----------------------------------------------------------

async def register_account(db: AsyncSession, username: str, email: str, password: str) -> Account:
    """
    Create a pending account, or refresh an unverified one, and send its code.

    Steps:
    1. Reject a username already held by a verified account
    2. Reject an email held by a verified account
    3. Refresh the unverified account holding this email (new username,
       password hash and code), or create a new one
    4. Email the code

    The store write is kept even if the email fails; DependencyError is
    raised after the commit.

    Raises:
        ConflictError: username or email already taken
        DependencyError: the verification email could not be sent
    """
    if await find_verified_by_username(db, username):
        raise ConflictError("Username is already taken")

    code, expiry = generate_verify_code()
    password_hash = hash_password(password)

    account = await find_by_email(db, email)
    if account is not None:
        if account.is_verified:
            raise ConflictError("User already exists with this email")

        # Retry of an unfinished signup: overwrite in place, no duplicate row.
        # The username already passed the verified-holder check above.
        account.username = username
        account.password_hash = password_hash
        account.verify_code = code
        account.verify_code_expiry = expiry
        created = False
    else:
        account = Account(
            username=username,
            email=email,
            password_hash=password_hash,
            verify_code=code,
            verify_code_expiry=expiry,
            is_verified=False,
            is_accepting_messages=True,
            created_at=clock.utcnow(),
        )
        db.add(account)
        created = True

    await db.commit()
    await db.refresh(account)
    logger.info(f"Account {'created' if created else 'refreshed'}: id={account.id} username={account.username}")

    if not await send_verification_email(email, username, code):
        raise DependencyError("Account saved, but the verification email could not be sent")

    return account


async def resend_verify_code(db: AsyncSession, email: str) -> Account:
    """
    Issue a fresh code to an account that has not been verified yet.

    Raises:
        NotFoundError: no account has this email
        ConflictError: the account is already verified
        DependencyError: the email could not be sent
    """
    account = await find_by_email(db, email)
    if account is None:
        raise NotFoundError("User not found")
    if account.is_verified:
        raise ConflictError("Account is already verified")

    account.verify_code, account.verify_code_expiry = generate_verify_code()
    await db.commit()
    logger.info(f"Verification code regenerated for account id={account.id}")

    if not await send_verification_email(account.email, account.username, account.verify_code):
        raise DependencyError("A new code was generated, but the email could not be sent")
    return account


# --- Verification ----------------------------------------------------------

async def _verification_candidate(db: AsyncSession, username: str, code: str) -> Account | None:
    result = await db.execute(
        select(Account)
        .filter(Account.username == username)
        .order_by(Account.id.desc())
    )
    candidates = result.scalars().all()
    if not candidates:
        return None
    # Several pending signups may share a username; the code tells them apart
    for account in candidates:
        if account.verify_code == code:
            return account
    return candidates[0]


async def verify_account(db: AsyncSession, username: str, code: str) -> Account:
    """
    Confirm an account with its one-time code.

    The account becomes verified only when the code matches AND has not
    expired. An expired code fails even if it is correct.

    Raises:
        NotFoundError: no account has this username
        ValidationError: the code is expired or incorrect
        ConflictError: another verified account took the username meanwhile
    """
    account = await _verification_candidate(db, username, code)
    if account is None:
        raise NotFoundError("User not found")

    is_code_valid = account.verify_code == code
    is_code_not_expired = not is_code_expired(account.verify_code_expiry)

    if is_code_valid and is_code_not_expired:
        if not account.is_verified:
            holder = await find_verified_by_username(db, username)
            if holder is not None and holder.id != account.id:
                raise ConflictError("Username is already taken, please sign up again with another username")
            account.is_verified = True
            await db.commit()
            logger.info(f"Account verified: id={account.id} username={username}")
        return account

    if not is_code_not_expired:
        logger.info(f"Expired verification code for username={username}")
        raise ValidationError("Verification code has expired, please sign up again to get a new code")

    logger.info(f"Incorrect verification code for username={username}")
    raise ValidationError("Incorrect verification code")


# --- Sign in ---------------------------------------------------------------

async def authenticate(db: AsyncSession, identifier: str, password: str) -> Account:
    """
    Check sign-in credentials.

    Raises:
        AuthError: unknown identifier, unverified account or wrong password
    """
    account = await find_by_identifier(db, identifier)
    if account is None:
        raise AuthError("No user found with this email or username")
    if not account.is_verified:
        raise AuthError("Please verify your account before logging in")
    if not verify_password(password, account.password_hash):
        raise AuthError("Incorrect password")
    return account


# --- Message acceptance ----------------------------------------------------

async def set_accepting_messages(db: AsyncSession, account_id: int, accept_messages: bool) -> Account:
    """
    Set whether the account takes new messages. Stored messages are untouched.

    Raises:
        NotFoundError: the account no longer exists
    """
    result = await db.execute(
        update(Account)
        .where(Account.id == account_id)
        .values(is_accepting_messages=accept_messages)
    )
    await db.commit()
    if result.rowcount == 0:
        raise NotFoundError("Failed to find user to update message acceptance status")

    account = await get_account(db, account_id)
    # The session may hold an older copy loaded earlier in this request
    await db.refresh(account)
    logger.info(f"Account id={account_id} accepting messages: {accept_messages}")
    return account


async def get_accepting_messages(db: AsyncSession, account_id: int) -> bool:
    account = await get_account(db, account_id)
    if account is None:
        raise NotFoundError("User not found")
    return account.is_accepting_messages
