"""
Input Validation Utilities

This module provides validation functions for user input:
1. username_errors: Checks a username against the account naming rules
2. password_errors: Checks the minimum password strength
3. normalize_username: Undoes transport encoding of a username
4. normalize_email: Lowercases the domain the way stored emails are

The error-list style lets callers report every broken rule per field
instead of stopping at the first one.
"""

import re
from urllib.parse import unquote


USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6

# Letters, digits and underscore only
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")


def username_errors(username: str) -> list[str]:
    """
    Return every rule the username breaks (empty list when valid).

    Examples:
        >>> username_errors("alice_01")
        []
        >>> username_errors("a!")
        ['Username must not contain special characters']
    """
    errors = []
    if len(username) < USERNAME_MIN_LENGTH:
        errors.append(f"Username must be at least {USERNAME_MIN_LENGTH} characters")
    if len(username) > USERNAME_MAX_LENGTH:
        errors.append(f"Username must be no more than {USERNAME_MAX_LENGTH} characters")
    # fullmatch: "$" alone would also accept a trailing newline
    if username and not USERNAME_PATTERN.fullmatch(username):
        errors.append("Username must not contain special characters")
    return errors


def password_errors(password: str) -> list[str]:
    if len(password) < PASSWORD_MIN_LENGTH:
        return [f"Password must be at least {PASSWORD_MIN_LENGTH} characters"]
    return []


def normalize_username(username: str) -> str:
    """
    Decode a username that may have been percent-encoded in transit.

    Clients sometimes pass the username straight from a URL segment,
    e.g. "john%5Fdoe" for "john_doe".
    """
    return unquote(username)


def normalize_email(email: str) -> str:
    """
    Lowercase the domain part of an email address.

    Stored emails went through EmailStr, which normalizes the domain,
    so lookups by raw user input must do the same.

    Examples:
        >>> normalize_email("Alice@Example.COM")
        'Alice@example.com'
    """
    local, sep, domain = email.rpartition("@")
    if not sep:
        return email
    return f"{local}@{domain.lower()}"
