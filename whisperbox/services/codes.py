"""
One-time verification codes.

A code is six decimal digits drawn uniformly from 100000-999999, so it never
has a leading zero to lose. It is valid until its expiry instant, exclusive.
"""

import secrets
from datetime import datetime, timedelta

from whisperbox.config import settings
from whisperbox.utils import clock


CODE_MIN = 100000
CODE_MAX = 999999


def generate_verify_code(ttl: timedelta | None = None) -> tuple[str, datetime]:
    """
    Create a fresh code and the instant it expires.

    Args:
        ttl: Optional validity window; defaults to VERIFY_CODE_TTL_MINUTES

    Returns:
        (code, expiry) where code is a 6-character digit string
    """
    if ttl is None:
        ttl = timedelta(minutes=settings.VERIFY_CODE_TTL_MINUTES)
    code = str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
    return code, clock.utcnow() + ttl


def is_code_expired(expiry: datetime, now: datetime | None = None) -> bool:
    if now is None:
        now = clock.utcnow()
    return now >= expiry
