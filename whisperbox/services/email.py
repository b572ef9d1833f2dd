"""
Email Service for Verification Codes

This module sends the one-time verification code using the Resend API.
Resend is a modern email service with a simple API for transactional emails.

Delivery is attempted once. The caller only learns whether it worked;
there is no retry and no outbox.
"""

import asyncio
import logging

import resend

from whisperbox.config import settings
from whisperbox.templating import templates


# Set up logging for debugging email sending issues
logger = logging.getLogger(__name__)

# Configure Resend API with our API key
# This must be set before making any API calls
resend.api_key = settings.RESEND_API_KEY


def render_verification_email(username: str, code: str) -> str:
    template = templates.get_template("verification_email.html")
    return template.render(
        username=username,
        code=code,
        app_name=settings.APP_NAME,
        ttl_minutes=settings.VERIFY_CODE_TTL_MINUTES,
    )


async def send_verification_email(to_email: str, username: str, code: str) -> bool:
    """
    Send a verification code to the specified address.

    Args:
        to_email: Recipient's email address
        username: Name used in the greeting
        code: The 6-digit one-time code

    Returns:
        True if Resend accepted the email, False otherwise.
        Errors are logged, never raised.
    """
    params = {
        "from": settings.FROM_EMAIL,
        "to": [to_email],
        "subject": f"{settings.APP_NAME} | Verification Code",
        "html": render_verification_email(username, code),
    }

    try:
        # resend is a blocking client; keep it off the event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
    except Exception as e:
        logger.error(f"Error sending verification email to {to_email}: {e}")
        return False

    logger.info(f"Verification email sent to {to_email}: {email}")
    return True
