"""
Message Service - Anonymous Intake, Listing and Deletion

Messages live under their recipient's account. Every read and delete is
scoped by the owning account id, so a message id on its own grants nothing.
"""

import logging

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from whisperbox.errors import ForbiddenError, NotFoundError
from whisperbox.models import Account, Message
from whisperbox.services.accounts import find_by_username
from whisperbox.utils import clock


logger = logging.getLogger(__name__)


async def deliver_message(db: AsyncSession, username: str, content: str) -> Message:
    """
    Store an anonymous message for the named recipient.

    A recipient who is not accepting messages gets nothing: the message is
    dropped, not queued.

    Raises:
        NotFoundError: no account has this username
        ForbiddenError: the recipient is not accepting messages
    """
    recipient = await find_by_username(db, username)
    if recipient is None:
        raise NotFoundError("User not found")

    if not recipient.is_accepting_messages:
        raise ForbiddenError("User is not accepting messages")

    message = Message(user_id=recipient.id, content=content, created_at=clock.utcnow())
    db.add(message)
    await db.commit()
    await db.refresh(message)

    logger.info(f"Message id={message.id} delivered to account id={recipient.id}")
    return message


async def list_messages(db: AsyncSession, account_id: int) -> list[Message]:
    """
    Return the account's messages, most recent first.

    Raises:
        NotFoundError: the account no longer exists
    """
    result = await db.execute(
        select(Account)
        .filter(Account.id == account_id)
        .options(selectinload(Account.messages))
    )
    account = result.scalars().first()
    if account is None:
        raise NotFoundError("User not found")

    # Stored in insertion order; shown in recency order. Ties keep the
    # later insert first.
    return sorted(account.messages, key=lambda m: (m.created_at, m.id), reverse=True)


async def delete_message(db: AsyncSession, account_id: int, message_id: int) -> None:
    """
    Remove one of the account's own messages.

    Raises:
        NotFoundError: no message with this id belongs to the account
    """
    result = await db.execute(
        delete(Message)
        .where(Message.id == message_id, Message.user_id == account_id)
    )
    await db.commit()

    if result.rowcount == 0:
        raise NotFoundError("Message not found or already deleted")
    logger.info(f"Message id={message_id} deleted by account id={account_id}")
