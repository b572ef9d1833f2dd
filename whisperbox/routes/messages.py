"""
Message Routes - Acceptance Toggle, Anonymous Intake, Inbox

This module handles:
- POST /api/accept-messages: Turn message acceptance on or off
- GET /api/accept-messages: Read the current acceptance flag
- POST /api/send-message: Leave an anonymous message for a user (no login)
- GET /api/get-messages: The caller's inbox, newest first
- DELETE /api/delete-message/{message_id}: Remove one of the caller's messages
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from whisperbox.database import get_db
from whisperbox.dependencies import get_current_principal
from whisperbox.errors import InternalError
from whisperbox.routes.auth import set_session_cookie
from whisperbox.schemas import AcceptMessagesRequest, AccountOut, MessageOut, SendMessageRequest, dump
from whisperbox.services import accounts, messages
from whisperbox.services.auth import Principal


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["messages"])


@router.post("/accept-messages")
async def update_accept_messages(
    data: AcceptMessagesRequest,
    response: Response,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    """
    Set whether the caller takes new messages.

    The session cookie is re-issued so its cached flag matches the store.
    """
    try:
        account = await accounts.set_accepting_messages(db, principal.id, data.accept_messages)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error updating message acceptance status")
        raise InternalError("Error updating message acceptance status")

    set_session_cookie(response, Principal.from_account(account))
    return {
        "success": True,
        "message": "Message acceptance status updated successfully",
        "isAcceptingMessages": account.is_accepting_messages,
        "updatedUser": dump(AccountOut.model_validate(account)),
    }


@router.get("/accept-messages")
async def get_accept_messages(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    try:
        is_accepting = await accounts.get_accepting_messages(db, principal.id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error retrieving message acceptance status")
        raise InternalError("Error retrieving message acceptance status")

    return {"success": True, "message": "OK", "isAcceptingMessages": is_accepting}


@router.post("/send-message", status_code=status.HTTP_201_CREATED)
async def send_message(data: SendMessageRequest, db: AsyncSession = Depends(get_db)):
    """Store an anonymous message for the named user. No session needed."""
    try:
        await messages.deliver_message(db, data.username, data.content)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error adding message")
        raise InternalError("Error adding message")

    return {"success": True, "message": "Message sent successfully"}


@router.get("/get-messages")
async def get_messages(
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    try:
        inbox = await messages.list_messages(db, principal.id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error fetching messages")
        raise InternalError("Error fetching messages")

    return {
        "success": True,
        "message": "OK",
        "messages": [dump(MessageOut.model_validate(m)) for m in inbox],
    }


@router.delete("/delete-message/{message_id}")
async def delete_message(
    message_id: int,
    principal: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
):
    try:
        await messages.delete_message(db, principal.id, message_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Error deleting message")
        raise InternalError("Error deleting message")

    return {"success": True, "message": "Message deleted"}
