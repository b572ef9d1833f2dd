"""
Database Models for Whisperbox

This module defines the SQLAlchemy ORM models for the application:
- Account: A registered user who receives anonymous messages
- Message: An anonymous note stored under its recipient's account

Messages have no life outside their account: they are reachable only through
the owning account's relationship and are removed with it.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import declarative_base, relationship

from whisperbox.utils import clock


# Base class for all ORM models
# All models must inherit from Base to be recognized by SQLAlchemy
Base = declarative_base()


class Account(Base):
    """
    Account model representing one registered human.

    An account starts unverified and becomes verified once the emailed
    one-time code is confirmed. Only verified accounts may sign in.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Not unique on its own: several unverified signups may share a username.
    # Uniqueness among verified accounts is enforced by the partial index below.
    username = Column(String(20), nullable=False, index=True)

    # Unique across all accounts, verified or not
    email = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    # Pending (or last used) one-time code and the instant it stops working
    verify_code = Column(String(6), nullable=False)
    verify_code_expiry = Column(DateTime, nullable=False)

    is_verified = Column(Boolean, default=False, nullable=False)
    is_accepting_messages = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=clock.utcnow)

    # Messages are stored in insertion order; readers sort by recency.
    # cascade="all, delete-orphan": a message removed from the list is deleted
    messages = relationship(
        "Message",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="Message.id"
    )

    __table_args__ = (
        Index(
            "uq_users_verified_username",
            "username",
            unique=True,
            postgresql_where=text("is_verified"),
            sqlite_where=text("is_verified = 1"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, username={self.username!r}, is_verified={self.is_verified})>"


class Message(Base):
    """
    Anonymous message owned by exactly one Account.

    The sender is never recorded.
    """
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    content = Column(String, nullable=False)

    # Set once at creation, never updated
    created_at = Column(DateTime, default=clock.utcnow, index=True, nullable=False)

    account = relationship("Account", back_populates="messages")
