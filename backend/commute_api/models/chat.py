"""
Commute Match Backend — Chat & Message Models
==============================================

What:  ORM models for chats, their participants, messages and read receipts.
Who:   Used by ChatRepository and MessageRepository.

Table Design:
    chats               one row per conversation; soft-deleted via is_active
    chat_participants   (chat_id, user_id, is_admin) membership rows
    messages            chat messages, hard-deleted by their sender
    message_reads       (message_id, user_id, read_at) read receipts

    A chat's last-message summary is denormalized into `chats.last_message`
    so the chat list can be ordered without touching `messages`.
"""

import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commute_api.database import Base
from commute_api.models.base import OBJECT_ID_LENGTH, TimestampMixin, id_column, utcnow
from commute_api.models.user import User


class ChatType(str, enum.Enum):
    DIRECT = "direct"
    GROUP = "group"


class MessageType(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"


class MessageStatus(str, enum.Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class ChatParticipant(Base):
    __tablename__ = "chat_participants"

    id: Mapped[str] = id_column()
    chat_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship(User, lazy="joined")

    __table_args__ = (
        UniqueConstraint("chat_id", "user_id", name="uq_chat_participants_chat_user"),
        Index("idx_chat_participants_user", "user_id"),
    )


class Chat(TimestampMixin, Base):
    """
    A direct (two users) or group conversation.

    Soft delete: `is_active=False` plus `deleted_at`; rows are never removed.
    """

    __tablename__ = "chats"

    id: Mapped[str] = id_column()
    chat_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=ChatType.DIRECT.value
    )
    title: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # {content, sender_id, timestamp, message_type}
    last_message: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    last_message_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    members: Mapped[List[ChatParticipant]] = relationship(
        ChatParticipant,
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by=ChatParticipant.joined_at,
    )

    __table_args__ = (
        Index("idx_chats_type_active", "chat_type", "is_active"),
        Index("idx_chats_last_message_at", "last_message_at"),
    )

    @property
    def participant_ids(self) -> List[str]:
        return [member.user_id for member in self.members]

    @property
    def admin_ids(self) -> List[str]:
        return [member.user_id for member in self.members if member.is_admin]

    def is_participant(self, user_id: str) -> bool:
        return user_id in self.participant_ids

    def is_admin(self, user_id: str) -> bool:
        return user_id in self.admin_ids

    def __repr__(self) -> str:
        return f"<Chat(id={self.id}, type='{self.chat_type}', active={self.is_active})>"


class MessageRead(Base):
    __tablename__ = "message_reads"

    id: Mapped[str] = id_column()
    message_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(OBJECT_ID_LENGTH), nullable=False)
    read_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        UniqueConstraint("message_id", "user_id", name="uq_message_reads_message_user"),
    )


class Message(TimestampMixin, Base):
    __tablename__ = "messages"

    id: Mapped[str] = id_column()
    chat_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    # Set for direct chats (the other participant)
    receiver_id: Mapped[Optional[str]] = mapped_column(
        String(OBJECT_ID_LENGTH), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=MessageType.TEXT.value
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=MessageStatus.SENT.value
    )
    file_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    file_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    reply_to_message_id: Mapped[Optional[str]] = mapped_column(
        String(OBJECT_ID_LENGTH), nullable=True
    )

    sender: Mapped[User] = relationship(User, lazy="joined")
    read_receipts: Mapped[List[MessageRead]] = relationship(
        MessageRead,
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_messages_chat_created", "chat_id", "created_at"),
        Index("idx_messages_sender_created", "sender_id", "created_at"),
        Index("idx_messages_receiver", "receiver_id"),
    )

    @property
    def read_by(self) -> List[Dict[str, Any]]:
        return [
            {"user_id": receipt.user_id, "read_at": receipt.read_at}
            for receipt in self.read_receipts
        ]

    def __repr__(self) -> str:
        return f"<Message(id={self.id}, chat={self.chat_id}, type='{self.message_type}')>"
