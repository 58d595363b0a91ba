"""
Commute Match Backend — Message Repository
===========================================

What:  Persistence for chat messages and their read receipts.
Who:   Used by ChatService.

Unread Definition:
    A message is unread for a user when the user did not send it, its
    status is not 'read', and there is no read receipt for that user.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.models.base import utcnow
from commute_api.models.chat import Message, MessageRead, MessageStatus


def _unread_by(user_id: str):
    return (
        Message.sender_id != user_id,
        Message.status != MessageStatus.READ.value,
        ~Message.read_receipts.any(MessageRead.user_id == user_id),
    )


class MessageRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, data: Dict[str, Any]) -> Message:
        async with self._session_factory() as session:
            message = Message(**data)
            session.add(message)
            await session.commit()
            message_id = message.id
        return await self.find_by_id(message_id)

    async def find_by_id(self, message_id: str) -> Optional[Message]:
        async with self._session_factory() as session:
            result = await session.execute(select(Message).where(Message.id == message_id))
            return result.scalar_one_or_none()

    async def find_chat_messages(self, chat_id: str, page: int = 1, limit: int = 50) -> List[Message]:
        """One page of a chat's messages, newest first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Message)
                .where(Message.chat_id == chat_id)
                .order_by(Message.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def mark_chat_messages_as_read(self, chat_id: str, user_id: str) -> int:
        """Add a read receipt for every unread message; returns how many."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Message).where(Message.chat_id == chat_id, *_unread_by(user_id))
            )
            messages = list(result.scalars().all())
            now = utcnow()
            for message in messages:
                message.read_receipts.append(MessageRead(user_id=user_id, read_at=now))
                message.status = MessageStatus.READ.value
                message.updated_at = now
            await session.commit()
            return len(messages)

    async def get_unread_messages_count(self, chat_id: str, user_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(Message.id)).where(
                    Message.chat_id == chat_id, *_unread_by(user_id)
                )
            )
            return result.scalar_one()

    async def get_user_unread_messages_count(self, user_id: str) -> int:
        """Unread messages addressed to the user across all chats."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(Message.id)).where(
                    Message.receiver_id == user_id, *_unread_by(user_id)
                )
            )
            return result.scalar_one()

    async def search_messages(self, chat_id: str, term: str, limit: int = 20) -> List[Message]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Message)
                .where(
                    Message.chat_id == chat_id,
                    Message.content.icontains(term, autoescape=True),
                )
                .order_by(Message.created_at.desc())
                .limit(limit)
            )
            return list(result.scalars().all())

    async def update_message(self, message_id: str, content: str) -> Optional[Message]:
        async with self._session_factory() as session:
            message = await session.get(Message, message_id)
            if message is None:
                return None
            message.content = content
            message.updated_at = utcnow()
            await session.commit()
        return await self.find_by_id(message_id)

    async def delete_message(self, message_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(delete(Message).where(Message.id == message_id))
            await session.commit()
            return result.rowcount > 0
