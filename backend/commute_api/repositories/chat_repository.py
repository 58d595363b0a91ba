"""
Commute Match Backend — Chat Repository
========================================

What:  Persistence for chats and their participant rows.
Who:   Used by ChatService.

Query Patterns:
    - Chats of a user:  id IN (SELECT chat_id FROM chat_participants WHERE user_id = :u)
                        AND is_active, ordered by last activity
    - Direct chat:      chat_type = 'direct' AND is_active AND both users
                        appear in chat_participants

Mutating methods return the freshly re-read chat (members loaded), or None
when the chat does not exist.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.models.base import utcnow
from commute_api.models.chat import Chat, ChatParticipant, ChatType

logger = logging.getLogger(__name__)


def _chats_of(user_id: str):
    return select(ChatParticipant.chat_id).where(ChatParticipant.user_id == user_id)


class ChatRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(
        self,
        chat_type: str,
        participant_ids: Iterable[str],
        admin_ids: Iterable[str] = (),
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Chat:
        admins = set(admin_ids)
        async with self._session_factory() as session:
            chat = Chat(chat_type=chat_type, title=title, description=description)
            chat.members = [
                ChatParticipant(user_id=user_id, is_admin=user_id in admins)
                for user_id in participant_ids
            ]
            session.add(chat)
            await session.commit()
            chat_id = chat.id

        logger.info("Chat %s created (%s)", chat_id, chat_type)
        return await self.find_by_id(chat_id)

    async def find_by_id(self, chat_id: str) -> Optional[Chat]:
        async with self._session_factory() as session:
            result = await session.execute(select(Chat).where(Chat.id == chat_id))
            return result.scalar_one_or_none()

    async def find_direct_chat(self, user_a: str, user_b: str) -> Optional[Chat]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Chat)
                .where(
                    Chat.chat_type == ChatType.DIRECT.value,
                    Chat.is_active.is_(True),
                    Chat.id.in_(_chats_of(user_a)),
                    Chat.id.in_(_chats_of(user_b)),
                )
                .limit(1)
            )
            return result.scalar_one_or_none()

    async def find_user_chats(self, user_id: str, page: int = 1, limit: int = 20) -> List[Chat]:
        """Active chats of a user, most recent activity first."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Chat)
                .where(Chat.is_active.is_(True), Chat.id.in_(_chats_of(user_id)))
                .order_by(Chat.last_message_at.desc().nulls_last(), Chat.updated_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def count_user_chats(self, user_id: str) -> int:
        async with self._session_factory() as session:
            result = await session.execute(
                select(func.count(Chat.id)).where(
                    Chat.is_active.is_(True), Chat.id.in_(_chats_of(user_id))
                )
            )
            return result.scalar_one()

    async def update_last_message(self, chat_id: str, summary: Dict[str, Any]) -> Optional[Chat]:
        """`summary` is {content, sender_id, timestamp (ISO string), message_type}."""
        return await self._modify(chat_id, last_message=summary, last_message_at=utcnow())

    async def update_chat_info(self, chat_id: str, changes: Dict[str, Any]) -> Optional[Chat]:
        return await self._modify(chat_id, **changes)

    async def soft_delete_chat(self, chat_id: str) -> Optional[Chat]:
        return await self._modify(chat_id, is_active=False, deleted_at=utcnow())

    async def add_participant(self, chat_id: str, user_id: str) -> Optional[Chat]:
        async with self._session_factory() as session:
            chat = await session.get(Chat, chat_id)
            if chat is None:
                return None
            if user_id not in chat.participant_ids:
                chat.members.append(ChatParticipant(user_id=user_id))
            chat.updated_at = utcnow()
            await session.commit()
        return await self.find_by_id(chat_id)

    async def remove_participant(self, chat_id: str, user_id: str) -> Optional[Chat]:
        async with self._session_factory() as session:
            chat = await session.get(Chat, chat_id)
            if chat is None:
                return None
            chat.members = [m for m in chat.members if m.user_id != user_id]
            chat.updated_at = utcnow()
            await session.commit()
        return await self.find_by_id(chat_id)

    async def _modify(self, chat_id: str, **fields: Any) -> Optional[Chat]:
        async with self._session_factory() as session:
            chat = await session.get(Chat, chat_id)
            if chat is None:
                return None
            for field, value in fields.items():
                setattr(chat, field, value)
            chat.updated_at = utcnow()
            await session.commit()
        return await self.find_by_id(chat_id)
