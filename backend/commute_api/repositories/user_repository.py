"""
Commute Match Backend — User Repository
========================================

What:  Persistence operations for users.
Who:   Used by UserService, ChatService (participant lookups), the admin
       listing, and the authentication dependency.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.models.base import utcnow
from commute_api.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, data: Dict[str, Any]) -> User:
        async with self._session_factory() as session:
            user = User(**data)
            session.add(user)
            await session.commit()
            logger.info("User %s registered", user.id)
            return user

    async def find_by_email(self, email: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        async with self._session_factory() as session:
            return await session.get(User, user_id)

    async def update(self, user_id: str, changes: Dict[str, Any]) -> Optional[User]:
        async with self._session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                return None
            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = utcnow()
            await session.commit()
            return user

    async def find_all(self, page: int = 1, limit: int = 10) -> List[User]:
        """Newest users first, one page at a time."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(User)
                .order_by(User.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            return list(result.scalars().all())

    async def count(self) -> int:
        async with self._session_factory() as session:
            result = await session.execute(select(func.count(User.id)))
            return result.scalar_one()
