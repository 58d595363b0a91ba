"""Persistence for the one-per-user matching preferences document."""

from typing import Any, Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.models.base import utcnow
from commute_api.models.user import MatchingPreferences


class MatchingPreferencesRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_by_user_id(self, user_id: str) -> Optional[MatchingPreferences]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(MatchingPreferences).where(MatchingPreferences.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def create(self, user_id: str, preferences: Dict[str, Any]) -> MatchingPreferences:
        async with self._session_factory() as session:
            record = MatchingPreferences(user_id=user_id, preferences=dict(preferences))
            session.add(record)
            await session.commit()
            return record

    async def upsert(self, user_id: str, preferences: Dict[str, Any]) -> MatchingPreferences:
        """Replace the stored document, creating the row if needed."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MatchingPreferences).where(MatchingPreferences.user_id == user_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                record = MatchingPreferences(user_id=user_id, preferences=dict(preferences))
                session.add(record)
            else:
                # New dict object so the JSON column is flagged dirty
                record.preferences = dict(preferences)
                record.updated_at = utcnow()
            await session.commit()
            return record

    async def delete(self, user_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(MatchingPreferences).where(MatchingPreferences.user_id == user_id)
            )
            await session.commit()
            return result.rowcount > 0
