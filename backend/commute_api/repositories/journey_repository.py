"""
Commute Match Backend — Journey Repository
===========================================

What:  Persistence operations for journeys.
How:   Each method opens its own AsyncSession from the injected factory,
       so independent calls (e.g. the four stats counts) can run
       concurrently on separate connections.
Who:   Used only by JourneyService.

Filter Translation:
    Plain equality keys from the service become WHERE clauses:
        travel_mode, user          → column = :value
        route_id, start_point,
        end_point (find_all only)  → column ILIKE '%value%' (escaped)
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.models.base import utcnow
from commute_api.models.journey import Journey

logger = logging.getLogger(__name__)

_CONTAINS_KEYS = ("route_id", "start_point", "end_point")


class JourneyRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _equality_filters(stmt: Select, filters: Dict[str, Any]) -> Select:
        if filters.get("travel_mode"):
            stmt = stmt.where(Journey.travel_mode == filters["travel_mode"])
        if filters.get("user"):
            stmt = stmt.where(Journey.user_id == filters["user"])
        return stmt

    async def create(self, user_id: str, data: Dict[str, Any]) -> Journey:
        async with self._session_factory() as session:
            journey = Journey(user_id=user_id, **data)
            session.add(journey)
            await session.commit()
            journey_id = journey.id

        logger.info("Journey %s created for user %s", journey_id, user_id)
        # Fresh read so the owner summary is loaded
        return await self.find_by_id(journey_id)

    async def find_by_id(self, journey_id: str) -> Optional[Journey]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Journey).where(Journey.id == journey_id)
            )
            return result.scalar_one_or_none()

    async def find_by_user(self, user_id: str) -> List[Journey]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Journey)
                .where(Journey.user_id == user_id)
                .order_by(Journey.created_at.desc())
            )
            return list(result.scalars().all())

    async def find_all(self, query: Optional[Dict[str, Any]] = None) -> List[Journey]:
        """
        Journeys matching the query, newest first.

        Query plan:
            SELECT ... FROM journeys JOIN users
            WHERE [travel_mode = :m] [AND route_id ILIKE :r] ...
            ORDER BY created_at DESC
        """
        query = query or {}
        stmt = self._equality_filters(select(Journey), query)
        for key in _CONTAINS_KEYS:
            if query.get(key):
                column = getattr(Journey, key)
                stmt = stmt.where(column.icontains(query[key], autoescape=True))

        async with self._session_factory() as session:
            result = await session.execute(stmt.order_by(Journey.created_at.desc()))
            return list(result.scalars().all())

    async def update(
        self, journey_id: str, user_id: str, changes: Dict[str, Any]
    ) -> Optional[Journey]:
        """Apply `changes` to the journey only if `user_id` owns it."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(Journey).where(Journey.id == journey_id, Journey.user_id == user_id)
            )
            journey = result.scalar_one_or_none()
            if journey is None:
                return None

            for field, value in changes.items():
                setattr(journey, field, value)
            journey.updated_at = utcnow()
            await session.commit()
            return journey

    async def delete(self, journey_id: str, user_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(Journey).where(Journey.id == journey_id, Journey.user_id == user_id)
            )
            await session.commit()
            return result.rowcount > 0

    async def find_by_route(self, travel_mode: str, route_id: str) -> List[Journey]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(Journey).where(
                    Journey.travel_mode == travel_mode,
                    Journey.route_id == route_id,
                )
            )
            return list(result.scalars().all())

    async def find_similar_journeys(
        self, user_id: str, journey: Dict[str, Any]
    ) -> List[Journey]:
        """
        Other users' journeys on the same mode that share a start or end.

        Query plan:
            WHERE user_id != :me AND travel_mode = :m
              AND (start_point ILIKE '%start%' OR end_point ILIKE '%end%')
        """
        stmt = select(Journey).where(
            Journey.user_id != user_id,
            Journey.travel_mode == journey["travel_mode"],
            or_(
                Journey.start_point.icontains(journey["start_point"], autoescape=True),
                Journey.end_point.icontains(journey["end_point"], autoescape=True),
            ),
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        """COUNT(*) scoped by the equality keys `travel_mode` and `user`."""
        stmt = self._equality_filters(select(func.count(Journey.id)), query or {})
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()
