"""
Commute Match Backend — Journey Service
========================================

What:  Validation and business rules for journeys.
Why:   Keeps the rules (required fields, travel-mode enumeration, distinct
       endpoints, ownership) independent of HTTP and of the database.
How:   Validates first, then delegates to the injected JourneyRepository and
       converts ORM rows into JourneyResponse models.
Who:   Called by the /api/journeys route handlers.

Error Mapping:
    missing/blank/duplicate fields  → ValidationError (400)
    malformed journey id            → ValidationError (400)
    absent journey                  → NotFoundError (404)
    absent or not-owned on mutate   → NotFoundError (404) "…or unauthorized"
"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import DataError, StatementError

from commute_api.exceptions import NotFoundError, ValidationError
from commute_api.models.journey import TravelMode
from commute_api.repositories.journey_repository import JourneyRepository
from commute_api.schemas.journey import (
    JourneyCreate,
    JourneyResponse,
    JourneysByMode,
    JourneyStats,
    JourneyUpdate,
)
from commute_api.services.validation import is_valid_time

logger = logging.getLogger(__name__)

JOURNEY_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

REQUIRED_FIELDS = ("travel_mode", "route_id", "start_point", "end_point")

_BLANK_MESSAGES = {
    "route_id": "Route ID cannot be empty",
    "start_point": "Start point cannot be empty",
    "end_point": "End point cannot be empty",
}

_TIME_FIELDS = {
    "departure_time": "Invalid departure time format. Use HH:mm format",
    "arrival_time": "Invalid arrival time format. Use HH:mm format",
}


def _same_place(start: str, end: str) -> bool:
    return start.strip().lower() == end.strip().lower()


class JourneyService:
    """
    Business logic layer for journey operations.

    The repository is injected so tests can substitute an AsyncMock.
    """

    def __init__(self, repository: JourneyRepository):
        self._repository = repository

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def validate_travel_mode(travel_mode: Optional[str]) -> None:
        if travel_mode not in TravelMode.values():
            raise ValidationError(
                f"Invalid travel mode. Must be one of: {', '.join(TravelMode.values())}",
                field="travel_mode",
            )

    @staticmethod
    def _validate_times(data: Dict[str, Any]) -> None:
        for field, message in _TIME_FIELDS.items():
            value = data.get(field)
            if value is not None and not is_valid_time(value):
                raise ValidationError(message, field=field)

    @classmethod
    def validate_journey_data(cls, data: Dict[str, Any]) -> None:
        """Rules for a complete journey shape (create and similar-search)."""
        if any(not data.get(field) for field in REQUIRED_FIELDS):
            raise ValidationError("All journey fields are required")

        cls.validate_travel_mode(data["travel_mode"])

        for field, message in _BLANK_MESSAGES.items():
            if not data[field].strip():
                raise ValidationError(message, field=field)

        if _same_place(data["start_point"], data["end_point"]):
            raise ValidationError("Start point and end point cannot be the same")

        cls._validate_times(data)

    @classmethod
    def validate_journey_update_data(cls, data: Dict[str, Any]) -> None:
        """Rules for a partial update; only fields present are checked."""
        if not data:
            raise ValidationError("At least one field must be provided for update")

        if "travel_mode" in data:
            cls.validate_travel_mode(data["travel_mode"])

        for field, message in _BLANK_MESSAGES.items():
            if field in data and not (data[field] or "").strip():
                raise ValidationError(message, field=field)

        start, end = data.get("start_point"), data.get("end_point")
        if start and end and _same_place(start, end):
            raise ValidationError("Start point and end point cannot be the same")

        cls._validate_times(data)

    @staticmethod
    def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
        }

    # ── Operations ────────────────────────────────────────────────────────

    async def create_journey(self, user_id: str, journey: JourneyCreate) -> JourneyResponse:
        data = journey.model_dump(exclude_none=True)
        self.validate_journey_data(data)
        created = await self._repository.create(user_id, self._clean(data))
        return JourneyResponse.model_validate(created)

    async def get_journey_by_id(self, journey_id: str) -> JourneyResponse:
        """
        Fetch one journey.

        Raises:
            ValidationError: id is not 24 hex characters, or the store
                rejected it as malformed
            NotFoundError: no journey with that id
        """
        if not JOURNEY_ID_PATTERN.match(journey_id):
            raise ValidationError("Invalid journey ID format", field="id")

        try:
            journey = await self._repository.find_by_id(journey_id)
        except (DataError, StatementError) as e:
            logger.warning("Journey lookup rejected id %s: %s", journey_id, e)
            raise ValidationError("Invalid journey ID format", field="id") from e

        if journey is None:
            raise NotFoundError("Journey not found", context={"journey_id": journey_id})
        return JourneyResponse.model_validate(journey)

    async def get_user_journeys(self, user_id: str) -> List[JourneyResponse]:
        journeys = await self._repository.find_by_user(user_id)
        return [JourneyResponse.model_validate(j) for j in journeys]

    async def get_all_journeys(self, query: Optional[Dict[str, Any]] = None) -> List[JourneyResponse]:
        journeys = await self._repository.find_all(query or {})
        return [JourneyResponse.model_validate(j) for j in journeys]

    async def update_journey(
        self, journey_id: str, user_id: str, update: JourneyUpdate
    ) -> JourneyResponse:
        changes = update.changes()
        self.validate_journey_update_data(changes)

        journey = await self._repository.update(journey_id, user_id, self._clean(changes))
        if journey is None:
            raise NotFoundError(
                "Journey not found or unauthorized",
                context={"journey_id": journey_id, "user_id": user_id},
            )
        return JourneyResponse.model_validate(journey)

    async def delete_journey(self, journey_id: str, user_id: str) -> None:
        deleted = await self._repository.delete(journey_id, user_id)
        if not deleted:
            raise NotFoundError(
                "Journey not found or unauthorized",
                context={"journey_id": journey_id, "user_id": user_id},
            )
        logger.info("Journey %s deleted by %s", journey_id, user_id)

    async def get_journeys_by_route(self, travel_mode: str, route_id: str) -> List[JourneyResponse]:
        self.validate_travel_mode(travel_mode)
        journeys = await self._repository.find_by_route(travel_mode, route_id)
        return [JourneyResponse.model_validate(j) for j in journeys]

    async def find_similar_journeys(
        self, user_id: str, journey: JourneyCreate
    ) -> List[JourneyResponse]:
        data = journey.model_dump(exclude_none=True)
        self.validate_journey_data(data)
        journeys = await self._repository.find_similar_journeys(user_id, self._clean(data))
        return [JourneyResponse.model_validate(j) for j in journeys]

    async def get_journey_stats(self, user_id: Optional[str] = None) -> JourneyStats:
        """
        Totals for all journeys, or for one user's journeys.

        Issues four independent COUNT queries concurrently: the scope total
        and the scope restricted to each travel mode.
        """
        scope: Dict[str, Any] = {"user": user_id} if user_id else {}
        total, bus, tube, overground = await asyncio.gather(
            self._repository.count(scope),
            self._repository.count({**scope, "travel_mode": TravelMode.BUS.value}),
            self._repository.count({**scope, "travel_mode": TravelMode.TUBE.value}),
            self._repository.count({**scope, "travel_mode": TravelMode.OVERGROUND.value}),
        )
        return JourneyStats(
            total_journeys=total,
            journeys_by_mode=JourneysByMode(bus=bus, tube=tube, overground=overground),
        )
