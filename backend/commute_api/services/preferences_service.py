"""
Commute Match Backend — Matching Preferences Service
=====================================================

What:  CRUD for a user's matching preferences document.
How:   Validates with the shared rules in services/validation.py, then
       delegates to MatchingPreferencesRepository. Updates merge the sent
       keys into the stored document.
"""

import logging

from commute_api.exceptions import NotFoundError, ValidationError
from commute_api.models.user import MatchingPreferences
from commute_api.repositories.preferences_repository import MatchingPreferencesRepository
from commute_api.schemas.user import MatchingPreferencesPayload, MatchingPreferencesResponse
from commute_api.services.validation import validate_matching_preferences

logger = logging.getLogger(__name__)


def _to_response(record: MatchingPreferences) -> MatchingPreferencesResponse:
    return MatchingPreferencesResponse(
        user_id=record.user_id,
        matching_preferences=record.preferences or {},
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class MatchingPreferencesService:
    def __init__(self, repository: MatchingPreferencesRepository):
        self._repository = repository

    async def create_preferences(
        self, user_id: str, payload: MatchingPreferencesPayload
    ) -> MatchingPreferencesResponse:
        document = payload.document()
        validate_matching_preferences(document)

        if await self._repository.find_by_user_id(user_id) is not None:
            raise ValidationError("Matching preferences already exist for this user")

        record = await self._repository.create(user_id, document)
        logger.info("Matching preferences created for user %s", user_id)
        return _to_response(record)

    async def get_preferences(self, user_id: str) -> MatchingPreferencesResponse:
        record = await self._repository.find_by_user_id(user_id)
        if record is None:
            raise NotFoundError("Matching preferences not found", context={"user_id": user_id})
        return _to_response(record)

    async def update_preferences(
        self, user_id: str, payload: MatchingPreferencesPayload
    ) -> MatchingPreferencesResponse:
        document = payload.document()
        validate_matching_preferences(document)

        existing = await self._repository.find_by_user_id(user_id)
        merged = {**(existing.preferences if existing else {}), **document}
        record = await self._repository.upsert(user_id, merged)
        return _to_response(record)

    async def delete_preferences(self, user_id: str) -> None:
        if not await self._repository.delete(user_id):
            raise NotFoundError("Matching preferences not found", context={"user_id": user_id})
