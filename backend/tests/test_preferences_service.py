"""
Commute Match Backend — Matching Preferences Tests
===================================================

What:  The shared preference rules and MatchingPreferencesService CRUD.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from commute_api.exceptions import NotFoundError, ValidationError
from commute_api.schemas.user import MatchingPreferencesPayload
from commute_api.services.preferences_service import MatchingPreferencesService
from commute_api.services.validation import is_valid_time, validate_matching_preferences


def _record(user_id="a" * 24, preferences=None):
    now = datetime.now(timezone.utc)
    return SimpleNamespace(
        user_id=user_id,
        preferences=preferences or {},
        created_at=now,
        updated_at=now,
    )


class TestPreferenceRules:

    @pytest.mark.parametrize("value", ["00:00", "08:00", "23:59"])
    def test_valid_times(self, value):
        assert is_valid_time(value)

    @pytest.mark.parametrize("value", ["25:00", "24:00", "8:00", "08:60", "0800", "", None])
    def test_invalid_times(self, value):
        assert not is_valid_time(value)

    def test_age_range_bounds_accepted(self):
        validate_matching_preferences({"preferred_age_range": {"min": 18, "max": 100}})

    def test_min_greater_than_max_rejected(self):
        with pytest.raises(ValidationError, match="Invalid age range"):
            validate_matching_preferences({"preferred_age_range": {"min": 35, "max": 25}})

    def test_commute_time_accepted(self):
        validate_matching_preferences(
            {"preferred_commute_time": {"start": "08:00", "end": "09:00"}}
        )

    @pytest.mark.parametrize(
        "commute_time",
        [
            {"start": "08:00"},
            {"end": "09:00"},
            {"start": None, "end": None},
            {},
        ],
    )
    def test_commute_time_needs_start_and_end(self, commute_time):
        with pytest.raises(ValidationError, match="Invalid commute time format"):
            validate_matching_preferences({"preferred_commute_time": commute_time})

    def test_invalid_commute_days_listed(self):
        with pytest.raises(ValidationError, match="Invalid commute days: FUNDAY, monday"):
            validate_matching_preferences(
                {"preferred_commute_days": ["MONDAY", "FUNDAY", "monday"]}
            )

    def test_profession_too_short(self):
        with pytest.raises(ValidationError, match="Profession must be at least 2 characters long"):
            validate_matching_preferences({"profession": " A "})

    def test_about_me_too_long(self):
        with pytest.raises(ValidationError, match="About me must be less than 1000 characters"):
            validate_matching_preferences({"about_me": "x" * 1001})

    def test_too_many_interests(self):
        with pytest.raises(ValidationError, match="Cannot have more than 20 interests"):
            validate_matching_preferences({"interests": [f"topic{i}" for i in range(21)]})

    def test_language_too_long(self):
        with pytest.raises(ValidationError, match="Each language must be less than 30 characters"):
            validate_matching_preferences({"languages": ["English", "L" * 31]})


class TestMatchingPreferencesService:

    @pytest.fixture(autouse=True)
    def _service(self, preferences_repo):
        self.repo = preferences_repo
        self.service = MatchingPreferencesService(preferences_repo)

    @pytest.mark.asyncio
    async def test_create(self):
        self.repo.find_by_user_id.return_value = None
        self.repo.create.return_value = _record(preferences={"profession": "Pharmacist"})

        result = await self.service.create_preferences(
            "a" * 24, MatchingPreferencesPayload(profession="Pharmacist")
        )

        assert result.matching_preferences == {"profession": "Pharmacist"}
        self.repo.create.assert_awaited_once_with("a" * 24, {"profession": "Pharmacist"})

    @pytest.mark.asyncio
    async def test_create_twice_rejected(self):
        self.repo.find_by_user_id.return_value = _record()
        with pytest.raises(ValidationError, match="already exist"):
            await self.service.create_preferences(
                "a" * 24, MatchingPreferencesPayload(profession="Pharmacist")
            )
        self.repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_missing(self):
        self.repo.find_by_user_id.return_value = None
        with pytest.raises(NotFoundError, match="Matching preferences not found"):
            await self.service.get_preferences("a" * 24)

    @pytest.mark.asyncio
    async def test_update_merges(self):
        self.repo.find_by_user_id.return_value = _record(
            preferences={"profession": "Pharmacist", "languages": ["English"]}
        )
        self.repo.upsert.return_value = _record()

        await self.service.update_preferences(
            "a" * 24, MatchingPreferencesPayload(languages=["French"])
        )

        self.repo.upsert.assert_awaited_once_with(
            "a" * 24, {"profession": "Pharmacist", "languages": ["French"]}
        )

    @pytest.mark.asyncio
    async def test_delete_missing(self):
        self.repo.delete.return_value = False
        with pytest.raises(NotFoundError):
            await self.service.delete_preferences("a" * 24)
