"""
Commute Match Backend — Shared Validation Rules
================================================

What:  Field rules used by more than one service: the HH:mm time format,
       the age-range bounds and the matching-preferences document checks.
Who:   JourneyService (departure/arrival times), UserService
       (update-profile) and MatchingPreferencesService.

Every rule raises ValidationError (400) on the first failure.
"""

import re
from typing import Any, Dict, List, Optional

from commute_api.exceptions import ValidationError

# 00:00 .. 23:59, two-digit hour required
TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

MIN_AGE = 18
MAX_AGE = 100

WEEKDAYS = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")

AGE_RANGE_MESSAGE = (
    f"Invalid age range. Min age must be >= {MIN_AGE} and max age must be <= {MAX_AGE}"
)
COMMUTE_TIME_MESSAGE = "Invalid commute time format. Use HH:mm format"


def is_valid_time(value: Optional[str]) -> bool:
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def validate_age_range(age_range: Dict[str, Any]) -> None:
    low = age_range.get("min")
    high = age_range.get("max")
    if low is not None and low < MIN_AGE:
        raise ValidationError(AGE_RANGE_MESSAGE, field="preferred_age_range")
    if high is not None and high > MAX_AGE:
        raise ValidationError(AGE_RANGE_MESSAGE, field="preferred_age_range")
    if low is not None and high is not None and low > high:
        raise ValidationError(AGE_RANGE_MESSAGE, field="preferred_age_range")


def validate_commute_time(commute_time: Dict[str, Any]) -> None:
    """Both `start` and `end` are required and must be HH:mm."""
    for key in ("start", "end"):
        if not is_valid_time(commute_time.get(key)):
            raise ValidationError(COMMUTE_TIME_MESSAGE, field="preferred_commute_time")


def _check_text(value: str, label: str, min_len: int, max_len: int, field: str) -> None:
    if len(value.strip()) < min_len:
        raise ValidationError(f"{label} must be at least {min_len} characters long", field=field)
    if len(value) > max_len:
        raise ValidationError(f"{label} must be less than {max_len} characters", field=field)


def _check_items(items: List[str], noun: str, max_items: int, min_len: int, max_len: int) -> None:
    field = f"{noun}s"
    if len(items) > max_items:
        raise ValidationError(f"Cannot have more than {max_items} {field}", field=field)
    for item in items:
        _check_text(item, f"Each {noun}", min_len, max_len, field)


def validate_matching_preferences(preferences: Dict[str, Any]) -> None:
    """
    Validate a (possibly partial) matching preferences document.

    Only keys present in `preferences` are checked, so the same function
    serves create, merge-update and the profile update path.
    """
    if preferences.get("profession"):
        _check_text(preferences["profession"], "Profession", 2, 100, "profession")

    about_me = preferences.get("about_me")
    if about_me is not None and len(about_me) > 1000:
        raise ValidationError("About me must be less than 1000 characters", field="about_me")

    if preferences.get("interests"):
        _check_items(preferences["interests"], "interest", max_items=20, min_len=2, max_len=50)

    if preferences.get("languages"):
        _check_items(preferences["languages"], "language", max_items=10, min_len=2, max_len=30)

    commute_time = preferences.get("preferred_commute_time")
    if commute_time is not None:
        validate_commute_time(commute_time)

    days = preferences.get("preferred_commute_days")
    if days:
        invalid = [day for day in days if day not in WEEKDAYS]
        if invalid:
            raise ValidationError(
                f"Invalid commute days: {', '.join(invalid)}",
                field="preferred_commute_days",
            )

    age_range = preferences.get("preferred_age_range")
    if age_range:
        validate_age_range(age_range)
