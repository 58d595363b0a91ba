"""
Commute Match Backend — User & Preferences Schemas
===================================================

What:  Request/response contracts for registration, login, profile and
       matching preferences.
How:   Requests keep fields Optional so UserService can report the exact
       missing-field message; responses never carry the password hash.

Sensitive Fields:
    ProfileUpdate ignores unknown keys (`extra="ignore"`), so a client
    sending `password`, `email` or `role` to update-profile has them
    silently dropped before the service sees the payload.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Authentication
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(BaseModel):
    full_name: Optional[str] = Field(default=None, examples=["Ada Lovelace"])
    email: Optional[str] = Field(default=None, examples=["ada@example.com"])
    password: Optional[str] = Field(default=None, examples=["s3cret!"])
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Matching Preferences
# ══════════════════════════════════════════════════════════════════════════


class CommuteTime(BaseModel):
    start: Optional[str] = Field(default=None, examples=["08:00"])
    end: Optional[str] = Field(default=None, examples=["09:30"])


class AgeRange(BaseModel):
    min: Optional[int] = Field(default=None, examples=[25])
    max: Optional[int] = Field(default=None, examples=[40])


class MatchingPreferencesPayload(BaseModel):
    """
    Criteria a user sets for compatible commute partners.

    Every key is optional; only keys the client sent are validated and
    stored (see `document()`).
    """

    model_config = ConfigDict(extra="ignore")

    preferred_commute_time: Optional[CommuteTime] = None
    preferred_commute_days: Optional[List[str]] = None
    preferred_age_range: Optional[AgeRange] = None
    max_distance: Optional[float] = None
    preferred_vehicle_type: Optional[str] = None
    preferred_gender: Optional[str] = None
    smoking_preference: Optional[str] = None
    music_preference: Optional[str] = None
    profession: Optional[str] = None
    about_me: Optional[str] = None
    languages: Optional[List[str]] = None
    interests: Optional[List[str]] = None

    def document(self) -> Dict[str, Any]:
        """JSON document stored in `matching_preferences.preferences`."""
        return self.model_dump(exclude_unset=True)


class MatchingPreferencesResponse(BaseModel):
    user_id: str
    matching_preferences: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ══════════════════════════════════════════════════════════════════════════
# Profile
# ══════════════════════════════════════════════════════════════════════════


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    matching_preferences: Optional[MatchingPreferencesPayload] = None

    def scalar_changes(self) -> Dict[str, Any]:
        """Sent profile fields other than matching_preferences."""
        return self.model_dump(exclude_unset=True, exclude={"matching_preferences"})


class UserResponse(BaseModel):
    """A user as returned by the API; the credential is never included."""

    id: str
    full_name: str
    email: str
    role: str
    phone_number: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileResponse(UserResponse):
    matching_preferences: Optional[Dict[str, Any]] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str


class UserListResponse(BaseModel):
    users: List[UserResponse]
    page: int
    limit: int
    total: int
