"""
Commute Match Backend — User Service
=====================================

What:  Registration, login and profile management.
How:   Receives its repositories plus a PasswordHasher and TokenSigner at
       construction. Every returned user is a UserResponse, which has no
       password field, so the credential cannot leak through this layer.
Who:   Called by the /api/users route handlers.

Registration Flow:
    1. Required fields / password length / email shape
    2. Duplicate email check (case-insensitive, emails are stored lowercased)
    3. Hash password, persist, issue token
"""

import logging
from typing import Optional

from commute_api.exceptions import (
    DatabaseError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
)
from commute_api.models.user import User, UserRole
from commute_api.repositories.preferences_repository import MatchingPreferencesRepository
from commute_api.repositories.user_repository import UserRepository
from commute_api.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)
from commute_api.security import PasswordHasher, TokenSigner
from commute_api.services.validation import validate_matching_preferences

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    def __init__(
        self,
        users: UserRepository,
        preferences: MatchingPreferencesRepository,
        password_hasher: PasswordHasher,
        token_signer: TokenSigner,
    ):
        self._users = users
        self._preferences = preferences
        self._hasher = password_hasher
        self._signer = token_signer

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=self._signer.issue(user.id),
        )

    @staticmethod
    def _require(**fields: Optional[str]) -> None:
        missing = [name for name, value in fields.items() if not value]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    async def register(self, data: RegisterRequest) -> AuthResponse:
        self._require(full_name=data.full_name, email=data.email, password=data.password)
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )
        if "@" not in data.email:
            raise ValidationError("Invalid email format", field="email")

        email = _normalize_email(data.email)
        if await self._users.find_by_email(email) is not None:
            raise ValidationError("User already exists", field="email")

        user = await self._users.create(
            {
                "full_name": data.full_name.strip(),
                "email": email,
                "password": self._hasher.hash(data.password),
                "role": UserRole.USER.value,
                "phone_number": data.phone_number,
                "date_of_birth": data.date_of_birth,
                "gender": data.gender,
            }
        )
        return self._auth_response(user)

    async def login(self, data: LoginRequest) -> AuthResponse:
        self._require(email=data.email, password=data.password)

        user = await self._users.find_by_email(_normalize_email(data.email))
        # Same message for unknown email and wrong password
        if user is None or not self._hasher.verify(data.password, user.password):
            raise AuthenticationError("Invalid credentials")
        return self._auth_response(user)

    async def get_profile(self, user_id: str) -> ProfileResponse:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", context={"user_id": user_id})

        record = await self._preferences.find_by_user_id(user_id)
        profile = ProfileResponse.model_validate(user)
        profile.matching_preferences = record.preferences if record else None
        return profile

    async def update_profile(self, user_id: str, data: ProfileUpdate) -> UserResponse:
        """
        Update scalar profile fields and, separately, matching preferences.

        Password, email and role are not part of ProfileUpdate, so they are
        never written here. Sent preference keys are merged into the stored
        document.
        """
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found", context={"user_id": user_id})

        preferences = None
        if data.matching_preferences is not None:
            preferences = data.matching_preferences.document()
            validate_matching_preferences(preferences)

        changes = data.scalar_changes()
        if changes:
            user = await self._users.update(user_id, changes)
            if user is None:
                raise DatabaseError("Failed to update user profile", context={"user_id": user_id})

        if preferences is not None:
            existing = await self._preferences.find_by_user_id(user_id)
            merged = {**(existing.preferences if existing else {}), **preferences}
            await self._preferences.upsert(user_id, merged)

        logger.info("Profile updated for user %s", user_id)
        return UserResponse.model_validate(user)

    async def list_users(self, page: int, limit: int):
        """Admin listing; returns (users, total)."""
        users = await self._users.find_all(page=page, limit=limit)
        total = await self._users.count()
        return [UserResponse.model_validate(u) for u in users], total
