"""
Commute Match Backend — FastAPI Dependency Providers
=====================================================

What:  Builds repositories and services per request and resolves the
       authenticated user from the bearer token.
How:   Plain functions wired with `Depends`. Tests replace any provider via
       `app.dependency_overrides` (usually the service providers, or
       `get_session_factory` to point everything at SQLite).

Dependency Graph:
    get_session_factory
        └── get_*_repository
                └── get_*_service ──▶ route handlers
    get_current_user  (HTTPBearer → TokenSigner.decode → UserRepository)
        └── require_role(...)
"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from commute_api.database import async_session_factory
from commute_api.exceptions import AuthenticationError, NotFoundError, PermissionDeniedError
from commute_api.models.user import User, UserRole
from commute_api.repositories import (
    ChatRepository,
    JourneyRepository,
    MatchingPreferencesRepository,
    MessageRepository,
    UserRepository,
)
from commute_api.security import PasswordHasher, TokenSigner
from commute_api.services.chat_service import ChatService
from commute_api.services.journey_service import JourneyService
from commute_api.services.preferences_service import MatchingPreferencesService
from commute_api.services.user_service import UserService

# auto_error=False so a missing header reaches our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)

_password_hasher = PasswordHasher()


# ── Infrastructure ────────────────────────────────────────────────────────

def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_session_factory


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_token_signer() -> TokenSigner:
    return TokenSigner()


# ── Repositories ──────────────────────────────────────────────────────────

def get_journey_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> JourneyRepository:
    return JourneyRepository(factory)


def get_user_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> UserRepository:
    return UserRepository(factory)


def get_preferences_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> MatchingPreferencesRepository:
    return MatchingPreferencesRepository(factory)


def get_chat_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> ChatRepository:
    return ChatRepository(factory)


def get_message_repository(
    factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> MessageRepository:
    return MessageRepository(factory)


# ── Services ──────────────────────────────────────────────────────────────

def get_journey_service(
    repository: JourneyRepository = Depends(get_journey_repository),
) -> JourneyService:
    return JourneyService(repository)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
    preferences: MatchingPreferencesRepository = Depends(get_preferences_repository),
    hasher: PasswordHasher = Depends(get_password_hasher),
    signer: TokenSigner = Depends(get_token_signer),
) -> UserService:
    return UserService(users, preferences, hasher, signer)


def get_preferences_service(
    repository: MatchingPreferencesRepository = Depends(get_preferences_repository),
) -> MatchingPreferencesService:
    return MatchingPreferencesService(repository)


def get_chat_service(
    chats: ChatRepository = Depends(get_chat_repository),
    messages: MessageRepository = Depends(get_message_repository),
    users: UserRepository = Depends(get_user_repository),
) -> ChatService:
    return ChatService(chats, messages, users)


# ── Authentication ────────────────────────────────────────────────────────

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: UserRepository = Depends(get_user_repository),
    signer: TokenSigner = Depends(get_token_signer),
) -> User:
    """
    Resolve the caller from `Authorization: Bearer <token>`.

    Raises:
        AuthenticationError: header missing (Authentication required) or
            token invalid/expired (Invalid token)
        NotFoundError: token is valid but the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    user_id = signer.decode(credentials.credentials)
    user = await users.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found", context={"user_id": user_id})
    return user


def require_role(*roles: UserRole) -> Callable:
    """Dependency factory: 403 unless the caller holds one of `roles`."""
    allowed = {role.value for role in roles}

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise PermissionDeniedError("Insufficient permissions")
        return user

    return checker
