# Repositories package init
"""
Commute Match Backend — Repository Layer
=========================================

What:  Query construction and CRUD over the async SQLAlchemy session factory.
How:   Every repository takes an `async_sessionmaker` at construction and
       opens one session per method call. Services never see sessions.
"""

from commute_api.repositories.chat_repository import ChatRepository
from commute_api.repositories.journey_repository import JourneyRepository
from commute_api.repositories.message_repository import MessageRepository
from commute_api.repositories.preferences_repository import MatchingPreferencesRepository
from commute_api.repositories.user_repository import UserRepository

__all__ = [
    "ChatRepository",
    "JourneyRepository",
    "MatchingPreferencesRepository",
    "MessageRepository",
    "UserRepository",
]
