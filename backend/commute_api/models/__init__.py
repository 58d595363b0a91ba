# Models package init: importing it registers every table with Base.metadata
from commute_api.models.base import new_object_id, utcnow
from commute_api.models.chat import (
    Chat,
    ChatParticipant,
    ChatType,
    Message,
    MessageRead,
    MessageStatus,
    MessageType,
)
from commute_api.models.journey import Journey, TravelMode
from commute_api.models.user import MatchingPreferences, User, UserRole

__all__ = [
    "Chat",
    "ChatParticipant",
    "ChatType",
    "Journey",
    "MatchingPreferences",
    "Message",
    "MessageRead",
    "MessageStatus",
    "MessageType",
    "TravelMode",
    "User",
    "UserRole",
    "new_object_id",
    "utcnow",
]
