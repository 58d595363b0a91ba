"""
Commute Match Backend — Chat Service
=====================================

What:  Direct and group chats between commuters, their messages and
       group administration.
How:   Composes ChatRepository, MessageRepository and UserRepository, all
       injected at construction.
Who:   Called by the /api/chats route handlers.

Access Rules:
    read / send / search / mark-read   participants only (403)
    add participant, edit info         group admins only (403); never on direct chats (400)
    remove participant                 group only; admins remove anyone, others only themselves
    delete chat                        soft delete; group chats need an admin
    edit / delete message              the sender only; edits are text-only
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from commute_api.exceptions import (
    DatabaseError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from commute_api.models.base import utcnow
from commute_api.models.chat import Chat, ChatType, MessageStatus, MessageType
from commute_api.repositories.chat_repository import ChatRepository
from commute_api.repositories.message_repository import MessageRepository
from commute_api.repositories.user_repository import UserRepository
from commute_api.schemas.chat import (
    ChatResponse,
    CreateChatRequest,
    MessageResponse,
    SendMessageRequest,
    UpdateChatRequest,
)

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000


class ChatService:
    def __init__(
        self,
        chats: ChatRepository,
        messages: MessageRepository,
        users: UserRepository,
    ):
        self._chats = chats
        self._messages = messages
        self._users = users

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_chat(self, chat_id: str) -> Chat:
        chat = await self._chats.find_by_id(chat_id)
        if chat is None:
            raise NotFoundError("Chat not found", context={"chat_id": chat_id})
        return chat

    async def _get_participant_chat(self, user_id: str, chat_id: str) -> Chat:
        chat = await self._get_chat(chat_id)
        if not chat.is_participant(user_id):
            raise PermissionDeniedError("You are not a participant in this chat")
        return chat

    @staticmethod
    def _validate_enum(value: str, enum_cls, label: str) -> None:
        allowed = [member.value for member in enum_cls]
        if value not in allowed:
            raise ValidationError(f"Invalid {label}. Must be one of: {', '.join(allowed)}")

    # ── Chats ─────────────────────────────────────────────────────────────

    async def create_chat(self, user_id: str, request: CreateChatRequest) -> ChatResponse:
        """
        Create a chat between the caller and `participant_ids`.

        An active direct chat between the same two users is returned as-is
        instead of creating a duplicate.
        """
        self._validate_enum(request.chat_type, ChatType, "chat type")
        if not request.participant_ids:
            raise ValidationError("At least one participant ID is required")
        if request.chat_type == ChatType.GROUP.value and not request.title:
            raise ValidationError("Title is required for group chats")

        participant_ids = list(dict.fromkeys([*request.participant_ids, user_id]))
        if len(participant_ids) < 2:
            raise ValidationError("At least 2 participants required for a chat")

        for participant_id in participant_ids:
            if await self._users.find_by_id(participant_id) is None:
                raise NotFoundError(f"User with ID {participant_id} not found")

        if request.chat_type == ChatType.DIRECT.value and len(participant_ids) == 2:
            existing = await self._chats.find_direct_chat(*participant_ids)
            if existing is not None:
                return ChatResponse.from_chat(existing)

        is_group = request.chat_type == ChatType.GROUP.value
        chat = await self._chats.create(
            chat_type=request.chat_type,
            participant_ids=participant_ids,
            admin_ids=[user_id] if is_group else [],
            title=request.title,
            description=request.description,
        )
        return ChatResponse.from_chat(chat)

    async def get_user_chats(
        self, user_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[ChatResponse], int]:
        """
        Active chats of the user with per-chat unread counts.

        Direct chats are titled with the other participant's name.
        Returns (chats, total active chats).
        """
        chats, total = await asyncio.gather(
            self._chats.find_user_chats(user_id, page, limit),
            self._chats.count_user_chats(user_id),
        )
        unread_counts = await asyncio.gather(
            *(self._messages.get_unread_messages_count(chat.id, user_id) for chat in chats)
        )

        results = []
        for chat, unread in zip(chats, unread_counts):
            title = chat.title
            if chat.chat_type == ChatType.DIRECT.value:
                other = next((m.user for m in chat.members if m.user_id != user_id), None)
                title = other.full_name if other is not None else "Unknown User"
            results.append(ChatResponse.from_chat(chat, title=title, unread_count=unread))
        return results, total

    async def get_chat_by_id(self, user_id: str, chat_id: str) -> ChatResponse:
        chat = await self._get_participant_chat(user_id, chat_id)
        return ChatResponse.from_chat(chat)

    async def update_chat_info(
        self, user_id: str, chat_id: str, request: UpdateChatRequest
    ) -> ChatResponse:
        chat = await self._get_chat(chat_id)
        if chat.chat_type == ChatType.DIRECT.value:
            raise ValidationError("Cannot update direct chat information")
        if not chat.is_admin(user_id):
            raise PermissionDeniedError("Only admins can update chat information")

        changes = request.model_dump(exclude_unset=True)
        updated = await self._chats.update_chat_info(chat_id, changes)
        if updated is None:
            raise DatabaseError("Failed to update chat information", context={"chat_id": chat_id})
        return ChatResponse.from_chat(updated)

    async def delete_chat(self, user_id: str, chat_id: str) -> None:
        chat = await self._get_chat(chat_id)
        if chat.chat_type == ChatType.GROUP.value and not chat.is_admin(user_id):
            raise PermissionDeniedError("Only admins can delete group chats")
        if chat.chat_type == ChatType.DIRECT.value and not chat.is_participant(user_id):
            raise PermissionDeniedError("You are not a participant in this chat")

        await self._chats.soft_delete_chat(chat_id)
        logger.info("Chat %s deactivated by %s", chat_id, user_id)

    async def add_participant(
        self, user_id: str, chat_id: str, participant_id: str
    ) -> ChatResponse:
        chat = await self._get_chat(chat_id)
        if chat.chat_type == ChatType.DIRECT.value:
            raise ValidationError("Cannot add participants to direct chats")
        if not chat.is_admin(user_id):
            raise PermissionDeniedError("Only admins can add participants")
        if await self._users.find_by_id(participant_id) is None:
            raise NotFoundError("User not found", context={"user_id": participant_id})
        if chat.is_participant(participant_id):
            raise ValidationError("User is already a participant")

        updated = await self._chats.add_participant(chat_id, participant_id)
        if updated is None:
            raise DatabaseError("Failed to add participant", context={"chat_id": chat_id})
        return ChatResponse.from_chat(updated)

    async def remove_participant(
        self, user_id: str, chat_id: str, participant_id: str
    ) -> ChatResponse:
        chat = await self._get_chat(chat_id)
        if chat.chat_type != ChatType.GROUP.value:
            raise ValidationError("Cannot remove participants from direct chats")
        if user_id != participant_id and not chat.is_admin(user_id):
            raise PermissionDeniedError("Only admins can remove other participants")

        updated = await self._chats.remove_participant(chat_id, participant_id)
        if updated is None:
            raise DatabaseError("Failed to remove participant", context={"chat_id": chat_id})
        return ChatResponse.from_chat(updated)

    # ── Messages ──────────────────────────────────────────────────────────

    async def send_message(self, user_id: str, request: SendMessageRequest) -> MessageResponse:
        if not request.chat_id or not request.content:
            raise ValidationError("Chat ID and content are required")
        if len(request.content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters",
                field="content",
            )
        self._validate_enum(request.message_type, MessageType, "message type")

        chat = await self._get_participant_chat(user_id, request.chat_id)
        if not chat.is_active:
            raise ValidationError("Chat is inactive")

        receiver_id = request.receiver_id
        if chat.chat_type == ChatType.DIRECT.value and not receiver_id:
            receiver_id = next((pid for pid in chat.participant_ids if pid != user_id), None)

        message = await self._messages.create(
            {
                "chat_id": chat.id,
                "sender_id": user_id,
                "receiver_id": receiver_id,
                "content": request.content,
                "message_type": request.message_type,
                "status": MessageStatus.SENT.value,
                "file_url": request.file_url,
                "file_name": request.file_name,
                "reply_to_message_id": request.reply_to_message_id,
            }
        )
        await self._chats.update_last_message(
            chat.id,
            {
                "content": request.content,
                "sender_id": user_id,
                "timestamp": utcnow().isoformat(),
                "message_type": request.message_type,
            },
        )
        return MessageResponse.model_validate(message)

    async def get_chat_messages(
        self, user_id: str, chat_id: str, page: int = 1, limit: int = 50
    ) -> List[MessageResponse]:
        await self._get_participant_chat(user_id, chat_id)
        messages = await self._messages.find_chat_messages(chat_id, page, limit)
        return [MessageResponse.model_validate(m) for m in messages]

    async def mark_messages_as_read(self, user_id: str, chat_id: str) -> int:
        await self._get_participant_chat(user_id, chat_id)
        return await self._messages.mark_chat_messages_as_read(chat_id, user_id)

    async def search_messages(
        self, user_id: str, chat_id: str, term: Optional[str], limit: int = 20
    ) -> List[MessageResponse]:
        if not term:
            raise ValidationError("Chat ID and search term are required")
        await self._get_participant_chat(user_id, chat_id)
        messages = await self._messages.search_messages(chat_id, term, limit)
        return [MessageResponse.model_validate(m) for m in messages]

    async def get_unread_messages_count(self, user_id: str) -> int:
        return await self._messages.get_user_unread_messages_count(user_id)

    async def update_message(
        self, user_id: str, message_id: str, content: Optional[str]
    ) -> MessageResponse:
        if not content:
            raise ValidationError("Message ID and content are required")

        message = await self._messages.find_by_id(message_id)
        if message is None:
            raise NotFoundError("Message not found", context={"message_id": message_id})
        if message.sender_id != user_id:
            raise PermissionDeniedError("You can only edit your own messages")
        if message.message_type != MessageType.TEXT.value:
            raise ValidationError("Only text messages can be edited")

        updated = await self._messages.update_message(message_id, content)
        if updated is None:
            raise DatabaseError("Failed to update message", context={"message_id": message_id})
        return MessageResponse.model_validate(updated)

    async def delete_message(self, user_id: str, message_id: str) -> None:
        message = await self._messages.find_by_id(message_id)
        if message is None:
            raise NotFoundError("Message not found", context={"message_id": message_id})
        if message.sender_id != user_id:
            raise PermissionDeniedError("You can only delete your own messages")

        await self._messages.delete_message(message_id)
