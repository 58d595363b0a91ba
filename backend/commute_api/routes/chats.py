"""
Commute Match Backend — Chat Route Handlers
============================================

What:  /api/chats endpoints: chats, messages and group participants.
Who:   Every route requires a bearer token; participant/admin/sender checks
       happen in ChatService.

Route Order:
    /messages..., /unread/count are declared before /{chat_id} routes.
"""

from fastapi import APIRouter, Depends, Query, status

from commute_api.config import settings
from commute_api.dependencies import get_chat_service, get_current_user
from commute_api.exceptions import ValidationError
from commute_api.models.user import User
from commute_api.schemas.chat import (
    AddParticipantRequest,
    ChatListResponse,
    ChatResponse,
    CreateChatRequest,
    MessageListResponse,
    MessageResponse,
    SearchResponse,
    SendMessageRequest,
    UnreadCountResponse,
    UpdateChatRequest,
    UpdateMessageRequest,
)
from commute_api.schemas.common import ApiResponse, ok
from commute_api.services.chat_service import ChatService

router = APIRouter(prefix="/api/chats", tags=["Chats"])


# ── Chats ─────────────────────────────────────────────────────────────────

@router.post("", response_model=ApiResponse[ChatResponse], status_code=status.HTTP_201_CREATED)
async def create_chat(
    payload: CreateChatRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    chat = await service.create_chat(user.id, payload)
    return ok(chat, "Chat created successfully")


@router.get("", response_model=ApiResponse[ChatListResponse])
async def list_chats(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    chats, total = await service.get_user_chats(user.id, page, limit)
    return ok(
        ChatListResponse(chats=chats, page=page, limit=limit, total=total),
        "Chats retrieved successfully",
    )


# ── Messages ──────────────────────────────────────────────────────────────

@router.post(
    "/messages",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    payload: SendMessageRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    message = await service.send_message(user.id, payload)
    return ok(message, "Message sent successfully")


@router.put("/messages/{message_id}", response_model=ApiResponse[MessageResponse])
async def update_message(
    message_id: str,
    payload: UpdateMessageRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    message = await service.update_message(user.id, message_id, payload.content)
    return ok(message, "Message updated successfully")


@router.delete("/messages/{message_id}", response_model=ApiResponse[None])
async def delete_message(
    message_id: str,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    await service.delete_message(user.id, message_id)
    return ok(None, "Message deleted successfully")


@router.get("/unread/count", response_model=ApiResponse[UnreadCountResponse])
async def unread_count(
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    count = await service.get_unread_messages_count(user.id)
    return ok(UnreadCountResponse(unread_count=count), "Unread count retrieved successfully")


# ── Single chat ───────────────────────────────────────────────────────────

@router.get("/{chat_id}", response_model=ApiResponse[ChatResponse])
async def get_chat(
    chat_id: str,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    chat = await service.get_chat_by_id(user.id, chat_id)
    return ok(chat, "Chat retrieved successfully")


@router.put("/{chat_id}", response_model=ApiResponse[ChatResponse])
async def update_chat(
    chat_id: str,
    payload: UpdateChatRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    chat = await service.update_chat_info(user.id, chat_id, payload)
    return ok(chat, "Chat information updated successfully")


@router.delete("/{chat_id}", response_model=ApiResponse[None])
async def delete_chat(
    chat_id: str,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    await service.delete_chat(user.id, chat_id)
    return ok(None, "Chat deleted successfully")


@router.get("/{chat_id}/messages", response_model=ApiResponse[MessageListResponse])
async def chat_messages(
    chat_id: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    messages = await service.get_chat_messages(user.id, chat_id, page, limit)
    return ok(
        MessageListResponse(messages=messages, page=page, limit=limit, total=len(messages)),
        "Messages retrieved successfully",
    )


@router.put("/{chat_id}/read", response_model=ApiResponse[None])
async def mark_read(
    chat_id: str,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    await service.mark_messages_as_read(user.id, chat_id)
    return ok(None, "Messages marked as read successfully")


@router.get("/{chat_id}/search", response_model=ApiResponse[SearchResponse])
async def search_messages(
    chat_id: str,
    q: str = Query(default="", description="Case-insensitive text to look for"),
    limit: int = Query(default=20, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    messages = await service.search_messages(user.id, chat_id, q, limit)
    return ok(
        SearchResponse(messages=messages, search_term=q, total=len(messages)),
        "Search completed successfully",
    )


@router.post("/{chat_id}/participants", response_model=ApiResponse[ChatResponse])
async def add_participant(
    chat_id: str,
    payload: AddParticipantRequest,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    if not payload.participant_id:
        raise ValidationError("Chat ID and participant ID are required")
    chat = await service.add_participant(user.id, chat_id, payload.participant_id)
    return ok(chat, "Participant added successfully")


@router.delete("/{chat_id}/participants/{participant_id}", response_model=ApiResponse[ChatResponse])
async def remove_participant(
    chat_id: str,
    participant_id: str,
    user: User = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
):
    chat = await service.remove_participant(user.id, chat_id, participant_id)
    return ok(chat, "Participant removed successfully")
