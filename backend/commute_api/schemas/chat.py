"""
Commute Match Backend — Chat & Message Schemas
===============================================

What:  Request/response contracts for the chat endpoints.
How:   Response models are assembled from ORM rows by the `from_*`
       constructors below; participant membership lives in its own table,
       so it is flattened into `participants` / `admin_ids` lists here.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from commute_api.schemas.journey import UserSummary


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CreateChatRequest(BaseModel):
    chat_type: str = Field(default="direct", examples=["direct", "group"])
    participant_ids: List[str] = Field(default_factory=list)
    title: Optional[str] = None
    description: Optional[str] = None


class SendMessageRequest(BaseModel):
    chat_id: Optional[str] = None
    content: Optional[str] = None
    message_type: str = Field(default="text", examples=["text"])
    receiver_id: Optional[str] = None
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    reply_to_message_id: Optional[str] = None


class UpdateChatRequest(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class UpdateMessageRequest(BaseModel):
    content: Optional[str] = None


class AddParticipantRequest(BaseModel):
    participant_id: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ParticipantDetail(BaseModel):
    id: str
    full_name: str
    email: str
    profile_image_url: Optional[str] = None
    is_admin: bool = False


class LastMessage(BaseModel):
    content: str
    sender_id: str
    timestamp: datetime
    message_type: str


class ChatResponse(BaseModel):
    id: str
    chat_type: str
    title: Optional[str] = None
    description: Optional[str] = None
    participants: List[str] = Field(default_factory=list)
    admin_ids: List[str] = Field(default_factory=list)
    participant_details: List[ParticipantDetail] = Field(default_factory=list)
    last_message: Optional[LastMessage] = None
    last_message_at: Optional[datetime] = None
    is_active: bool = True
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    unread_count: Optional[int] = None

    @classmethod
    def from_chat(cls, chat: Any, **overrides: Any) -> "ChatResponse":
        details = [
            ParticipantDetail(
                id=member.user.id,
                full_name=member.user.full_name,
                email=member.user.email,
                profile_image_url=member.user.profile_image_url,
                is_admin=member.is_admin,
            )
            for member in chat.members
        ]
        data: Dict[str, Any] = {
            "id": chat.id,
            "chat_type": chat.chat_type,
            "title": chat.title,
            "description": chat.description,
            "participants": chat.participant_ids,
            "admin_ids": chat.admin_ids,
            "participant_details": details,
            "last_message": chat.last_message,
            "last_message_at": chat.last_message_at,
            "is_active": chat.is_active,
            "deleted_at": chat.deleted_at,
            "created_at": chat.created_at,
            "updated_at": chat.updated_at,
        }
        data.update(overrides)
        return cls(**data)


class ReadReceipt(BaseModel):
    user_id: str
    read_at: datetime


class MessageResponse(BaseModel):
    id: str
    chat_id: str
    sender_id: str
    sender: Optional[UserSummary] = None
    receiver_id: Optional[str] = None
    content: str
    message_type: str
    status: str
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    reply_to_message_id: Optional[str] = None
    read_by: List[ReadReceipt] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ChatListResponse(BaseModel):
    chats: List[ChatResponse]
    page: int
    limit: int
    total: int


class MessageListResponse(BaseModel):
    messages: List[MessageResponse]
    page: int
    limit: int
    total: int


class SearchResponse(BaseModel):
    messages: List[MessageResponse]
    search_term: str
    total: int


class UnreadCountResponse(BaseModel):
    unread_count: int
