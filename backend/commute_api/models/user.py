"""
Commute Match Backend — User & Matching Preferences Models
===========================================================

What:  ORM models for the `users` and `matching_preferences` tables.
Who:   Used by UserRepository / MatchingPreferencesRepository and Alembic.

Table Design:
    - users.email is unique and always stored lowercased and trimmed
    - users.password holds an argon2 hash; it never leaves the service layer
    - users.role is set at registration and never updated by the API
    - matching_preferences keeps one JSON document per user, so optional
      preference keys can be added without migrations
"""

import enum
from typing import Any, Dict, Optional

from sqlalchemy import JSON, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from commute_api.database import Base
from commute_api.models.base import OBJECT_ID_LENGTH, TimestampMixin, id_column


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(TimestampMixin, Base):
    """
    A registered application user.

    Lifecycle:
        1. Created at registration with a hashed credential and role 'user'
        2. Profile scalar fields updated through PUT /api/users/update-profile
        3. Matching preferences live in their own row (see MatchingPreferences)
    """

    __tablename__ = "users"

    id: Mapped[str] = id_column()

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        comment="Lowercased, trimmed login email",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="argon2 hash of the user's password",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.USER.value,
    )

    # ── Optional profile fields ───────────────────────────────────────────
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    date_of_birth: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (Index("idx_users_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"


class MatchingPreferences(TimestampMixin, Base):
    """A user's stored criteria for compatible commute partners."""

    __tablename__ = "matching_preferences"

    id: Mapped[str] = id_column()

    user_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    # Always reassigned as a new dict so SQLAlchemy sees the change
    preferences: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    def __repr__(self) -> str:
        return f"<MatchingPreferences(user_id={self.user_id})>"
