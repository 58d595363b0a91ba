"""
Shared column helpers for the ORM models.

Identifiers are 24-character lowercase hex strings (the format clients and
the `/journeys/{id}` validation expect), generated in Python on insert.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

OBJECT_ID_LENGTH = 24


def new_object_id() -> str:
    return uuid.uuid4().hex[:OBJECT_ID_LENGTH]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def id_column() -> Mapped[str]:
    return mapped_column(
        String(OBJECT_ID_LENGTH),
        primary_key=True,
        default=new_object_id,
        comment="24-character hex identifier",
    )


class TimestampMixin:
    """created_at / updated_at columns, both UTC. Repositories bump updated_at."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
