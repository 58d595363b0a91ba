"""
Commute Match Backend — Journey Model
======================================

What:  ORM model representing the `journeys` table.
Who:   Used by JourneyRepository for CRUD/count queries and by Alembic.

Query Patterns:
    - Journeys of a user:        WHERE user_id = :id            → idx_journeys_user
    - Journeys on a route:       WHERE travel_mode = :m AND route_id = :r
                                                                → idx_journeys_mode_route
    - Stats:                     COUNT(*) WHERE [user_id] [AND travel_mode]
"""

import enum
from typing import Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commute_api.database import Base
from commute_api.models.base import OBJECT_ID_LENGTH, TimestampMixin, id_column
from commute_api.models.user import User


class TravelMode(str, enum.Enum):
    BUS = "bus"
    TUBE = "tube"
    OVERGROUND = "overground"

    @classmethod
    def values(cls) -> list[str]:
        return [mode.value for mode in cls]


class Journey(TimestampMixin, Base):
    """
    A recorded commute leg owned by a user.

    Lifecycle:
        1. Created by its owner (POST /api/journeys)
        2. Partially updated by its owner only
        3. Hard-deleted by its owner only
    """

    __tablename__ = "journeys"

    id: Mapped[str] = id_column()

    user_id: Mapped[str] = mapped_column(
        String(OBJECT_ID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Values: bus | tube | overground
    travel_mode: Mapped[str] = mapped_column(String(20), nullable=False)

    # e.g. bus number or tube line
    route_id: Mapped[str] = mapped_column(String(100), nullable=False)

    # Stop/station name or code
    start_point: Mapped[str] = mapped_column(String(255), nullable=False)
    end_point: Mapped[str] = mapped_column(String(255), nullable=False)

    # HH:mm, optional
    departure_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)
    arrival_time: Mapped[Optional[str]] = mapped_column(String(5), nullable=True)

    # Owner summary is embedded in every response, so it is always joined
    user: Mapped[User] = relationship(User, lazy="joined")

    __table_args__ = (
        Index("idx_journeys_user", "user_id"),
        Index("idx_journeys_mode_route", "travel_mode", "route_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Journey(id={self.id}, mode='{self.travel_mode}', route='{self.route_id}', "
            f"{self.start_point!r} -> {self.end_point!r})>"
        )
