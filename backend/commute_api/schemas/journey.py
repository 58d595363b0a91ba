"""
Commute Match Backend — Journey Request/Response Schemas
=========================================================

What:  Pydantic models for the journey endpoints.

Design Decision:
    Request fields are all Optional[str]. Presence, blank-ness and enum
    membership are business rules enforced by JourneyService, so a payload
    missing `route_id` produces the service's "All journey fields are
    required" message rather than a generic schema error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class JourneyCreate(BaseModel):
    """Body of POST /api/journeys and POST /api/journeys/similar."""

    travel_mode: Optional[str] = Field(default=None, examples=["bus"])
    route_id: Optional[str] = Field(default=None, examples=["73"])
    start_point: Optional[str] = Field(default=None, examples=["Stoke Newington"])
    end_point: Optional[str] = Field(default=None, examples=["Oxford Circus"])
    departure_time: Optional[str] = Field(default=None, examples=["08:15"])
    arrival_time: Optional[str] = Field(default=None, examples=["09:00"])


class JourneyUpdate(BaseModel):
    """
    Body of PUT /api/journeys/{id}.

    Only the fields the client actually sent (`model_fields_set`) are
    validated and written.
    """

    travel_mode: Optional[str] = None
    route_id: Optional[str] = None
    start_point: Optional[str] = None
    end_point: Optional[str] = None
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class JourneyQuery(BaseModel):
    """Query-string filters for GET /api/journeys."""

    travel_mode: Optional[str] = None
    route_id: Optional[str] = None
    start_point: Optional[str] = None
    end_point: Optional[str] = None
    user: Optional[str] = None

    def filters(self) -> dict:
        return self.model_dump(exclude_none=True)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserSummary(BaseModel):
    """Owner details embedded in journeys and messages."""

    id: str
    full_name: str
    email: str

    model_config = {"from_attributes": True}


class JourneyResponse(BaseModel):
    id: str
    user_id: str
    user: Optional[UserSummary] = None
    travel_mode: str
    route_id: str
    start_point: str
    end_point: str
    departure_time: Optional[str] = None
    arrival_time: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class JourneysByMode(BaseModel):
    bus: int = 0
    tube: int = 0
    overground: int = 0


class JourneyStats(BaseModel):
    """
    Serialized as {"totalJourneys": n, "journeysByMode": {...}}.

    The three mode counts are independent filters and need not sum to the
    total.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_journeys: int = Field(alias="totalJourneys")
    journeys_by_mode: JourneysByMode = Field(alias="journeysByMode")
