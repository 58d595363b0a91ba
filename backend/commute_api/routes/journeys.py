"""
Commute Match Backend — Journey Route Handlers
===============================================

What:  /api/journeys endpoints.
How:   Thin adapters: parse body/params, call JourneyService, wrap the
       result in the `{success, result, message}` envelope.
Who:   Called by the mobile client's journey screens.

Route Order:
    Fixed paths (/user/all, /stats, /stats/user, /route/..., /similar) are
    declared before /journeys/{journey_id} so they are not captured by it.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from commute_api.dependencies import get_current_user, get_journey_service
from commute_api.models.user import User
from commute_api.schemas.common import ApiResponse, ok
from commute_api.schemas.journey import (
    JourneyCreate,
    JourneyQuery,
    JourneyResponse,
    JourneyStats,
    JourneyUpdate,
)
from commute_api.services.journey_service import JourneyService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journeys", tags=["Journeys"])


@router.post(
    "",
    response_model=ApiResponse[JourneyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record a journey for the caller",
)
async def create_journey(
    payload: JourneyCreate,
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    journey = await service.create_journey(user.id, payload)
    return ok(journey, "Journey created successfully")


@router.get(
    "",
    response_model=ApiResponse[List[JourneyResponse]],
    summary="List journeys, optionally filtered",
    description=(
        "travel_mode and user match exactly; route_id, start_point and end_point "
        "match case-insensitively anywhere in the value. Newest first."
    ),
)
async def list_journeys(
    query: JourneyQuery = Depends(),
    service: JourneyService = Depends(get_journey_service),
):
    journeys = await service.get_all_journeys(query.filters())
    return ok(journeys, "Journeys retrieved successfully")


@router.get(
    "/user/all",
    response_model=ApiResponse[List[JourneyResponse]],
    summary="List the caller's journeys",
)
async def list_my_journeys(
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    journeys = await service.get_user_journeys(user.id)
    return ok(journeys, "User journeys retrieved successfully")


@router.get(
    "/stats",
    response_model=ApiResponse[JourneyStats],
    summary="Journey totals across all users",
)
async def journey_stats(service: JourneyService = Depends(get_journey_service)):
    stats = await service.get_journey_stats()
    return ok(stats, "Journey statistics retrieved successfully")


@router.get(
    "/stats/user",
    response_model=ApiResponse[JourneyStats],
    summary="Journey totals for the caller",
)
async def my_journey_stats(
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    stats = await service.get_journey_stats(user.id)
    return ok(stats, "Journey statistics retrieved successfully")


@router.get(
    "/route/{travel_mode}/{route_id}",
    response_model=ApiResponse[List[JourneyResponse]],
    summary="Journeys on an exact mode and route",
)
async def journeys_by_route(
    travel_mode: str,
    route_id: str,
    service: JourneyService = Depends(get_journey_service),
):
    journeys = await service.get_journeys_by_route(travel_mode, route_id)
    return ok(journeys, "Journeys by route retrieved successfully")


@router.post(
    "/similar",
    response_model=ApiResponse[List[JourneyResponse]],
    summary="Other users' journeys resembling the given one",
)
async def similar_journeys(
    payload: JourneyCreate,
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    journeys = await service.find_similar_journeys(user.id, payload)
    return ok(journeys, "Similar journeys found successfully")


@router.get(
    "/{journey_id}",
    response_model=ApiResponse[JourneyResponse],
    summary="Get a journey by id",
)
async def get_journey(
    journey_id: str,
    service: JourneyService = Depends(get_journey_service),
):
    journey = await service.get_journey_by_id(journey_id)
    return ok(journey, "Journey retrieved successfully")


@router.put(
    "/{journey_id}",
    response_model=ApiResponse[JourneyResponse],
    summary="Partially update one of the caller's journeys",
)
async def update_journey(
    journey_id: str,
    payload: JourneyUpdate,
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    journey = await service.update_journey(journey_id, user.id, payload)
    return ok(journey, "Journey updated successfully")


@router.delete(
    "/{journey_id}",
    response_model=ApiResponse[None],
    summary="Delete one of the caller's journeys",
)
async def delete_journey(
    journey_id: str,
    user: User = Depends(get_current_user),
    service: JourneyService = Depends(get_journey_service),
):
    await service.delete_journey(journey_id, user.id)
    return ok(None, "Journey deleted successfully")
