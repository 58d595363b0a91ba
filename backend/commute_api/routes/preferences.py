"""/api/preferences: the caller's matching preferences document."""

from fastapi import APIRouter, Depends, status

from commute_api.dependencies import get_current_user, get_preferences_service
from commute_api.models.user import User
from commute_api.schemas.common import ApiResponse, ok
from commute_api.schemas.user import MatchingPreferencesPayload, MatchingPreferencesResponse
from commute_api.services.preferences_service import MatchingPreferencesService

router = APIRouter(prefix="/api/preferences", tags=["Matching Preferences"])


@router.post(
    "",
    response_model=ApiResponse[MatchingPreferencesResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_preferences(
    payload: MatchingPreferencesPayload,
    user: User = Depends(get_current_user),
    service: MatchingPreferencesService = Depends(get_preferences_service),
):
    result = await service.create_preferences(user.id, payload)
    return ok(result, "Matching preferences created successfully")


@router.get("", response_model=ApiResponse[MatchingPreferencesResponse])
async def get_preferences(
    user: User = Depends(get_current_user),
    service: MatchingPreferencesService = Depends(get_preferences_service),
):
    result = await service.get_preferences(user.id)
    return ok(result, "Matching preferences retrieved successfully")


@router.put("", response_model=ApiResponse[MatchingPreferencesResponse])
async def update_preferences(
    payload: MatchingPreferencesPayload,
    user: User = Depends(get_current_user),
    service: MatchingPreferencesService = Depends(get_preferences_service),
):
    result = await service.update_preferences(user.id, payload)
    return ok(result, "Matching preferences updated successfully")


@router.delete("", response_model=ApiResponse[None])
async def delete_preferences(
    user: User = Depends(get_current_user),
    service: MatchingPreferencesService = Depends(get_preferences_service),
):
    await service.delete_preferences(user.id)
    return ok(None, "Matching preferences deleted successfully")
