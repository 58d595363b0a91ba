"""
Commute Match Backend — User Route Handlers
============================================

What:  Registration, login and the caller's profile under /api/users.
"""

from fastapi import APIRouter, Depends, status

from commute_api.dependencies import get_current_user, get_user_service
from commute_api.models.user import User
from commute_api.schemas.common import ApiResponse, ok
from commute_api.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileResponse,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)
from commute_api.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account and receive a bearer token",
)
async def register(
    payload: RegisterRequest,
    service: UserService = Depends(get_user_service),
):
    result = await service.register(payload)
    return ok(result, "User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Exchange credentials for a bearer token",
)
async def login(
    payload: LoginRequest,
    service: UserService = Depends(get_user_service),
):
    result = await service.login(payload)
    return ok(result, "Login successful")


@router.get(
    "/profile",
    response_model=ApiResponse[ProfileResponse],
    summary="The caller's profile and matching preferences",
)
async def get_profile(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    profile = await service.get_profile(user.id)
    return ok(profile, "Profile retrieved successfully")


@router.put(
    "/update-profile",
    response_model=ApiResponse[UserResponse],
    summary="Update profile fields and matching preferences",
)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    updated = await service.update_profile(user.id, payload)
    return ok(updated, "Profile updated successfully")
