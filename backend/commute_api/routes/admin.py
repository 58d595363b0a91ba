"""/api/admin: administrator-only endpoints."""

from fastapi import APIRouter, Depends, Query

from commute_api.config import settings
from commute_api.dependencies import get_user_service, require_role
from commute_api.models.user import User, UserRole
from commute_api.schemas.common import ApiResponse, ok
from commute_api.schemas.user import UserListResponse
from commute_api.services.user_service import UserService

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get(
    "/users",
    response_model=ApiResponse[UserListResponse],
    summary="List all users (admin only)",
)
async def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    _admin: User = Depends(require_role(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    users, total = await service.list_users(page, limit)
    return ok(
        UserListResponse(users=users, page=page, limit=limit, total=total),
        "Users retrieved successfully",
    )
