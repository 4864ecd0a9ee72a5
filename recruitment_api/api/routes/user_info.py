from __future__ import annotations

from fastapi import APIRouter, Depends

from recruitment_api.core.deps import provide_service
from recruitment_api.schemas.common import ApiResponse
from recruitment_api.schemas.entities import UserInfo
from recruitment_api.schemas.user_info import UserInfoCreate, UserInfoUpdate
from recruitment_api.services.user_info import UserInfoService

from .crud import build_crud_router

# Included ahead of the CRUD router so /me is not taken for an id.
me_router = APIRouter(prefix="/userinfo", tags=["User Info"])


# PUBLIC_INTERFACE
@me_router.get(
    "/me",
    response_model=ApiResponse[UserInfo],
    summary="Caller's profile",
    description="Profile details of the authenticated user.",
)
async def get_my_details(
    service: UserInfoService = Depends(provide_service(UserInfoService)),
) -> ApiResponse:
    result = await service.get_user_details_async()
    return ApiResponse(data=result.entity)


router = build_crud_router(
    prefix="/userinfo",
    tags=["User Info"],
    label="User info",
    service_cls=UserInfoService,
    create_model=UserInfoCreate,
    update_model=UserInfoUpdate,
    read_model=UserInfo,
)
