from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path, status

from recruitment_api.core.deps import get_public_context, provide_service
from recruitment_api.schemas.common import ApiResponse
from recruitment_api.schemas.entities import Application, Department, Position
from recruitment_api.schemas.recruitment import (
    ApplicationCreate,
    ApplicationUpdate,
    DepartmentCreate,
    DepartmentUpdate,
    PositionCreate,
    PositionUpdate,
)
from recruitment_api.services.recruitment import (
    ApplicationService,
    DepartmentService,
    PositionService,
)

from .crud import build_crud_router

departments_router = build_crud_router(
    prefix="/departments",
    tags=["Departments"],
    label="Department",
    service_cls=DepartmentService,
    create_model=DepartmentCreate,
    update_model=DepartmentUpdate,
    read_model=Department,
)

positions_router = build_crud_router(
    prefix="/positions",
    tags=["Positions"],
    label="Position",
    service_cls=PositionService,
    create_model=PositionCreate,
    update_model=PositionUpdate,
    read_model=Position,
)

applications_router = build_crud_router(
    prefix="/applications",
    tags=["Applications"],
    label="Application",
    service_cls=ApplicationService,
    create_model=ApplicationCreate,
    update_model=ApplicationUpdate,
    read_model=Application,
)

# Careers page endpoints: no authentication, scoped by the organization in the path.
public_router = APIRouter(prefix="/public/{org_id}", tags=["Public"])


# PUBLIC_INTERFACE
@public_router.get(
    "/positions",
    response_model=ApiResponse[List[Position]],
    summary="Open positions",
    description="Active positions with status 'Open' for an organization's careers page.",
)
async def list_open_positions(
    org_id: str = Path(..., description="Organization ID"),
    service: PositionService = Depends(provide_service(PositionService, get_public_context)),
) -> ApiResponse:
    return ApiResponse(data=await service.get_open_positions_async())


# PUBLIC_INTERFACE
@public_router.post(
    "/applications",
    response_model=ApiResponse[Application],
    status_code=status.HTTP_201_CREATED,
    summary="Submit application",
    description="Anonymous candidate submission for an open position of the organization.",
)
async def submit_application(
    payload: ApplicationCreate,
    org_id: str = Path(..., description="Organization ID"),
    service: ApplicationService = Depends(provide_service(ApplicationService, get_public_context)),
) -> ApiResponse:
    result = await service.create_async(payload)
    return ApiResponse(message="Application submitted", data=result.entity)
