from __future__ import annotations

from fastapi import Depends

from recruitment_api.core.deps import require_roles
from recruitment_api.schemas.auth import UserCreate, UserRead, UserUpdate
from recruitment_api.services.users import UserService

from .crud import ADMIN, build_crud_router

# User administration is restricted to organization admins, reads included.
router = build_crud_router(
    prefix="/users",
    tags=["Users"],
    label="User",
    service_cls=UserService,
    create_model=UserCreate,
    update_model=UserUpdate,
    read_model=UserRead,
    write_roles=(ADMIN,),
    dependencies=[Depends(require_roles(ADMIN))],
)
