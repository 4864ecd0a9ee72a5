from __future__ import annotations

from recruitment_api.schemas.entities import Organization
from recruitment_api.schemas.organization import OrganizationUpdate
from recruitment_api.services.organization import OrganizationService

from .crud import ADMIN, build_crud_router

# Organizations are created by sign-up and never deleted through the API.
router = build_crud_router(
    prefix="/organizations",
    tags=["Organizations"],
    label="Organization",
    service_cls=OrganizationService,
    create_model=OrganizationUpdate,
    update_model=OrganizationUpdate,
    read_model=Organization,
    write_roles=(ADMIN,),
    exclude=("create", "delete", "hard_delete"),
)
