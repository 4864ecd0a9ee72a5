from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Path

from recruitment_api.core.deps import get_public_context, provide_service, require_roles
from recruitment_api.schemas.common import ApiResponse
from recruitment_api.schemas.entities import FormField, FormSection, FormTemplate
from recruitment_api.schemas.forms import (
    FormFieldCreate,
    FormFieldUpdate,
    FormFieldUpsert,
    FormSectionCreate,
    FormSectionUpdate,
    FormTemplateCreate,
    FormTemplateResult,
    FormTemplateUpdate,
    OptionGroupCreate,
    OptionGroupResult,
    OptionGroupUpdate,
)
from recruitment_api.services.forms import (
    FormFieldService,
    FormSectionService,
    FormTemplateService,
    OptionGroupService,
)

from .crud import ADMIN, MANAGER, build_crud_router
from .recruitment import public_router

form_templates_router = build_crud_router(
    prefix="/form-templates",
    tags=["Forms"],
    label="Form template",
    service_cls=FormTemplateService,
    create_model=FormTemplateCreate,
    update_model=FormTemplateUpdate,
    read_model=FormTemplate,
    detail_model=FormTemplateResult,
)

form_sections_router = build_crud_router(
    prefix="/form-sections",
    tags=["Forms"],
    label="Form section",
    service_cls=FormSectionService,
    create_model=FormSectionCreate,
    update_model=FormSectionUpdate,
    read_model=FormSection,
)

form_field_batch_router = APIRouter(prefix="/form-fields", tags=["Forms"])


# PUBLIC_INTERFACE
@form_field_batch_router.post(
    "/upsert",
    response_model=ApiResponse[List[FormField]],
    summary="Save form fields",
    description=(
        "Create or replace several fields at once. A field whose Uid names an existing "
        "field is replaced; any other is created. All fields are saved or none are."
    ),
    dependencies=[Depends(require_roles(ADMIN, MANAGER))],
)
async def upsert_form_fields(
    payload: List[FormFieldUpsert],
    service: FormFieldService = Depends(provide_service(FormFieldService)),
) -> ApiResponse:
    saved = await service.upsert_fields_async(payload)
    return ApiResponse(message="Form fields saved", data=saved)


form_fields_router = build_crud_router(
    prefix="/form-fields",
    tags=["Forms"],
    label="Form field",
    service_cls=FormFieldService,
    create_model=FormFieldCreate,
    update_model=FormFieldUpdate,
    read_model=FormField,
)

option_groups_router = build_crud_router(
    prefix="/option-groups",
    tags=["Forms"],
    label="Option group",
    service_cls=OptionGroupService,
    create_model=OptionGroupCreate,
    update_model=OptionGroupUpdate,
    read_model=OptionGroupResult,
)


# Registered on the shared public router, which main includes once.
# PUBLIC_INTERFACE
@public_router.get(
    "/form-templates/{id}",
    response_model=ApiResponse[FormTemplateResult],
    summary="Public form template",
    description="Active form template with its sections, fields and options, for rendering a public form.",
)
async def get_public_form_template(
    org_id: str = Path(..., description="Organization ID"),
    id: str = Path(..., description="Form template ID"),
    service: FormTemplateService = Depends(provide_service(FormTemplateService, get_public_context)),
) -> ApiResponse:
    result = await service.get_public_template_async(id)
    return ApiResponse(data=result.entity)
