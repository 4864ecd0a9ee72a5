from __future__ import annotations

from recruitment_api.schemas.email_templates import EmailTemplateCreate, EmailTemplateUpdate
from recruitment_api.schemas.entities import EmailTemplate
from recruitment_api.services.email_templates import EmailTemplateService

from .crud import build_crud_router

router = build_crud_router(
    prefix="/email-templates",
    tags=["Email Templates"],
    label="Email template",
    service_cls=EmailTemplateService,
    create_model=EmailTemplateCreate,
    update_model=EmailTemplateUpdate,
    read_model=EmailTemplate,
)
