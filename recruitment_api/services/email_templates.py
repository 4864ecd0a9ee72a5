from __future__ import annotations

from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import EmailTemplate

from .base import BaseService


class EmailTemplateService(BaseService[EmailTemplate]):
    table_name = TableNames.EMAIL_TEMPLATE
    entity_type = EmailTemplate
    updatable_fields = frozenset({"Name", "Description", "Content", "Type", "IsActive"})
    search_fields = ("Name", "Type")
