from __future__ import annotations

from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.entities import Organization

from .base import BaseService


class OrganizationService(BaseService[Organization]):
    """
    The caller's own organization. Its OrgId is its Uid, so the tenant
    predicate every read carries matches exactly one row.
    """

    table_name = TableNames.ORGANIZATION
    entity_type = Organization
    updatable_fields = frozenset(
        {"Name", "Description", "LogoUrl", "Phone", "Email", "Owner", "Address", "OrgSite"}
    )
    search_fields = ("Name", "Email")
