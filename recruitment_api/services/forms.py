"""
Form builder services: templates, sections, fields and option groups.

Nested reads (a template with its sections, fields and options, or an
option group with its options) are assembled from one ordered query per
level, grouped in Python.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Iterable, Optional, Sequence
from uuid import uuid4

from pydantic import BaseModel

from recruitment_api.core.errors import NotFoundError, ValidationError
from recruitment_api.db.base import utc_now
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.entities import FormField, FormSection, FormTemplate, Option, OptionGroup
from recruitment_api.schemas.forms import (
    FormFieldCreate,
    FormFieldResult,
    FormFieldUpdate,
    FormFieldUpsert,
    FormSectionResult,
    FormTemplateResult,
    OptionGroupResult,
    OptionInput,
)
from recruitment_api.schemas.results import PaginatedResult, Result

from .base import BaseService

logger = logging.getLogger(__name__)

CHILD_ORDER = ("SortOrder", "CreatedOn")


async def _ensure_exists(service: BaseService, table: TableNames, id: Optional[str], field: str, label: str) -> None:
    if id is None:
        return
    if not await service.other_repository(table).exists(id, service.tenant_id):
        raise ValidationError(f"{label} not found", details={field: id})


async def _options_by_group(service: BaseService, group_ids: Iterable[Optional[str]]) -> dict[str, list[Option]]:
    ids = sorted({g for g in group_ids if g})
    grouped: dict[str, list[Option]] = defaultdict(list)
    if not ids:
        return grouped
    options = await service.other_repository(TableNames.OPTIONS).find_where(
        {"OptionGroupId": ids}, org_id=service.tenant_id, order_by=CHILD_ORDER
    )
    for option in options:
        grouped[option.OptionGroupId].append(option)
    return grouped


class FormTemplateService(BaseService[FormTemplate]):
    table_name = TableNames.FORM_TEMPLATE
    entity_type = FormTemplate
    updatable_fields = frozenset({"Name", "Description", "TemplateType", "IsActive"})
    search_fields = ("Name", "Description")

    async def _assemble(self, template: FormTemplate) -> FormTemplateResult:
        sections = await self.other_repository(TableNames.FORM_SECTION).find_where(
            {"FormTemplateId": template.Uid}, org_id=self.tenant_id, order_by=CHILD_ORDER
        )
        fields: list[FormField] = []
        if sections:
            fields = await self.other_repository(TableNames.FORM_FIELD).find_where(
                {"FormSectionId": [s.Uid for s in sections]}, org_id=self.tenant_id, order_by=CHILD_ORDER
            )
        options = await _options_by_group(self, (f.OptionGroupId for f in fields))

        fields_by_section: dict[str, list[FormFieldResult]] = defaultdict(list)
        for field in fields:
            fields_by_section[field.FormSectionId].append(
                FormFieldResult(**field.model_dump(), Options=options.get(field.OptionGroupId, []))
            )
        return FormTemplateResult(
            **template.model_dump(),
            Sections=[
                FormSectionResult(**section.model_dump(), Fields=fields_by_section.get(section.Uid, []))
                for section in sections
            ],
        )

    async def get_by_id_async(self, id: str) -> Result[FormTemplateResult]:
        """Template with its live sections, fields and field options, each ordered by SortOrder."""
        template = await self.repository.find_by_id(id, self.tenant_id)
        if template is None:
            raise NotFoundError("Form template not found")
        return Result.to_entity_result(await self._assemble(template))

    # PUBLIC_INTERFACE
    async def get_public_template_async(self, id: str) -> Result[FormTemplateResult]:
        """Same nested view for anonymous callers; inactive templates are hidden."""
        template = await self.repository.find_by_id(id, self.tenant_id)
        if template is None or not template.IsActive:
            raise NotFoundError("Form template not found")
        return Result.to_entity_result(await self._assemble(template))


class FormSectionService(BaseService[FormSection]):
    table_name = TableNames.FORM_SECTION
    entity_type = FormSection
    updatable_fields = frozenset({"Name", "Description", "ShowTitle", "SortOrder", "IsActive"})
    search_fields = ("Name",)

    async def validate_add(self, model: BaseModel) -> None:
        await _ensure_exists(
            self, TableNames.FORM_TEMPLATE, getattr(model, "FormTemplateId", None), "FormTemplateId", "Form template"
        )


class FormFieldService(BaseService[FormField]):
    """Fields of a form section. Sections and option groups must belong to the caller's organization."""

    table_name = TableNames.FORM_FIELD
    entity_type = FormField
    updatable_fields = frozenset(
        {
            "FormSectionId",
            "Label",
            "Name",
            "Placeholder",
            "Type",
            "OptionGroupId",
            "HelpText",
            "IsRequired",
            "DefaultValue",
            "MinLength",
            "MaxLength",
            "Pattern",
            "SortOrder",
            "IsVisible",
            "Width",
            "IsActive",
        }
    )
    search_fields = ("Label", "Name", "Type")

    async def _validate_references(self, model: BaseModel, only_set: bool) -> None:
        fields_set = model.model_fields_set
        if not only_set or "FormSectionId" in fields_set:
            await _ensure_exists(
                self, TableNames.FORM_SECTION, getattr(model, "FormSectionId", None), "FormSectionId", "Form section"
            )
        if not only_set or "OptionGroupId" in fields_set:
            await _ensure_exists(
                self, TableNames.OPTION_GROUP, getattr(model, "OptionGroupId", None), "OptionGroupId", "Option group"
            )
        min_length, max_length = getattr(model, "MinLength", None), getattr(model, "MaxLength", None)
        if min_length is not None and max_length is not None and min_length > max_length:
            raise ValidationError("MinLength cannot exceed MaxLength")

    async def validate_add(self, model: BaseModel) -> None:
        await self._validate_references(model, only_set=False)

    async def validate_update(self, model: BaseModel, id: str) -> None:
        await self._validate_references(model, only_set=True)

    # PUBLIC_INTERFACE
    async def upsert_fields_async(self, fields: Sequence[FormFieldUpsert]) -> list[Any]:
        """
        Save a batch of fields in one transaction: a field whose Uid names an
        existing field of the organization is replaced, any other is created
        with a new Uid. One invalid field rolls the whole batch back.
        """
        if not fields:
            return []

        async def _upsert(tx: UnitOfWork) -> list[Any]:
            service = self.bind(tx)
            saved = []
            for field in fields:
                values = field.model_dump(exclude={"Uid"})
                if field.Uid and await service.repository.exists(field.Uid, self.tenant_id):
                    result = await service.update_async(FormFieldUpdate(**values), field.Uid)
                else:
                    result = await service.create_async(FormFieldCreate(**values))
                saved.append(result.entity)
            return saved

        saved = await self.transaction(_upsert)
        logger.info("Upserted %d form fields", len(saved))
        return saved


class OptionGroupService(BaseService[OptionGroup]):
    """
    Option groups and their options, written together.

    Create and update upsert the payload's ``Options`` in the same
    transaction as the group: an option with a Uid of this group is
    updated, one without a Uid is added. Options missing from the payload
    are left untouched. Every read returns the group's live options
    ordered by SortOrder.
    """

    table_name = TableNames.OPTION_GROUP
    entity_type = OptionGroup
    output_type = OptionGroupResult
    updatable_fields = frozenset({"Name", "Description", "IsActive"})
    search_fields = ("Name", "Description")

    @staticmethod
    def _ensure_unique_names(options: Sequence[OptionInput]) -> None:
        seen: set[str] = set()
        duplicates: list[str] = []
        for option in options:
            name = option.Name.strip().lower()
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            raise ValidationError(f"Duplicate option names found: {', '.join(duplicates)}")

    async def validate_add(self, model: BaseModel) -> None:
        self._ensure_unique_names(getattr(model, "Options", None) or [])

    async def validate_update(self, model: BaseModel, id: str) -> None:
        self._ensure_unique_names(getattr(model, "Options", None) or [])

    async def _upsert_options(self, options: Sequence[OptionInput], group_id: str) -> None:
        if not options:
            return
        repo = self.other_repository(TableNames.OPTIONS)
        given = [o.Uid for o in options if o.Uid]
        if given:
            known = {o.Uid for o in await repo.find_where({"Uid": given, "OptionGroupId": group_id}, org_id=self.tenant_id)}
            unknown = [uid for uid in given if uid not in known]
            if unknown:
                raise ValidationError("Options do not belong to this group", details={"Options": unknown})

        now = utc_now()
        rows = [
            {
                "Uid": option.Uid or str(uuid4()),
                "OrgId": self.tenant_id,
                "OptionGroupId": group_id,
                "Name": option.Name,
                "Value": option.Value,
                "SortOrder": option.SortOrder,
                "IsActive": True if option.IsActive is None else option.IsActive,
                "IsDeleted": False,
                "CreatedOn": now,
                "CreatedBy": self.user_id,
                "UpdatedOn": now,
                "UpdatedBy": self.user_id,
            }
            for option in options
        ]
        await repo.upsert_many(rows, exclude_from_update=("OrgId", "OptionGroupId", "IsDeleted"))

    async def post_add_operation(self, model: BaseModel, entity: OptionGroup) -> None:
        await self._upsert_options(getattr(model, "Options", None) or [], entity.Uid)

    async def post_update_operation(self, model: BaseModel, entity: OptionGroup) -> None:
        await self._upsert_options(getattr(model, "Options", None) or [], entity.Uid)

    async def create_async(self, model: BaseModel) -> Result[Any]:
        created = await self.transaction(lambda tx: super(OptionGroupService, self.bind(tx)).create_async(model))
        return await self.get_by_id_async(created.entity.Uid)

    async def update_async(self, model: BaseModel, id: str) -> Result[Any]:
        await self.transaction(lambda tx: super(OptionGroupService, self.bind(tx)).update_async(model, id))
        return await self.get_by_id_async(id)

    async def _with_options(self, groups: Sequence[BaseModel]) -> list[OptionGroupResult]:
        options = await _options_by_group(self, (g.Uid for g in groups))
        return [
            OptionGroupResult(**g.model_dump(exclude={"Options"}), Options=options.get(g.Uid, []))
            for g in groups
        ]

    async def get_all_async(self, columns: Optional[Sequence[str]] = None) -> Result[Any]:
        records = await self._with_options((await super().get_all_async(columns)).result.records or [])
        return Result.to_paged_result(1, len(records), len(records), records)

    async def get_list_async(self, filters: Optional[Filter] = None) -> PaginatedResult[Any]:
        page = await super().get_list_async(filters)
        return PaginatedResult(data=await self._with_options(page.data), pagination=page.pagination)

    async def get_by_id_async(self, id: str) -> Result[Any]:
        group = (await super().get_by_id_async(id)).entity
        return Result.to_entity_result((await self._with_options([group]))[0])
