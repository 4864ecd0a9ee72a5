import pytest

from recruitment_api.core.errors import NotFoundError, ValidationError
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.forms import (
    FormFieldCreate,
    FormFieldUpsert,
    FormSectionCreate,
    FormTemplateCreate,
    FormTemplateUpdate,
    OptionGroupCreate,
    OptionGroupUpdate,
    OptionInput,
)
from recruitment_api.services.forms import (
    FormFieldService,
    FormSectionService,
    FormTemplateService,
    OptionGroupService,
)


async def _group(uow, context, name="Yes/No", options=("Yes", "No")):
    payload = OptionGroupCreate(
        Name=name,
        Options=[OptionInput(Name=o, Value=o.lower(), SortOrder=i) for i, o in enumerate(options)],
    )
    return (await OptionGroupService(uow, context).create_async(payload)).entity


async def _template(uow, context, name="Application form"):
    return (await FormTemplateService(uow, context).create_async(FormTemplateCreate(Name=name))).entity


@pytest.mark.asyncio
async def test_template_read_nests_sections_fields_and_options_in_sort_order(uow, admin_context):
    template = await _template(uow, admin_context)
    sections = FormSectionService(uow, admin_context)
    later = (await sections.create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="Extra", SortOrder=2))).entity
    first = (await sections.create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="Basics", SortOrder=1))).entity
    group = await _group(uow, admin_context, options=("No", "Yes"))

    fields = FormFieldService(uow, admin_context)
    await fields.create_async(FormFieldCreate(FormSectionId=first.Uid, Label="Email", Name="email", SortOrder=2))
    await fields.create_async(
        FormFieldCreate(
            FormSectionId=first.Uid, Label="Relocate?", Name="relocate", Type="radio", OptionGroupId=group.Uid, SortOrder=1
        )
    )

    view = (await FormTemplateService(uow, admin_context).get_by_id_async(template.Uid)).entity
    assert view.TemplateType == "Application"
    assert [s.Name for s in view.Sections] == ["Basics", "Extra"]
    assert [f.Name for f in view.Sections[0].Fields] == ["relocate", "email"]
    assert [o.Name for o in view.Sections[0].Fields[0].Options] == ["No", "Yes"]
    assert view.Sections[0].Fields[1].Options == []
    assert view.Sections[1].Uid == later.Uid
    assert view.Sections[1].Fields == []


@pytest.mark.asyncio
async def test_template_read_leaves_out_deleted_children(uow, admin_context):
    template = await _template(uow, admin_context)
    section = (
        await FormSectionService(uow, admin_context).create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="S"))
    ).entity
    fields = FormFieldService(uow, admin_context)
    kept = (await fields.create_async(FormFieldCreate(FormSectionId=section.Uid, Label="A", Name="a"))).entity
    dropped = (await fields.create_async(FormFieldCreate(FormSectionId=section.Uid, Label="B", Name="b"))).entity
    assert await fields.delete_async(dropped.Uid)

    view = (await FormTemplateService(uow, admin_context).get_by_id_async(template.Uid)).entity
    assert [f.Uid for f in view.Sections[0].Fields] == [kept.Uid]


@pytest.mark.asyncio
async def test_template_of_other_org_is_not_found(uow, admin_context, other_admin_context):
    template = await _template(uow, admin_context)
    with pytest.raises(NotFoundError, match="Form template not found"):
        await FormTemplateService(uow, other_admin_context).get_by_id_async(template.Uid)


@pytest.mark.asyncio
async def test_public_template_view_hides_inactive_templates(uow, admin_context):
    service = FormTemplateService(uow, admin_context)
    template = await _template(uow, admin_context)
    assert (await service.get_public_template_async(template.Uid)).entity.Uid == template.Uid

    await service.update_async(FormTemplateUpdate(IsActive=False), template.Uid)
    with pytest.raises(NotFoundError):
        await service.get_public_template_async(template.Uid)


@pytest.mark.asyncio
async def test_section_requires_template_of_same_org(uow, admin_context, other_admin_context):
    template = await _template(uow, admin_context)
    with pytest.raises(ValidationError, match="Form template not found") as exc:
        await FormSectionService(uow, other_admin_context).create_async(
            FormSectionCreate(FormTemplateId=template.Uid, Name="Stolen")
        )
    assert exc.value.details == {"FormTemplateId": template.Uid}


@pytest.mark.asyncio
async def test_field_references_and_length_bounds_are_checked(uow, admin_context):
    template = await _template(uow, admin_context)
    section = (
        await FormSectionService(uow, admin_context).create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="S"))
    ).entity
    fields = FormFieldService(uow, admin_context)

    with pytest.raises(ValidationError, match="Option group not found"):
        await fields.create_async(FormFieldCreate(FormSectionId=section.Uid, Label="A", Name="a", OptionGroupId="nope"))
    with pytest.raises(ValidationError, match="Form section not found"):
        await fields.create_async(FormFieldCreate(FormSectionId="nope", Label="A", Name="a"))
    with pytest.raises(ValidationError, match="MinLength cannot exceed MaxLength"):
        await fields.create_async(FormFieldCreate(FormSectionId=section.Uid, Label="A", Name="a", MinLength=5, MaxLength=2))


@pytest.mark.asyncio
async def test_upsert_fields_replaces_known_and_creates_new(uow, admin_context):
    template = await _template(uow, admin_context)
    section = (
        await FormSectionService(uow, admin_context).create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="S"))
    ).entity
    fields = FormFieldService(uow, admin_context)
    existing = (
        await fields.create_async(FormFieldCreate(FormSectionId=section.Uid, Label="Name", Name="name", Placeholder="x"))
    ).entity

    saved = await fields.upsert_fields_async(
        [
            FormFieldUpsert(Uid=existing.Uid, FormSectionId=section.Uid, Label="Full name", Name="name", SortOrder=1),
            FormFieldUpsert(FormSectionId=section.Uid, Label="Phone", Name="phone", SortOrder=2),
            FormFieldUpsert(Uid="stale-id", FormSectionId=section.Uid, Label="City", Name="city", SortOrder=3),
        ]
    )

    assert [f.Label for f in saved] == ["Full name", "Phone", "City"]
    assert saved[0].Uid == existing.Uid
    assert saved[0].Placeholder is None
    assert saved[0].CreatedBy == existing.CreatedBy
    assert saved[2].Uid != "stale-id"
    assert (await fields.count_async()) == 3


@pytest.mark.asyncio
async def test_upsert_fields_is_all_or_nothing(uow, admin_context):
    template = await _template(uow, admin_context)
    section = (
        await FormSectionService(uow, admin_context).create_async(FormSectionCreate(FormTemplateId=template.Uid, Name="S"))
    ).entity
    fields = FormFieldService(uow, admin_context)

    with pytest.raises(ValidationError, match="Form section not found"):
        await fields.upsert_fields_async(
            [
                FormFieldUpsert(FormSectionId=section.Uid, Label="Ok", Name="ok"),
                FormFieldUpsert(FormSectionId="missing", Label="Bad", Name="bad"),
            ]
        )
    assert await fields.count_async() == 0
    assert await fields.upsert_fields_async([]) == []


@pytest.mark.asyncio
async def test_option_group_create_returns_options_in_sort_order(uow, admin_context):
    group = await _group(uow, admin_context, options=("Low", "High"))
    assert [o.Name for o in group.Options] == ["Low", "High"]
    assert all(o.OrgId == admin_context.tenant_id for o in group.Options)
    assert all(o.OptionGroupId == group.Uid for o in group.Options)
    assert all(o.IsActive is True and o.IsDeleted is False for o in group.Options)


@pytest.mark.asyncio
async def test_option_group_rejects_duplicate_option_names(uow, admin_context):
    payload = OptionGroupCreate(
        Name="Sizes",
        Options=[OptionInput(Name="Small"), OptionInput(Name=" small "), OptionInput(Name="Large")],
    )
    service = OptionGroupService(uow, admin_context)
    with pytest.raises(ValidationError, match="Duplicate option names found: small"):
        await service.create_async(payload)
    assert await service.count_async() == 0


@pytest.mark.asyncio
async def test_option_group_update_upserts_listed_options_and_keeps_the_rest(uow, admin_context):
    service = OptionGroupService(uow, admin_context)
    group = await _group(uow, admin_context, options=("Yes", "No"))
    yes, no = group.Options

    updated = (
        await service.update_async(
            OptionGroupUpdate(
                Name="Answer",
                Options=[
                    OptionInput(Uid=yes.Uid, Name="Yes please", Value="y", SortOrder=0),
                    OptionInput(Name="Maybe", Value="m", SortOrder=5),
                ],
            ),
            group.Uid,
        )
    ).entity

    assert updated.Name == "Answer"
    by_name = {o.Name: o for o in updated.Options}
    assert set(by_name) == {"Yes please", "No", "Maybe"}
    assert by_name["Yes please"].Uid == yes.Uid
    assert by_name["Yes please"].CreatedOn == yes.CreatedOn
    assert by_name["No"].Uid == no.Uid


@pytest.mark.asyncio
async def test_option_group_update_cannot_take_over_foreign_options(uow, admin_context, other_admin_context):
    mine = await _group(uow, admin_context, name="Mine")
    theirs = await _group(uow, other_admin_context, name="Theirs")
    service = OptionGroupService(uow, admin_context)

    with pytest.raises(ValidationError, match="Options do not belong to this group"):
        await service.update_async(
            OptionGroupUpdate(Options=[OptionInput(Uid=theirs.Options[0].Uid, Name="Grabbed")]), mine.Uid
        )
    untouched = (await OptionGroupService(uow, other_admin_context).get_by_id_async(theirs.Uid)).entity
    assert untouched.Options[0].Name == "Yes"


@pytest.mark.asyncio
async def test_option_group_listings_include_options(uow, admin_context):
    await _group(uow, admin_context, name="A", options=("One",))
    await _group(uow, admin_context, name="B", options=())
    service = OptionGroupService(uow, admin_context)

    everything = {g.Name: g for g in (await service.get_all_async()).result.records}
    assert [o.Name for o in everything["A"].Options] == ["One"]
    assert everything["B"].Options == []

    page = await service.get_list_async(Filter(sort_by="Name", sort_order="asc"))
    assert [g.Name for g in page.data] == ["A", "B"]
    assert [o.Name for o in page.data[0].Options] == ["One"]

    option_rows = await uow.get_repository(TableNames.OPTIONS).find_where({}, org_id=admin_context.tenant_id)
    assert len(option_rows) == 1
