import json
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from pydantic import BaseModel

from recruitment_api.core.context import SYSTEM_USER_ID, RequestContext
from recruitment_api.core.errors import (
    DuplicateEntryError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from recruitment_api.core.security import verify_password
from recruitment_api.db.tables import TableNames
from recruitment_api.schemas.auth import UserCreate, UserUpdate
from recruitment_api.schemas.common import Filter
from recruitment_api.schemas.gyms import GymCreate, GymUpdate
from recruitment_api.schemas.recruitment import (
    ApplicationCreate,
    DepartmentCreate,
    PositionCreate,
    PositionUpdate,
)
from recruitment_api.schemas.tasks import TaskCreate, TaskUpdate
from recruitment_api.services.gyms import GymService
from recruitment_api.services.recruitment import ApplicationService, DepartmentService, PositionService
from recruitment_api.services.tasks import TaskService
from recruitment_api.services.users import UserService


@pytest.mark.asyncio
async def test_create_stamps_identity_and_audit(uow, admin_context):
    result = await GymService(uow, admin_context).create_async(GymCreate(Name="Downtown"))
    gym = result.entity
    assert gym.Uid
    assert gym.OrgId == admin_context.tenant_id
    assert gym.CreatedBy == admin_context.user_id
    assert gym.IsActive is True
    assert gym.IsDeleted is False
    assert gym.CreatedOn is not None


@pytest.mark.asyncio
async def test_reads_do_not_leak_across_tenants(uow, admin_context, other_admin_context):
    gym = (await GymService(uow, admin_context).create_async(GymCreate(Name="Downtown"))).entity
    other = GymService(uow, other_admin_context)

    with pytest.raises(NotFoundError, match="Gym not found"):
        await other.get_by_id_async(gym.Uid)
    assert (await other.get_all_async()).result.total_records == 0
    assert await other.delete_async(gym.Uid) is False


@pytest.mark.asyncio
async def test_update_from_other_tenant_is_forbidden(uow, admin_context, other_admin_context):
    gym = (await GymService(uow, admin_context).create_async(GymCreate(Name="Downtown"))).entity
    with pytest.raises(ForbiddenError):
        await GymService(uow, other_admin_context).update_async(GymUpdate(Name="Hijacked"), gym.Uid)

    unchanged = (await GymService(uow, admin_context).get_by_id_async(gym.Uid)).entity
    assert unchanged.Name == "Downtown"


@pytest.mark.asyncio
async def test_update_merges_only_sent_fields(uow, admin_context):
    service = GymService(uow, admin_context)
    gym = (await service.create_async(GymCreate(Name="Downtown", Phone="111"))).entity

    updated = (await service.update_async(GymUpdate(Name="Uptown"), gym.Uid)).entity
    assert updated.Name == "Uptown"
    assert updated.Phone == "111"
    assert updated.UpdatedBy == admin_context.user_id
    assert updated.UpdatedOn is not None
    assert updated.CreatedBy == gym.CreatedBy


@pytest.mark.asyncio
async def test_update_with_null_required_column_is_a_validation_error(uow, admin_context):
    service = GymService(uow, admin_context)
    gym = (await service.create_async(GymCreate(Name="Downtown"))).entity

    with pytest.raises(ValidationError, match="Name is required") as info:
        await service.update_async(GymUpdate.model_validate({"Name": None}), gym.Uid)
    assert info.value.status_code == 400
    assert (await service.get_by_id_async(gym.Uid)).entity.Name == "Downtown"


@pytest.mark.asyncio
async def test_update_of_row_deleted_after_load_is_not_found(uow, admin_context):
    class RacingGymService(GymService):
        async def pre_update_operation(self, entity):
            await super().pre_update_operation(entity)
            # Another request deletes the row between load and write.
            await self.repository.soft_delete(entity.Uid, self.tenant_id, "someone-else")

    gym = (await GymService(uow, admin_context).create_async(GymCreate(Name="Downtown"))).entity
    with pytest.raises(NotFoundError):
        await RacingGymService(uow, admin_context).update_async(GymUpdate(Name="Back"), gym.Uid)

    assert await uow.get_repository(TableNames.GYM).find_by_id(gym.Uid, admin_context.tenant_id) is None
    rows = await uow.raw("SELECT Name, DeletedBy FROM Gym WHERE Uid = ?", [gym.Uid])
    assert rows[0] == {"Name": "Downtown", "DeletedBy": "someone-else"}


@pytest.mark.asyncio
async def test_update_writes_only_changed_columns(uow, admin_context):
    class ConcurrentPhoneEdit(GymService):
        async def pre_update_operation(self, entity):
            await super().pre_update_operation(entity)
            # Another request changes Phone after this one loaded the row.
            await self.uow.raw("UPDATE Gym SET Phone = ? WHERE Uid = ?", ["222", entity.Uid])

    gym = (await GymService(uow, admin_context).create_async(GymCreate(Name="Downtown", Phone="111"))).entity
    updated = (await ConcurrentPhoneEdit(uow, admin_context).update_async(GymUpdate(Name="Uptown"), gym.Uid)).entity
    assert updated.Name == "Uptown"
    assert updated.Phone == "222"


@pytest.mark.asyncio
async def test_create_ignores_server_stamped_fields_from_payload(uow, admin_context, other_org_id):
    class GymPayload(BaseModel):
        Name: str
        OrgId: Optional[str] = None
        IsDeleted: Optional[bool] = None
        IsActive: Optional[bool] = None
        CreatedBy: Optional[str] = None
        Uid: Optional[str] = None

    payload = GymPayload(
        Name="Downtown",
        OrgId=other_org_id,
        IsDeleted=True,
        IsActive=False,
        CreatedBy="intruder",
        Uid="chosen-by-client",
    )
    created = (await GymService(uow, admin_context).create_async(payload)).entity

    stored = await uow.get_repository(TableNames.GYM).find_by_id(created.Uid, admin_context.tenant_id)
    assert stored is not None
    assert stored.Uid != "chosen-by-client"
    assert stored.OrgId == admin_context.tenant_id
    assert stored.IsDeleted is False
    assert stored.IsActive is True
    assert stored.CreatedBy == admin_context.user_id
    assert await uow.get_repository(TableNames.GYM).count(other_org_id) == 0


@pytest.mark.asyncio
async def test_update_missing_row(uow, admin_context):
    with pytest.raises(NotFoundError):
        await GymService(uow, admin_context).update_async(GymUpdate(Name="X"), "missing")


@pytest.mark.asyncio
async def test_delete_then_get(uow, admin_context):
    service = GymService(uow, admin_context)
    gym = (await service.create_async(GymCreate(Name="Downtown"))).entity
    assert await service.exists_async(gym.Uid) is True
    assert await service.delete_async(gym.Uid) is True
    assert await service.delete_async(gym.Uid) is False
    assert await service.exists_async(gym.Uid) is False
    with pytest.raises(NotFoundError):
        await service.get_by_id_async(gym.Uid)
    assert await service.hard_delete_async(gym.Uid) is True


@pytest.mark.asyncio
async def test_list_with_search(uow, admin_context):
    service = GymService(uow, admin_context)
    for name in ("North Fitness", "South Fitness", "Yoga Loft"):
        await service.create_async(GymCreate(Name=name))

    page = await service.get_list_async(Filter(search_keyword="Fitness", sort_by="Name", sort_order="ASC"))
    assert [g.Name for g in page.data] == ["North Fitness", "South Fitness"]
    assert page.pagination.total == 2
    assert await service.count_async() == 3


@pytest.mark.asyncio
async def test_task_dates_must_be_ordered(uow, admin_context):
    service = TaskService(uow, admin_context)
    start = datetime(2024, 3, 1, tzinfo=timezone.utc)
    with pytest.raises(ValidationError, match="EndDate"):
        await service.create_async(TaskCreate(Name="Ship", StartDate=start, EndDate=start - timedelta(days=1)))

    task = (await service.create_async(TaskCreate(Name="Ship", StartDate=start, EndDate=start))).entity
    assert task.Status == "Active"
    with pytest.raises(ValidationError):
        await service.update_async(TaskUpdate(EndDate=start - timedelta(days=2)), task.Uid)


@pytest.mark.asyncio
async def test_position_requires_department_in_same_tenant(uow, admin_context, other_admin_context):
    foreign_dept = (
        await DepartmentService(uow, other_admin_context).create_async(DepartmentCreate(Name="Ops"))
    ).entity
    positions = PositionService(uow, admin_context)
    with pytest.raises(ValidationError, match="Department not found"):
        await positions.create_async(PositionCreate(Name="Dev", DepartmentId=foreign_dept.Uid))

    dept = (await DepartmentService(uow, admin_context).create_async(DepartmentCreate(Name="Eng"))).entity
    position = (await positions.create_async(PositionCreate(Name="Dev", DepartmentId=dept.Uid))).entity
    assert position.Status == "Draft"


@pytest.mark.asyncio
async def test_public_application_requires_open_position(uow, admin_context):
    positions = PositionService(uow, admin_context)
    position = (await positions.create_async(PositionCreate(Name="Dev"))).entity
    candidate = RequestContext.anonymous(tenant_id=admin_context.tenant_id)
    applications = ApplicationService(uow, candidate)
    payload = ApplicationCreate(Name="Jane", Email="jane@mail.io", PositionId=position.Uid)

    with pytest.raises(ValidationError, match="not open"):
        await applications.create_async(payload)

    await positions.update_async(PositionUpdate(Status="Open"), position.Uid)
    assert [p.Uid for p in await PositionService(uow, candidate).get_open_positions_async()] == [position.Uid]

    created = (await applications.create_async(payload)).entity
    assert created.CreatedBy == SYSTEM_USER_ID
    assert created.OrgId == admin_context.tenant_id


@pytest.mark.asyncio
async def test_application_validation(uow, admin_context):
    position = (await PositionService(uow, admin_context).create_async(PositionCreate(Name="Dev"))).entity
    applications = ApplicationService(uow, admin_context)

    with pytest.raises(ValidationError, match="Invalid JSON"):
        await applications.create_async(
            ApplicationCreate(Name="Jane", Email="jane@mail.io", PositionId=position.Uid, MetaData="{oops")
        )
    with pytest.raises(ValidationError, match="Position not found"):
        await applications.create_async(ApplicationCreate(Name="Jane", Email="jane@mail.io", PositionId="nope"))

    # Staff may file applications against draft positions.
    created = await applications.create_async(
        ApplicationCreate(
            Name="Jane",
            Email="jane@mail.io",
            PositionId=position.Uid,
            MetaData=json.dumps({"referral": "yes"}),
        )
    )
    assert json.loads(created.entity.MetaData) == {"referral": "yes"}


@pytest.mark.asyncio
async def test_users_hash_passwords_and_hide_them(uow, admin_context):
    users = UserService(uow, admin_context)
    created = (await users.create_async(UserCreate(Email="emp@acme.io", Password="secret1"))).entity
    assert not hasattr(created, "Password")
    assert created.Role == "Employee"

    stored = await uow.get_repository(TableNames.USER).find_by_uid(created.Uid)
    assert stored.Password != "secret1"
    assert verify_password("secret1", stored.Password)

    # Updating other fields keeps the existing hash.
    await users.update_async(UserUpdate(Role="Manager"), created.Uid)
    stored = await uow.get_repository(TableNames.USER).find_by_uid(created.Uid)
    assert stored.Role == "Manager"
    assert verify_password("secret1", stored.Password)

    await users.update_async(UserUpdate(Password="changed1"), created.Uid)
    stored = await uow.get_repository(TableNames.USER).find_by_uid(created.Uid)
    assert verify_password("changed1", stored.Password)


@pytest.mark.asyncio
async def test_user_emails_are_globally_unique(uow, admin_context, other_admin_context):
    await UserService(uow, admin_context).create_async(UserCreate(Email="dup@acme.io", Password="secret1"))
    with pytest.raises(DuplicateEntryError):
        await UserService(uow, other_admin_context).create_async(UserCreate(Email="dup@acme.io", Password="secret1"))


@pytest.mark.asyncio
async def test_service_transaction_rolls_back(uow, admin_context):
    service = GymService(uow, admin_context)

    async def work(tx):
        await service.bind(tx).create_async(GymCreate(Name="Temp"))
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError):
        await service.transaction(work)
    assert await service.count_async() == 0
