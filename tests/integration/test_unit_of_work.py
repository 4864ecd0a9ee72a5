from uuid import uuid4

import pytest
from pydantic import BaseModel

from recruitment_api.db.base import utc_now
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.entities import Gym


def _gym(org_id, name):
    return Gym(Uid=str(uuid4()), OrgId=org_id, Name=name, CreatedOn=utc_now())


def test_repositories_are_cached_per_table(uow):
    assert uow.get_repository(TableNames.GYM) is uow.get_repository("Gym")
    assert uow.get_repository(TableNames.GYM, Gym) is uow.get_repository("Gym")
    uow.clear_cache()
    assert uow.get_repository(TableNames.GYM) is not None


@pytest.mark.asyncio
async def test_repository_cache_respects_entity_type(uow, org_id):
    class GymSummary(BaseModel):
        Uid: str
        Name: str

    summaries = uow.get_repository(TableNames.GYM, GymSummary)
    gyms = uow.get_repository(TableNames.GYM)
    assert summaries is not gyms
    assert summaries.entity_type is GymSummary
    assert gyms.entity_type is Gym

    gym = _gym(org_id, "Downtown")
    await gyms.create(gym)
    assert isinstance(await uow.get_repository(TableNames.GYM).find_by_id(gym.Uid, org_id), Gym)
    assert isinstance(await uow.get_repository(TableNames.GYM, GymSummary).find_by_id(gym.Uid, org_id), GymSummary)


def test_unknown_table_is_rejected(uow):
    with pytest.raises(ValueError):
        uow.get_repository("Salaries")


@pytest.mark.asyncio
async def test_transaction_commits(uow, org_id):
    assert not uow.executor.in_transaction

    async def work(tx: UnitOfWork):
        assert tx.executor.in_transaction
        await tx.get_repository(TableNames.GYM).create(_gym(org_id, "A"))
        await tx.get_repository(TableNames.GYM).create(_gym(org_id, "B"))
        return "done"

    assert await uow.transaction(work) == "done"
    assert await uow.get_repository(TableNames.GYM).count(org_id) == 2


@pytest.mark.asyncio
async def test_transaction_rolls_back_on_error(uow, org_id):
    async def work(tx: UnitOfWork):
        await tx.get_repository(TableNames.GYM).create(_gym(org_id, "A"))
        raise RuntimeError("abort")

    with pytest.raises(RuntimeError, match="abort"):
        await uow.transaction(work)
    assert await uow.get_repository(TableNames.GYM).count(org_id) == 0


@pytest.mark.asyncio
async def test_nested_transaction_joins_outer(uow, org_id):
    async def inner(tx: UnitOfWork):
        await tx.get_repository(TableNames.GYM).create(_gym(org_id, "inner"))

    async def outer(tx: UnitOfWork):
        await tx.transaction(inner)
        raise RuntimeError("abort outer")

    with pytest.raises(RuntimeError):
        await uow.transaction(outer)
    assert await uow.get_repository(TableNames.GYM).count(org_id) == 0


@pytest.mark.asyncio
async def test_raw_query(uow):
    rows = await uow.raw("SELECT 1 AS ok")
    assert rows == [{"ok": 1}]
    assert uow.dialect == "sqlite"
