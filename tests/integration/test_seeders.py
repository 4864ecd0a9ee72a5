import pytest

from recruitment_api.core.security import verify_password
from recruitment_api.db.seed import (
    DEMO_ADMIN_EMAIL,
    DEMO_ADMIN_PASSWORD,
    DEMO_ORG_ID,
    Seeder,
    SeederManager,
    default_seeders,
)
from recruitment_api.db.tables import TableNames


class ExplodingSeeder(Seeder):
    name = "ExplodingSeeder"
    order = 10

    async def run(self, uow):
        await uow.raw(
            "INSERT INTO Organization (Uid, OrgId, Name, CreatedOn) VALUES (?, ?, ?, CURRENT_TIMESTAMP)",
            ["tmp-org", "tmp-org", "Temporary"],
        )
        raise RuntimeError("kaboom")


class NeverReachedSeeder(Seeder):
    name = "NeverReachedSeeder"
    order = 20

    async def run(self, uow):
        raise AssertionError("should not run after a failure")


@pytest.mark.asyncio
async def test_run_executes_pending_seeders_once(engine, uow):
    manager = SeederManager(engine, default_seeders())

    first = await manager.run()
    assert first.success == ["DemoOrganizationSeeder", "AdminUserSeeder"]
    assert first.batch == 1
    assert first.failed == []

    second = await manager.run()
    assert second.success == []
    assert second.skipped == ["DemoOrganizationSeeder", "AdminUserSeeder"]
    assert second.batch == 2

    admin = await uow.get_repository(TableNames.USER).find_one_where({"Email": DEMO_ADMIN_EMAIL})
    assert admin.OrgId == DEMO_ORG_ID
    assert admin.Role == "Admin"
    assert verify_password(DEMO_ADMIN_PASSWORD, admin.Password)


@pytest.mark.asyncio
async def test_status_reports_batches(engine):
    manager = SeederManager(engine, default_seeders())
    before = await manager.status()
    assert [s.executed for s in before] == [False, False]

    await manager.run()
    after = await manager.status()
    assert [(s.name, s.executed, s.batch) for s in after] == [
        ("DemoOrganizationSeeder", True, 1),
        ("AdminUserSeeder", True, 1),
    ]


@pytest.mark.asyncio
async def test_rollback_undoes_last_batch(engine, uow):
    manager = SeederManager(engine, default_seeders())
    await manager.run()

    rolled_back = await manager.rollback()
    assert rolled_back == ["AdminUserSeeder", "DemoOrganizationSeeder"]
    assert await uow.get_repository(TableNames.ORGANIZATION).find_by_uid(DEMO_ORG_ID) is None
    assert all(not s.executed for s in await manager.status())


@pytest.mark.asyncio
async def test_failure_stops_the_run_and_leaves_no_trace(engine, uow):
    manager = SeederManager(engine, [ExplodingSeeder(), NeverReachedSeeder()])
    result = await manager.run()

    assert result.success == []
    assert [f.name for f in result.failed] == ["ExplodingSeeder"]
    assert result.failed[0].error == "kaboom"
    assert await uow.get_repository(TableNames.ORGANIZATION).find_by_uid("tmp-org") is None
    assert all(not s.executed for s in await manager.status())


@pytest.mark.asyncio
async def test_run_single_seeder(engine):
    manager = SeederManager(engine, default_seeders())
    with pytest.raises(ValueError):
        await manager.run_seeder("MissingSeeder")

    assert await manager.run_seeder("DemoOrganizationSeeder") is True
    assert await manager.run_seeder("DemoOrganizationSeeder") is False
    assert await manager.run_seeder("DemoOrganizationSeeder", force=True) is True

    statuses = {s.name: s for s in await manager.status()}
    assert statuses["DemoOrganizationSeeder"].executed is True
    assert statuses["AdminUserSeeder"].executed is False
