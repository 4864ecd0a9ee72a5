from uuid import uuid4

import pytest
import pytest_asyncio

from recruitment_api.core.context import RequestContext
from recruitment_api.db import Settings, create_engine_from_settings, create_schema
from recruitment_api.db.base import utc_now
from recruitment_api.db.query_executor import QueryExecutor
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.entities import Organization


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine_from_settings(Settings(DATABASE_URL="sqlite+aiosqlite://"))
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def uow(engine):
    return UnitOfWork(QueryExecutor(engine))


@pytest.fixture
def org_factory(uow):
    async def _create(name: str = "Acme") -> str:
        org_id = str(uuid4())
        await uow.get_repository(TableNames.ORGANIZATION).create(
            Organization(
                Uid=org_id,
                OrgId=org_id,
                Name=name,
                IsActive=True,
                IsDeleted=False,
                CreatedOn=utc_now(),
            )
        )
        return org_id

    return _create


@pytest_asyncio.fixture
async def org_id(org_factory):
    return await org_factory("Org A")


@pytest_asyncio.fixture
async def other_org_id(org_factory):
    return await org_factory("Org B")


@pytest.fixture
def admin_context(org_id):
    return RequestContext(tenant_id=org_id, user_id=str(uuid4()), role="Admin", email="admin@acme.io")


@pytest.fixture
def other_admin_context(other_org_id):
    return RequestContext(tenant_id=other_org_id, user_id=str(uuid4()), role="Admin")
