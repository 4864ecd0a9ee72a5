"""
Database seeding with execution tracking.

Seeders run in ascending ``order``. Each one executes in its own transaction
together with its bookkeeping row in ``_seeds``, so a failed seeder leaves
nothing behind. Every ``run()`` call records its seeders under a new batch
number; ``rollback()`` undoes the most recent batch.

Seeds:
- Demo organization (Acme Fitness)
- Admin user for the demo organization

Usage:
  python -m recruitment_api.db.run_migrations migrate
  python -m recruitment_api.db.seed
  python -m recruitment_api.db.seed --status
  python -m recruitment_api.db.seed --rollback
  python -m recruitment_api.db.seed --name AdminUserSeeder --force
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncEngine

from recruitment_api.core.context import SYSTEM_USER_ID, RequestContext
from recruitment_api.core.logging import configure_logging
from recruitment_api.db.base import utc_now
from recruitment_api.db.models.seeds import SeedRecord
from recruitment_api.db.query_executor import QueryExecutor
from recruitment_api.db.session import create_engine_from_settings
from recruitment_api.db.tables import TableNames
from recruitment_api.repositories.unit_of_work import UnitOfWork
from recruitment_api.schemas.auth import UserCreate
from recruitment_api.schemas.entities import Organization, UserRole
from recruitment_api.services.users import UserService

logger = logging.getLogger(__name__)

SEEDS_TABLE = SeedRecord.__tablename__

DEMO_ORG_ID = "11111111-1111-1111-1111-111111111111"
DEMO_ADMIN_EMAIL = "admin@example.com"
DEMO_ADMIN_PASSWORD = "Admin@123"


class Seeder:
    """
    Base class for seeders.

    Subclasses set a unique ``name`` (the tracking key) and an ``order``
    (lower runs first), implement ``run`` and may implement ``rollback``.
    """

    name: str = ""
    order: int = 0
    description: Optional[str] = None

    async def run(self, uow: UnitOfWork) -> None:
        raise NotImplementedError

    async def rollback(self, uow: UnitOfWork) -> None:
        raise NotImplementedError

    @property
    def can_rollback(self) -> bool:
        return type(self).rollback is not Seeder.rollback


@dataclass
class SeederFailure:
    name: str
    error: str


@dataclass
class SeederRunResult:
    success: List[str] = field(default_factory=list)
    failed: List[SeederFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    batch: int = 0


@dataclass
class SeederStatus:
    name: str
    order: int
    executed: bool
    batch: Optional[int] = None
    executed_at: Optional[str] = None


class SeederManager:
    """Registers seeders and runs, re-runs or rolls them back with tracking."""

    def __init__(self, engine: AsyncEngine, seeders: Sequence[Seeder] = ()) -> None:
        self.engine = engine
        self.executor = QueryExecutor(engine)
        self.seeders: List[Seeder] = []
        self.register_many(seeders)

    def register(self, seeder: Seeder) -> "SeederManager":
        self.seeders.append(seeder)
        return self

    def register_many(self, seeders: Sequence[Seeder]) -> "SeederManager":
        self.seeders.extend(seeders)
        return self

    def _find(self, name: str) -> Optional[Seeder]:
        return next((s for s in self.seeders if s.name == name), None)

    async def ensure_table(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: SeedRecord.__table__.create(sync_conn, checkfirst=True))

    async def executed(self) -> List[dict]:
        return await self.executor.select(
            f"SELECT name, batch, executed_at FROM {SEEDS_TABLE} ORDER BY id ASC"
        )

    async def next_batch(self) -> int:
        row = await self.executor.select_one(f"SELECT MAX(batch) AS max_batch FROM {SEEDS_TABLE}")
        return int((row or {}).get("max_batch") or 0) + 1

    async def _execute(self, seeder: Seeder, batch: Optional[int]) -> None:
        """Run one seeder and, when ``batch`` is given, record it in the same transaction."""
        async with self.executor.begin() as tx:
            await seeder.run(UnitOfWork(tx))
            if batch is not None:
                await tx.insert(
                    f"INSERT INTO {SEEDS_TABLE} (name, batch, executed_at) VALUES (?, ?, ?)",
                    [seeder.name, batch, utc_now()],
                )

    # PUBLIC_INTERFACE
    async def run(self) -> SeederRunResult:
        """Run every pending seeder in order; stops at the first failure."""
        await self.ensure_table()
        done = {row["name"] for row in await self.executed()}
        result = SeederRunResult(batch=await self.next_batch())

        for seeder in sorted(self.seeders, key=lambda s: s.order):
            if seeder.name in done:
                result.skipped.append(seeder.name)
                continue
            try:
                logger.info("Running seeder: %s", seeder.name)
                await self._execute(seeder, result.batch)
            except Exception as exc:
                logger.exception("Seeder %s failed", seeder.name)
                result.failed.append(SeederFailure(name=seeder.name, error=str(exc)))
                break
            result.success.append(seeder.name)
            logger.info("Seeder %s completed", seeder.name)
        return result

    # PUBLIC_INTERFACE
    async def run_seeder(self, name: str, force: bool = False) -> bool:
        """
        Run a single seeder by name.

        Returns False when it already ran and ``force`` is not set, or when it
        fails. Raises ValueError for an unknown name.
        """
        seeder = self._find(name)
        if seeder is None:
            raise ValueError(f'Seeder "{name}" not found')

        await self.ensure_table()
        already = any(row["name"] == name for row in await self.executed())
        if already and not force:
            logger.info('Seeder "%s" already executed. Use --force to re-run.', name)
            return False

        try:
            await self._execute(seeder, None if already else await self.next_batch())
        except Exception:
            logger.exception("Seeder %s failed", name)
            return False
        return True

    # PUBLIC_INTERFACE
    async def rollback(self) -> List[str]:
        """Undo the last batch, newest first. Seeders without a rollback are skipped."""
        await self.ensure_table()
        rows = await self.executor.select(
            f"SELECT name FROM {SEEDS_TABLE} WHERE batch = (SELECT MAX(batch) FROM {SEEDS_TABLE}) ORDER BY id DESC"
        )
        rolled_back: List[str] = []
        for row in rows:
            seeder = self._find(row["name"])
            if seeder is None or not seeder.can_rollback:
                logger.warning("%s has no rollback method, skipping", row["name"])
                continue
            try:
                async with self.executor.begin() as tx:
                    await seeder.rollback(UnitOfWork(tx))
                    await tx.delete(f"DELETE FROM {SEEDS_TABLE} WHERE name = ?", [seeder.name])
            except Exception:
                logger.exception("Rollback of %s failed", seeder.name)
                break
            rolled_back.append(seeder.name)
        return rolled_back

    # PUBLIC_INTERFACE
    async def status(self) -> List[SeederStatus]:
        """Every registered seeder with its execution record, in run order."""
        await self.ensure_table()
        records = {row["name"]: row for row in await self.executed()}
        statuses = []
        for seeder in sorted(self.seeders, key=lambda s: s.order):
            record = records.get(seeder.name)
            statuses.append(
                SeederStatus(
                    name=seeder.name,
                    order=seeder.order,
                    executed=record is not None,
                    batch=record["batch"] if record else None,
                    executed_at=str(record["executed_at"]) if record else None,
                )
            )
        return statuses


class DemoOrganizationSeeder(Seeder):
    name = "DemoOrganizationSeeder"
    order = 1
    description = "Demo organization used by the admin seeder"

    async def run(self, uow: UnitOfWork) -> None:
        organizations = uow.get_repository(TableNames.ORGANIZATION)
        if await organizations.find_by_uid(DEMO_ORG_ID) is not None:
            return
        await organizations.create(
            Organization(
                Uid=DEMO_ORG_ID,
                OrgId=DEMO_ORG_ID,
                Name="Acme Fitness",
                Email=DEMO_ADMIN_EMAIL,
                Owner=DEMO_ADMIN_EMAIL,
                IsActive=True,
                IsDeleted=False,
                CreatedOn=utc_now(),
                CreatedBy=SYSTEM_USER_ID,
            )
        )

    async def rollback(self, uow: UnitOfWork) -> None:
        await uow.get_repository(TableNames.ORGANIZATION).hard_delete(DEMO_ORG_ID)


class AdminUserSeeder(Seeder):
    name = "AdminUserSeeder"
    order = 2
    description = "Admin login for the demo organization"

    @staticmethod
    def _users(uow: UnitOfWork) -> UserService:
        return UserService(uow, RequestContext.anonymous(tenant_id=DEMO_ORG_ID))

    async def run(self, uow: UnitOfWork) -> None:
        users = self._users(uow)
        if await users.get_by_email(DEMO_ADMIN_EMAIL) is not None:
            return
        await users.create_async(
            UserCreate(Email=DEMO_ADMIN_EMAIL, Password=DEMO_ADMIN_PASSWORD, Role=UserRole.ADMIN)
        )

    async def rollback(self, uow: UnitOfWork) -> None:
        user = await self._users(uow).get_by_email(DEMO_ADMIN_EMAIL)
        if user is not None:
            await uow.get_repository(TableNames.USER).hard_delete(user.Uid, DEMO_ORG_ID)


# PUBLIC_INTERFACE
def default_seeders() -> List[Seeder]:
    return [DemoOrganizationSeeder(), AdminUserSeeder()]


def _print_result(result: SeederRunResult) -> None:
    print(f"Batch {result.batch}")
    for name in result.success:
        print(f"  ran      {name}")
    for name in result.skipped:
        print(f"  skipped  {name}")
    for failure in result.failed:
        print(f"  FAILED   {failure.name}: {failure.error}")


async def _main(args: argparse.Namespace) -> int:
    engine = create_engine_from_settings()
    manager = SeederManager(engine, default_seeders())
    try:
        if args.status:
            for s in await manager.status():
                state = f"batch {s.batch} at {s.executed_at}" if s.executed else "pending"
                print(f"{s.order:>3}  {s.name:<30} {state}")
            return 0
        if args.rollback:
            names = await manager.rollback()
            print("Rolled back: " + (", ".join(names) if names else "nothing"))
            return 0
        if args.name:
            try:
                ok = await manager.run_seeder(args.name, force=args.force)
            except ValueError as exc:
                print(str(exc))
                return 1
            print(f"{args.name}: {'completed' if ok else 'not run'}")
            return 0 if ok else 1

        result = await manager.run()
        _print_result(result)
        return 1 if result.failed else 0
    finally:
        await engine.dispose()


# PUBLIC_INTERFACE
def main(argv: Optional[List[str]] = None) -> None:
    """Entrypoint for the seeding CLI."""
    parser = argparse.ArgumentParser(prog="recruitment_api.db.seed", description="Run database seeders.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="List seeders and whether they ran")
    group.add_argument("--rollback", action="store_true", help="Undo the most recent batch")
    group.add_argument("--name", help="Run a single seeder by name")
    parser.add_argument("--force", action="store_true", help="With --name, re-run even if already executed")
    args = parser.parse_args(argv)

    configure_logging(logging.INFO)
    sys.exit(asyncio.run(_main(args)))


if __name__ == "__main__":
    main()
