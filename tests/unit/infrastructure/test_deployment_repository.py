"""Unit tests for SQLAlchemyDeploymentRepository against in-memory SQLite."""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from kdeploy.config import DatabaseConfig
from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    ensure_schema,
)
from kdeploy.infrastructure.persistence.repository.deployment import (
    SQLAlchemyDeploymentRepository,
)


def _make_record(id: str, owner: str = "alice", offset: int = 0) -> DeploymentRecord:
    at = datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=offset)
    return DeploymentRecord(
        id=DeploymentId(id),
        owner_id=UserId(owner),
        data="components: []\n",
        created_at=at,
        updated_at=at,
    )


@pytest_asyncio.fixture
async def session():
    engine = create_db_engine(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await ensure_schema(engine)
    async with create_session_factory(engine)() as session:
        yield session
    await engine.dispose()


class TestDeploymentRepository:
    @pytest.mark.asyncio
    async def test_save_and_get(self, session):
        repo = SQLAlchemyDeploymentRepository(session)
        record = _make_record("d-1")

        await repo.save(record)
        loaded = await repo.get(DeploymentId("d-1"))

        assert loaded == record
        assert loaded.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_missing(self, session):
        repo = SQLAlchemyDeploymentRepository(session)

        assert await repo.get(DeploymentId("nope")) is None

    @pytest.mark.asyncio
    async def test_save_updates_existing(self, session):
        repo = SQLAlchemyDeploymentRepository(session)
        record = _make_record("d-1")
        await repo.save(record)

        changed = record.model_copy(update={"data": "components: [x]\n"})
        await repo.save(changed)

        loaded = await repo.get(DeploymentId("d-1"))
        assert loaded.data == "components: [x]\n"

    @pytest.mark.asyncio
    async def test_list_by_owner_newest_first(self, session):
        repo = SQLAlchemyDeploymentRepository(session)
        await repo.save(_make_record("d-1", offset=0))
        await repo.save(_make_record("d-2", offset=5))
        await repo.save(_make_record("d-3", owner="bob"))

        records = await repo.list_by_owner(UserId("alice"))

        assert [str(r.id) for r in records] == ["d-2", "d-1"]
