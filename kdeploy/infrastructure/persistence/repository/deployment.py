from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kdeploy.domain.auth.model.value import UserId
from kdeploy.domain.deployment.model.record import DeploymentRecord
from kdeploy.domain.deployment.model.value import DeploymentId
from kdeploy.domain.deployment.port.repository import DeploymentRepository
from kdeploy.infrastructure.persistence.mappers.deployment import record_to_dict, row_to_record
from kdeploy.infrastructure.persistence.tables import deployments_table


class SQLAlchemyDeploymentRepository(DeploymentRepository):
    """SQLAlchemy implementation of DeploymentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, id: DeploymentId) -> DeploymentRecord | None:
        stmt = select(deployments_table).where(deployments_table.c.id == str(id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_record(dict(row)) if row else None

    async def save(self, record: DeploymentRecord) -> None:
        values = record_to_dict(record)

        stmt = select(deployments_table.c.id).where(deployments_table.c.id == str(record.id))
        result = await self.session.execute(stmt)

        if result.first() is not None:
            stmt = (
                update(deployments_table)
                .where(deployments_table.c.id == str(record.id))
                .values(**values)
            )
        else:
            stmt = insert(deployments_table).values(**values)

        await self.session.execute(stmt)
        await self.session.flush()

    async def list_by_owner(self, owner_id: UserId) -> list[DeploymentRecord]:
        stmt = (
            select(deployments_table)
            .where(deployments_table.c.owner_id == str(owner_id))
            .order_by(deployments_table.c.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [row_to_record(dict(r)) for r in result.mappings().all()]
