from collections.abc import AsyncIterator

from dishka import provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from kdeploy.config import Config
from kdeploy.domain.deployment.port.repository import DeploymentRepository
from kdeploy.infrastructure.persistence.database import create_db_engine, create_session_factory
from kdeploy.infrastructure.persistence.repository.deployment import (
    SQLAlchemyDeploymentRepository,
)
from kdeploy.util.di.base import Provider, Scope


class PersistenceProvider(Provider):
    """One engine per process; one session, committed on success, per request."""

    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterator[AsyncEngine]:
        engine = create_db_engine(config.database)
        try:
            yield engine
        finally:
            await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    deployment_repo = provide(
        SQLAlchemyDeploymentRepository, scope=Scope.UOW, provides=DeploymentRepository
    )
