import logging
from pathlib import Path
from typing import Any

from sqlalchemy import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from kdeploy.config import DatabaseConfig
from kdeploy.infrastructure.persistence.tables import metadata

logger = logging.getLogger(__name__)


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _resolve_sqlite_file(url: URL) -> URL:
    """Expand ``~`` in a SQLite file path and create its directory."""
    if url.get_backend_name() != "sqlite" or _is_memory_sqlite(url):
        return url

    path = Path(url.database).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return url.set(database=str(path))


def create_db_engine(config: DatabaseConfig) -> AsyncEngine:
    url = _resolve_sqlite_file(make_url(config.url))

    engine_kwargs: dict[str, Any] = {"echo": config.echo}
    if _is_memory_sqlite(url):
        # Every session must see the same in-memory database
        engine_kwargs["poolclass"] = StaticPool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    elif url.get_backend_name() != "sqlite":
        engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables are left untouched."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Database schema ready: %s", ", ".join(sorted(metadata.tables)))
