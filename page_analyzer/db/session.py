"""Engine and session-factory builders; the pool is created once per process."""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from page_analyzer.config import AnalyzerConfig
from page_analyzer.db.models import Base
from page_analyzer.logger import get_logger

log = get_logger("db")


def create_engine(config: AnalyzerConfig) -> AsyncEngine:
    kwargs: dict[str, Any] = {"echo": config.echo_sql, "pool_pre_ping": True}
    if not config.is_sqlite:
        # SQLite picks its own pool class, which rejects sizing arguments
        kwargs.update(pool_size=config.pool_size, pool_timeout=config.pool_timeout)
    engine = create_async_engine(config.database_url, **kwargs)
    log.debug("Engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # rows are handed out after commit, so attributes must stay loaded
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_schema(engine: AsyncEngine) -> None:
    """Create ``urls`` and ``checks`` if missing (development and tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("Schema ready")
