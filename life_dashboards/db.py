from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine

from life_dashboards.settings import get_settings

logger = logging.getLogger(__name__)


def _normalize_database_url(database_url: str) -> str:
    url = str(database_url or "").strip()
    if url.startswith("sqlite://"):
        url = "sqlite+aiosqlite://" + url[len("sqlite://") :]
    elif url.startswith("sqlite+pysqlite://"):
        url = "sqlite+aiosqlite://" + url[len("sqlite+pysqlite://") :]
    return url


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        settings = get_settings()
        db_url = _normalize_database_url(settings.database_url)
        logger.debug("Creating database engine for %s", db_url.split("://", 1)[0])
        _engine = create_async_engine(db_url, future=True)
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
