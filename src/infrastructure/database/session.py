"""Database session management."""

from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """Driver specific engine options for ``url``."""
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # An in-memory database lives only as long as its single connection
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        return options

    # Supavisor runs in transaction mode, which breaks asyncpg's prepared
    # statement cache
    connect_args: dict[str, Any] = {}
    if "pooler.supabase.com" in url:
        connect_args["statement_cache_size"] = 0
    return {"pool_pre_ping": True, "connect_args": connect_args}


engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_engine_options(settings.async_database_url),
)

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session for request-scoped database access."""
    async with async_session_factory() as session:
        yield session
