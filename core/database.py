"""
Async engine and session factory for the event store
"""

from typing import Any, Dict
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine, async_sessionmaker
from sqlalchemy.pool import NullPool
from core.config import settings
import logging

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine.

    PostgreSQL (asyncpg) in deployments; SQLite (aiosqlite) is accepted for
    local runs and needs the same-thread check disabled.
    """
    options: Dict[str, Any] = {"echo": False, "poolclass": NullPool}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    return create_async_engine(database_url, **options)


engine = build_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)


async def db_healthcheck(session: AsyncSession) -> bool:
    """SELECT 1 against the configured database."""
    result = await session.execute(text("SELECT 1 AS ok"))
    return result.scalar() == 1
