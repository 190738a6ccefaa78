"""
FastAPI dependencies shared by the routers
"""

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import async_session_maker
from ingestion.extractors.steam_client import SteamClient
from ingestion.scheduler import PollScheduler


async def get_db() -> AsyncSession:
    async with async_session_maker() as session:
        yield session


def get_steam_client() -> SteamClient:
    return SteamClient()


def get_poll_scheduler(request: Request) -> PollScheduler:
    return request.app.state.poll_scheduler
