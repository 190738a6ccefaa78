"""
Create the event store tables (games, totals, achievement events, webhook targets).

Deployments should prefer `alembic upgrade head`; this is for local setups.
"""

import asyncio
import logging
import sys
import os

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import engine
from core.logging import setup_logging
from models.base import Base
# Import all models to ensure they are registered
from models.achievement_event import AchievementEvent
from models.game import Game, GameAchievementTotal
from models.webhook_target import WebhookTarget

logger = logging.getLogger(__name__)


async def init_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
    await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database())
