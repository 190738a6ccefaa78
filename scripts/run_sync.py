"""
Script to run one poll cycle (sync + webhooks) for the configured account
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.database import async_session_maker, engine
from core.logging import setup_logging
from ingestion.scheduler import PollScheduler

logger = logging.getLogger(__name__)


async def run_sync() -> int:
    """Run a single cycle. Returns the process exit code."""
    poll_scheduler = PollScheduler()

    try:
        async with async_session_maker() as session:
            result = await poll_scheduler.poll_once(session)
    except Exception as e:
        logger.error(f"Poll cycle failed: {str(e)}")
        return 1
    finally:
        await engine.dispose()

    summary = result.summary
    logger.info(
        f"Poll cycle complete: considered={summary.games_considered}, "
        f"processed={summary.games_processed}, failures={summary.api_failures}, "
        f"new_unlocks={summary.new_unlocks_inserted}, "
        f"webhooks_sent={result.webhooks_sent_for_events}"
    )
    if summary.failed_app_ids_sample:
        logger.warning(f"Failed app ids (sample): {summary.failed_app_ids_sample}")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(run_sync()))
