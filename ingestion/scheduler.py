import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import settings
from core.database import async_session_maker
from ingestion.extractors.steam_client import SteamClient
from ingestion.loaders.achievement_store import AchievementStore
from ingestion.loaders.webhook_targets import WebhookTargetRegistry
from ingestion.runner import AchievementSyncRunner
from notifications.webhook_sender import WebhookNotifier
from schemas.sync import EventDeliveries, PollResult

logger = logging.getLogger(__name__)

JOB_ID = "steam_achievement_poll"


class PollScheduler:
    """
    Runs a sync-then-notify cycle at startup and every POLL_INTERVAL_SECONDS.

    A tick that fires while the previous cycle is still running is skipped
    (max_instances=1). A failed cycle is logged and the next tick runs as usual.
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        client_factory: Callable[[], SteamClient] = SteamClient,
        webhook_transport: Optional[httpx.AsyncBaseTransport] = None,
        interval_seconds: Optional[int] = None,
        steam_user_id: Optional[str] = None
    ):
        self.scheduler = AsyncIOScheduler()
        self.SessionLocal = session_factory or async_session_maker
        self.client_factory = client_factory
        self.webhook_transport = webhook_transport
        self.interval_seconds = interval_seconds or settings.POLL_INTERVAL_SECONDS
        self.steam_user_id = steam_user_id

    async def poll_once(self, session: AsyncSession) -> PollResult:
        """Sync once, then send webhooks only for newly inserted achievements."""
        runner = AchievementSyncRunner(
            client=self.client_factory(),
            store=AchievementStore(session),
        )
        summary = await runner.reconcile(self.steam_user_id or settings.STEAM_STEAMID64)

        notifier = WebhookNotifier(WebhookTargetRegistry(session), transport=self.webhook_transport)
        deliveries = []
        for event in summary.new_events_sample:
            results = await notifier.deliver_all(event)
            deliveries.append(EventDeliveries(
                app_id=event.app_id,
                achievement_key=event.achievement_key,
                deliveries=results,
            ))

        return PollResult(
            summary=summary,
            webhooks_sent_for_events=len(summary.new_events_sample),
            deliveries=deliveries,
        )

    async def run_cycle(self) -> Optional[PollResult]:
        """Job body: one poll cycle. Never raises."""
        try:
            async with self.SessionLocal() as session:
                result = await self.poll_once(session)
        except Exception:
            logger.exception("Poll cycle failed.")
            return None

        logger.info(
            f"Poll cycle complete. games_processed={result.summary.games_processed}, "
            f"new_unlocks_inserted={result.summary.new_unlocks_inserted}, "
            f"webhooks_sent={result.webhooks_sent_for_events}"
        )
        return result

    def start(self):
        """Start the scheduler; the first cycle runs immediately."""
        self.scheduler.add_job(
            self.run_cycle,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=JOB_ID,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self.scheduler.start()
        logger.info(
            f"Poller enabled: will sync + send webhooks for new achievements "
            f"every {self.interval_seconds} seconds"
        )

    async def stop(self):
        """Stop the scheduler. Returns once it no longer runs."""
        if not self.scheduler.running:
            return
        self.scheduler.shutdown(wait=False)
        # AsyncIOScheduler applies the shutdown on the next loop iteration
        await asyncio.sleep(0)
        logger.info("Poller stopped")
