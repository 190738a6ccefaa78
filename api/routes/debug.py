"""
Debug endpoints, registered only when ENABLE_DEBUG_ROUTES=true
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db, get_poll_scheduler, get_steam_client
from api.routes.steam import build_owned_games_summary
from ingestion.extractors.steam_client import SteamClient
from ingestion.loaders.achievement_store import AchievementStore
from ingestion.loaders.webhook_targets import WebhookTargetRegistry
from ingestion.runner import AchievementSyncRunner
from ingestion.scheduler import PollScheduler
from core.config import settings
from models.base import utcnow
from notifications.webhook_sender import WebhookNotifier
from schemas.api import (
    OwnedGamesSummary,
    PlayerAchievementsDebugResponse,
    PollOnceResponse,
    SeedResponse,
    SyncResponse,
)
from schemas.sync import AchievementEventCreate
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/debug", tags=["Debug"])

DELIVERIES_SAMPLE_SIZE = 10
UNLOCKED_SAMPLE_SIZE = 5


@router.post("/receiver")
async def webhook_receiver(request: Request, body: Optional[Dict[str, Any]] = Body(None)):
    """Local webhook receiver for testing deliveries."""
    logger.info(f"[{getattr(request.state, 'request_id', '-')}] Webhook received: {body}")
    return {"ok": True}


@router.post("/steam/sync", response_model=SyncResponse)
async def manual_sync(
    db: AsyncSession = Depends(get_db),
    client: SteamClient = Depends(get_steam_client)
):
    """Manual sync only (stores new unlocks, sends no webhooks)."""
    runner = AchievementSyncRunner(client=client, store=AchievementStore(db))
    summary = await runner.reconcile(settings.STEAM_STEAMID64)
    return SyncResponse(summary=summary)


@router.post("/steam/poll-once", response_model=PollOnceResponse)
async def poll_once(
    db: AsyncSession = Depends(get_db),
    poll_scheduler: PollScheduler = Depends(get_poll_scheduler)
):
    """Sync, then send webhooks only for newly inserted achievements."""
    result = await poll_scheduler.poll_once(db)
    return PollOnceResponse(
        summary=result.summary,
        webhooks_sent_for_events=result.webhooks_sent_for_events,
        deliveries_sample=result.deliveries[:DELIVERIES_SAMPLE_SIZE],
    )


@router.get("/steam/achievements", response_model=PlayerAchievementsDebugResponse)
async def player_achievements(
    app_id: Optional[str] = Query(None, alias="appId"),
    client: SteamClient = Depends(get_steam_client)
):
    """Fetch and summarize the account's achievements for one game."""
    try:
        parsed_app_id = int(app_id)
    except (TypeError, ValueError):
        return JSONResponse(status_code=400, content={"ok": False, "error": "Use ?appId=NUMBER."})

    result = await client.get_player_achievements(parsed_app_id)
    unlocked = [a for a in result.achievements if a.unlocked]

    return PlayerAchievementsDebugResponse(
        steam_id=result.steam_id,
        game_name=result.game_name,
        total_achievements=len(result.achievements),
        unlocked_count=len(unlocked),
        sample_unlocked=unlocked[:UNLOCKED_SAMPLE_SIZE],
    )


@router.get("/steam/owned-games", response_model=OwnedGamesSummary)
async def owned_games_alias(client: SteamClient = Depends(get_steam_client)):
    return await build_owned_games_summary(client)


@router.post("/seed", response_model=SeedResponse)
async def seed_event(
    db: AsyncSession = Depends(get_db),
    poll_scheduler: PollScheduler = Depends(get_poll_scheduler)
):
    """Store a fixed demo unlock and deliver it if it was new."""
    event = AchievementEventCreate(
        steam_user_id="demo-user",
        app_id=440,
        achievement_key="FIRST_WIN",
        achievement_name="First Win",
        achieved_at=utcnow(),
    )

    inserted = await AchievementStore(db).insert_event_if_new(event)
    if not inserted:
        return SeedResponse(inserted=False)

    notifier = WebhookNotifier(
        WebhookTargetRegistry(db), transport=poll_scheduler.webhook_transport
    )
    deliveries = await notifier.deliver_all(event)
    return SeedResponse(inserted=True, deliveries=deliveries)
