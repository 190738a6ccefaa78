"""
Pydantic schemas for sync results, unlock events and webhook delivery.

All models serialize with camelCase aliases, which is the shape the HTTP
endpoints and webhook receivers see.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


class AchievementEventCreate(BaseModel):
    """A newly observed unlock, as passed to the store and to the notifier"""
    steam_user_id: str = Field(..., alias="steamUserId", min_length=1)
    app_id: int = Field(..., alias="appId")
    achievement_key: str = Field(..., alias="achievementKey", min_length=1)
    achievement_name: Optional[str] = Field(None, alias="achievementName")
    achieved_at: datetime = Field(..., alias="achievedAt")

    class Config:
        populate_by_name = True


class WebhookPayload(BaseModel):
    """JSON body POSTed to every registered webhook target"""
    type: Literal["achievement_unlocked"] = "achievement_unlocked"
    steam_user_id: str = Field(..., alias="steamUserId")
    app_id: int = Field(..., alias="appId")
    achievement_key: str = Field(..., alias="achievementKey")
    achievement_name: Optional[str] = Field(None, alias="achievementName")
    achieved_at: datetime = Field(..., alias="achievedAt")

    @classmethod
    def from_event(cls, event: AchievementEventCreate) -> "WebhookPayload":
        return cls(
            steam_user_id=event.steam_user_id,
            app_id=event.app_id,
            achievement_key=event.achievement_key,
            achievement_name=event.achievement_name,
            achieved_at=event.achieved_at,
        )

    class Config:
        populate_by_name = True


class DeliveryResult(BaseModel):
    """
    Outcome of one delivery attempt to one target.

    ok=True means an HTTP response was received, whatever its status code.
    ok=False means the request never completed; ``error`` describes why.
    """
    ok: bool
    target_id: Optional[int] = Field(None, alias="targetId")
    url: Optional[str] = None
    status_code: Optional[int] = Field(None, alias="status")
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class AppInsertedCount(BaseModel):
    appid: int
    inserted: int


class SyncRunSummary(BaseModel):
    """Statistics for one reconcile run. Never persisted."""
    max_games: int = Field(..., alias="maxGames")
    effective_max_games: int = Field(0, alias="effectiveMaxGames")
    games_considered: int = Field(0, alias="gamesConsidered")
    games_processed: int = Field(0, alias="gamesProcessed")
    api_failures: int = Field(0, alias="apiFailures")
    failed_app_ids_sample: List[int] = Field(default_factory=list, alias="failedAppIdsSample")
    new_unlocks_inserted: int = Field(0, alias="newUnlocksInserted")
    new_unlocks_inserted_per_app_sample: List[AppInsertedCount] = Field(
        default_factory=list, alias="newUnlocksInsertedPerAppSample"
    )
    new_events_sample: List[AchievementEventCreate] = Field(default_factory=list, alias="newEventsSample")

    class Config:
        populate_by_name = True


class EventDeliveries(BaseModel):
    """Delivery results for one event across all targets"""
    app_id: int = Field(..., alias="appId")
    achievement_key: str = Field(..., alias="achievementKey")
    deliveries: List[DeliveryResult] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class PollResult(BaseModel):
    """One reconcile-then-notify cycle"""
    summary: SyncRunSummary
    webhooks_sent_for_events: int = Field(0, alias="webhooksSentForEvents")
    deliveries: List[EventDeliveries] = Field(default_factory=list)

    class Config:
        populate_by_name = True
