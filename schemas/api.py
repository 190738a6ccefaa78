"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, Field, AnyUrl
from typing import Optional, List
from datetime import datetime
from schemas.steam import PlayerAchievement
from schemas.sync import DeliveryResult, EventDeliveries, SyncRunSummary


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthResponse(BaseModel):
    ok: bool


# ============================================================================
# Webhook Target Schemas
# ============================================================================

class WebhookTargetCreate(BaseModel):
    """Body of POST /webhooks; validates only, the URL is stored as sent"""
    url: AnyUrl


class WebhookTargetResponse(BaseModel):
    id: int
    url: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WebhookRegisteredResponse(BaseModel):
    ok: bool = True
    webhook: WebhookTargetResponse


class WebhookListResponse(BaseModel):
    ok: bool = True
    webhooks: List[WebhookTargetResponse] = Field(default_factory=list)


# ============================================================================
# Steam Schemas
# ============================================================================

class OwnedGameSample(BaseModel):
    appid: int
    name: Optional[str] = None
    playtime_forever: int = 0


class OwnedGamesSummary(BaseModel):
    """Owned games after ranking and the STEAM_MAX_GAMES ceiling"""
    ok: bool = True
    total_owned: int = Field(..., alias="totalOwned")
    returned: int
    sample: List[OwnedGameSample] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "ok": True,
                "totalOwned": 230,
                "returned": 50,
                "sample": [{"appid": 440, "name": "Team Fortress 2", "playtime_forever": 5120}]
            }
        }


# ============================================================================
# Debug Schemas
# ============================================================================

class SyncResponse(BaseModel):
    ok: bool = True
    summary: SyncRunSummary


class PollOnceResponse(BaseModel):
    ok: bool = True
    summary: SyncRunSummary
    webhooks_sent_for_events: int = Field(0, alias="webhooksSentForEvents")
    deliveries_sample: List[EventDeliveries] = Field(default_factory=list, alias="deliveriesSample")

    class Config:
        populate_by_name = True


class PlayerAchievementsDebugResponse(BaseModel):
    ok: bool = True
    steam_id: Optional[str] = Field(None, alias="steamID")
    game_name: Optional[str] = Field(None, alias="gameName")
    total_achievements: int = Field(0, alias="totalAchievements")
    unlocked_count: int = Field(0, alias="unlockedCount")
    sample_unlocked: List[PlayerAchievement] = Field(default_factory=list, alias="sampleUnlocked")

    class Config:
        populate_by_name = True


class SeedResponse(BaseModel):
    ok: bool = True
    inserted: bool
    deliveries: List[DeliveryResult] = Field(default_factory=list)


# ============================================================================
# Error Response Schema
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response"""
    ok: bool = False
    error: str
    detail: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "ok": False,
                "error": "Missing STEAM_STEAMID64 in environment.",
                "detail": "ConfigurationError"
            }
        }
