"""
Pydantic schemas for data validation and serialization.

Schemas:
    steam: Steam Web API response shapes (owned games, player achievements)
    sync: Unlock events, sync summaries, webhook payloads and delivery results
    api: HTTP request/response models

Serialization:
    Sync and API models expose camelCase aliases (``gamesProcessed``,
    ``newEventsSample``, ``achievedAt``...) and accept snake_case field
    names on construction.

Usage:
    from schemas.sync import AchievementEventCreate, SyncRunSummary
    from schemas.api import OwnedGamesSummary
"""

__all__ = [
    "OwnedGame",
    "PlayerAchievement",
    "PlayerAchievements",
    "AchievementEventCreate",
    "WebhookPayload",
    "DeliveryResult",
    "SyncRunSummary",
    "PollResult",
]
