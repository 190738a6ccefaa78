"""
SQLAlchemy ORM models for database tables.

Models:
    base: Base declarative class and the UTC timestamp default
    game: Owned games and per-game achievement totals
    achievement_event: Append-only achievement unlock events
    webhook_target: Registered webhook delivery targets

Usage:
    from models.base import Base
    from models.achievement_event import AchievementEvent
    from models.game import Game, GameAchievementTotal
    from models.webhook_target import WebhookTarget

Constraints:
    - achievement_events is unique on (steam_user_id, app_id, achievement_key)
    - games and game_achievement_totals are keyed by app_id and upserted
    - webhook_targets.url is unique
"""

__all__ = [
    "Base",
    "Game",
    "GameAchievementTotal",
    "AchievementEvent",
    "WebhookTarget",
]
