"""
Sync pipeline components for Steam achievement tracking.

Modules:
    runner: Reconciler that turns Steam's achievement state into stored unlock events
    scheduler: APScheduler integration that runs sync-then-notify cycles

Subpackages:
    extractors: Steam Web API client
    loaders: Event store writes and webhook target registry

Architecture:
    Each cycle follows the same path:

    1. Extract - List owned games, then fetch achievements one game at a time
    2. Load - Upsert games/totals, insert unlock events idempotently
    3. Notify - POST each new event to every registered webhook target

    A failure for one game or one target is recorded and skipped; only a
    failure to list owned games aborts the cycle.

Usage:
    from ingestion.extractors.steam_client import SteamClient
    from ingestion.loaders.achievement_store import AchievementStore
    from ingestion.runner import AchievementSyncRunner

Example:
    runner = AchievementSyncRunner(SteamClient(), AchievementStore(session))
    summary = await runner.reconcile(settings.STEAM_STEAMID64)

    print(f"Inserted {summary.new_unlocks_inserted} new unlocks")
"""

__all__ = [
    "SteamClient",
    "AchievementStore",
    "WebhookTargetRegistry",
    "AchievementSyncRunner",
    "PollScheduler",
]
