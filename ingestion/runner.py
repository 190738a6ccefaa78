"""
Achievement sync runner - reconciles Steam's view of the account against the event store.

This module provides:
- Ranking of owned games by playtime with a per-run ceiling
- Per-game failure isolation (one failing game never aborts the run)
- Exactly-once unlock detection through the store's idempotent insert
- Bounded samples of failures and new events for the caller
"""

from typing import Callable, List, Optional
from datetime import datetime, timezone

from ingestion.extractors.steam_client import SteamClient
from ingestion.loaders.achievement_store import AchievementStore
from schemas.steam import OwnedGame
from schemas.sync import AchievementEventCreate, AppInsertedCount, SyncRunSummary
from core.config import settings
from core.exceptions import ConfigurationError, SyncException
from models.base import utcnow
import logging

logger = logging.getLogger(__name__)

FAILED_APP_IDS_SAMPLE_SIZE = 20
PER_APP_INSERTED_SAMPLE_SIZE = 10


def rank_games(games: List[OwnedGame], max_games: int) -> List[OwnedGame]:
    """Sort by playtime descending and keep the first ``max_games`` (<= 0 keeps all)."""
    ranked = sorted(games, key=lambda g: g.playtime_forever, reverse=True)
    return ranked if max_games <= 0 else ranked[:max_games]


class AchievementSyncRunner:
    """
    Reconciler for the tracked account.

    Responsibilities:
    - Fetch owned games (a failure here aborts the run)
    - Upsert game metadata and achievement totals
    - Insert unlock events that are not stored yet
    - Count and sample per-game failures instead of raising
    """

    def __init__(
        self,
        client: SteamClient,
        store: AchievementStore,
        max_games: Optional[int] = None,
        max_new_events: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        self.client = client
        self.store = store
        self.max_games = settings.STEAM_MAX_GAMES if max_games is None else max_games
        self.max_new_events = (
            settings.MAX_NEW_EVENTS_RETURNED if max_new_events is None else max_new_events
        )
        self.clock = clock

    async def reconcile(self, steam_user_id: Optional[str]) -> SyncRunSummary:
        """
        Sync achievements for one account and store new unlock events.

        Args:
            steam_user_id: SteamID64 the events are recorded under

        Returns:
            SyncRunSummary with counters and bounded samples

        Raises:
            ConfigurationError: No account configured
            ProviderError: Owned games could not be listed
        """
        if not steam_user_id:
            raise ConfigurationError(
                "Missing STEAM_STEAMID64 in environment.",
                context={"setting": "STEAM_STEAMID64"}
            )

        # --------------------------------------------------
        # PHASE 1: OWNED GAMES (root dependency, not caught)
        # --------------------------------------------------
        games = await self.client.get_owned_games()
        selected = rank_games(games, self.max_games)

        summary = SyncRunSummary(
            max_games=self.max_games,
            effective_max_games=len(selected),
            games_considered=len(games),
        )

        logger.info(
            f"Syncing achievements for {len(selected)} of {len(games)} owned games "
            f"(max_games={self.max_games})"
        )

        # --------------------------------------------------
        # PHASE 2: PER-GAME RECONCILIATION
        # --------------------------------------------------
        for game in selected:
            summary.games_processed += 1
            try:
                inserted = await self._sync_game(steam_user_id, game, summary)
            except Exception as e:
                summary.api_failures += 1
                if len(summary.failed_app_ids_sample) < FAILED_APP_IDS_SAMPLE_SIZE:
                    summary.failed_app_ids_sample.append(game.appid)

                if isinstance(e, SyncException):
                    logger.warning(
                        f"Sync failed for app_id={game.appid}: {e.message}",
                        extra={"error_context": e.to_dict()}
                    )
                else:
                    logger.exception(f"Unexpected error syncing app_id={game.appid}")
                continue

            if inserted > 0 and len(summary.new_unlocks_inserted_per_app_sample) < PER_APP_INSERTED_SAMPLE_SIZE:
                summary.new_unlocks_inserted_per_app_sample.append(
                    AppInsertedCount(appid=game.appid, inserted=inserted)
                )

        logger.info(
            f"Sync complete: processed={summary.games_processed}, "
            f"failures={summary.api_failures}, new_unlocks={summary.new_unlocks_inserted}"
        )
        return summary

    async def _sync_game(
        self,
        steam_user_id: str,
        game: OwnedGame,
        summary: SyncRunSummary
    ) -> int:
        """Reconcile one game. Returns the number of events inserted for it."""
        await self.store.upsert_game(
            app_id=game.appid,
            name=game.name,
            playtime_forever=game.playtime_forever,
        )

        stats = await self.client.get_player_achievements(game.appid)
        await self.store.upsert_game_achievement_total(
            app_id=game.appid,
            total_achievements=len(stats.achievements),
        )

        inserted_for_game = 0
        for achievement in stats.achievements:
            if not achievement.unlocked:
                continue

            event = AchievementEventCreate(
                steam_user_id=steam_user_id,
                app_id=game.appid,
                achievement_key=achievement.apiname,
                # Steam's schema endpoint would give display names; the API name is used for now
                achievement_name=achievement.apiname,
                achieved_at=self._achieved_at(achievement.unlocktime),
            )

            if await self.store.insert_event_if_new(event):
                summary.new_unlocks_inserted += 1
                inserted_for_game += 1
                if len(summary.new_events_sample) < self.max_new_events:
                    summary.new_events_sample.append(event)

        return inserted_for_game

    def _achieved_at(self, unlocktime: Optional[int]) -> datetime:
        """Steam unlock time, or the processing time when Steam omits it."""
        if unlocktime:
            return datetime.fromtimestamp(unlocktime, tz=timezone.utc)
        return self.clock()
