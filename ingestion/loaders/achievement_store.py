"""
Persist games, achievement totals and unlock events with idempotent writes
"""

from typing import Any, Callable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects import postgresql, sqlite
from models.achievement_event import AchievementEvent
from models.game import Game, GameAchievementTotal
from models.base import utcnow
from schemas.sync import AchievementEventCreate
from core.exceptions import StoreError
import logging

logger = logging.getLogger(__name__)


def dialect_insert(db: AsyncSession, table: Any):
    """INSERT for the session's dialect, with ON CONFLICT support."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)


class AchievementStore:
    """
    Write side of the event store.

    Ensures:
    - At most one achievement_events row per (steam_user_id, app_id, achievement_key)
    - Games and totals are last-writer-wins upserts
    - Every operation is a single statement committed on its own
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def _execute(
        self,
        stmt,
        operation: str,
        table_name: str,
        fetch: Optional[Callable[[Any], Any]] = None
    ):
        try:
            result = await self.db.execute(stmt)
            value = fetch(result) if fetch else None
            await self.db.commit()
            return value
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                f"{operation} on {table_name} failed",
                context={"operation": operation, "table_name": table_name},
                original_exception=e
            )

    async def upsert_game(self, app_id: int, name: Optional[str], playtime_forever: int) -> None:
        """Upsert basic game metadata derived from the OwnedGames endpoint."""
        stmt = dialect_insert(self.db, Game).values(
            app_id=app_id,
            name=name,
            playtime_forever=playtime_forever,
            updated_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["app_id"],
            set_={
                "name": stmt.excluded.name,
                "playtime_forever": stmt.excluded.playtime_forever,
                "updated_at": stmt.excluded.updated_at,
            }
        )
        await self._execute(stmt, "UPSERT", "games")

    async def upsert_game_achievement_total(self, app_id: int, total_achievements: int) -> None:
        """Upsert the number of achievements Steam defines for a game."""
        stmt = dialect_insert(self.db, GameAchievementTotal).values(
            app_id=app_id,
            total_achievements=total_achievements,
            updated_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["app_id"],
            set_={
                "total_achievements": stmt.excluded.total_achievements,
                "updated_at": stmt.excluded.updated_at,
            }
        )
        await self._execute(stmt, "UPSERT", "game_achievement_totals")

    async def insert_event_if_new(self, event: AchievementEventCreate) -> bool:
        """
        Insert an unlock event unless the same unlock is already stored.

        INSERT ... ON CONFLICT DO NOTHING RETURNING id, so the existence check
        and the write are one atomic statement.

        Returns:
            True only when a new row was inserted
        """
        stmt = (
            dialect_insert(self.db, AchievementEvent)
            .values(
                steam_user_id=event.steam_user_id,
                app_id=event.app_id,
                achievement_key=event.achievement_key,
                achievement_name=event.achievement_name,
                achieved_at=event.achieved_at,
                created_at=utcnow(),
            )
            .on_conflict_do_nothing(
                index_elements=["steam_user_id", "app_id", "achievement_key"]
            )
            .returning(AchievementEvent.id)
        )
        inserted_id = await self._execute(
            stmt, "INSERT", "achievement_events",
            fetch=lambda result: result.scalar_one_or_none()
        )
        inserted = inserted_id is not None

        if inserted:
            logger.debug(
                f"New unlock stored: app_id={event.app_id} key={event.achievement_key}"
            )
        return inserted
