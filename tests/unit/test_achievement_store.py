"""
Unit tests for the event store and webhook target registry
"""

import pytest
from datetime import datetime, timezone
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from ingestion.loaders.achievement_store import AchievementStore
from ingestion.loaders.webhook_targets import WebhookTargetRegistry
from models.achievement_event import AchievementEvent
from models.game import Game, GameAchievementTotal
from schemas.sync import AchievementEventCreate
from core.exceptions import StoreError


def make_event(key: str = "FIRST_WIN", app_id: int = 440, user: str = "76561198000000001"):
    return AchievementEventCreate(
        steam_user_id=user,
        app_id=app_id,
        achievement_key=key,
        achievement_name=key,
        achieved_at=datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc),
    )


async def count_events(db_session) -> int:
    result = await db_session.execute(select(func.count()).select_from(AchievementEvent))
    return result.scalar_one()


class TestInsertEventIfNew:
    """Idempotent unlock insert"""

    @pytest.mark.asyncio
    async def test_first_insert_returns_true(self, db_session):
        store = AchievementStore(db_session)

        inserted = await store.insert_event_if_new(make_event())

        assert inserted is True
        assert await count_events(db_session) == 1

    @pytest.mark.asyncio
    async def test_duplicate_insert_returns_false(self, db_session):
        store = AchievementStore(db_session)

        first = await store.insert_event_if_new(make_event())
        second = await store.insert_event_if_new(make_event())

        assert first is True
        assert second is False
        assert await count_events(db_session) == 1

    @pytest.mark.asyncio
    async def test_duplicate_keeps_original_row(self, db_session):
        store = AchievementStore(db_session)
        await store.insert_event_if_new(make_event())

        later = make_event()
        later.achieved_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
        await store.insert_event_if_new(later)

        result = await db_session.execute(select(AchievementEvent))
        row = result.scalar_one()
        assert row.achieved_at.replace(tzinfo=None) == datetime(2023, 11, 14, 22, 13, 20)

    @pytest.mark.asyncio
    async def test_distinct_keys_are_independent(self, db_session):
        store = AchievementStore(db_session)

        results = [
            await store.insert_event_if_new(make_event("FIRST_WIN")),
            await store.insert_event_if_new(make_event("TEN_WINS")),
            await store.insert_event_if_new(make_event("FIRST_WIN", app_id=620)),
            await store.insert_event_if_new(make_event("FIRST_WIN", user="other-user")),
        ]

        assert results == [True, True, True, True]
        assert await count_events(db_session) == 4

    @pytest.mark.asyncio
    async def test_separate_sessions_insert_once(self, session_factory):
        async with session_factory() as first_session, session_factory() as second_session:
            first = await AchievementStore(first_session).insert_event_if_new(make_event())
            second = await AchievementStore(second_session).insert_event_if_new(make_event())

        assert sorted([first, second]) == [False, True]


class TestUpserts:
    """Game metadata and totals"""

    @pytest.mark.asyncio
    async def test_upsert_game_last_writer_wins(self, db_session):
        store = AchievementStore(db_session)

        await store.upsert_game(440, "Team Fortress 2", 100)
        await store.upsert_game(440, "Team Fortress 2 (renamed)", 250)

        result = await db_session.execute(select(Game))
        games = result.scalars().all()
        assert len(games) == 1
        assert games[0].name == "Team Fortress 2 (renamed)"
        assert games[0].playtime_forever == 250

    @pytest.mark.asyncio
    async def test_upsert_game_allows_missing_name(self, db_session):
        store = AchievementStore(db_session)

        await store.upsert_game(730, None, 0)

        result = await db_session.execute(select(Game).where(Game.app_id == 730))
        assert result.scalar_one().name is None

    @pytest.mark.asyncio
    async def test_upsert_achievement_total(self, db_session):
        store = AchievementStore(db_session)

        await store.upsert_game_achievement_total(440, 520)
        await store.upsert_game_achievement_total(440, 521)

        result = await db_session.execute(select(GameAchievementTotal))
        totals = result.scalars().all()
        assert len(totals) == 1
        assert totals[0].total_achievements == 521


class TestStoreErrors:
    """Database failures surface as StoreError"""

    @pytest.mark.asyncio
    async def test_missing_tables_raise_store_error(self):
        engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        try:
            async with AsyncSession(engine) as session:
                store = AchievementStore(session)

                with pytest.raises(StoreError) as exc_info:
                    await store.insert_event_if_new(make_event())

                assert exc_info.value.context["table_name"] == "achievement_events"

                with pytest.raises(StoreError):
                    await WebhookTargetRegistry(session).list_targets()
        finally:
            await engine.dispose()


class TestWebhookTargetRegistry:
    """Target registration and listing"""

    @pytest.mark.asyncio
    async def test_empty_registry(self, db_session):
        registry = WebhookTargetRegistry(db_session)

        assert await registry.list_targets() == []

    @pytest.mark.asyncio
    async def test_add_and_list_in_registration_order(self, db_session):
        registry = WebhookTargetRegistry(db_session)

        await registry.add_target("https://ok.example/hook")
        await registry.add_target("https://reject.example/hook")

        targets = await registry.list_targets()
        assert [t.url for t in targets] == [
            "https://ok.example/hook",
            "https://reject.example/hook",
        ]
        assert targets[0].id < targets[1].id

    @pytest.mark.asyncio
    async def test_duplicate_url_returns_existing(self, db_session):
        registry = WebhookTargetRegistry(db_session)

        first = await registry.add_target("https://ok.example/hook")
        second = await registry.add_target("https://ok.example/hook")

        assert first.id == second.id
        assert len(await registry.list_targets()) == 1

    @pytest.mark.asyncio
    async def test_same_url_from_separate_sessions(self, session_factory):
        async with session_factory() as first_session, session_factory() as second_session:
            first = await WebhookTargetRegistry(first_session).add_target("https://ok.example/hook")
            second = await WebhookTargetRegistry(second_session).add_target("https://ok.example/hook")

        assert first.id == second.id

        async with session_factory() as session:
            assert len(await WebhookTargetRegistry(session).list_targets()) == 1

    @pytest.mark.asyncio
    async def test_url_stored_verbatim(self, db_session):
        registry = WebhookTargetRegistry(db_session)

        target = await registry.add_target("http://a.example")

        assert target.url == "http://a.example"
