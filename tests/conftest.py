"""
Pytest configuration and fixtures
"""

import os

# Settings are read at import time; configure them before any project import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENABLE_POLLER", "false")
os.environ.setdefault("ENABLE_DEBUG_ROUTES", "false")
os.environ.setdefault("STEAM_API_KEY", "test-key")
os.environ.setdefault("STEAM_STEAMID64", "76561198000000001")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator, Dict, List, Iterable
from models.base import Base
# Import all models so create_all sees their tables
from models.achievement_event import AchievementEvent
from models.game import Game, GameAchievementTotal
from models.webhook_target import WebhookTarget
from ingestion.extractors.steam_client import SteamClient

STEAM_ID = "76561198000000001"
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """In-memory SQLite engine shared by every session of one test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with session_factory() as session:
        yield session
        await session.rollback()


# ============================================================================
# Fake Steam Web API
# ============================================================================

class FakeSteamAPI:
    """
    httpx handler emulating the two Steam endpoints.

    Attributes are mutable so a test can change what Steam reports between syncs.
    """

    def __init__(
        self,
        owned_games: List[dict],
        achievements: Dict[int, List[dict]] = None,
        failing_app_ids: Iterable[int] = (),
    ):
        self.owned_games = owned_games
        self.achievements = achievements or {}
        self.failing_app_ids = set(failing_app_ids)
        self.owned_games_status = 200
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/GetOwnedGames/v0001/"):
            if self.owned_games_status != 200:
                return httpx.Response(self.owned_games_status, text="unavailable")
            return httpx.Response(
                200,
                json={"response": {"game_count": len(self.owned_games), "games": self.owned_games}},
            )

        if path.endswith("/GetPlayerAchievements/v0001/"):
            app_id = int(request.url.params["appid"])
            if app_id in self.failing_app_ids:
                return httpx.Response(500, text="Internal Server Error")
            return httpx.Response(
                200,
                json={
                    "playerstats": {
                        "steamID": STEAM_ID,
                        "gameName": f"Game {app_id}",
                        "achievements": self.achievements.get(app_id, []),
                        "success": True,
                    }
                },
            )

        return httpx.Response(404)

    def achievement_requests(self) -> List[int]:
        return [
            int(r.url.params["appid"])
            for r in self.requests
            if r.url.path.endswith("/GetPlayerAchievements/v0001/")
        ]


def make_steam_client(api: FakeSteamAPI, **kwargs) -> SteamClient:
    options = dict(
        api_key="test-key",
        steam_id=STEAM_ID,
        base_url="https://steam.test",
        max_retries=0,
        retry_delay=0,
    )
    options.update(kwargs)
    return SteamClient(transport=httpx.MockTransport(api), **options)


@pytest.fixture
def steam_id():
    return STEAM_ID


# ============================================================================
# Fake webhook receivers
# ============================================================================

class FakeWebhookReceivers:
    """
    httpx handler for webhook targets.

    - ok.example answers 200
    - reject.example answers 410
    - down.example refuses the connection
    """

    def __init__(self):
        self.received: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "down.example":
            raise httpx.ConnectError("Connection refused", request=request)
        self.received.append(request)
        if host == "reject.example":
            return httpx.Response(410)
        return httpx.Response(200, json={"ok": True})


@pytest.fixture
def webhook_receivers():
    return FakeWebhookReceivers()


@pytest.fixture
def webhook_transport(webhook_receivers):
    return httpx.MockTransport(webhook_receivers)


@pytest.fixture
def mock_owned_games():
    """Mock OwnedGames entries"""
    return [
        {"appid": 440, "name": "Team Fortress 2", "playtime_forever": 5120},
        {"appid": 620, "name": "Portal 2", "playtime_forever": 900},
        {"appid": 730, "name": "Counter-Strike 2"},
    ]


@pytest.fixture
def fake_steam_api():
    """Factory for FakeSteamAPI handlers"""
    return FakeSteamAPI


@pytest.fixture
def steam_client_factory():
    """Factory building a SteamClient wired to a FakeSteamAPI"""
    return make_steam_client
