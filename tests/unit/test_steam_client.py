"""
Unit tests for the Steam Web API client
"""

import httpx
import pytest
from ingestion.extractors.steam_client import SteamClient
from core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    MalformedResponseError,
    NetworkError,
    ProviderError,
    RateLimitError,
)


def client_for(handler, **kwargs) -> SteamClient:
    options = dict(
        api_key="test-key",
        steam_id="76561198000000001",
        base_url="https://steam.test",
        max_retries=0,
        retry_delay=0,
    )
    options.update(kwargs)
    return SteamClient(transport=httpx.MockTransport(handler), **options)


class TestOwnedGames:
    """GetOwnedGames parsing"""

    @pytest.mark.asyncio
    async def test_get_owned_games_success(self, fake_steam_api, steam_client_factory, mock_owned_games):
        api = fake_steam_api(mock_owned_games)
        client = steam_client_factory(api)

        games = await client.get_owned_games()

        assert [g.appid for g in games] == [440, 620, 730]
        assert games[0].name == "Team Fortress 2"
        assert games[0].playtime_forever == 5120
        # Missing playtime defaults to zero
        assert games[2].playtime_forever == 0

    @pytest.mark.asyncio
    async def test_get_owned_games_sends_credentials(self, fake_steam_api, steam_client_factory):
        api = fake_steam_api([])
        client = steam_client_factory(api)

        await client.get_owned_games()

        params = api.requests[0].url.params
        assert params["key"] == "test-key"
        assert params["steamid"] == "76561198000000001"
        assert params["include_appinfo"] == "1"
        assert params["include_played_free_games"] == "1"

    @pytest.mark.asyncio
    async def test_get_owned_games_empty_response(self):
        client = client_for(lambda request: httpx.Response(200, json={"response": {}}))

        games = await client.get_owned_games()

        assert games == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"response": [1]},
        {"response": "x"},
        {"response": {"games": 5}},
        {"response": {"games": [{"name": "no appid"}]}},
        [1, 2, 3],
    ])
    async def test_get_owned_games_malformed_shapes(self, body):
        client = client_for(lambda request: httpx.Response(200, json=body))

        with pytest.raises(MalformedResponseError):
            await client.get_owned_games()

    @pytest.mark.asyncio
    async def test_get_owned_games_invalid_json(self):
        client = client_for(lambda request: httpx.Response(200, text="<html>oops</html>"))

        with pytest.raises(MalformedResponseError):
            await client.get_owned_games()


class TestPlayerAchievements:
    """GetPlayerAchievements parsing and error mapping"""

    @pytest.mark.asyncio
    async def test_get_player_achievements_success(self, fake_steam_api, steam_client_factory):
        api = fake_steam_api(
            [],
            achievements={
                440: [
                    {"apiname": "FIRST_WIN", "achieved": 1, "unlocktime": 1700000000},
                    {"apiname": "TEN_WINS", "achieved": 0, "unlocktime": 0},
                ]
            },
        )
        client = steam_client_factory(api)

        result = await client.get_player_achievements(440)

        assert result.steam_id == "76561198000000001"
        assert result.game_name == "Game 440"
        assert len(result.achievements) == 2
        assert result.achievements[0].unlocked is True
        assert result.achievements[1].unlocked is False
        assert api.requests[0].url.params["appid"] == "440"

    @pytest.mark.asyncio
    async def test_playerstats_error_raises_provider_error(self):
        client = client_for(
            lambda request: httpx.Response(
                200, json={"playerstats": {"error": "Requested app has no stats", "success": False}}
            )
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.get_player_achievements(10)

        assert "Requested app has no stats" in exc_info.value.message
        assert exc_info.value.context["app_id"] == 10

    @pytest.mark.asyncio
    async def test_missing_playerstats_raises_malformed(self):
        client = client_for(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(MalformedResponseError):
            await client.get_player_achievements(10)

    @pytest.mark.asyncio
    async def test_no_achievements_key_means_empty_list(self):
        client = client_for(
            lambda request: httpx.Response(200, json={"playerstats": {"steamID": "1", "gameName": "X"}})
        )

        result = await client.get_player_achievements(10)

        assert result.achievements == []

    @pytest.mark.asyncio
    async def test_bad_request_raises_provider_error(self):
        client = client_for(lambda request: httpx.Response(400, text="Bad Request"))

        with pytest.raises(ProviderError) as exc_info:
            await client.get_player_achievements(10)

        assert exc_info.value.context["status_code"] == 400


class TestErrorHandling:
    """Retry behaviour and exception mapping"""

    @pytest.mark.asyncio
    async def test_forbidden_raises_authentication_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(403)

        client = client_for(handler, max_retries=2)

        with pytest.raises(AuthenticationError):
            await client.get_owned_games()

        # Non-retryable: exactly one attempt
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_retried_then_succeeds(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"response": {"games": [{"appid": 1}]}})

        client = client_for(handler, max_retries=2)

        games = await client.get_owned_games()

        assert len(calls) == 3
        assert [g.appid for g in games] == [1]

    @pytest.mark.asyncio
    async def test_server_error_after_retries_raises_network_error(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        client = client_for(handler, max_retries=1)

        with pytest.raises(NetworkError) as exc_info:
            await client.get_owned_games()

        assert len(calls) == 2
        assert exc_info.value.context["status_code"] == 500

    @pytest.mark.asyncio
    async def test_rate_limit_raises_rate_limit_error(self):
        client = client_for(lambda request: httpx.Response(429, headers={"Retry-After": "0"}))

        with pytest.raises(RateLimitError):
            await client.get_player_achievements(10)

    @pytest.mark.asyncio
    async def test_connection_error_raises_network_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = client_for(handler)

        with pytest.raises(NetworkError) as exc_info:
            await client.get_owned_games()

        assert isinstance(exc_info.value.original_exception, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_missing_api_key_raises_configuration_error(self):
        client = client_for(lambda request: httpx.Response(200, json={}), api_key="")

        with pytest.raises(ConfigurationError):
            await client.get_owned_games()

    @pytest.mark.asyncio
    async def test_missing_steam_id_raises_configuration_error(self):
        client = client_for(lambda request: httpx.Response(200, json={}), steam_id="")

        with pytest.raises(ConfigurationError):
            await client.get_player_achievements(440)
