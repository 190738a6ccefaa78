"""
Steam Web API client for owned games and per-game player achievements.

This module provides:
- Typed parsing of the two read-only endpoints the sync needs
- Retry with exponential backoff for transient failures (5xx, 429, transport)
- Mapping of every failure to a ProviderError subclass with context
"""

import httpx
import asyncio
from typing import List, Dict, Any, Optional
from pydantic import ValidationError as PydanticValidationError
from core.config import settings
from core.exceptions import (
    ConfigurationError,
    ProviderError,
    NetworkError,
    RateLimitError,
    AuthenticationError,
    MalformedResponseError,
    RetryableError
)
from schemas.steam import OwnedGame, PlayerAchievements
import logging

logger = logging.getLogger(__name__)

OWNED_GAMES_PATH = "/IPlayerService/GetOwnedGames/v0001/"
PLAYER_ACHIEVEMENTS_PATH = "/ISteamUserStats/GetPlayerAchievements/v0001/"


class SteamClient:
    """
    Minimal Steam Web API client for the configured account.

    Attributes:
        api_key: Steam Web API key
        steam_id: SteamID64 of the tracked account
        base_url: API root (default: https://api.steampowered.com)
        max_retries: Extra attempts for transient errors (default: 2)
        retry_delay: Initial backoff in seconds, doubled per attempt (default: 1.0)
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        steam_id: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.STEAM_API_KEY
        self.steam_id = steam_id if steam_id is not None else settings.STEAM_STEAMID64
        self.base_url = (base_url or settings.STEAM_API_BASE_URL).rstrip("/")
        self.max_retries = settings.STEAM_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = settings.STEAM_RETRY_DELAY if retry_delay is None else retry_delay
        self.transport = transport

    def _credentials(self) -> Dict[str, str]:
        if not self.api_key:
            raise ConfigurationError(
                "Missing STEAM_API_KEY in environment.",
                context={"setting": "STEAM_API_KEY"}
            )
        if not self.steam_id:
            raise ConfigurationError(
                "Missing STEAM_STEAMID64 in environment.",
                context={"setting": "STEAM_STEAMID64"}
            )
        return {"key": self.api_key, "steamid": self.steam_id}

    async def _get_json(
        self,
        path: str,
        params: Dict[str, Any],
        context: Dict[str, Any]
    ) -> Any:
        """
        GET ``path`` and decode the JSON body, retrying transient failures.

        Raises:
            AuthenticationError: HTTP 401/403
            RateLimitError: HTTP 429 after all retries
            NetworkError: HTTP 5xx or transport failure after all retries
            ProviderError: Any other non-2xx status
            MalformedResponseError: Body is not JSON
        """
        url = f"{self.base_url}{path}"
        attempts = self.max_retries + 1

        async with httpx.AsyncClient(transport=self.transport) as client:
            for attempt in range(attempts):
                try:
                    response = await self._request(client, url, params, context)
                except RetryableError as e:
                    if attempt >= attempts - 1:
                        raise
                    delay = self.retry_delay * (2 ** attempt)
                    if isinstance(e, RateLimitError) and e.retry_after:
                        delay = e.retry_after
                    logger.warning(
                        f"{e.message}. Retrying in {delay} seconds "
                        f"(attempt {attempt + 1}/{attempts})"
                    )
                    await asyncio.sleep(delay)
                    continue

                try:
                    return response.json()
                except ValueError as e:
                    raise MalformedResponseError(
                        "Failed to parse JSON response",
                        context={**context, "response_body": response.text[:500]},
                        original_exception=e
                    )

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Dict[str, Any],
        context: Dict[str, Any]
    ) -> httpx.Response:
        try:
            response = await client.get(url, params=params)
        except httpx.TransportError as e:
            raise NetworkError(
                "Steam API request failed",
                context=dict(context),
                original_exception=e
            )

        status = response.status_code
        if 200 <= status < 300:
            return response

        error_context = {**context, "status_code": status}
        if status in (401, 403):
            raise AuthenticationError("Steam API rejected the API key", context=error_context)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Steam API rate limit exceeded",
                context=error_context,
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None
            )
        if status >= 500:
            raise NetworkError(f"Steam API server error {status}", context=error_context)

        error_context["response_body"] = response.text[:500]
        raise ProviderError(f"Steam API failed: {status} {response.reason_phrase}", context=error_context)

    async def get_owned_games(self) -> List[OwnedGame]:
        """
        List every game owned by the configured account.

        Returns:
            Owned games in provider order (empty if Steam returns none)
        """
        params = {
            **self._credentials(),
            "include_appinfo": 1,
            "include_played_free_games": 1,
        }
        context = {"endpoint": "GetOwnedGames"}

        data = await self._get_json(OWNED_GAMES_PATH, params, context)
        if not isinstance(data, dict):
            raise MalformedResponseError("Unexpected Steam response: not an object", context=context)

        body = data.get("response") or {}
        if not isinstance(body, dict):
            raise MalformedResponseError("Unexpected Steam response: invalid response block", context=context)

        games = body.get("games") or []
        if not isinstance(games, list):
            raise MalformedResponseError("Unexpected Steam response: games is not a list", context=context)

        try:
            owned = [OwnedGame.model_validate(g) for g in games]
        except PydanticValidationError as e:
            raise MalformedResponseError(
                "Unexpected Steam response: invalid game entry",
                context=context,
                original_exception=e
            )

        logger.debug(f"Steam reports {len(owned)} owned games")
        return owned

    async def get_player_achievements(self, app_id: int) -> PlayerAchievements:
        """
        Fetch the account's achievement states for one game.

        Raises:
            MalformedResponseError: ``playerstats`` is missing or invalid
            ProviderError: Steam reports an error for this game
        """
        params = {**self._credentials(), "appid": app_id}
        context = {"endpoint": "GetPlayerAchievements", "app_id": app_id}

        data = await self._get_json(PLAYER_ACHIEVEMENTS_PATH, params, context)
        playerstats = data.get("playerstats") if isinstance(data, dict) else None

        if not isinstance(playerstats, dict):
            raise MalformedResponseError(
                "Unexpected Steam response: missing playerstats.",
                context=context
            )
        if playerstats.get("error"):
            raise ProviderError(
                f"Steam API error: {playerstats['error']}",
                context=context
            )

        try:
            return PlayerAchievements.model_validate(playerstats)
        except PydanticValidationError as e:
            raise MalformedResponseError(
                "Unexpected Steam response: invalid playerstats",
                context=context,
                original_exception=e
            )
