"""
Steam passthrough endpoints
"""

from fastapi import APIRouter, Depends
from api.dependencies import get_steam_client
from core.config import settings
from ingestion.extractors.steam_client import SteamClient
from ingestion.runner import rank_games
from schemas.api import OwnedGameSample, OwnedGamesSummary

router = APIRouter(tags=["Steam"])

OWNED_GAMES_SAMPLE_SIZE = 10


async def build_owned_games_summary(client: SteamClient) -> OwnedGamesSummary:
    """Owned games ranked by playtime, cut to STEAM_MAX_GAMES like the sync."""
    games = await client.get_owned_games()
    selected = rank_games(games, settings.STEAM_MAX_GAMES)

    return OwnedGamesSummary(
        total_owned=len(games),
        returned=len(selected),
        sample=[
            OwnedGameSample(appid=g.appid, name=g.name, playtime_forever=g.playtime_forever)
            for g in selected[:OWNED_GAMES_SAMPLE_SIZE]
        ],
    )


@router.get("/steam/owned-games", response_model=OwnedGamesSummary)
async def owned_games(client: SteamClient = Depends(get_steam_client)):
    return await build_owned_games_summary(client)
