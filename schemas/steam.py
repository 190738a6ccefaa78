"""
Pydantic schemas for Steam Web API responses.

Only the fields the sync reads are modelled; everything else in the
payload is ignored.
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, List


class OwnedGame(BaseModel):
    """One entry of IPlayerService/GetOwnedGames ``response.games``"""
    appid: int
    name: Optional[str] = None
    playtime_forever: int = 0

    @validator("playtime_forever", pre=True)
    def default_playtime(cls, v):
        """Steam omits or nulls playtime for never-played games"""
        return v or 0

    class Config:
        extra = "ignore"


class PlayerAchievement(BaseModel):
    """One entry of ISteamUserStats/GetPlayerAchievements ``playerstats.achievements``"""
    apiname: str
    achieved: int = 0  # 1 = unlocked, 0 = locked
    unlocktime: Optional[int] = None  # unix seconds, usually present when achieved

    @property
    def unlocked(self) -> bool:
        return self.achieved == 1

    class Config:
        extra = "ignore"


class PlayerAchievements(BaseModel):
    """Parsed ``playerstats`` block for one game"""
    steam_id: Optional[str] = Field(None, alias="steamID")
    game_name: Optional[str] = Field(None, alias="gameName")
    achievements: List[PlayerAchievement] = Field(default_factory=list)

    @validator("achievements", pre=True)
    def default_achievements(cls, v):
        return v or []

    class Config:
        extra = "ignore"
        populate_by_name = True
