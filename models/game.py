from sqlalchemy import Column, Integer, String, DateTime
from models.base import Base, utcnow


class Game(Base):
    """
    A game owned by the tracked Steam account.

    Populated from the OwnedGames endpoint on every sync; name and playtime
    are overwritten each time the game is observed. Rows are never deleted.
    """
    __tablename__ = "games"

    app_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(500), nullable=True)
    playtime_forever = Column(Integer, nullable=False, default=0)  # minutes

    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class GameAchievementTotal(Base):
    """
    Number of achievements Steam defines for a game, locked or not.

    Refreshed on every successful per-game fetch.
    """
    __tablename__ = "game_achievement_totals"

    app_id = Column(Integer, primary_key=True, autoincrement=False)
    total_achievements = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
