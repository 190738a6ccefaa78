from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint, Index
from models.base import Base, utcnow


class AchievementEvent(Base):
    """
    One observed achievement unlock.

    Design:
    - (steam_user_id, app_id, achievement_key) is unique; the sync inserts
      with ON CONFLICT DO NOTHING so a repeated observation never creates
      a second row
    - achieved_at comes from Steam's unlocktime when present, otherwise the
      time the unlock was first processed
    - Rows are append-only
    """
    __tablename__ = "achievement_events"

    id = Column(Integer, primary_key=True, autoincrement=True)

    steam_user_id = Column(String(32), nullable=False)
    app_id = Column(Integer, nullable=False, index=True)
    achievement_key = Column(String(255), nullable=False)
    achievement_name = Column(String(500), nullable=True)

    achieved_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "steam_user_id", "app_id", "achievement_key",
            name="uq_achievement_events_user_app_key",
        ),
        Index("idx_achievement_events_user_achieved", "steam_user_id", "achieved_at"),
    )
