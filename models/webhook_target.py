from sqlalchemy import Column, Integer, String, DateTime
from models.base import Base, utcnow


class WebhookTarget(Base):
    """Outbound webhook delivery target registered through POST /webhooks."""
    __tablename__ = "webhook_targets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(String(2048), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
