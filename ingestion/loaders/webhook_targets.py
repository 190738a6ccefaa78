"""
Registered webhook targets
"""

from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from ingestion.loaders.achievement_store import dialect_insert
from models.webhook_target import WebhookTarget
from models.base import utcnow
from core.exceptions import StoreError
import logging

logger = logging.getLogger(__name__)


class WebhookTargetRegistry:
    """Read access to webhook targets for the notifier, plus registration for the API."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    async def list_targets(self) -> List[WebhookTarget]:
        """All registered targets, oldest first"""
        try:
            result = await self.db.execute(select(WebhookTarget).order_by(WebhookTarget.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                "Failed to list webhook targets",
                context={"operation": "SELECT", "table_name": "webhook_targets"},
                original_exception=e
            )

    async def add_target(self, url: str) -> WebhookTarget:
        """
        Register a target URL.

        INSERT ... ON CONFLICT (url) DO NOTHING, then read the row back, so
        concurrent registrations of one URL all get the same target.
        """
        stmt = (
            dialect_insert(self.db, WebhookTarget)
            .values(url=url, created_at=utcnow())
            .on_conflict_do_nothing(index_elements=["url"])
            .returning(WebhookTarget.id)
        )
        try:
            inserted_id = (await self.db.execute(stmt)).scalar_one_or_none()
            await self.db.commit()

            result = await self.db.execute(select(WebhookTarget).where(WebhookTarget.url == url))
            target = result.scalar_one()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StoreError(
                "Failed to register webhook target",
                context={"operation": "INSERT", "table_name": "webhook_targets", "url": url},
                original_exception=e
            )

        if inserted_id is not None:
            logger.info(f"Registered webhook target id={target.id} url={url}")
        return target
