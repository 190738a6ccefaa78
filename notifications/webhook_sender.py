"""
Deliver achievement unlock webhooks to every registered target.

One POST per target per event, all targets concurrently, no retries.
A target that cannot be reached is reported as a failed result and never
affects delivery to the others.
"""

import asyncio
import httpx
from typing import List, Optional
from ingestion.loaders.webhook_targets import WebhookTargetRegistry
from models.webhook_target import WebhookTarget
from schemas.sync import AchievementEventCreate, DeliveryResult, WebhookPayload
from core.exceptions import DeliveryError, SyncException
import logging

logger = logging.getLogger(__name__)


class WebhookNotifier:
    """
    Fan out unlock events to webhook targets.

    Attributes:
        registry: Source of registered targets
        transport: Optional httpx transport, used by tests
    """

    def __init__(
        self,
        registry: WebhookTargetRegistry,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.registry = registry
        self.transport = transport

    async def _deliver(
        self,
        client: httpx.AsyncClient,
        target: WebhookTarget,
        body: dict
    ) -> DeliveryResult:
        try:
            response = await client.post(target.url, json=body)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise DeliveryError(
                f"Webhook delivery to {target.url} failed",
                context={"target_id": target.id, "url": target.url},
                original_exception=e
            )
        return DeliveryResult(
            ok=True,
            target_id=target.id,
            url=target.url,
            status_code=response.status_code,
        )

    async def deliver_all(self, event: AchievementEventCreate) -> List[DeliveryResult]:
        """
        Send one event to all registered targets.

        Returns:
            One DeliveryResult per target, in target order. A non-2xx response
            is still ok=True; only transport failures are ok=False. If the
            targets cannot be loaded, a single ok=False result is returned.
        """
        try:
            targets = await self.registry.list_targets()
        except SyncException as e:
            logger.error(
                f"Could not load webhook targets for app_id={event.app_id} "
                f"key={event.achievement_key}: {e}"
            )
            return [DeliveryResult(ok=False, error=str(e))]

        if not targets:
            return []

        body = WebhookPayload.from_event(event).model_dump(mode="json", by_alias=True)

        async with httpx.AsyncClient(transport=self.transport) as client:
            outcomes = await asyncio.gather(
                *(self._deliver(client, t, body) for t in targets),
                return_exceptions=True
            )

        results = []
        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                if isinstance(outcome, DeliveryError):
                    logger.warning(str(outcome))
                else:
                    logger.error(
                        f"Unexpected error delivering to target id={target.id}: {outcome!r}"
                    )
                results.append(DeliveryResult(ok=False, error=str(outcome)))
            else:
                results.append(outcome)

        delivered = sum(1 for r in results if r.ok)
        logger.info(
            f"Webhooks for app_id={event.app_id} key={event.achievement_key}: "
            f"{delivered}/{len(results)} delivered"
        )
        return results
