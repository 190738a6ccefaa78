"""
Webhook target registration
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from ingestion.loaders.webhook_targets import WebhookTargetRegistry
from schemas.api import (
    WebhookTargetCreate,
    WebhookTargetResponse,
    WebhookRegisteredResponse,
    WebhookListResponse,
)
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Webhooks"])


@router.post("/webhooks", response_model=WebhookRegisteredResponse)
async def register_webhook(
    body: Optional[Dict[str, Any]] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a webhook target.

    Every newly stored achievement unlock is POSTed to each registered URL.
    """
    if not body or not body.get("url"):
        return JSONResponse(
            status_code=400,
            content={"ok": False, "error": "Missing 'url' in request body."}
        )

    url = body["url"]
    try:
        WebhookTargetCreate(url=url)
    except ValidationError:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid URL."})

    target = await WebhookTargetRegistry(db).add_target(url)
    return WebhookRegisteredResponse(webhook=WebhookTargetResponse.model_validate(target))


@router.get("/webhooks", response_model=WebhookListResponse)
async def list_webhooks(db: AsyncSession = Depends(get_db)):
    """List registered webhook targets."""
    targets = await WebhookTargetRegistry(db).list_targets()
    return WebhookListResponse(
        webhooks=[WebhookTargetResponse.model_validate(t) for t in targets]
    )
