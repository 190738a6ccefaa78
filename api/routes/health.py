"""
Health check endpoints
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from api.dependencies import get_db
from core.database import db_healthcheck
from schemas.api import HealthResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Server is running."""
    return HealthResponse(ok=True)


@router.get("/db/health", response_model=HealthResponse)
async def db_health_check(db: AsyncSession = Depends(get_db)):
    """Database connectivity check."""
    try:
        ok = await db_healthcheck(db)
    except Exception as e:
        logger.error(f"Database connection failed: {str(e)}")
        return JSONResponse(status_code=500, content={"ok": False})
    return HealthResponse(ok=ok)
