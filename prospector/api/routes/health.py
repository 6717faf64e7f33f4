from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from prospector.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
    }


@router.get("/ready")
async def readiness_check():
    """Readiness check: the completion provider must be configured, the lead database is optional."""
    if not settings.openai_api_key:
        raise HTTPException(status_code=503, detail="OPENAI_API_KEY is not configured")

    return {
        "status": "ready",
        "version": settings.app_version,
        "environment": settings.environment,
        "lead_source": "apollo" if settings.apollo_enabled else "sample",
    }
