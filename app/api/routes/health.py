"""
Health Check Endpoints - Application health and status monitoring.
"""

from fastapi import APIRouter, Depends
from datetime import datetime

from app.core.config import get_settings, Settings
from app.models.responses import HealthResponse


router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Check if the API is running and healthy"
)
async def health_check(
    settings: Settings = Depends(get_settings)
) -> HealthResponse:
    """
    Basic health check endpoint.

    Returns:
        HealthResponse with status and version info
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        environment=settings.environment,
        timestamp=datetime.utcnow()
    )


@router.get(
    "/ready",
    summary="Readiness Check",
    description="Check if the API is ready to accept requests"
)
async def readiness_check(
    settings: Settings = Depends(get_settings)
) -> dict:
    """
    Readiness check for Kubernetes/container orchestration.

    The Gemini key is required; Supabase is reported but optional.
    """
    checks = {
        "api": True,
        "config_loaded": settings is not None,
        "llm_configured": bool(settings.gemini_api_key),
    }

    return {
        "ready": all(checks.values()),
        "checks": checks,
        "persistence_configured": settings.supabase_configured,
        "timestamp": datetime.utcnow().isoformat()
    }


@router.get(
    "/live",
    summary="Liveness Check",
    description="Simple liveness probe"
)
async def liveness_check() -> dict:
    """
    Liveness check for Kubernetes.

    Just returns OK if the server is running.
    """
    return {"status": "alive"}
