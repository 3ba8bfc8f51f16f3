# =============================================================================
# app/routers/health.py - Service Status
# =============================================================================
# Status routes for the hosting platform: /health reports the deployed
# version, /health/ready pings Supabase tables and storage, /health/live
# only answers.
# =============================================================================

from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

router = APIRouter()

HEALTHY = "healthy"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check(call: Callable[[], object]) -> str:
    # Errors become part of the status text; readiness never fails outright.
    try:
        call()
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"
    return HEALTHY


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per-dependency result, "healthy" or "unhealthy: <reason>"."""
    database: str
    storage: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Running environment and API version of the DS_Capture backend."""
    return HealthResponse(
        status=HEALTHY,
        timestamp=_now_iso(),
        environment=settings.ENVIRONMENT,
        version=settings.API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Reads one portfolio project row and lists the storage buckets.

    Answers 200 either way; status is "degraded" when a check fails.
    """
    from lib.supabase_client import SupabaseClient

    checks = ChecksResponse(
        database=_check(
            lambda: SupabaseClient.get_client().table("portfolio_projects").select("id").limit(1).execute()
        ),
        storage=_check(lambda: SupabaseClient.get_client().storage.list_buckets()),
    )
    ready = checks.database == HEALTHY and checks.storage == HEALTHY

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        timestamp=_now_iso(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(status="alive", timestamp=_now_iso())
