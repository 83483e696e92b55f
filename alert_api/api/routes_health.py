"""
Service banner and health check routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from alert_api.api.deps import get_database
from alert_api.core.db import Database
from alert_api.schemas.alert import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/", summary="Service banner")
async def root():
    """Describe the service and list its endpoints."""
    return {
        "message": "Alert API Server",
        "status": "running",
        "endpoints": {
            "alerts": "POST /alerts - Receive Grafana alerts",
            "recent_alerts": "GET /alerts?limit=N - List recent alerts",
            "health": "GET /health - Health check",
        },
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(database: Database = Depends(get_database)) -> HealthResponse:
    """
    Check the service and its database.

    Always answers 200; an unreachable database is reported as
    "disconnected" in the body.
    """
    connected = await database.ping()

    return HealthResponse(
        status="ok",
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(timezone.utc),
    )
