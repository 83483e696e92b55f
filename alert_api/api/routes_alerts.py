"""
Alert webhook and query routes.

- POST /alerts: receive a webhook batch from the monitoring tool
- GET /alerts: view the most recently stored alerts
"""

import json
import logging
import re
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alert_api.api.deps import get_db
from alert_api.core.config import settings
from alert_api.core.errors import AlertAPIError
from alert_api.ingestion import ingest_alerts
from alert_api.models import Alert
from alert_api.schemas.alert import (
    AlertIngestResponse,
    AlertListResponse,
    AlertResponse,
    InsertedAlert,
)


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

router = APIRouter(
    prefix="/alerts",
    tags=["Alerts"],
)


# =============================================================================
# HELPERS
# =============================================================================


def _too_large(max_bytes: int) -> AlertAPIError:
    return AlertAPIError(
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        "Request body too large",
        message=f"Body exceeds {max_bytes} bytes",
    )


async def _read_body(request: Request) -> Any:
    max_bytes = settings.max_body_bytes

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise _too_large(max_bytes)

    # Chunked uploads carry no Content-Length, so count while reading
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise _too_large(max_bytes)

    if not body.strip():
        return {}

    try:
        return json.loads(body)
    except ValueError as exc:
        raise AlertAPIError(
            status.HTTP_400_BAD_REQUEST,
            "Invalid JSON body",
            message=str(exc),
        )


def parse_limit(raw: Optional[str]) -> int:
    """
    Parse the ?limit= value by its leading integer ("10abc" -> 10, "2.5" -> 2).

    Missing, non-numeric or < 1 means 50.
    """
    match = _LEADING_INT.match(raw or "")
    if match is None:
        return DEFAULT_LIMIT

    limit = int(match.group(1))
    return limit if limit > 0 else DEFAULT_LIMIT


# =============================================================================
# RECEIVE ALERTS (WEBHOOK)
# =============================================================================


@router.post(
    "",
    response_model=AlertIngestResponse,
    summary="Receive monitoring alerts",
)
async def receive_alerts(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AlertIngestResponse:
    """
    Store every alert of a webhook delivery.

    The body must contain a non-empty "alerts" array. Each entry is
    normalized and inserted on its own; entries that fail are skipped
    and the response only lists the stored ones.
    """
    payload = await _read_body(request)
    alerts = payload.get("alerts") if isinstance(payload, dict) else None

    if not isinstance(alerts, list) or len(alerts) == 0:
        raise AlertAPIError(
            status.HTTP_400_BAD_REQUEST,
            "No alerts found in request body",
            expected="Array of alerts in body.alerts",
        )

    logger.info("Received alert webhook with %d alert(s)", len(alerts))
    logger.debug("Webhook body: %s", json.dumps(payload, indent=2, default=str))

    result = await ingest_alerts(db, alerts)

    return AlertIngestResponse(
        message="Alerts processed successfully",
        processed=result.processed,
        inserted=len(result.inserted),
        alerts=[InsertedAlert.model_validate(alert) for alert in result.inserted],
    )


# =============================================================================
# LIST RECENT ALERTS
# =============================================================================


@router.get(
    "",
    response_model=AlertListResponse,
    summary="List the most recent alerts",
)
async def list_recent_alerts(
    limit: Optional[str] = Query(
        default=None,
        description="How many alerts to return (default 50)",
    ),
    db: AsyncSession = Depends(get_db),
) -> AlertListResponse:
    """
    Return the newest stored alerts first.

    An unparsable or non-positive limit falls back to 50.
    """
    size = parse_limit(limit)

    query = (
        select(Alert)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
        .limit(size)
    )

    try:
        result = await db.execute(query)
        rows = result.scalars().all()
    except SQLAlchemyError as exc:
        logger.error("Error fetching alerts: %s", exc)
        raise AlertAPIError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to fetch alerts",
            message=str(exc),
        )

    return AlertListResponse(
        alerts=[AlertResponse.model_validate(row) for row in rows],
        count=len(rows),
    )
