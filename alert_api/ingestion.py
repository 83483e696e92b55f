"""
Alert ingestion - normalize and store a webhook batch one alert at a time.

Each alert is independent: a bad entry is logged and skipped, and the
rest of the batch still gets stored. There is no batch transaction and
no retry.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alert_api.models import Alert
from alert_api.normalizer import normalize_alert
from alert_api.schemas.alert import NormalizedAlert


logger = logging.getLogger(__name__)


class FailureKind(str, enum.Enum):
    """Why a single alert of a batch was not stored."""

    NORMALIZATION = "normalization"
    STORAGE = "storage"


@dataclass
class IngestFailure:
    index: int
    kind: FailureKind
    error: str
    payload: Any


@dataclass
class IngestResult:
    """Outcome of one batch: stored rows in input order plus the skipped items."""

    processed: int
    inserted: list[Alert] = field(default_factory=list)
    failures: list[IngestFailure] = field(default_factory=list)


async def insert_alert(db: AsyncSession, record: NormalizedAlert) -> Alert:
    """Insert one normalized alert and commit it on its own."""
    alert = Alert(**record.model_dump())

    db.add(alert)
    await db.commit()
    await db.refresh(alert)

    return alert


async def ingest_alerts(db: AsyncSession, items: Sequence[Any]) -> IngestResult:
    """
    Normalize and store every item of a webhook batch, in order.

    Args:
        db: Session used for the inserts (one commit per alert)
        items: The raw entries of the webhook's "alerts" array

    Returns:
        IngestResult with the stored Alert rows and the per-item failures
    """
    result = IngestResult(processed=len(items))

    for index, item in enumerate(items):
        try:
            record = normalize_alert(item)
        except ValueError as exc:
            _record_failure(result, index, FailureKind.NORMALIZATION, exc, item)
            continue

        try:
            alert = await insert_alert(db, record)
        except (SQLAlchemyError, ValueError) as exc:
            # Drivers raise some errors unwrapped, e.g. UnicodeEncodeError
            # for strings the database encoding cannot hold
            await db.rollback()
            _record_failure(result, index, FailureKind.STORAGE, exc, item)
            continue

        result.inserted.append(alert)
        logger.info(
            "Alert inserted successfully: %s (%s)",
            alert.alert_name,
            alert.alert_state,
        )

    return result


def _record_failure(
    result: IngestResult,
    index: int,
    kind: FailureKind,
    exc: Exception,
    item: Any,
) -> None:
    logger.error("Error processing individual alert #%d (%s): %s", index, kind.value, exc)
    logger.error("Alert data: %r", item)
    result.failures.append(IngestFailure(index=index, kind=kind, error=str(exc), payload=item))
