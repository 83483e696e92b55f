"""
Alert normalization.

Maps one loosely-structured webhook alert onto the fixed columns of the
`alerts` table. Everything here is pure: no database, no HTTP.

Defaulting rules:
- alert_name    <- labels.alertname, else "Unknown Alert"
- alert_state   <- status, else "unknown"
- alert_message <- annotations.summary, else annotations.description, else ""
- rule_id, rule_name, dashboard_id, panel_id <- labels, else None
- rule_url, generator_url <- generatorURL
- tags          <- all labels as JSON text ("{}" when absent)
- alert_values  <- values as JSON text ("{}" when absent)
- fired_at      <- startsAt
- resolved_at   <- endsAt, but only when status is "resolved"
"""

import json
from typing import Any, Mapping, Optional

from alert_api.schemas.alert import AlertInput, NormalizedAlert


UNKNOWN_ALERT_NAME = "Unknown Alert"
UNKNOWN_STATE = "unknown"
RESOLVED_STATE = "resolved"


def _text(value: Any) -> Optional[str]:
    """Coerce a label/annotation value to text; missing or blank becomes None."""
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def serialize_mapping(mapping: Optional[Mapping[str, Any]]) -> str:
    """Compact JSON text for a label or value mapping."""
    return json.dumps(dict(mapping or {}), separators=(",", ":"), default=str)


def normalize_alert(raw: Any) -> NormalizedAlert:
    """
    Turn one webhook alert into the column values of an `alerts` row.

    Args:
        raw: One entry of the webhook's "alerts" array (usually a dict)

    Returns:
        The normalized record, ready to insert

    Raises:
        pydantic.ValidationError: if the entry is not an object, a field has
            the wrong type, or a timestamp cannot be parsed
    """
    alert = raw if isinstance(raw, AlertInput) else AlertInput.model_validate(raw)

    labels = alert.labels or {}
    annotations = alert.annotations or {}

    # Both conditions are required: firing alerts often carry a placeholder endsAt
    resolved_at = alert.ends_at if alert.status == RESOLVED_STATE else None

    return NormalizedAlert(
        alert_name=_text(labels.get("alertname")) or UNKNOWN_ALERT_NAME,
        alert_state=alert.status or UNKNOWN_STATE,
        alert_message=(
            _text(annotations.get("summary"))
            or _text(annotations.get("description"))
            or ""
        ),
        rule_id=_text(labels.get("rule_id")),
        rule_name=_text(labels.get("rule_name")),
        rule_url=alert.generator_url or None,
        dashboard_id=_text(labels.get("dashboard_id")),
        panel_id=_text(labels.get("panel_id")),
        tags=serialize_mapping(labels),
        alert_values=serialize_mapping(alert.alert_values),
        generator_url=alert.generator_url or None,
        fingerprint=alert.fingerprint or None,
        silence_url=alert.silence_url or None,
        fired_at=alert.starts_at,
        resolved_at=resolved_at,
    )
