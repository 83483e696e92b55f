"""
Pydantic schemas for alert endpoints.

AlertInput mirrors one entry of the webhook's "alerts" array. Every field is
optional because the monitoring tool omits whatever it has no value for.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================


class AlertInput(BaseModel):
    """
    One alert as sent by the monitoring tool.

    Example:
        {
            "status": "firing",
            "labels": {"alertname": "HighCPU", "rule_id": "42"},
            "annotations": {"summary": "CPU above 90%"},
            "startsAt": "2025-01-01T12:00:00Z",
            "endsAt": "0001-01-01T00:00:00Z",
            "generatorURL": "http://grafana/alerting/grafana/42/view",
            "fingerprint": "c6eadffa33fcdf37",
            "silenceURL": "http://grafana/alerting/silence/new",
            "values": {"A": 93.1}
        }
    """

    status: Optional[str] = None
    labels: Optional[Dict[str, Any]] = None
    annotations: Optional[Dict[str, Any]] = None
    generator_url: Optional[str] = Field(default=None, alias="generatorURL")
    fingerprint: Optional[str] = None
    silence_url: Optional[str] = Field(default=None, alias="silenceURL")
    starts_at: Optional[datetime] = Field(default=None, alias="startsAt")
    ends_at: Optional[datetime] = Field(default=None, alias="endsAt")
    alert_values: Optional[Dict[str, Any]] = Field(default=None, alias="values")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("starts_at", "ends_at", mode="before")
    @classmethod
    def blank_time_is_missing(cls, value: Any) -> Any:
        # An empty timestamp string means "no timestamp", not a parse error
        if value == "":
            return None
        return value


# =============================================================================
# NORMALIZED RECORD
# =============================================================================


class NormalizedAlert(BaseModel):
    """The column values of one `alerts` row, before the database assigns id/created_at."""

    alert_name: str
    alert_state: str
    alert_message: str = ""
    rule_id: Optional[str] = None
    rule_name: Optional[str] = None
    rule_url: Optional[str] = None
    dashboard_id: Optional[str] = None
    panel_id: Optional[str] = None
    tags: str = "{}"
    alert_values: str = "{}"
    generator_url: Optional[str] = None
    fingerprint: Optional[str] = None
    silence_url: Optional[str] = None
    fired_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class InsertedAlert(BaseModel):
    """Summary of one stored alert in the webhook response."""

    id: int
    alert_name: str
    alert_state: str

    model_config = ConfigDict(from_attributes=True)


class AlertIngestResponse(BaseModel):
    """
    Response to a webhook delivery.

    Example:
        {
            "message": "Alerts processed successfully",
            "processed": 2,
            "inserted": 1,
            "alerts": [{"id": 7, "alert_name": "HighCPU", "alert_state": "firing"}]
        }
    """

    message: str = "Alerts processed successfully"
    processed: int
    inserted: int
    alerts: list[InsertedAlert]


class AlertResponse(BaseModel):
    """A stored alert row."""

    id: int
    alert_name: str
    alert_state: str
    alert_message: Optional[str]
    rule_id: Optional[str]
    rule_name: Optional[str]
    rule_url: Optional[str]
    dashboard_id: Optional[str]
    panel_id: Optional[str]
    tags: Optional[str]
    alert_values: Optional[str]
    generator_url: Optional[str]
    fingerprint: Optional[str]
    silence_url: Optional[str]
    created_at: datetime
    fired_at: Optional[datetime]
    resolved_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class AlertListResponse(BaseModel):
    """The most recent alerts, newest first."""

    alerts: list[AlertResponse]
    count: int


class HealthResponse(BaseModel):
    status: str = "ok"
    database: str  # "connected" or "disconnected"
    timestamp: datetime
