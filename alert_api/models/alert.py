"""
Alert model - represents the 'alerts' table in the database.

One row per alert delivered by the monitoring tool. The table is
append-only: a rule that fires and later resolves produces two rows,
one with alert_state "firing" and one with "resolved".
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from alert_api.core.db import Base


class Alert(Base):
    """
    Alert model - one normalized webhook alert.

    Attributes:
        id: Primary key
        alert_name: The "alertname" label ("Unknown Alert" if missing)
        alert_state: Delivery status ("firing", "resolved", ...)
        alert_message: Summary or description annotation
        tags: JSON text of every label on the alert
        alert_values: JSON text of the evaluated values
        fingerprint: Identity token from the source; not unique here
        created_at: When the row was inserted
        fired_at: When the alert started firing
        resolved_at: When it resolved (only set for "resolved" deliveries)
    """

    __tablename__ = "alerts"

    __table_args__ = (
        # Index for: "Filter alerts by state"
        Index("ix_alerts_alert_state", "alert_state"),

        # Index for: "Get the most recent alerts"
        # Used in: GET /alerts?limit=N
        Index("ix_alerts_created_at", "created_at"),

        # Index for: "Find all deliveries of one rule"
        Index("ix_alerts_alert_name", "alert_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    alert_name: Mapped[str] = mapped_column(String(255), nullable=False)
    alert_state: Mapped[str] = mapped_column(String(50), nullable=False)
    alert_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # RULE / DASHBOARD REFERENCES
    # ---------------------------
    # Copied from labels and the generator URL when the source provides them.

    rule_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rule_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    rule_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    dashboard_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    panel_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # SERIALIZED MAPPINGS
    # -------------------
    # Stored as JSON text so any relational backend can hold them.

    tags: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    alert_values: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    generator_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    fingerprint: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    silence_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    fired_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Alert id={self.id} name='{self.alert_name}' state='{self.alert_state}'>"
