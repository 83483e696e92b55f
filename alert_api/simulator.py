#!/usr/bin/env python3
"""
Alert Webhook Simulator

Plays the role of the monitoring tool: keeps a handful of alert rules,
lets them start firing and later resolve, and posts each change to the
Alert API webhook the way Grafana does.
"""

import asyncio
import os
import random
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

# Configuration from environment
ALERT_API_URL = os.getenv("ALERT_API_URL", "http://localhost:3003")
BATCHES_PER_MINUTE = int(os.getenv("BATCHES_PER_MINUTE", "12"))
GRAFANA_URL = os.getenv("GRAFANA_URL", "http://grafana:3000")

# Grafana sends this placeholder as endsAt while an alert is still firing
NOT_ENDED = "0001-01-01T00:00:00Z"

# Simulated rules and the panels they watch
RULES = [
    {
        "rule_id": "cpu-high",
        "alertname": "HighCPUUsage",
        "summary": "CPU usage above 90% on {instance}",
        "dashboard_id": "node-overview",
        "panel_id": "2",
        "metric": "cpu_percent",
        "instances": ["web-01", "web-02", "db-01"],
    },
    {
        "rule_id": "disk-low",
        "alertname": "LowDiskSpace",
        "summary": "Less than 10% disk left on {instance}",
        "dashboard_id": "node-overview",
        "panel_id": "7",
        "metric": "disk_free_percent",
        "instances": ["db-01", "backup-01"],
    },
    {
        "rule_id": "api-latency",
        "alertname": "HighRequestLatency",
        "summary": "p95 latency above 1s on {instance}",
        "dashboard_id": "api-latency",
        "panel_id": "4",
        "metric": "p95_latency_ms",
        "instances": ["api-gateway"],
    },
]


def _isoformat(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_alert(
    rule: dict[str, Any],
    instance: str,
    status: str,
    started_at: datetime,
    ended_at: Optional[datetime] = None,
    fingerprint: Optional[str] = None,
) -> dict[str, Any]:
    """Build one Grafana-style alert entry for the webhook body."""
    value = round(random.uniform(90, 99), 2) if status == "firing" else round(random.uniform(10, 60), 2)

    return {
        "status": status,
        "labels": {
            "alertname": rule["alertname"],
            "instance": instance,
            "rule_id": rule["rule_id"],
            "rule_name": rule["alertname"],
            "dashboard_id": rule["dashboard_id"],
            "panel_id": rule["panel_id"],
        },
        "annotations": {
            "summary": rule["summary"].format(instance=instance),
        },
        "startsAt": _isoformat(started_at),
        "endsAt": _isoformat(ended_at) if ended_at else NOT_ENDED,
        "generatorURL": f"{GRAFANA_URL}/alerting/grafana/{rule['rule_id']}/view",
        "fingerprint": fingerprint or uuid.uuid4().hex[:16],
        "silenceURL": f"{GRAFANA_URL}/alerting/silence/new?alertmanager=grafana",
        "values": {rule["metric"]: value},
    }


def build_webhook(alerts: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap alert entries in the webhook envelope."""
    statuses = {alert["status"] for alert in alerts}
    return {
        "receiver": "alert-api",
        "status": "firing" if "firing" in statuses else "resolved",
        "alerts": alerts,
    }


class Simulator:
    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.client = client or httpx.AsyncClient(timeout=30.0)
        # (alertname, instance) -> (started_at, fingerprint) for rules currently firing
        self.firing: dict[tuple[str, str], tuple[datetime, str]] = {}

    def next_alert(self) -> dict[str, Any]:
        """Pick a rule/instance and either start or resolve it."""
        rule = random.choice(RULES)
        instance = random.choice(rule["instances"])
        key = (rule["alertname"], instance)
        now = datetime.now(timezone.utc)

        if key in self.firing:
            started_at, fingerprint = self.firing.pop(key)
            return build_alert(rule, instance, "resolved", started_at, now, fingerprint)

        fingerprint = uuid.uuid4().hex[:16]
        self.firing[key] = (now, fingerprint)
        return build_alert(rule, instance, "firing", now, fingerprint=fingerprint)

    async def send(self, body: dict[str, Any]) -> httpx.Response:
        return await self.client.post(f"{ALERT_API_URL}/alerts", json=body)

    async def run(self):
        """Main simulation loop."""
        print(f"\n📡 Sending alert webhooks to {ALERT_API_URL} ({BATCHES_PER_MINUTE} batches/min)...")
        print("   Press Ctrl+C to stop\n")

        delay = 60.0 / BATCHES_PER_MINUTE

        batch_count = 0
        while True:
            try:
                alerts = [self.next_alert() for _ in range(random.randint(1, 3))]
                response = await self.send(build_webhook(alerts))

                batch_count += 1
                if response.status_code == 200:
                    body = response.json()
                    for alert in body["alerts"]:
                        emoji = "🔥" if alert["alert_state"] == "firing" else "✅"
                        print(f"{emoji} [{batch_count}] #{alert['id']:<6} {alert['alert_name']:<24} | {alert['alert_state']}")
                else:
                    print(f"⚠️  Failed to send webhook: {response.status_code} - {response.text}")

                await asyncio.sleep(max(0.1, delay + random.uniform(-0.5, 0.5)))

            except asyncio.CancelledError:
                break
            except httpx.HTTPError as e:
                print(f"❌ Error: {e}")
                await asyncio.sleep(5)

        print(f"\n👋 Simulator stopped. Sent {batch_count} batches.")

    async def close(self):
        await self.client.aclose()


async def main():
    print("=" * 60)
    print("   ALERT WEBHOOK SIMULATOR")
    print("=" * 60)

    simulator = Simulator()
    try:
        await simulator.run()
    finally:
        await simulator.close()


def cli() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n\n🛑 Shutting down...")


if __name__ == "__main__":
    cli()
