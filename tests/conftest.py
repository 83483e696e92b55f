"""
Pytest configuration and fixtures.

Fixtures are reusable test setup/teardown functions.
They're automatically discovered by pytest from this file.

The HTTP tests run the real FastAPI app against a throwaway SQLite
database: the `get_database` dependency is overridden, so the app's
lifespan (which would connect to PostgreSQL) never runs.
"""

from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from alert_api.api.deps import get_database
from alert_api.core.db import Database
from alert_api.main import app


# =============================================================================
# PAYLOAD HELPERS
# =============================================================================


def make_alert(**overrides: Any) -> dict[str, Any]:
    """A Grafana-style webhook alert; keyword arguments replace top-level fields."""
    alert = {
        "status": "firing",
        "labels": {
            "alertname": "HighCPUUsage",
            "instance": "web-01",
            "rule_id": "cpu-high",
            "rule_name": "High CPU",
            "dashboard_id": "node-overview",
            "panel_id": "2",
        },
        "annotations": {
            "summary": "CPU usage above 90% on web-01",
            "description": "The 5m average CPU usage is above 90%",
        },
        "startsAt": "2025-01-01T12:00:00Z",
        "endsAt": "0001-01-01T00:00:00Z",
        "generatorURL": "http://grafana:3000/alerting/grafana/cpu-high/view",
        "fingerprint": "c6eadffa33fcdf37",
        "silenceURL": "http://grafana:3000/alerting/silence/new",
        "values": {"A": 93.1},
    }
    alert.update(overrides)
    return alert


# =============================================================================
# FIXTURES
# =============================================================================


@pytest_asyncio.fixture
async def database(tmp_path):
    """A Database handle bound to a fresh SQLite file with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'alerts.db'}")
    await db.init_schema()

    yield db

    await db.dispose()


@pytest_asyncio.fixture
async def client(database):
    """HTTP client talking to the app, with the test database injected."""
    app.dependency_overrides[get_database] = lambda: database

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def alert_factory():
    return make_alert
