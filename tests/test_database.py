"""
Tests for the database handle and schema creation.

These tests verify:
1. The connectivity check reports reachable and unreachable databases
2. The alerts table and its indexes are created
3. Schema creation can run again without errors
4. Startup fails when the database is unreachable
"""

import pytest
from sqlalchemy import inspect, text

from alert_api.core.config import Settings
from alert_api.core.db import Database
from alert_api.core.errors import DatabaseUnavailableError
from alert_api.main import connect_database


UNREACHABLE_URL = "sqlite+aiosqlite:////nonexistent-dir/for/alerts.db"


async def _table_info(database: Database):
    def collect(sync_connection):
        inspector = inspect(sync_connection)
        return (
            inspector.get_table_names(),
            {column["name"] for column in inspector.get_columns("alerts")},
            {index["name"] for index in inspector.get_indexes("alerts")},
        )

    async with database.engine.connect() as connection:
        return await connection.run_sync(collect)


# =============================================================================
# CONNECTION TESTS
# =============================================================================


class TestDatabaseConnection:

    @pytest.mark.asyncio
    async def test_ping_connected(self, database):
        assert await database.ping() is True

    @pytest.mark.asyncio
    async def test_ping_unreachable(self):
        database = Database(UNREACHABLE_URL)
        try:
            assert await database.ping() is False
        finally:
            await database.dispose()

    @pytest.mark.asyncio
    async def test_session_executes(self, database):
        async with database.session() as session:
            value = (await session.execute(text("SELECT 1"))).scalar()

        assert value == 1, "Should be able to execute simple query"


# =============================================================================
# SCHEMA TESTS
# =============================================================================


class TestSchema:

    @pytest.mark.asyncio
    async def test_alerts_table_created(self, database):
        tables, columns, indexes = await _table_info(database)

        assert "alerts" in tables
        assert {
            "id", "alert_name", "alert_state", "alert_message", "rule_id",
            "rule_name", "rule_url", "dashboard_id", "panel_id", "tags",
            "alert_values", "generator_url", "fingerprint", "silence_url",
            "created_at", "fired_at", "resolved_at",
        } == columns
        assert {
            "ix_alerts_alert_state",
            "ix_alerts_created_at",
            "ix_alerts_alert_name",
        } <= indexes

    @pytest.mark.asyncio
    async def test_init_schema_idempotent(self, database):
        """Running schema creation again is a no-op."""
        await database.init_schema()
        await database.init_schema()

        tables, columns, indexes = await _table_info(database)

        assert tables.count("alerts") == 1
        assert len(columns) == 17
        assert len(indexes) == 3

    @pytest.mark.asyncio
    async def test_created_at_set_by_database(self, database):
        async with database.session() as session:
            await session.execute(
                text("INSERT INTO alerts (alert_name, alert_state) VALUES ('x', 'firing')")
            )
            await session.commit()
            created_at = (await session.execute(text("SELECT created_at FROM alerts"))).scalar()

        assert created_at is not None


# =============================================================================
# STARTUP
# =============================================================================


class TestStartup:

    @pytest.mark.asyncio
    async def test_connect_database_creates_schema(self, tmp_path):
        config = Settings(_env_file=None, database_url=f"sqlite+aiosqlite:///{tmp_path / 'boot.db'}")

        database = await connect_database(config)
        try:
            tables, _, _ = await _table_info(database)
        finally:
            await database.dispose()

        assert "alerts" in tables

    @pytest.mark.asyncio
    async def test_connect_database_unreachable(self):
        config = Settings(_env_file=None, database_url=UNREACHABLE_URL)

        with pytest.raises(DatabaseUnavailableError):
            await connect_database(config)
