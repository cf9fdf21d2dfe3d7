"""Unit tests for connection configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nested_params.adapters.sqlite import SqliteSyncAdapter
from nested_params.core.connection import ConnectionConfig, ConnectionManager
from nested_params.core.exceptions import AdapterError


class TestConnectionConfig:
    def test_defaults(self) -> None:
        config = ConnectionConfig(driver="sqlite", database=":memory:")
        assert config.pool_size == 1
        assert config.echo is False

    def test_coercion(self) -> None:
        config = ConnectionConfig(driver="sqlite", database="app.db", pool_size="3")
        assert config.pool_size == 3

    def test_database_required(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="sqlite")


class TestConnectionManager:
    def test_loads_adapter(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        assert isinstance(manager.adapter, SqliteSyncAdapter)

    def test_driver_name_case_insensitive(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="SQLite", database=":memory:"))
        assert isinstance(manager.adapter, SqliteSyncAdapter)

    def test_unsupported_driver(self) -> None:
        with pytest.raises(AdapterError, match="oracle"):
            ConnectionManager(ConnectionConfig(driver="oracle", database="x"))

    def test_connection_returned_to_pool(self, sqlite_config: ConnectionConfig) -> None:
        manager = ConnectionManager(sqlite_config)
        with manager.get_connection() as conn:
            conn.execute("SELECT 1")
        with manager.get_connection() as again:
            assert again is conn
        manager.close_pool()
