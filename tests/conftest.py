"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from nested_params.core.connection import ConnectionConfig
from nested_params.core.engine import Engine
from nested_params.repository.base import Repository
from tests.models import DDL


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def engine(sqlite_config: ConnectionConfig) -> Iterator[Engine]:
    """Engine over an in-memory database holding every test table."""
    eng = Engine.from_config(sqlite_config)
    for statement in DDL:
        eng.execute(statement)
    yield eng
    eng.close()


@pytest.fixture
def repo(engine: Engine) -> Repository:
    return Repository(engine)
