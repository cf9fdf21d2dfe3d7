"""Unit tests for TransactionManager."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from nested_params.core.engine import Engine
from nested_params.core.exceptions import TransactionStateError
from nested_params.core.transaction import TransactionManager

INSERT = "INSERT INTO projects (name) VALUES (:name)"
COUNT = "SELECT COUNT(*) FROM projects"


class TestTransactionManager:
    def test_commit_persists_changes(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            engine.execute(INSERT, {"name": "Dinner"})
            assert tx.state == "active"

        assert tx.state == "committed"
        assert engine.fetch_scalar(COUNT) == 1

    def test_auto_rollback_on_exception(self, engine: Engine) -> None:
        with pytest.raises(RuntimeError, match="boom"), engine.transaction():
            engine.execute(INSERT, {"name": "Dinner"})
            raise RuntimeError("boom")

        assert engine.fetch_scalar(COUNT) == 0
        assert not engine.in_transaction

    def test_explicit_rollback(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            engine.execute(INSERT, {"name": "Dinner"})
            tx.rollback()

        assert engine.fetch_scalar(COUNT) == 0

    def test_nested_block_joins_outer(self, engine: Engine) -> None:
        with engine.transaction() as outer:
            with engine.transaction() as inner:
                assert inner.joined
                assert inner.connection is outer.connection
                engine.execute(INSERT, {"name": "Inner"})
            # Nothing is committed until the outer block ends.
            assert outer.state == "active"
            engine.execute(INSERT, {"name": "Outer"})

        assert engine.fetch_scalar(COUNT) == 2

    def test_exception_in_nested_block_rolls_back_everything(self, engine: Engine) -> None:
        with pytest.raises(RuntimeError), engine.transaction():
            engine.execute(INSERT, {"name": "Outer"})
            with engine.transaction():
                engine.execute(INSERT, {"name": "Inner"})
                raise RuntimeError("boom")

        assert engine.fetch_scalar(COUNT) == 0

    def test_rollback_callbacks_run_in_reverse(self, engine: Engine) -> None:
        calls: list[str] = []
        with pytest.raises(RuntimeError), engine.transaction() as tx:
            tx.on_rollback(lambda: calls.append("first"))
            with engine.transaction() as inner:
                inner.on_rollback(lambda: calls.append("second"))
            raise RuntimeError("boom")

        assert calls == ["second", "first"]

    def test_rollback_callbacks_dropped_on_commit(self, engine: Engine) -> None:
        calls: list[str] = []
        with engine.transaction() as tx:
            tx.on_rollback(lambda: calls.append("rolled back"))

        assert calls == []

    def test_commit_after_rollback_is_an_error(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.rollback()
            with pytest.raises(TransactionStateError):
                tx.commit()

    def test_execute_after_rollback_is_an_error(self, engine: Engine) -> None:
        with engine.transaction() as tx:
            tx.rollback()
            with pytest.raises(TransactionStateError):
                engine.execute(INSERT, {"name": "late"})

    def test_failed_commit_rolls_back(self) -> None:
        connection = MagicMock()
        connection.commit.side_effect = RuntimeError("constraint failed")
        calls: list[str] = []

        tx = TransactionManager(MagicMock(), connection)
        with pytest.raises(RuntimeError, match="constraint failed"), tx:
            tx.on_rollback(lambda: calls.append("reset"))

        connection.rollback.assert_called_once_with()
        assert tx.state == "rolled_back"
        assert calls == ["reset"]

    def test_failed_explicit_commit_rolls_back(self) -> None:
        connection = MagicMock()
        connection.commit.side_effect = RuntimeError("constraint failed")

        tx = TransactionManager(MagicMock(), connection)
        with tx:
            with pytest.raises(RuntimeError):
                tx.commit()
            assert tx.state == "rolled_back"

        connection.rollback.assert_called_once_with()
