"""Transaction management.

Provides the context manager that scopes a group of writes to one atomic
unit. Auto-commits on success, auto-rolls-back on exception. Opening a
transaction while another one is active joins the outer transaction instead
of starting a new one, so only the outermost block commits or rolls back.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from nested_params.core.exceptions import TransactionStateError

if TYPE_CHECKING:
    from nested_params.core.engine import Engine

log = logging.getLogger(__name__)


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionManager:
    """Synchronous transaction context manager."""

    def __init__(
        self,
        engine: Engine,
        connection: Any,
        outer: TransactionManager | None = None,
    ) -> None:
        self._engine = engine
        self._connection = connection
        self._outer = outer
        self._state = _TxState.IDLE
        self._rollback_callbacks: list[Callable[[], None]] = []

    @property
    def connection(self) -> Any:
        return self._connection

    @property
    def joined(self) -> bool:
        """True when this block runs inside an already open transaction."""
        return self._outer is not None

    @property
    def state(self) -> str:
        return self._state.value

    def __enter__(self) -> TransactionManager:
        self._state = _TxState.ACTIVE
        if self._outer is None:
            self._engine._begin(self)
            log.debug("transaction opened")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._outer is not None:
            # The outermost block decides; an exception propagating out of
            # here will reach it.
            if self._state == _TxState.ACTIVE:
                self._state = _TxState.ROLLED_BACK if exc_type else _TxState.COMMITTED
            return
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    self._do_rollback()
                else:
                    try:
                        self._connection.commit()
                    except BaseException:
                        self._do_rollback()
                        raise
                    self._state = _TxState.COMMITTED
                    log.debug("transaction committed")
        finally:
            self._engine._end(self)

    def on_rollback(self, callback: Callable[[], None]) -> None:
        """Register *callback* to run after the outermost transaction rolls back."""
        if self._outer is not None:
            self._outer.on_rollback(callback)
        else:
            self._rollback_callbacks.append(callback)

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "commit")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "commit")
        if self._outer is None:
            try:
                self._connection.commit()
            except BaseException:
                self._do_rollback()
                raise
        self._state = _TxState.COMMITTED

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "rollback")
        if self._outer is not None:
            self._outer.rollback()
            self._state = _TxState.ROLLED_BACK
            return
        self._do_rollback()

    def check_active(self) -> None:
        if self._state == _TxState.IDLE:
            raise TransactionStateError("idle", "execute")
        if self._state == _TxState.COMMITTED:
            raise TransactionStateError("committed", "execute")
        if self._state == _TxState.ROLLED_BACK:
            raise TransactionStateError("rolled_back", "execute")

    def _do_rollback(self) -> None:
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK
        log.debug("transaction rolled back")
        callbacks, self._rollback_callbacks = self._rollback_callbacks, []
        for callback in reversed(callbacks):
            callback()
