"""
Unit of Work: owns one connection and the transaction begun on it.
"""

import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
from sqlalchemy import Connection, Transaction
from dade.exceptions.errors import TransactionCompletedError
from dade.logging.logger import get_logger
from .mapper import EntityMapper, Params, default_mapper

INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1
INT64_MIN, INT64_MAX = -(2 ** 63), 2 ** 63 - 1


class UnitOfWorkState(str, Enum):
    """Unit of work lifecycle; everything but OPEN is terminal."""
    OPEN = "open"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    DISPOSED = "disposed"


class IUnitOfWork(ABC):
    """Transaction boundary interface."""

    mapper: EntityMapper

    @property
    @abstractmethod
    def transaction(self) -> Transaction:
        pass

    @abstractmethod
    def execute(self, sql: str, params: Params = None) -> int:
        pass

    @abstractmethod
    def execute_scalar32(self, sql: str, params: Params = None) -> int:
        pass

    @abstractmethod
    def execute_scalar64(self, sql: str, params: Params = None) -> int:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the transaction and connection if still open (idempotent)."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _to_int(value: Any, low: int, high: int) -> int:
    # NULL scalars read as zero
    result = 0 if value is None else int(value)
    if not low <= result <= high:
        raise OverflowError(f"Scalar {result} out of range [{low}, {high}]")
    return result


class UnitOfWork(IUnitOfWork):
    """
    Wraps one transaction on one explicitly opened connection.

    The transaction is begun at construction. commit() and rollback() end it,
    close the connection and clear both references; any later call raises
    TransactionCompletedError. Leaving a ``with`` block without completing rolls
    the transaction back. Not safe for concurrent use: callers sequence every
    call against one instance.
    """

    def __init__(self, connection: Connection, mapper: Optional[EntityMapper] = None):
        self.id = uuid.uuid4().hex[:12]
        self.mapper = mapper or default_mapper
        self._logger = get_logger("unit_of_work", trace_id=self.id)
        self._connection: Optional[Connection] = connection
        self._transaction: Optional[Transaction] = connection.begin()
        self._state = UnitOfWorkState.OPEN
        self._logger.debug("Transaction begun")

    @property
    def state(self) -> UnitOfWorkState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is UnitOfWorkState.OPEN

    def _require_open(self) -> Transaction:
        if self._state is not UnitOfWorkState.OPEN:
            raise TransactionCompletedError(
                f"Unit of work {self.id} is {self._state.value}; create a new one",
                state=self._state,
            )
        return self._transaction

    @property
    def transaction(self) -> Transaction:
        return self._require_open()

    @property
    def connection(self) -> Connection:
        self._require_open()
        return self._connection

    def execute(self, sql: str, params: Params = None) -> int:
        """Run a non-query statement inside the transaction; returns affected rows."""
        self._require_open()
        return self.mapper.execute(self._connection, sql, params)

    def execute_scalar32(self, sql: str, params: Params = None) -> int:
        self._require_open()
        value = self.mapper.execute_scalar(self._connection, sql, params)
        return _to_int(value, INT32_MIN, INT32_MAX)

    def execute_scalar64(self, sql: str, params: Params = None) -> int:
        self._require_open()
        value = self.mapper.execute_scalar(self._connection, sql, params)
        return _to_int(value, INT64_MIN, INT64_MAX)

    def commit(self) -> None:
        """Commit; on failure roll back and re-raise. Resources are released either way."""
        transaction = self._require_open()
        outcome = UnitOfWorkState.ROLLED_BACK
        try:
            transaction.commit()
            outcome = UnitOfWorkState.COMMITTED
        except Exception:
            self._logger.opt(exception=True).warning("Commit failed, rolling back")
            try:
                transaction.rollback()
            except Exception:
                self._logger.opt(exception=True).error("Rollback after failed commit also failed")
            raise
        finally:
            self._release(outcome)

    def rollback(self) -> None:
        transaction = self._require_open()
        try:
            transaction.rollback()
        finally:
            self._release(UnitOfWorkState.ROLLED_BACK)

    def close(self) -> None:
        if self._state is not UnitOfWorkState.OPEN:
            return
        transaction = self._transaction
        try:
            # Closing an unfinished root transaction rolls it back
            transaction.close()
        finally:
            self._release(UnitOfWorkState.DISPOSED)

    def _release(self, state: UnitOfWorkState) -> None:
        connection = self._connection
        self._connection = None
        self._transaction = None
        self._state = state
        self._logger.debug(f"Unit of work {state.value}")
        if connection is not None:
            connection.close()
