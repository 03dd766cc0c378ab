"""
DadeContext: lazily opens one unit of work and forwards calls to it.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Type, TypeVar
from sqlalchemy import Transaction
from sqlmodel import SQLModel
from dade.exceptions.errors import TransactionCompletedError
from .base import DadeSet
from .factory import IUnitOfWorkFactory
from .mapper import EntityMapper, Params
from .unit_of_work import IUnitOfWork

T = TypeVar("T", bound=SQLModel)


class ContextState(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    COMPLETED = "completed"


class IDadeContext(ABC):
    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
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


class DadeContext(IDadeContext):
    """
    One transactional unit of work per context.

    The unit of work is created by the factory on first use, not at
    construction. After commit() or rollback() the context is completed and
    every further call raises TransactionCompletedError; open a new context
    for the next unit of work. Subclass to add domain operations.
    """

    def __init__(self, unit_of_work_factory: IUnitOfWorkFactory):
        self._unit_of_work_factory = unit_of_work_factory
        self._unit_of_work: Optional[IUnitOfWork] = None
        self._state = ContextState.NOT_STARTED

    @property
    def state(self) -> ContextState:
        return self._state

    def _ensure_unit_of_work(self) -> IUnitOfWork:
        if self._state is ContextState.COMPLETED:
            raise TransactionCompletedError("Context already completed", state=self._state)
        if self._state is ContextState.NOT_STARTED:
            self._unit_of_work = self._unit_of_work_factory.create()
            self._state = ContextState.ACTIVE
        return self._unit_of_work

    @property
    def transaction(self) -> Transaction:
        """Transaction of the underlying unit of work, for sharing with DadeSet."""
        return self._ensure_unit_of_work().transaction

    def set(self, model: Type[T], mapper: Optional[EntityMapper] = None) -> DadeSet[T, Any]:
        """DadeSet for model bound to this context's transaction."""
        unit_of_work = self._ensure_unit_of_work()
        return DadeSet(unit_of_work.transaction, model, mapper=mapper or unit_of_work.mapper)

    def execute(self, sql: str, params: Params = None) -> int:
        return self._ensure_unit_of_work().execute(sql, params)

    def execute_scalar32(self, sql: str, params: Params = None) -> int:
        return self._ensure_unit_of_work().execute_scalar32(sql, params)

    def execute_scalar64(self, sql: str, params: Params = None) -> int:
        return self._ensure_unit_of_work().execute_scalar64(sql, params)

    def commit(self) -> None:
        unit_of_work = self._ensure_unit_of_work()
        try:
            unit_of_work.commit()
        finally:
            self._state = ContextState.COMPLETED

    def rollback(self) -> None:
        unit_of_work = self._ensure_unit_of_work()
        try:
            unit_of_work.rollback()
        finally:
            self._state = ContextState.COMPLETED

    def close(self) -> None:
        """Dispose an unfinished unit of work; safe to call repeatedly."""
        if self._unit_of_work is not None:
            self._unit_of_work.close()
        self._state = ContextState.COMPLETED

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
