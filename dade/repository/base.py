"""
Repository abstract base class and generic implementation.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar
from sqlalchemy import Connection, Transaction
from sqlmodel import SQLModel
from dade.exceptions.errors import TransactionCompletedError
from .mapper import EntityMapper, Params, default_mapper

T = TypeVar("T", bound=SQLModel)
TKey = TypeVar("TKey")


class IDadeSet(ABC, Generic[T, TKey]):
    """Repository interface; CRUD and query operations for one entity type."""

    @abstractmethod
    def get(self, id: TKey) -> Optional[T]:
        """Get entity by primary key; None when absent."""
        pass

    @abstractmethod
    def add(self, entity: T) -> TKey:
        """Insert entity; returns the generated key."""
        pass

    @abstractmethod
    def add_many(self, entities: Iterable[T]) -> int:
        """Insert entities; returns the number inserted."""
        pass

    @abstractmethod
    def update(self, entity: T) -> bool:
        """Update entity by key; False when the key does not exist."""
        pass

    @abstractmethod
    def update_many(self, entities: Iterable[T]) -> bool:
        pass

    @abstractmethod
    def delete(self, entity: T) -> bool:
        """Delete entity by key; False when the key does not exist."""
        pass

    @abstractmethod
    def delete_many(self, entities: Iterable[T]) -> bool:
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        """Get all entities (no paging)."""
        pass

    @abstractmethod
    def query(self, query: str, params: Params = None) -> List[T]:
        pass

    @abstractmethod
    def single(self, query: str, params: Params = None) -> T:
        """Exactly one entity; NoResultFound or MultipleResultsFound otherwise."""
        pass

    @abstractmethod
    def any(self, query: str, params: Params = None) -> bool:
        """True when the count query's scalar is greater than zero."""
        pass

    @abstractmethod
    def execute(self, query: str, params: Params = None) -> int:
        pass


class DadeSet(IDadeSet[T, TKey]):
    """
    Generic repository bound to a transaction it does not own.

    Every call runs on the transaction's connection. The *_async variants run
    the synchronous call in a worker thread so the event loop is not blocked;
    they must still be awaited one at a time per transaction.
    """

    def __init__(self, transaction: Transaction, model: Type[T], mapper: Optional[EntityMapper] = None):
        """Initialize set with a shared transaction and the entity model."""
        self.transaction = transaction
        self.model = model
        self.mapper = mapper or default_mapper

    @property
    def connection(self) -> Connection:
        if not self.transaction.is_active:
            raise TransactionCompletedError(
                f"Transaction for {self.model.__name__} set is no longer active"
            )
        return self.transaction.connection

    def get(self, id: TKey) -> Optional[T]:
        return self.mapper.get(self.connection, self.model, id)

    def add(self, entity: T) -> TKey:
        return self.mapper.insert(self.connection, entity)

    def add_many(self, entities: Iterable[T]) -> int:
        connection = self.connection
        count = 0
        for entity in entities:
            self.mapper.insert(connection, entity)
            count += 1
        return count

    def update(self, entity: T) -> bool:
        return self.mapper.update(self.connection, entity)

    def update_many(self, entities: Iterable[T]) -> bool:
        connection = self.connection
        results = [self.mapper.update(connection, entity) for entity in entities]
        return all(results)

    def delete(self, entity: T) -> bool:
        return self.mapper.delete(self.connection, entity)

    def delete_many(self, entities: Iterable[T]) -> bool:
        connection = self.connection
        results = [self.mapper.delete(connection, entity) for entity in entities]
        return all(results)

    def get_all(self) -> List[T]:
        return self.mapper.get_all(self.connection, self.model)

    def query(self, query: str, params: Params = None) -> List[T]:
        return self.mapper.query(self.connection, self.model, query, params)

    def single(self, query: str, params: Params = None) -> T:
        return self.mapper.query_single(self.connection, self.model, query, params)

    def any(self, query: str, params: Params = None) -> bool:
        value = self.mapper.execute_scalar(self.connection, query, params)
        return (value or 0) > 0

    def execute(self, query: str, params: Params = None) -> int:
        return self.mapper.execute(self.connection, query, params)

    async def get_async(self, id: TKey) -> Optional[T]:
        return await asyncio.to_thread(self.get, id)

    async def add_async(self, entity: T) -> TKey:
        return await asyncio.to_thread(self.add, entity)

    async def add_many_async(self, entities: Iterable[T]) -> int:
        return await asyncio.to_thread(self.add_many, list(entities))

    async def update_async(self, entity: T) -> bool:
        return await asyncio.to_thread(self.update, entity)

    async def update_many_async(self, entities: Iterable[T]) -> bool:
        return await asyncio.to_thread(self.update_many, list(entities))

    async def delete_async(self, entity: T) -> bool:
        return await asyncio.to_thread(self.delete, entity)

    async def delete_many_async(self, entities: Iterable[T]) -> bool:
        return await asyncio.to_thread(self.delete_many, list(entities))

    async def get_all_async(self) -> List[T]:
        return await asyncio.to_thread(self.get_all)

    async def query_async(self, query: str, params: Params = None) -> List[T]:
        return await asyncio.to_thread(self.query, query, params)

    async def single_async(self, query: str, params: Params = None) -> T:
        return await asyncio.to_thread(self.single, query, params)

    async def any_async(self, query: str, params: Params = None) -> bool:
        return await asyncio.to_thread(self.any, query, params)

    async def execute_async(self, query: str, params: Params = None) -> int:
        return await asyncio.to_thread(self.execute, query, params)
