"""
Entity mapping strategy: converts between table rows and SQLModel entities.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence, Type, TypeVar, Union
from sqlalchemy import Column, Connection, Table, delete, insert, select, text, update
from sqlmodel import SQLModel
from dade.exceptions.errors import MappingError

T = TypeVar("T", bound=SQLModel)

# Raw SQL parameters: one mapping, or a sequence of mappings for executemany
Params = Optional[Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]]


class EntityMapper(ABC):
    """Capability set the repository and unit of work delegate to."""

    @abstractmethod
    def get(self, connection: Connection, model: Type[T], key: Any) -> Optional[T]:
        """Fetch entity by primary key, None when absent."""
        pass

    @abstractmethod
    def insert(self, connection: Connection, entity: SQLModel) -> Any:
        """Insert entity and return its primary key."""
        pass

    @abstractmethod
    def update(self, connection: Connection, entity: SQLModel) -> bool:
        """Update entity by primary key; False when no row matched."""
        pass

    @abstractmethod
    def delete(self, connection: Connection, entity: SQLModel) -> bool:
        """Delete entity by primary key; False when no row matched."""
        pass

    @abstractmethod
    def get_all(self, connection: Connection, model: Type[T]) -> List[T]:
        pass

    @abstractmethod
    def query(self, connection: Connection, model: Type[T], sql: str, params: Params = None) -> List[T]:
        pass

    @abstractmethod
    def query_single(self, connection: Connection, model: Type[T], sql: str, params: Params = None) -> T:
        """Run query expecting exactly one row."""
        pass

    @abstractmethod
    def execute(self, connection: Connection, sql: str, params: Params = None) -> int:
        """Run a non-query statement and return the affected row count."""
        pass

    @abstractmethod
    def execute_scalar(self, connection: Connection, sql: str, params: Params = None) -> Any:
        pass


class SQLModelMapper(EntityMapper):
    """
    EntityMapper over SQLAlchemy Core and SQLModel table models.

    Column names are expected to equal field names, and each table must have a
    single-column primary key. Columns of raw query results that the model does
    not declare are ignored.
    """

    @staticmethod
    def table_of(model: Type[SQLModel]) -> Table:
        table = getattr(model, "__table__", None)
        if table is None:
            raise MappingError(f"{model.__name__} is not a table model (declare it with table=True)")
        return table

    @classmethod
    def key_column(cls, model: Type[SQLModel]) -> Column:
        columns = list(cls.table_of(model).primary_key.columns)
        if len(columns) != 1:
            raise MappingError(
                f"{model.__name__} must have exactly one primary key column",
                detail={"primary_key": [c.name for c in columns]},
            )
        return columns[0]

    @staticmethod
    def _to_entity(model: Type[T], row: Mapping[str, Any]) -> T:
        fields = model.model_fields
        return model(**{k: v for k, v in row.items() if k in fields})

    @staticmethod
    def _params(params: Params):
        return {} if params is None else params

    def get(self, connection: Connection, model: Type[T], key: Any) -> Optional[T]:
        table = self.table_of(model)
        statement = select(table).where(self.key_column(model) == key)
        row = connection.execute(statement).mappings().first()
        return self._to_entity(model, row) if row is not None else None

    def insert(self, connection: Connection, entity: SQLModel) -> Any:
        model = type(entity)
        table = self.table_of(model)
        key = self.key_column(model)
        values = {c.name: getattr(entity, c.name) for c in table.columns}
        if values.get(key.name) is None:
            # Let the database generate the key
            values.pop(key.name, None)
        result = connection.execute(insert(table).values(**values))
        new_key = result.inserted_primary_key[0]
        if getattr(entity, key.name) is None:
            setattr(entity, key.name, new_key)
        return new_key

    def update(self, connection: Connection, entity: SQLModel) -> bool:
        model = type(entity)
        table = self.table_of(model)
        key = self.key_column(model)
        values = {c.name: getattr(entity, c.name) for c in table.columns if c.name != key.name}
        statement = update(table).where(key == getattr(entity, key.name)).values(**values)
        return connection.execute(statement).rowcount > 0

    def delete(self, connection: Connection, entity: SQLModel) -> bool:
        model = type(entity)
        key = self.key_column(model)
        statement = delete(self.table_of(model)).where(key == getattr(entity, key.name))
        return connection.execute(statement).rowcount > 0

    def get_all(self, connection: Connection, model: Type[T]) -> List[T]:
        rows = connection.execute(select(self.table_of(model))).mappings().all()
        return [self._to_entity(model, row) for row in rows]

    def query(self, connection: Connection, model: Type[T], sql: str, params: Params = None) -> List[T]:
        rows = connection.execute(text(sql), self._params(params)).mappings().all()
        return [self._to_entity(model, row) for row in rows]

    def query_single(self, connection: Connection, model: Type[T], sql: str, params: Params = None) -> T:
        # one() raises NoResultFound / MultipleResultsFound
        row = connection.execute(text(sql), self._params(params)).mappings().one()
        return self._to_entity(model, row)

    def execute(self, connection: Connection, sql: str, params: Params = None) -> int:
        return connection.execute(text(sql), self._params(params)).rowcount

    def execute_scalar(self, connection: Connection, sql: str, params: Params = None) -> Any:
        return connection.execute(text(sql), self._params(params)).scalar()


default_mapper = SQLModelMapper()
