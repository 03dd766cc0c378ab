"""
Unit of Work factory: one fresh connection and transaction per create().
"""

from abc import ABC, abstractmethod
from typing import Optional, Type
from dade.config import Settings, settings as app_settings
from dade.database.base import BaseDatabaseDriver
from dade.database.sqlalchemy_driver import SQLAlchemyDriver
from dade.exceptions.errors import ConfigurationError
from dade.logging.logger import get_logger
from .mapper import EntityMapper
from .unit_of_work import IUnitOfWork, UnitOfWork

logger = get_logger("unit_of_work_factory")


class IUnitOfWorkFactory(ABC):
    @abstractmethod
    def create(self) -> IUnitOfWork:
        pass


class UnitOfWorkFactory(IUnitOfWorkFactory):
    """Builds UnitOfWork instances for one connection string and connection type."""

    def __init__(
        self,
        connection_string: Optional[str],
        connection_type: Type[BaseDatabaseDriver] = SQLAlchemyDriver,
        mapper: Optional[EntityMapper] = None,
        **driver_options,
    ):
        if connection_string is None or not str(connection_string).strip():
            raise ConfigurationError("connection_string cannot be null or empty")

        self._connection_string = connection_string
        self.mapper = mapper
        self.driver = connection_type(connection_string, **driver_options)
        logger.debug(f"Factory ready for {connection_type.__name__}")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "UnitOfWorkFactory":
        """Create factory from DATABASE_URL / DB_ECHO settings."""
        settings = settings or app_settings
        kwargs.setdefault("echo", settings.DB_ECHO)
        return cls(settings.DATABASE_URL, **kwargs)

    @property
    def connection_string(self) -> str:
        return self._connection_string

    def create(self) -> UnitOfWork:
        """Open a new connection, begin a transaction and wrap both."""
        connection = self.driver.connect()
        try:
            return UnitOfWork(connection, mapper=self.mapper)
        except Exception:
            connection.close()
            raise

    def dispose(self) -> None:
        """Release the driver (engine and pooled connections)."""
        self.driver.disconnect()
