from abc import ABC, abstractmethod
from sqlalchemy import Connection

class BaseDatabaseDriver(ABC):
    """Connection type: turns a connection string into opened connections."""

    def __init__(self, url: str, **options):
        self.url = url
        self.options = options

    @abstractmethod
    def connect(self) -> Connection:
        pass

    @abstractmethod
    def disconnect(self):
        pass
