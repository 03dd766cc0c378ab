from sqlalchemy import Connection, create_engine, make_url
from .base import BaseDatabaseDriver

class SQLAlchemyDriver(BaseDatabaseDriver):
    def __init__(self, url: str, echo: bool = False, **options):
        super().__init__(url, echo=echo, **options)
        connect_args = dict(options.pop("connect_args", {}))
        if make_url(url).get_backend_name() == "sqlite":
            # Async repository calls hand the connection to a worker thread
            connect_args.setdefault("check_same_thread", False)
        self.engine = create_engine(url, echo=echo, connect_args=connect_args, **options)

    def connect(self) -> Connection:
        """Open a new connection (checked out from the engine's pool)."""
        return self.engine.connect()

    def disconnect(self):
        """Dispose the engine and every pooled connection."""
        self.engine.dispose()
