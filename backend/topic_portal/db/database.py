"""
Storage client.

``Database`` owns the SQLAlchemy engine and session factory. The application
constructs one instance at startup, opens it in the lifespan hook and closes
it at shutdown; request handlers receive sessions through a dependency
instead of reaching for a module-level engine.
"""
import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from topic_portal.db.init_db import init_db

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    # connect_args is SQLite specific and allows access from multiple threads
    kwargs = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/").endswith("sqlite:"):
        # In-memory SQLite with StaticPool so the schema persists across connections
        kwargs["poolclass"] = StaticPool
    return kwargs


class Database:
    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def open(self) -> "Database":
        """Create the engine and session factory, then make sure the schema exists."""
        if self._engine is not None:
            return self
        self._engine = create_engine(self.url, echo=self.echo, **_engine_kwargs(self.url))
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        init_db(self._engine)
        logger.info("Database opened: %s", self._engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        logger.info("Database closed")
        self._engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def get_db(self) -> Generator[Session, None, None]:
        """Yield a session that is closed once the caller is done with it."""
        db = self.session()
        try:
            yield db
        finally:
            db.close()
