"""
Database connection and session management.
Uses SQLAlchemy for ORM and connection pooling.
"""

import logging
from datetime import datetime, timezone
from contextlib import contextmanager
from typing import Any, Dict, Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for models"""


class Database:
    """
    Storage handle owning the engine and the session factory.

    Built once at startup and passed to whoever needs it; ``dispose()``
    releases the connection pool on shutdown.

    Usage:
        database = Database("sqlite:///./ledger.db")
        database.create_all()
        with database.session() as db:
            ...
        database.dispose()
    """

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 10,
        max_overflow: int = 20,
    ):
        engine_args: Dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        if url.startswith("sqlite"):
            # Sessions are handed across FastAPI worker threads
            engine_args["connect_args"] = {"check_same_thread": False}
        else:
            engine_args["pool_size"] = pool_size
            engine_args["max_overflow"] = max_overflow

        self.url = url
        self.engine = create_engine(url, **engine_args)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.POOL_SIZE,
            max_overflow=settings.MAX_OVERFLOW,
        )

    def create_all(self) -> None:
        """Create database tables"""
        # Registers every model with Base.metadata
        import ledger_api.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Yield a session and make sure it is closed afterwards."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.warning("database.ping.failed", exc_info=True)
            return False
        return True

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function to get database session.
    Yields session and ensures it's closed after use.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db here
            pass
    """
    with get_database(request).session() as db:
        yield db


def utcnow() -> datetime:
    """Timezone-aware current time, used for every stored timestamp."""
    return datetime.now(timezone.utc)
