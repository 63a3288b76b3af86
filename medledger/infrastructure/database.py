import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from sqlalchemy.pool import StaticPool

from medledger.core.config import Settings, settings as default_settings
from medledger.core.exceptions import handle_database_error

logger = logging.getLogger(__name__)

# Base model
Base = declarative_base()


class Database:
    """Store handle shared by every service of one registry.

    All mutating calls go through ``unit_of_work`` which holds a single
    re-entrant lock and one transaction for the whole call, so callers never
    observe a half-applied operation.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        url = self.settings.DATABASE_URL
        self.is_sqlite = "sqlite" in url.lower()

        if self.is_sqlite:
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in url or url.rstrip("/") == "sqlite:":
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {"pool_pre_ping": True, "pool_recycle": 3600}
            if self.settings.DATABASE_POOL_SIZE:
                engine_kwargs["pool_size"] = self.settings.DATABASE_POOL_SIZE

        self.engine = create_engine(url, echo=self.settings.DEBUG, **engine_kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )
        self._lock = threading.RLock()

    def init_db(self) -> None:
        """Initialize database tables"""
        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        """Close database connections"""
        self.engine.dispose()

    @contextmanager
    def unit_of_work(self, operation: str = "operation") -> Iterator[Session]:
        """Run one serialized, all-or-nothing operation"""
        with self._lock:
            db = self.SessionLocal()
            try:
                yield db
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise handle_database_error(e, operation) from e
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Read-only session; nothing is committed"""
        with self._lock:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.rollback()
                db.close()
