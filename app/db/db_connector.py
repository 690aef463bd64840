"""SQLAlchemy connector for the tag/product database.

Environment Variables:
    DATABASE_URL (default: sqlite:///data/tags.db)
    Optional: DATABASE_ECHO ("true" logs every SQL statement)
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from config.constants import DEFAULT_DATABASE_URL
from config.exceptions import PipelineError, StoreUnavailableError
from db.models import Base
from utils.logging import get_logger

logger = get_logger(__name__)


class DBConnector:
    """Manage database sessions via a lazily-created SQLAlchemy engine."""

    def __init__(self, url: str | None = None, echo: bool = False) -> None:
        self.url = url or DEFAULT_DATABASE_URL
        self.echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @classmethod
    def from_env(cls) -> "DBConnector":
        load_dotenv()
        return cls(
            url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            echo=os.getenv("DATABASE_ECHO", "false").lower() == "true",
        )

    # ------------------------ Internal helpers ------------------------
    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            # Records leave the session scope; keep their loaded attributes
            self._session_factory = sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
        return self._session_factory

    def _create_engine(self) -> Engine:
        try:
            url = make_url(self.url)
        except Exception as exc:
            raise PipelineError(f"Invalid DATABASE_URL '{self.url}': {exc}") from exc

        if url.get_backend_name() == "sqlite":
            if url.database and url.database != ":memory:":
                Path(url.database).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(url, echo=self.echo)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        else:
            engine = create_engine(
                url,
                echo=self.echo,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        logger.debug("Engine created for backend '%s'", url.get_backend_name())
        return engine

    # ---------------- Schema / session helpers ----------------
    def has_schema(self) -> bool:
        """True when every table the models declare already exists."""
        try:
            existing = set(inspect(self.engine).get_table_names())
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Schema inspection failed: {exc}") from exc
        return set(Base.metadata.tables).issubset(existing)

    def create_schema(self) -> None:
        """Create the tags/products tables if they are missing."""
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Schema creation failed: {exc}") from exc
        logger.info("Schema ready: %s", ", ".join(sorted(inspect(self.engine).get_table_names())))

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context-managed session (commit on success, rollback on exception).

        IntegrityError is re-raised untouched so stores can treat unique
        violations as conflicts; any other SQLAlchemy failure becomes
        StoreUnavailableError.
        """
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Database operation failed: %s", exc)
            raise StoreUnavailableError(f"Database operation failed: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


def _enable_sqlite_foreign_keys(dbapi_conn, conn_rec) -> None:
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


__all__ = ["DBConnector"]
