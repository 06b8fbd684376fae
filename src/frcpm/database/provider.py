"""
SQLAlchemy persistence provider.

Hands out one Session-backed handle per database task, with:
- Lazy engine creation and connection pooling
- Thread-safe SQLite settings (each worker gets its own connection)
- Schema creation for the FRCPM tables

Usage:
    from frcpm.database.provider import SQLAlchemyProvider

    provider = SQLAlchemyProvider("sqlite:///./data/frcpm.db")
    provider.create_schema()

    handle = provider.acquire_handle()
    handle.begin()
    handle.session.add(project)
    handle.commit()
    handle.release()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from frcpm.core.exceptions import DatabaseError, HandleAcquisitionError
from frcpm.database.models import create_all_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import SessionTransaction

logger = logging.getLogger(__name__)


class SessionHandle:
    """Transactional handle over a single SQLAlchemy Session.

    Operations run by a DatabaseTask receive this handle and work with
    ``handle.session``.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self._transaction: SessionTransaction | None = None
        self._released = False

    @property
    def is_released(self) -> bool:
        return self._released

    def begin(self) -> None:
        self._transaction = self.session.begin()
        # Connect now so connection failures surface before the operation runs
        self.session.connection()

    def commit(self) -> None:
        if self._transaction is None:
            raise DatabaseError("commit() called without begin()")
        self._transaction.commit()

    def rollback(self) -> None:
        if self._transaction is not None and self._transaction.is_active:
            self._transaction.rollback()

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self.session.close()


class SQLAlchemyProvider:
    """
    PersistenceProvider backed by a SQLAlchemy engine.

    Sessions are created with ``expire_on_commit=False`` so entities
    returned from background tasks stay readable after their session closes.

    Args:
        url: Database connection URL
        echo: Log SQL statements
        engine: Pre-built engine (url is then informational only)
        **engine_kwargs: Extra arguments for ``create_engine``
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        engine: Engine | None = None,
        **engine_kwargs: Any,
    ) -> None:
        self.url = url
        self.echo = echo
        self._engine = engine
        self._engine_kwargs = engine_kwargs
        self._sessionmaker: sessionmaker[Session] | None = None

    def _get_engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            url = make_url(self.url)
            kwargs: dict[str, Any] = dict(self._engine_kwargs)

            if url.get_backend_name() == "sqlite":
                # Sessions move between worker threads
                kwargs.setdefault("connect_args", {"check_same_thread": False})
                if url.database in (None, "", ":memory:"):
                    kwargs.setdefault("poolclass", StaticPool)
                else:
                    Path(url.database).parent.mkdir(parents=True, exist_ok=True)

            self._engine = create_engine(url, echo=self.echo, **kwargs)
            logger.debug("Created engine for %s", url.render_as_string(hide_password=True))

        return self._engine

    @property
    def engine(self) -> Engine:
        return self._get_engine()

    def _get_sessionmaker(self) -> sessionmaker[Session]:
        if self._sessionmaker is None:
            self._sessionmaker = sessionmaker(bind=self._get_engine(), expire_on_commit=False)
        return self._sessionmaker

    def acquire_handle(self) -> SessionHandle:
        """Open a new session handle.

        Raises:
            HandleAcquisitionError: If the engine or session cannot be created.
        """
        try:
            return SessionHandle(self._get_sessionmaker()())
        except SQLAlchemyError as exc:
            raise HandleAcquisitionError(f"Cannot open a database session: {exc}") from exc

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager for synchronous sessions."""
        session = self._get_sessionmaker()()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create the FRCPM tables. Safe to call multiple times."""
        create_all_tables(self._get_engine())
        logger.info("Database schema ready")

    def dispose(self) -> None:
        """Close pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
