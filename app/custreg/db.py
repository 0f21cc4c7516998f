from __future__ import annotations

import logging
from contextlib import contextmanager
from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from app.custreg.config import Settings, require_database_path

logger = logging.getLogger(__name__)


class ConnectionProvider:
    """
    Hands out short-lived sessions against the configured SQLite file.

    The engine is built lazily on first use so a provider can be constructed
    before the path is known; an unset path surfaces as ConfigurationError at
    the first operation, not at construction.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker[Session] | None = None

    @property
    def database_path(self) -> str:
        return require_database_path(self.settings)

    @property
    def engine(self) -> Engine:
        return self._build()[0]

    def _build(self) -> tuple[Engine, sessionmaker[Session]]:
        if self._engine is None or self._sessionmaker is None:
            path = self.database_path
            # NullPool: no pooled file handle survives past a single operation.
            engine = create_engine(self.settings.database_url, future=True, poolclass=NullPool)
            if self.settings.env not in ("prod", "production"):
                @event.listens_for(engine, "connect")
                def _receive_connect(dbapi_connection, connection_record):  # type: ignore[no-redef]
                    logger.debug("DB connection opened: %s", path)

            self._engine = engine
            self._sessionmaker = sessionmaker(
                bind=engine,
                class_=Session,
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
                future=True,
            )
        return self._engine, self._sessionmaker

    @contextmanager
    def connect(self) -> Generator[Session, None, None]:
        """
        Yields a session and commits/rolls back. The session is always closed.
        """
        _, sm = self._build()
        s: Session = sm()
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise
        finally:
            s.close()
