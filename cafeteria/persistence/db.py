from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from cafeteria.persistence.models import Base

logger = logging.getLogger(__name__)


def create_engine_from_url(url: str) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


class Database:
    """Owns the engine and session factory for one process.

    Built once at startup and handed to whoever needs sessions; ``dispose``
    releases the connection pool at shutdown.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    def open(self) -> "Database":
        if self.engine is None:
            self.engine = create_engine_from_url(self.url)
            self._session_factory = sessionmaker(
                bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False
            )
            logger.info("database opened: dialect=%s", self.engine.dialect.name)
        return self

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("database closed")
        self.engine = None
        self._session_factory = None

    def init_schema(self) -> None:
        Base.metadata.create_all(bind=self._require_engine())

    def drop_schema(self) -> None:
        Base.metadata.drop_all(bind=self._require_engine())

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("database is not open")
        return self.engine

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        if self._session_factory is None:
            raise RuntimeError("database is not open")
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request) -> Generator[Session, None, None]:
    with get_database(request).session_scope() as session:
        yield session
