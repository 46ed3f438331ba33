"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from tagclear.core.config import get_settings
from tagclear.core.errors import ConnectionFailure, ConstraintViolation

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    engine = create_engine(settings.database_url, echo=settings.db_echo, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


@contextmanager
def get_session() -> Iterator[Session]:
    """Yield a fresh session, closing it (and discarding uncommitted work) on exit."""
    session: Session = _get_sessionmaker()()
    try:
        yield session
    except OperationalError as exc:
        raise ConnectionFailure(f"Database unavailable: {exc.orig}") from exc
    except IntegrityError as exc:
        raise ConstraintViolation(str(exc.orig)) from exc
    finally:
        session.close()
