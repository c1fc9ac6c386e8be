"""Engine, session factory and transaction scope for the ledger store."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from hours.app.core.errors import PersistenceError
from hours.app.core.settings import get_settings

logger = logging.getLogger(__name__)


def create_ledger_engine(database_url: str) -> Engine:
    """Create an engine; SQLite files get their directory created and foreign keys enforced."""
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    ledger_engine = create_engine(database_url, connect_args=connect_args)

    if url.get_backend_name() == "sqlite":

        @event.listens_for(ledger_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return ledger_engine


engine = create_ledger_engine(get_settings().database_url)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Scope a multi-statement unit of work: commit on normal exit, roll back on any error.

    Storage failures surface as PersistenceError; every other exception is re-raised
    unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Transaction rolled back after storage error: %s", exc)
        raise PersistenceError(f"transaction failed: {exc}") from exc
    except BaseException:
        db.rollback()
        raise
