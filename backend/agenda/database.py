"""Database engine and helpers.

This module builds the SQLModel/SQLAlchemy engine for the local SQLite
store and provides the helpers used by the application and tests. The
engine is owned by the FastAPI application (`app.state.engine`) and
handed to request handlers through the `get_session` dependency, so
tests can point each application at its own database file.
"""

import logging
from pathlib import Path

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from . import models

logger = logging.getLogger("agenda.db")

# Creation order is fixed: users first, then subjects.
TABLES = (models.User.__table__, models.Subject.__table__)


def build_engine(db_path: Path) -> Engine:
    """Return an engine for the SQLite file at `db_path`.

    The file itself is only created on first connect; see
    `create_db_and_tables`.
    """
    return create_engine(f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False})


def create_db_and_tables(engine: Engine, db_path: Path) -> None:
    """Create the store file and its tables if they do not exist yet.

    Runs during application startup and must finish before the server
    accepts requests. Each table is created with `CREATE TABLE IF NOT
    EXISTS` semantics, so calling this twice is harmless.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Using SQLite store at %s", db_path)
    for table in TABLES:
        SQLModel.metadata.create_all(engine, tables=[table])
        logger.info("Table %r created or already present", table.name)


def get_session(request: Request):
    """Yield a database `Session` bound to the application's engine.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(request.app.state.engine) as session:
        yield session
