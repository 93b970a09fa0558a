"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from tradejournal.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "TRADEJOURNAL_DB_PATH"
DEFAULT_DB_PATH = Path("~/.tradejournal/tradejournal.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the journal database file and make sure its directory exists.

    An explicit path wins over the TRADEJOURNAL_DB_PATH environment variable,
    which wins over ~/.tradejournal/tradejournal.db.
    """
    raw_path = database_path or os.environ.get(DB_PATH_ENV_VAR)
    path = Path(raw_path).expanduser() if raw_path else DEFAULT_DB_PATH.expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed journal database.

    Args:
        database_path: Path to the SQLite file (see resolve_database_path)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    logger.debug("Using journal database %s", path)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
