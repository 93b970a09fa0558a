"""Account store and import format persistence."""

from tradejournal.database.base import Database
from tradejournal.database.factories import create_sqlite_database, resolve_database_path
from tradejournal.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database", "resolve_database_path"]
