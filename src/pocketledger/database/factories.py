"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from pocketledger.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_PATH = Path.home() / ".pocketledger" / "pocketledger.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, uses
            POCKETLEDGER_DB_PATH, then ~/.pocketledger/pocketledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = Path(database_path or os.environ.get("POCKETLEDGER_DB_PATH") or DEFAULT_DB_PATH).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database instance from a URL, falling back to SQLite.

    Args:
        database_url: Any SQLAlchemy URL. If None, checks POCKETLEDGER_DATABASE_URL.
        database_path: SQLite file used when no URL is configured

    Returns:
        SQLAlchemyDatabase instance
    """
    database_url = database_url or os.environ.get("POCKETLEDGER_DATABASE_URL")
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
