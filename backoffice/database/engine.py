import logging
import sqlite3
from typing import Optional

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from backoffice.config import get_settings
from backoffice.core.text import fold_text

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30

# Columns added after the first release; older SQLite files get them on start-up.
SQLITE_ADDED_COLUMNS = {
    "inventory_items": {
        "subcategory": "TEXT NOT NULL DEFAULT ''",
        "barcode": "TEXT NOT NULL DEFAULT ''",
        "supplier": "TEXT NOT NULL DEFAULT ''",
        "image_url": "TEXT",
        "dimensions": "JSON",
        "weight": "JSON",
        "tags": "JSON",
        "min_stock_count": "INTEGER NOT NULL DEFAULT 1",
    },
    "sales": {
        "status": "TEXT NOT NULL DEFAULT 'completed'",
    },
}


def is_memory_sqlite(url) -> bool:
    url = make_url(url)
    if url.get_backend_name() != "sqlite":
        return False
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def _install_sqlite_pragmas(engine: Engine, in_memory: bool) -> None:
    busy_timeout_ms = SQLITE_BUSY_TIMEOUT_SECONDS * 1000

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute(f"PRAGMA busy_timeout={busy_timeout_ms}")
            if not in_memory:
                try:
                    cursor.execute("PRAGMA journal_mode=WAL")
                    cursor.execute("PRAGMA synchronous=NORMAL")
                except sqlite3.DatabaseError:
                    logger.warning("SQLite WAL mode unavailable; using the default journal.")
        finally:
            cursor.close()


def register_text_functions(engine: Engine) -> None:
    """Replace SQLite's ASCII-only ``lower`` with the Unicode case-fold."""

    @event.listens_for(engine, "connect")
    def _register_lower(dbapi_connection, _connection_record):
        dbapi_connection.create_function("lower", 1, fold_text, deterministic=True)


def create_db_engine(database_url: str) -> Engine:
    """Engine for ``database_url``; SQLite gets thread sharing, pragmas and StaticPool in memory."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    in_memory = is_memory_sqlite(url)
    kwargs = {}
    if in_memory:
        kwargs["poolclass"] = StaticPool
    sqlite_engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS},
        pool_pre_ping=True,
        **kwargs,
    )
    _install_sqlite_pragmas(sqlite_engine, in_memory)
    register_text_functions(sqlite_engine)
    return sqlite_engine


def _quote(identifier: str) -> str:
    return '"{}"'.format(identifier.replace('"', '""'))


def ensure_sqlite_schema(bind: Optional[Engine] = None) -> list[str]:
    """Add columns missing from tables created by older releases; returns what was added."""
    bind = bind if bind is not None else engine
    if bind.dialect.name != "sqlite":
        return []
    added = []
    with bind.begin() as conn:
        inspector = inspect(conn)
        for table_name, columns in SQLITE_ADDED_COLUMNS.items():
            if not inspector.has_table(table_name):
                continue
            existing = {column["name"] for column in inspector.get_columns(table_name)}
            for column_name, ddl in columns.items():
                if column_name in existing:
                    continue
                # noinspection SqlNoDataSourceInspection
                conn.exec_driver_sql(
                    f"ALTER TABLE {_quote(table_name)} ADD COLUMN {_quote(column_name)} {ddl}"
                )
                added.append(f"{table_name}.{column_name}")
                logger.info("Added column %s.%s", table_name, column_name)
    return added


engine = create_db_engine(get_settings().DATABASE_URL)


__all__ = [
    "create_db_engine",
    "engine",
    "ensure_sqlite_schema",
    "is_memory_sqlite",
    "register_text_functions",
]
