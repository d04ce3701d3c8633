from backoffice.database.base import Base
from backoffice.database.engine import engine, ensure_sqlite_schema
from backoffice.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "engine", "ensure_sqlite_schema", "get_db", "SessionLocal", "session_scope"]
