from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.database.base import Base
from backoffice.database.engine import register_text_functions
from backoffice.models import import_all_models


class DatabaseSwitch:
    """Flip ``down`` to make every query and commit fail."""

    def __init__(self):
        self.down = False

    def check(self, statement):
        if self.down:
            raise OperationalError(statement, {}, Exception("database is unavailable"))


def memory_engine():
    import_all_models()
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    register_text_functions(engine)
    Base.metadata.create_all(bind=engine)
    return engine


def session_factory(engine, switch=None):
    switch = switch or DatabaseSwitch()

    class SwitchableSession(Session):
        def execute(self, statement, *args, **kwargs):
            switch.check(str(statement))
            return super().execute(statement, *args, **kwargs)

        def commit(self):
            switch.check("COMMIT")
            super().commit()

    return sessionmaker(
        bind=engine,
        class_=SwitchableSession,
        autoflush=False,
        expire_on_commit=False,
    )
