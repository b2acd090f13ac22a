from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


def _enable_sqlite_fks(dbapi_conn, _record):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str):
        if url.startswith("sqlite"):
            self.engine = create_engine(url, connect_args={"check_same_thread": False})
            event.listen(self.engine, "connect", _enable_sqlite_fks)
        else:
            self.engine = create_engine(url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    def session(self) -> Session:
        return self.SessionLocal()

    def create_all(self):
        import models  # noqa: F401  registers the mapped tables

        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    s = request.app.state.database.session()
    try:
        yield s
    finally:
        s.close()
