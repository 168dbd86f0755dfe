"""Database engine and session management."""

from collections.abc import Generator
from typing import TYPE_CHECKING

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from app.core.config import Settings


def create_db_engine(settings: "Settings") -> Engine:
    """Build the process-wide engine for DATABASE_URL."""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite lives inside one connection; share it across sessions.
        if url in ("sqlite://", "sqlite+pysqlite://") or ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=settings.DEBUG, **kwargs)
    return create_engine(url, pool_pre_ping=True, echo=settings.DEBUG)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
