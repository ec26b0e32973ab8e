"""Database engine and session lifecycles for HTTP requests and message handling"""

from contextlib import contextmanager
from typing import Callable, Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from statement_gateway.config import settings

engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle_seconds,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    """
    One session per unit of work: an HTTP request or a single consumed message.

    Repositories commit their own writes; anything left uncommitted when the scope
    exits (e.g. after an exception) is rolled back by closing the session.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session"""
    with session_scope() as db:
        yield db
