"""Engine and session helpers."""

from contextlib import contextmanager, nullcontext
from typing import ContextManager, Generator, Optional
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.session import Session
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


def engine_for(database_uri: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite is shared across threads."""
    if 'sqlite' in database_uri:
        args = {"check_same_thread": False}
    else:
        args = {}
    if database_uri in ('sqlite://', 'sqlite:///:memory:'):
        return create_engine(database_uri, echo=echo, connect_args=args,
                             poolclass=StaticPool)
    return create_engine(database_uri, echo=echo, connect_args=args)


def shares_connection(engine: Engine) -> bool:
    """Whether every session on ``engine`` uses the same connection."""
    return isinstance(engine.pool, StaticPool)


def create_all(engine: Engine) -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(engine)


def drop_all(engine: Engine) -> None:
    """Drop all tables in the database."""
    Base.metadata.drop_all(engine)


@contextmanager
def transaction(sessions: sessionmaker,
                lock: Optional[ContextManager] = None) \
        -> Generator[Session, None, None]:
    """
    Context manager for database transaction.

    Pass ``lock`` when sessions share a connection, to keep their
    transactions from interleaving.
    """
    with lock if lock is not None else nullcontext():
        session = sessions()
        try:
            yield session
            session.commit()
        except Exception as e:
            logger.error('Commit failed, rolling back: %s', str(e))
            session.rollback()
            raise
        finally:
            session.close()
