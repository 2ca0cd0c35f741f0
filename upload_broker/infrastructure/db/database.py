"""
Database connection management.

Supports:
  - SQLite (local dev, tests, no setup)
  - PostgreSQL (production)

The connection string comes from Settings.database_url.
"""

import logging
from contextlib import contextmanager
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from upload_broker.infrastructure.db.models import Base

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Map Heroku-style postgres:// URLs onto the psycopg2 driver."""
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg2://", 1)
    return url


def create_db_engine(url: str) -> Engine:
    """Create SQLAlchemy engine."""
    db_url = normalize_database_url(url)

    if db_url.startswith("sqlite"):
        engine = create_engine(
            db_url,
            connect_args={"check_same_thread": False, "timeout": 15},
            echo=False,
        )
    else:
        # PostgreSQL
        engine = create_engine(
            db_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            echo=False,
        )

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to `engine`."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables. Safe to call multiple times."""
    Base.metadata.create_all(engine)
    logger.info(f"Database initialized: {engine.url.render_as_string(hide_password=True)}")


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """One transaction: commit on success, rollback on error."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
