"""Database engine and session factory"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loan_finder.config import settings
from loan_finder.infrastructure.database.models import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite gets thread-sharing, in-memory SQLite a single shared connection"""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def default_session_factory() -> sessionmaker:
    """Session factory for the configured database_url"""
    return build_session_factory(build_engine(settings.database_url))
