"""Database engine and session management"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from credit_settlement.config import settings
from credit_settlement.infrastructure.database.models import Base
from credit_settlement.infrastructure.database.repositories import RateTierRepository


@lru_cache
def get_engine() -> Engine:
    """Create the pooled engine on first use so importing the app never connects"""
    if settings.database_url.startswith("sqlite"):
        return create_engine(settings.database_url, connect_args={"check_same_thread": False})
    # Tier reads are short; a small pool recycled hourly avoids stale connections
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=3600,
    )


@lru_cache
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db() -> None:
    """Create tables and seed the default tier table when configured to"""
    Base.metadata.create_all(bind=get_engine())
    if settings.seed_default_tiers:
        db = get_session_factory()()
        try:
            RateTierRepository(db).seed_defaults()
        finally:
            db.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
