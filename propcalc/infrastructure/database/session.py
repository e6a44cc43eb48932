"""Engine and session factory for the alert and milestone tables"""

from typing import Any, Dict
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from propcalc.config import Settings, settings


def engine_options(config: Settings) -> Dict[str, Any]:
    """Pool options for Postgres; SQLite gets a thread-shareable connection instead"""
    if config.database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_pre_ping": True,
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
        "pool_recycle": config.db_pool_recycle_seconds,
    }


engine = create_engine(settings.database_url, **engine_options(settings))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Request-scoped session; job endpoints commit or roll back themselves"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
