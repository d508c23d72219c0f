"""
Database connection and session management.
Provides SQLAlchemy engine, session, and base class for models.
"""
from typing import Any, Dict
import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from .config import settings

# Set up logging
logger = logging.getLogger(__name__)

def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments for the configured backend.

    SQLite is opened for use across threads, since sync endpoints run in a
    threadpool. Server databases get connection liveness checks instead.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}

# Create SQLAlchemy engine for the client store
engine = create_engine(settings.sqlalchemy_database_url, **engine_options(settings.sqlalchemy_database_url))
logger.info(f"Client store engine created for backend: {engine.dialect.name}")

# Create session factory for database sessions
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

# Declarative base shared by the client models
Base = declarative_base()

def get_db():
    """
    Request-scoped session for the client repository.

    Yields:
        SQLAlchemy Session: closed once the response is sent
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
