"""SQLAlchemy engine and session management.

The database backend owns one session factory; engines are created
lazily from a URL so tests can point at a temporary SQLite file.
"""

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for ORM models
Base = declarative_base()


def init_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, making the parent directory of a SQLite file if needed.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log SQL statements

    Returns:
        Configured SQLAlchemy engine
    """
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        db_dir = Path(database_url[len("sqlite:///"):]).parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created database directory: {db_dir}")

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(
        database_url,
        connect_args=connect_args,
        pool_pre_ping=True,
        echo=echo,
    )
    logger.info(f"Database engine initialized: {database_url}")
    return engine


def create_session_factory(engine: Engine, create_schema: bool = True) -> sessionmaker:
    """Build a session factory bound to ``engine``.

    Args:
        engine: Engine to bind
        create_schema: Create missing tables before returning

    Returns:
        Configured sessionmaker instance
    """
    if create_schema:
        # Import registers the models with Base.metadata
        from folioshare.server.database import models  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.debug("Database tables created")

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def check_database_connection(engine: Optional[Engine]) -> bool:
    """Check if a database connection can be opened.

    Returns:
        True if connection is successful, False otherwise
    """
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
