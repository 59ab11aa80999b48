"""Database initialization - runs on backend startup."""
import logging

from sqlalchemy import text

from numtrip.infrastructure.persistence import models  # noqa: F401  registers tables on Base
from numtrip.infrastructure.persistence.db import Base, SessionLocal, engine

logger = logging.getLogger(__name__)


def initialize_database() -> bool:
    """Create any missing tables.

    Existing tables are left untouched, so this is safe on every startup.
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database schema initialized successfully")
        return True
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        return False


def check_database_health(session=None) -> bool:
    """Run a trivial query against the database.

    Returns:
        bool: True if the database answered, False otherwise
    """
    owns_session = session is None
    session = session or SessionLocal()
    try:
        session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Error checking database health: {e}")
        return False
    finally:
        if owns_session:
            session.close()
