"""
Database session management utilities for transaction handling outside request scope.
"""

from contextlib import contextmanager
from typing import Generator
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from db.database import get_db
from utils.logging import get_logger

logger = get_logger(__name__)

@contextmanager
def managed_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions with automatic cleanup and transaction management.

    Used by scripts that run outside FastAPI's dependency injection.

    Example:
        with managed_db_session() as db:
            novel = crud.get_novel(db, novel_id)
        # Session is committed and closed
    """
    db_generator = get_db()
    db = next(db_generator)
    try:
        yield db
        db.commit()
        logger.debug("Database transaction committed successfully")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy error, rolling back transaction: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error, rolling back transaction: {e}")
        raise
    finally:
        db.close()
        logger.debug("Database session closed")

@contextmanager
def managed_db_transaction(db: Session) -> Generator[Session, None, None]:
    """
    Context manager for explicit transaction management with an existing session.

    Groups several CRUD calls that must land together (for example all the
    story elements found by one chapter analysis). The CRUD helpers called
    inside must not commit on their own; pass ``commit=False`` where offered.

    Example:
        with managed_db_transaction(db) as tx_db:
            crud.upsert_character(tx_db, novel_id, "Mary", commit=False)
            crud.upsert_place(tx_db, novel_id, "Tower", commit=False)
        # Transaction is committed or rolled back automatically
    """
    try:
        yield db
        db.commit()
        logger.debug("Explicit transaction committed successfully")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy error in explicit transaction, rolling back: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error in explicit transaction, rolling back: {e}")
        raise
