"""
Unit-of-work helper wrapping persistence failures into StorageError.
"""
from contextlib import contextmanager
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def persist(db: Session, action: str):
    """Commit the work done inside the block, or roll back and raise StorageError."""
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Persistence failure while trying to {action}: {e}", exc_info=True)
        raise StorageError(f"Could not {action}") from e
