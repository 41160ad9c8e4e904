from contextlib import contextmanager
from sqlalchemy.orm import Session
from sqlalchemy.exc import DBAPIError, IntegrityError

from tracky.errors import DependencyUnavailable, TrackyError
from tracky.utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def unit_of_work(db: Session, operation: str, commit: bool = True):
    """
    Run a block of store reads/writes as one all-or-nothing transaction.

    Validation errors and constraint violations roll back and propagate
    unchanged. Any other driver-level failure rolls back and surfaces as
    DependencyUnavailable, so a failed write never leaves half of its rows
    behind.
    """
    try:
        yield
        if commit:
            db.commit()
    except (TrackyError, IntegrityError):
        db.rollback()
        raise
    except DBAPIError as e:
        db.rollback()
        logger.error(f"Store failure during {operation}: {e}")
        raise DependencyUnavailable(operation) from e
