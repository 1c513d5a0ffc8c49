from contextlib import contextmanager
from logging import Logger
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pharminc.core.errors import ConflictError, StoreError


@contextmanager
def store_operation(
    db: Session, logger: Logger, action: str, conflict_detail: Optional[str] = None
):
    """
    Wrap store calls: a unique-constraint violation is rolled back and
    surfaced as a ConflictError (409, conflict_detail); any other
    SQLAlchemy failure is rolled back, logged with its cause, and surfaced
    as a StoreError (500, fixed message).
    """
    try:
        yield
    except IntegrityError:
        db.rollback()
        logger.warning(f"Integrity conflict during {action}")
        raise ConflictError(conflict_detail)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database error during {action}")
        raise StoreError()
