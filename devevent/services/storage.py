import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devevent.core.exceptions import DuplicateKey, RecordValidationError
from devevent.database.db import Base

logger = logging.getLogger(__name__)


def save(db: Session, record: Base, *, duplicate: DuplicateKey) -> None:
    """
    Commit the pending write and reload ``record``.

    Validation runs in the flush hooks, so a rejected record never reaches the
    database. A unique index violation is reported as ``duplicate``. Either
    way the session is rolled back and prior state is left unchanged.
    """
    try:
        db.commit()
    except RecordValidationError as exc:
        db.rollback()
        logger.warning("Rejected %s write: %s", type(record).__name__, exc.message)
        raise
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Rejected %s write: %s", type(record).__name__, duplicate.message)
        raise duplicate from exc
    db.refresh(record)
