import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from leavedesk.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the request-scoped session shared by the SQL-backed stores."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def write(self, action: str):
        """
        Commit on success. Any SQLAlchemy failure rolls the session back and
        surfaces as PersistenceError, so nothing half-written is committed.
        """
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{action} failed: {e}", exc_info=True)
            raise PersistenceError() from e
        except Exception:
            self.db.rollback()
            raise
