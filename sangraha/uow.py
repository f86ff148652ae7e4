"""
Unit of Work

Couples every write of one business operation into a single transaction:
commit on clean exit, roll back on any exception. Storage failures surface as
StorageUnavailable so callers can retry without exposing driver details.

Usage:
    with UnitOfWork(db) as uow:
        booking = crud.get_booking(uow.session, booking_id)
        ledger.reserve(booking.facility_id, booking.quantity)
        booking.status = BookingStatus.ACTIVE
    # committed here, or nothing at all

Reads use `UnitOfWork(db, read_only=True)`: nothing is committed, but storage
errors are mapped the same way.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StorageUnavailable

logger = logging.getLogger("sangraha")


class UnitOfWork:

    def __init__(self, session: Session, read_only: bool = False):
        self.session = session
        self.read_only = read_only

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.read_only:
                return False
            try:
                self.session.commit()
            except SQLAlchemyError as e:
                self.session.rollback()
                logger.error(f"Commit failed, transaction rolled back: {e}")
                raise StorageUnavailable() from e
            return False

        self.session.rollback()
        if isinstance(exc_val, SQLAlchemyError):
            logger.error(f"Storage error, transaction rolled back: {exc_val}")
            raise StorageUnavailable() from exc_val
        # Business errors propagate unchanged
        return False
