"""
Capacity ledger: the only writer of Facility.available_capacity.

Every mutation is a single UPDATE statement whose new value is computed by
the database from the row's current value, so concurrent reserve/release
calls on one facility cannot act on a stale read. Changes are flushed before
returning; the enclosing unit of work decides when they commit.
"""
import logging

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from . import models
from .errors import InsufficientCapacity, InvalidRequest, NotFound

logger = logging.getLogger("sangraha")

Facility = models.Facility


class CapacityLedger:

    def __init__(self, db: Session):
        self.db = db

    def _load(self, facility_id: str, for_update: bool = False) -> Facility:
        stmt = (
            select(Facility)
            .where(Facility.id == facility_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        facility = self.db.execute(stmt).scalars().first()
        if facility is None:
            raise NotFound("Facility not found.")
        return facility

    def _apply(self, facility_id: str, *criteria, **values) -> int:
        stmt = (
            update(Facility)
            .where(Facility.id == facility_id, *criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def available(self, facility_id: str) -> int:
        return self._load(facility_id).available_capacity

    def reserve(self, facility_id: str, amount: int) -> int:
        """
        Takes `amount` kg out of the facility's available capacity.

        Raises InsufficientCapacity if `amount` is not positive or more than
        what is currently available. Returns the new available capacity.
        """
        if amount is None or amount <= 0:
            raise InsufficientCapacity("Reservation amount must be positive.")

        self.db.flush()
        updated = self._apply(
            facility_id,
            Facility.available_capacity >= amount,
            available_capacity=Facility.available_capacity - amount,
        )
        facility = self._load(facility_id)
        if updated == 0:
            raise InsufficientCapacity(
                f"Only {facility.available_capacity} kg available at {facility.name}, "
                f"{amount} kg requested."
            )

        logger.info(f"Reserved {amount} kg at facility {facility_id}; {facility.available_capacity} kg left.")
        return facility.available_capacity

    def release(self, facility_id: str, amount: int) -> int:
        """
        Returns `amount` kg to the facility, never above total capacity.
        """
        self.db.flush()
        facility = self._load(facility_id, for_update=True)
        if amount is None or amount <= 0:
            return facility.available_capacity

        if facility.available_capacity + amount > facility.total_capacity:
            # Usually a double release; keep the clamp but make it visible
            logger.warning(
                f"Release of {amount} kg at facility {facility_id} would exceed total capacity "
                f"({facility.available_capacity} + {amount} > {facility.total_capacity}); clamping."
            )

        restored = Facility.available_capacity + amount
        self._apply(
            facility_id,
            available_capacity=case(
                (restored > Facility.total_capacity, Facility.total_capacity),
                else_=restored,
            ),
        )
        facility = self._load(facility_id)
        logger.info(f"Released {amount} kg at facility {facility_id}; {facility.available_capacity} kg available.")
        return facility.available_capacity

    def set_availability(self, facility_id: str, new_available: int) -> int:
        """
        Provider override of available stock, clamped into [0, total].
        """
        self.db.flush()
        self._load(facility_id, for_update=True)
        requested = max(0, int(new_available))
        self._apply(
            facility_id,
            available_capacity=case(
                (Facility.total_capacity < requested, Facility.total_capacity),
                else_=requested,
            ),
        )
        facility = self._load(facility_id)
        if facility.available_capacity != new_available:
            logger.info(f"Availability {new_available} kg at facility {facility_id} clamped to {facility.available_capacity} kg.")
        return facility.available_capacity

    def resize(self, facility_id: str, new_total: int) -> Facility:
        """
        Changes total capacity while keeping the committed amount
        (total - available) intact, clamped into the new range.
        """
        if new_total is None or new_total <= 0:
            raise InvalidRequest("Total capacity must be a positive number of kg.")

        self.db.flush()
        self._load(facility_id, for_update=True)
        shifted = Facility.available_capacity + (new_total - Facility.total_capacity)
        self._apply(
            facility_id,
            total_capacity=new_total,
            available_capacity=case(
                (shifted < 0, 0),
                (shifted > new_total, new_total),
                else_=shifted,
            ),
        )
        facility = self._load(facility_id)
        logger.info(f"Facility {facility_id} resized to {new_total} kg; {facility.available_capacity} kg available.")
        return facility
