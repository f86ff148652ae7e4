import logging

from sqlalchemy.orm import Session

from . import crud, models, schemas
from .errors import Forbidden, InvalidRequest, NotFound
from .ledger import CapacityLedger
from .uow import UnitOfWork

logger = logging.getLogger("sangraha")


class FacilityService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = CapacityLedger(db)

    def list_facilities(self, owner_id: str | None = None) -> list[models.Facility]:
        with UnitOfWork(self.db, read_only=True) as uow:
            return crud.list_facilities(uow.session, owner_id=owner_id)

    def get_facility(self, facility_id: str) -> models.Facility:
        with UnitOfWork(self.db, read_only=True) as uow:
            facility = crud.get_facility(uow.session, facility_id)
        if facility is None:
            raise NotFound("Facility not found.")
        return facility

    def register_facility(self, identity: schemas.Identity, data: schemas.FacilityCreate) -> models.Facility:
        if not identity.is_provider:
            raise Forbidden("Only providers can register facilities.")
        if data.price_per_kg_per_day <= 0:
            raise InvalidRequest("Price per kg per day must be positive.")
        if data.total_capacity <= 0:
            raise InvalidRequest("Total capacity must be a positive number of kg.")
        if data.min_booking_days < 1:
            raise InvalidRequest("Minimum booking days must be at least 1.")

        with UnitOfWork(self.db) as uow:
            facility = crud.add_facility(uow.session, data, owner_id=identity.user_id)

        logger.info(f"Facility {facility.id} registered by provider {identity.user_id}.")
        return facility

    def update_facility(
            self,
            identity: schemas.Identity,
            facility_id: str,
            changes: schemas.FacilityUpdate,
    ) -> models.Facility:
        """
        Provider edits to price, capacity and display fields.

        Total capacity goes through the ledger first so that a new available
        figure is clamped against the new total.
        """
        if not identity.is_provider:
            raise Forbidden("Only providers can update facilities.")
        if changes.price_per_kg_per_day is not None and changes.price_per_kg_per_day <= 0:
            raise InvalidRequest("Price per kg per day must be positive.")
        if changes.name is not None and not changes.name.strip():
            raise InvalidRequest("Facility name cannot be empty.")
        if changes.location is not None and not changes.location.strip():
            raise InvalidRequest("Facility location cannot be empty.")

        with UnitOfWork(self.db) as uow:
            facility = crud.get_facility(uow.session, facility_id)
            if facility is None:
                raise NotFound("Facility not found.")
            # Unclaimed demo facilities are read-only
            if facility.owner_id is None or facility.owner_id != identity.user_id:
                raise Forbidden("You can only update facilities you own.")

            if changes.total_capacity is not None:
                self.ledger.resize(facility_id, changes.total_capacity)
            if changes.available_capacity is not None:
                self.ledger.set_availability(facility_id, changes.available_capacity)

            facility = crud.get_facility(uow.session, facility_id)
            if changes.price_per_kg_per_day is not None:
                facility.price_per_kg_per_day = changes.price_per_kg_per_day
            if changes.name is not None:
                facility.name = changes.name.strip()
            if changes.location is not None:
                facility.location = changes.location.strip()

        return facility
