"""
Booking orchestration: validates requests, prices them, records bookings and
drives status changes through the lifecycle and the capacity ledger.
"""
import datetime
import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from . import crud, lifecycle, models, pricing, schemas
from .errors import CapacityExceeded, Forbidden, InvalidRequest, InvalidTransition, NotFound
from .ledger import CapacityLedger
from .models import BookingStatus
from .uow import UnitOfWork

logger = logging.getLogger("sangraha")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class BookingService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = CapacityLedger(db)

    @staticmethod
    def validate_request(request: schemas.BookingCreate, facility: models.Facility) -> None:
        """
        The one place booking input is checked against the facility.
        """
        if request.quantity <= 0:
            raise InvalidRequest("Quantity must be a positive number of kg.")
        if request.duration <= 0:
            raise InvalidRequest("Duration must be a positive number of days.")
        if request.duration < facility.min_booking_days:
            raise InvalidRequest(
                f"{facility.name} requires a minimum booking of {facility.min_booking_days} days."
            )
        if request.quantity > facility.available_capacity:
            raise CapacityExceeded(
                f"Requested quantity exceeds available capacity "
                f"({request.quantity} kg requested, {facility.available_capacity} kg available)."
            )

    def create_booking(self, user_id: str, request: schemas.BookingCreate) -> models.Booking:
        """
        Records a pending booking request.

        Availability is checked but nothing is reserved; capacity is committed
        only when the provider approves the booking.
        """
        with UnitOfWork(self.db) as uow:
            facility = crud.get_facility(uow.session, request.facility_id)
            if facility is None:
                raise NotFound("Facility not found.")

            self.validate_request(request, facility)

            price = pricing.resolve_price(facility.price_per_kg_per_day, request.storage_category)
            start = _utcnow()
            booking = models.Booking(
                user_id=user_id,
                facility_id=facility.id,
                facility_name=facility.name,
                facility_location=facility.location,
                quantity=request.quantity,
                duration=request.duration,
                price_per_kg_per_day=price,
                total_cost=pricing.compute_total_cost(request.quantity, price, request.duration),
                start_date=start,
                end_date=start + datetime.timedelta(days=request.duration),
                status=BookingStatus.PENDING,
                storage_type=request.storage_type,
                storage_category=request.storage_category,
            )
            crud.add_booking(uow.session, booking)
            crud.create_booking_event_in_outbox(uow.session, "booking.created", booking)

        logger.info(f"Booking {booking.id} requested by user {user_id}: {booking.quantity} kg at facility {booking.facility_id}.")
        return booking

    def set_booking_status(self, acting_user_id: str, booking_id: str, new_status) -> models.Booking:
        """
        Moves a booking to `new_status` on behalf of the facility owner.

        The status write, its capacity effect and the outbox event commit
        together or not at all.
        """
        try:
            target = BookingStatus(new_status)
        except ValueError:
            raise InvalidRequest(f"Unknown booking status: {new_status!r}.")

        with UnitOfWork(self.db) as uow:
            booking = crud.get_booking(uow.session, booking_id, for_update=True)
            if booking is None:
                raise NotFound("Booking not found.")

            facility = crud.get_facility(uow.session, booking.facility_id)
            if facility is None or facility.owner_id is None or facility.owner_id != acting_user_id:
                raise Forbidden("Only the owner of this facility can change the booking status.")

            lifecycle.apply_transition(booking, target, self.ledger)
            crud.create_booking_event_in_outbox(uow.session, "booking.status_changed", booking)
            try:
                uow.session.flush()
            except StaleDataError:
                raise InvalidTransition("Booking was changed by another request; reload and try again.")

        return booking

    def list_bookings(self, identity: schemas.Identity, skip: int = 0, limit: int = 100) -> list[models.Booking]:
        """
        Farmers see their own bookings, providers see bookings on the
        facilities they own.
        """
        with UnitOfWork(self.db, read_only=True) as uow:
            if identity.is_provider:
                return crud.get_bookings_by_facility_owner(uow.session, identity.user_id, skip=skip, limit=limit)
            return crud.get_bookings_by_user(uow.session, identity.user_id, skip=skip, limit=limit)
