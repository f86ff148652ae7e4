import json
from sqlalchemy import select
from sqlalchemy.orm import Session
from . import models, schemas
from .config import settings  # Need this for the topic name


# --- Facilities ---

def get_facility(db: Session, facility_id: str) -> models.Facility | None:
    stmt = select(models.Facility).where(models.Facility.id == facility_id)
    return db.execute(stmt).scalars().first()


def list_facilities(db: Session, owner_id: str | None = None) -> list[models.Facility]:
    """
    Nearest first. Optionally only the facilities a provider owns.
    """
    stmt = select(models.Facility)
    if owner_id is not None:
        stmt = stmt.where(models.Facility.owner_id == owner_id)
    stmt = stmt.order_by(models.Facility.distance.asc(), models.Facility.name.asc())
    return list(db.execute(stmt).scalars().all())


def count_facilities(db: Session) -> int:
    return db.query(models.Facility).count()


def add_facility(
        db: Session,
        facility: schemas.FacilityCreate,
        owner_id: str | None,
        available_capacity: int | None = None,
) -> models.Facility:
    """
    Adds a facility, by default with all of its capacity available.
    Note: Does NOT commit. The caller's unit of work owns the transaction.
    """
    db_facility = models.Facility(
        **facility.model_dump(),
        owner_id=owner_id,
        available_capacity=facility.total_capacity if available_capacity is None else available_capacity,
    )
    db.add(db_facility)
    db.flush()
    return db_facility


# --- Bookings ---

def get_booking(db: Session, booking_id: str, for_update: bool = False) -> models.Booking | None:
    stmt = select(models.Booking).where(models.Booking.id == booking_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalars().first()


def get_bookings_by_user(db: Session, user_id: str, skip: int = 0, limit: int = 100) -> list[models.Booking]:
    return (
        db.query(models.Booking)
        .filter(models.Booking.user_id == user_id)
        .order_by(models.Booking.start_date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_bookings_by_facility_owner(db: Session, owner_id: str, skip: int = 0, limit: int = 100) -> list[models.Booking]:
    """
    Bookings placed against any facility the provider owns.
    """
    return (
        db.query(models.Booking)
        .join(models.Facility, models.Booking.facility_id == models.Facility.id)
        .filter(models.Facility.owner_id == owner_id)
        .order_by(models.Booking.start_date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def add_booking(db: Session, booking: models.Booking) -> models.Booking:
    db.add(booking)
    db.flush()
    return booking


# --- Outbox ---

def create_booking_event_in_outbox(db: Session, event: str, booking: models.Booking) -> models.OutboxEvent:
    """
    Queues a booking event for the outbox poller.
    Note: Does NOT commit. It rides on the same transaction as the booking change.
    """
    payload = {
        "event": event,
        "booking_id": booking.id,
        "facility_id": booking.facility_id,
        "user_id": booking.user_id,
        "status": booking.status.value,
        "quantity": booking.quantity,
    }

    db_outbox_event = models.OutboxEvent(
        topic=settings.KAFKA_BOOKING_TOPIC,
        payload=json.dumps(payload),
        status="PENDING"
    )
    db.add(db_outbox_event)
    return db_outbox_event
