import datetime
import uuid
from enum import Enum as PyEnum

from sqlalchemy import (
    Column, Integer, String, Float, Text, Boolean, JSON, ForeignKey, TIMESTAMP, Index, CheckConstraint
)
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import relationship

from .database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


# --- ENUM for User Roles (issued by the auth service) ---
class UserRole(str, PyEnum):
    FARMER = "farmer"
    PROVIDER = "provider"


# --- ENUM for Booking Status ---
class BookingStatus(str, PyEnum):
    PENDING = "pending"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# --- Facility Model (a cold-storage site) ---
class Facility(Base):
    __tablename__ = "facilities"

    id = Column(String(36), primary_key=True, default=_new_id)

    # Null owner means unclaimed demo data
    owner_id = Column(String(64), index=True, nullable=True)

    name = Column(String, nullable=False)
    location = Column(String, index=True, nullable=False)
    distance = Column(Float, nullable=False, default=0)
    type = Column(JSON, nullable=False, default=list)

    price_per_kg_per_day = Column(Float, nullable=False)

    # Only the capacity ledger writes available_capacity
    total_capacity = Column(Integer, nullable=False)
    available_capacity = Column(Integer, nullable=False)

    rating = Column(Float, nullable=False, default=0)
    review_count = Column(Integer, nullable=False, default=0)
    verified = Column(Boolean, nullable=False, default=False)
    certifications = Column(JSON, nullable=False, default=list)
    contact_phone = Column(String, nullable=False, default="")
    operating_hours = Column(String, nullable=False, default="")
    min_booking_days = Column(Integer, nullable=False, default=1)
    amenities = Column(JSON, nullable=False, default=list)
    image_url = Column(String, nullable=True)

    bookings = relationship("Booking", back_populates="facility")

    __table_args__ = (
        CheckConstraint("total_capacity > 0", name="ck_facilities_total_positive"),
        CheckConstraint(
            "available_capacity >= 0 AND available_capacity <= total_capacity",
            name="ck_facilities_available_in_range",
        ),
    )


# --- Booking Model ---
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_new_id)

    user_id = Column(String(64), index=True, nullable=False)
    facility_id = Column(String(36), ForeignKey("facilities.id"), index=True, nullable=False)

    # Snapshot of the facility at request time
    facility_name = Column(String, nullable=False)
    facility_location = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    duration = Column(Integer, nullable=False)

    # Frozen at creation
    price_per_kg_per_day = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)

    start_date = Column(TIMESTAMP, nullable=False, default=_utcnow)
    end_date = Column(TIMESTAMP, nullable=False)

    status = Column(SQLEnum(BookingStatus), default=BookingStatus.PENDING, nullable=False)

    # Optimistic lock: two concurrent status changes cannot both commit
    version = Column(Integer, nullable=False)

    storage_type = Column(String, nullable=False, default="")
    storage_category = Column(String, nullable=False, default="Fruits & Vegetables")

    facility = relationship("Facility", back_populates="bookings")

    __mapper_args__ = {"version_id_col": version}


class OutboxEvent(Base):
    __tablename__ = "outbox_events"

    id = Column(Integer, primary_key=True, index=True)

    # Status to track if the event has been sent
    status = Column(String(20), default="PENDING", nullable=False)

    # The Kafka topic to send the message to
    topic = Column(String(255), nullable=False)

    # The full JSON payload to be sent
    payload = Column(Text, nullable=False)

    created_at = Column(TIMESTAMP, default=_utcnow)

    __table_args__ = (
        Index('ix_outbox_events_status', 'status'),
    )
