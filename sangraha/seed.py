"""
Demo facilities for a fresh database. They have no owner, so they can be
browsed and booked but not managed until a provider registers their own.
"""
import logging

from sqlalchemy.orm import Session

from . import crud, schemas
from .uow import UnitOfWork

logger = logging.getLogger("sangraha")

# (facility, currently available kg)
DEMO_FACILITIES: list[tuple[schemas.FacilityCreate, int]] = [
    (schemas.FacilityCreate(
        name="Sahyadri Cold Storage",
        location="Nashik, Maharashtra",
        distance=3.2,
        type=["Cold", "Frozen"],
        price_per_kg_per_day=0.85,
        total_capacity=50000,
        rating=4.6,
        review_count=128,
        verified=True,
        certifications=["FSSAI Certified", "ISO 22000", "Govt Verified"],
        contact_phone="+91 98765 43210",
        operating_hours="6:00 AM - 10:00 PM",
        min_booking_days=1,
        amenities=["24/7 CCTV", "Loading Dock", "Weighbridge", "Insurance"],
    ), 32000),
    (schemas.FacilityCreate(
        name="KrishiSheetala Hub",
        location="Pune, Maharashtra",
        distance=5.8,
        type=["Cold", "Dairy"],
        price_per_kg_per_day=0.72,
        total_capacity=35000,
        rating=4.3,
        review_count=86,
        verified=True,
        certifications=["FSSAI Certified", "Govt Verified"],
        contact_phone="+91 98220 11234",
        operating_hours="24 Hours",
        min_booking_days=2,
        amenities=["Temperature Logs", "Loading Dock", "Insurance"],
    ), 12000),
    (schemas.FacilityCreate(
        name="AgroFrost Centre",
        location="Ahmednagar, Maharashtra",
        distance=8.5,
        type=["Cold"],
        price_per_kg_per_day=0.55,
        total_capacity=20000,
        rating=4.1,
        review_count=54,
        verified=False,
        certifications=["FSSAI Certified"],
        contact_phone="+91 97654 32109",
        operating_hours="7:00 AM - 8:00 PM",
        min_booking_days=3,
        amenities=["CCTV", "Weighbridge"],
    ), 2500),
    (schemas.FacilityCreate(
        name="Nandi Cold Chain",
        location="Solapur, Maharashtra",
        distance=12.3,
        type=["Frozen", "Dairy"],
        price_per_kg_per_day=0.95,
        total_capacity=45000,
        rating=4.8,
        review_count=203,
        verified=True,
        certifications=["FSSAI Certified", "ISO 22000", "HACCP"],
        contact_phone="+91 99887 76655",
        operating_hours="24 Hours",
        min_booking_days=1,
        amenities=["24/7 CCTV", "Loading Dock", "Insurance", "Refrigerated Transport"],
    ), 28000),
    (schemas.FacilityCreate(
        name="Kisan Seva Storage",
        location="Satara, Maharashtra",
        distance=15.0,
        type=["Cold"],
        price_per_kg_per_day=0.48,
        total_capacity=15000,
        rating=3.9,
        review_count=41,
        verified=False,
        certifications=["Govt Verified"],
        contact_phone="+91 94223 45678",
        operating_hours="8:00 AM - 6:00 PM",
        min_booking_days=2,
        amenities=["CCTV", "Loading Dock"],
    ), 8500),
]


def seed_demo_facilities(db: Session) -> int:
    """
    Inserts the demo facilities into an empty database.
    Returns how many were added (0 if any facility already exists).
    """
    if crud.count_facilities(db) > 0:
        return 0

    with UnitOfWork(db) as uow:
        for data, available in DEMO_FACILITIES:
            crud.add_facility(uow.session, data, owner_id=None, available_capacity=available)

    logger.info(f"Seeded {len(DEMO_FACILITIES)} demo facilities.")
    return len(DEMO_FACILITIES)
