from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Annotated

from .. import schemas
from ..booking_service import BookingService
from ..database import get_db
from ..dependencies import get_current_identity, rate_limit
from ..errors import DomainError, to_http_exception

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post(
    "/",
    response_model=schemas.BookingRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit(times=30, minutes=1))],
)
def create_booking(
        booking: schemas.BookingCreate,
        identity: Annotated[schemas.Identity, Depends(get_current_identity)],
        db: Session = Depends(get_db),
):
    """
    Request storage at a facility. The booking starts out pending until the
    facility owner approves it.
    """
    try:
        return BookingService(db).create_booking(identity.user_id, booking)
    except DomainError as e:
        raise to_http_exception(e)


@router.get(
    "/",
    response_model=List[schemas.BookingRead],
    dependencies=[Depends(rate_limit(times=60, minutes=1))],
)
def read_bookings(
        identity: Annotated[schemas.Identity, Depends(get_current_identity)],
        db: Session = Depends(get_db),
        skip: int = 0,
        limit: int = 100,
):
    """
    Farmers get their own bookings; providers get bookings on their facilities.
    """
    try:
        return BookingService(db).list_bookings(identity, skip=skip, limit=limit)
    except DomainError as e:
        raise to_http_exception(e)


@router.put(
    "/{booking_id}/status",
    response_model=schemas.BookingRead,
    dependencies=[Depends(rate_limit(times=60, minutes=1))],
)
def update_booking_status(
        booking_id: str,
        update: schemas.BookingStatusUpdate,
        identity: Annotated[schemas.Identity, Depends(get_current_identity)],
        db: Session = Depends(get_db),
):
    """
    Approve, reject, cancel or complete a booking. Facility owners only.
    """
    if not identity.is_provider:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only providers can change booking status."
        )
    try:
        return BookingService(db).set_booking_status(identity.user_id, booking_id, update.status)
    except DomainError as e:
        raise to_http_exception(e)
