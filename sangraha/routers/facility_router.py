from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Annotated

from .. import schemas
from ..database import get_db
from ..dependencies import get_current_identity
from ..errors import DomainError, to_http_exception
from ..facility_service import FacilityService

router = APIRouter(prefix="/facilities", tags=["Facilities"])


@router.get("/", response_model=List[schemas.FacilityRead])
def read_facilities(
        owner_id: str | None = Query(None, alias="ownerId"),
        db: Session = Depends(get_db),
):
    try:
        return FacilityService(db).list_facilities(owner_id=owner_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{facility_id}", response_model=schemas.FacilityRead)
def read_facility(facility_id: str, db: Session = Depends(get_db)):
    try:
        return FacilityService(db).get_facility(facility_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("/", response_model=schemas.FacilityRead, status_code=status.HTTP_201_CREATED)
def create_facility(
        facility: schemas.FacilityCreate,
        identity: Annotated[schemas.Identity, Depends(get_current_identity)],
        db: Session = Depends(get_db),
):
    try:
        return FacilityService(db).register_facility(identity, facility)
    except DomainError as e:
        raise to_http_exception(e)


@router.put("/{facility_id}", response_model=schemas.FacilityRead)
def update_facility(
        facility_id: str,
        changes: schemas.FacilityUpdate,
        identity: Annotated[schemas.Identity, Depends(get_current_identity)],
        db: Session = Depends(get_db),
):
    try:
        return FacilityService(db).update_facility(identity, facility_id, changes)
    except DomainError as e:
        raise to_http_exception(e)
