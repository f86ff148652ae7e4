import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .models import BookingStatus, UserRole


class CamelModel(BaseModel):
    # Clients speak camelCase; snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Identity(BaseModel):
    """Caller identity as asserted by the auth service token."""
    user_id: str
    role: UserRole = UserRole.FARMER

    @property
    def is_provider(self) -> bool:
        return self.role == UserRole.PROVIDER


# --- Facilities ---

class FacilityBase(CamelModel):
    name: str
    location: str
    distance: float = 0
    type: list[str] = []
    price_per_kg_per_day: float
    total_capacity: int
    rating: float = 0
    review_count: int = 0
    verified: bool = False
    certifications: list[str] = []
    contact_phone: str = ""
    operating_hours: str = ""
    min_booking_days: int = 1
    amenities: list[str] = []
    image_url: str | None = None


class FacilityCreate(FacilityBase):
    # owner_id and available_capacity are set by the service
    pass


class FacilityUpdate(CamelModel):
    price_per_kg_per_day: float | None = None
    available_capacity: int | None = None
    total_capacity: int | None = None
    name: str | None = None
    location: str | None = None


class FacilityRead(FacilityBase):
    id: str
    owner_id: str | None = None
    available_capacity: int


# --- Bookings ---

class BookingCreate(CamelModel):
    # user_id comes from the JWT token
    facility_id: str
    quantity: int
    duration: int
    storage_category: str = "Fruits & Vegetables"
    storage_type: str = ""


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingRead(CamelModel):
    id: str
    user_id: str
    facility_id: str
    facility_name: str
    facility_location: str
    quantity: int
    duration: int
    price_per_kg_per_day: float
    total_cost: float
    start_date: datetime.datetime
    end_date: datetime.datetime
    status: BookingStatus
    storage_type: str
    storage_category: str


# --- Pricing ---

class CategoryRead(CamelModel):
    name: str
    min: float
    max: float
    default: float


class PriceCheckRead(CamelModel):
    category: str
    price: float
    in_bounds: bool
    min: float
    max: float
