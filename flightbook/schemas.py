"""
Pydantic request schemas.
Every write endpoint validates its body here before any side effect.
JSON keys are camelCase on the wire.
"""
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

NAME_PATTERN = r"^[a-zA-Z\s'-]+$"
MAX_PASSENGERS = 9
MAX_MULTI_CITY_SEGMENTS = 5


def _today() -> date:
    return date.today()


def _coerce_date(value: Any) -> Any:
    """Accept full ISO timestamps where a calendar date is expected."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


CalendarDate = Annotated[date, BeforeValidator(_coerce_date)]


def age_on(birth_date: date, on: date) -> int:
    years = on.year - birth_date.year
    if (on.month, on.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Search

class TripType(str, Enum):
    ONE_WAY = "one-way"
    ROUND_TRIP = "round-trip"
    MULTI_CITY = "multi-city"


class CabinClass(str, Enum):
    ECONOMY = "economy"
    BUSINESS = "business"
    FIRST = "first"


class Airport(CamelModel):
    code: str = Field(..., pattern=r"^[A-Z]{3}$", description="IATA airport code")
    name: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


class FlightSegment(CamelModel):
    origin: Airport
    destination: Airport
    departure_date: CalendarDate
    return_date: Optional[CalendarDate] = None

    @field_validator("departure_date")
    @classmethod
    def departure_not_in_past(cls, value: date) -> date:
        if value < _today():
            raise ValueError("Departure date cannot be in the past")
        return value

    @model_validator(mode="after")
    def check_route(self):
        if self.origin.code == self.destination.code:
            raise ValueError("Origin and destination must be different")
        if self.return_date is not None and self.return_date <= self.departure_date:
            raise ValueError("Return date must be after departure date")
        return self


class PassengerCount(CamelModel):
    adults: int = Field(..., ge=1, le=MAX_PASSENGERS)
    children: int = Field(0, ge=0, le=MAX_PASSENGERS)
    infants: int = Field(0, ge=0, le=MAX_PASSENGERS)

    @model_validator(mode="after")
    def check_totals(self):
        if self.adults + self.children + self.infants > MAX_PASSENGERS:
            raise ValueError(f"Total passengers cannot exceed {MAX_PASSENGERS}")
        if self.infants > self.adults:
            raise ValueError("Number of infants cannot exceed number of adults")
        return self

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants


class SearchCriteria(CamelModel):
    trip_type: TripType
    segments: List[FlightSegment] = Field(..., min_length=1)
    passengers: PassengerCount
    cabin_class: CabinClass

    @model_validator(mode="after")
    def check_trip_type(self):
        count = len(self.segments)
        if self.trip_type == TripType.ONE_WAY and count != 1:
            raise ValueError("One-way trips must have exactly one segment")
        if self.trip_type == TripType.ROUND_TRIP:
            if count != 2:
                raise ValueError("Round-trip must have exactly two segments")
            outbound, inbound = self.segments
            if inbound.origin.code != outbound.destination.code or inbound.destination.code != outbound.origin.code:
                raise ValueError("Return flight must reverse the outbound route")
            if inbound.departure_date <= outbound.departure_date:
                raise ValueError("Return date must be after departure date")
        if self.trip_type == TripType.MULTI_CITY and count > MAX_MULTI_CITY_SEGMENTS:
            raise ValueError(f"Multi-city trips can have at most {MAX_MULTI_CITY_SEGMENTS} segments")
        return self


# Passengers

class PassengerType(str, Enum):
    ADULT = "adult"
    CHILD = "child"
    INFANT = "infant"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class PassportInfo(CamelModel):
    number: str = Field(..., pattern=r"^[A-Z0-9]{6,20}$")
    expiry_date: CalendarDate
    nationality: str = Field(..., min_length=2, max_length=100)
    issuing_country: str = Field(..., min_length=2, max_length=100)

    @field_validator("expiry_date")
    @classmethod
    def not_expired(cls, value: date) -> date:
        if value <= _today():
            raise ValueError("Passport has expired")
        return value


class ContactInfo(CamelModel):
    email: EmailStr
    phone: str = Field(..., pattern=r"^[0-9]{7,15}$")
    country_code: str = Field(..., pattern=r"^\+[0-9]{1,4}$")


class PassengerInfo(CamelModel):
    id: Optional[str] = None
    type: PassengerType
    first_name: str = Field(..., min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: str = Field(..., min_length=2, max_length=50, pattern=NAME_PATTERN)
    date_of_birth: CalendarDate
    gender: Gender
    passport: Optional[PassportInfo] = None
    contact: Optional[ContactInfo] = None

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("date_of_birth")
    @classmethod
    def plausible_birth_date(cls, value: date) -> date:
        today = _today()
        if value >= today:
            raise ValueError("Date of birth must be in the past")
        if age_on(value, today) >= 120:
            raise ValueError("Please enter a valid date of birth")
        return value

    @model_validator(mode="after")
    def type_matches_age(self):
        age = age_on(self.date_of_birth, _today())
        if self.type == PassengerType.ADULT and age < 12:
            raise ValueError("Adult passengers must be at least 12 years old")
        if self.type == PassengerType.CHILD and not 2 <= age < 12:
            raise ValueError("Child passengers must be between 2 and 11 years old")
        if self.type == PassengerType.INFANT and age >= 2:
            raise ValueError("Infant passengers must be under 2 years old")
        return self


# Bookings

class BookingCreateRequest(CamelModel):
    flight: Dict[str, Any]
    passengers: List[PassengerInfo]
    seats: Dict[str, Any] = Field(default_factory=dict)
    extras: Optional[Dict[str, Any]] = None
    total_amount: float = Field(..., gt=0)
    currency: str = Field(..., min_length=3, max_length=3)
    payment_id: str = Field(..., min_length=1)

    @field_validator("flight")
    @classmethod
    def flight_has_id(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        if not value.get("id"):
            raise ValueError("Flight id is required")
        return value

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: str) -> str:
        return value.upper()


class CancelBookingRequest(CamelModel):
    last_name: Optional[str] = None


# Payments

class CreateOrderRequest(CamelModel):
    amount: Optional[float] = None
    currency: Optional[str] = None
    booking_reference: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class VerifyPaymentRequest(CamelModel):
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None


# Users and auth

class RegisterRequest(CamelModel):
    category: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    citizenship: str = Field(..., min_length=1, max_length=50)
    uae_resident: bool = False
    details: Optional[str] = None


def _reject_nulls(model: BaseModel, fields) -> None:
    """Partial updates may omit a required column but never null it."""
    for field in fields:
        if field in model.model_fields_set and getattr(model, field) is None:
            raise ValueError(f"{to_camel(field)} cannot be null")


class UserUpdateRequest(CamelModel):
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    citizenship: Optional[str] = Field(None, min_length=1, max_length=50)
    uae_resident: Optional[bool] = None
    details: Optional[str] = None

    @model_validator(mode="after")
    def required_columns_not_null(self):
        _reject_nulls(self, ("category", "name", "citizenship", "uae_resident"))
        return self


class LoginRequest(CamelModel):
    user_id: Optional[int] = Field(None, gt=0)
    name: Optional[str] = Field(None, min_length=1)

    @model_validator(mode="after")
    def one_identifier(self):
        if self.user_id is None and not self.name:
            raise ValueError("Either userId or name is required")
        return self


class TravelHistoryCreateRequest(CamelModel):
    user_id: int = Field(..., gt=0)
    destination: str = Field(..., min_length=1, max_length=50)
    travel_date: CalendarDate
    purpose: Optional[str] = Field(None, max_length=50)


class TravelHistoryUpdateRequest(CamelModel):
    destination: Optional[str] = Field(None, min_length=1, max_length=50)
    travel_date: Optional[CalendarDate] = None
    purpose: Optional[str] = Field(None, max_length=50)

    @model_validator(mode="after")
    def required_columns_not_null(self):
        _reject_nulls(self, ("destination", "travel_date"))
        return self


# Booking session

class BaggageSelection(CamelModel):
    weight: int


class MealSelection(CamelModel):
    type: str


class InsuranceSelection(CamelModel):
    type: str


class LoungeSelection(CamelModel):
    airport: str = Field(..., min_length=3, max_length=3)


class SelectedExtras(CamelModel):
    baggage: Dict[str, BaggageSelection] = Field(default_factory=dict)
    meals: Dict[str, MealSelection] = Field(default_factory=dict)
    insurance: Optional[InsuranceSelection] = None
    lounge_access: Optional[LoungeSelection] = None


class SessionUpdateRequest(CamelModel):
    search_criteria: Optional[SearchCriteria] = None
    selected_flight: Optional[Dict[str, Any]] = None
    passengers: Optional[List[PassengerInfo]] = None
    selected_extras: Optional[SelectedExtras] = None
    booking_reference: Optional[str] = Field(None, pattern=r"^[A-Z0-9]{6}$")


class SeatSelectionRequest(CamelModel):
    seat_id: str = Field(..., pattern=r"^[0-9]{1,2}[A-K]$")
    aircraft: Optional[str] = None


class StepRequest(CamelModel):
    step: str
