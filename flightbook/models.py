"""
SQLAlchemy models for bookings, passengers, user profiles,
travel history, booking sessions and outbound message logs
"""

from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, Text, ForeignKey, Index, JSON, Numeric, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import uuid
import enum
from .database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


# Enums
class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"

class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"

class PassengerType(str, enum.Enum):
    ADULT = "ADULT"
    CHILD = "CHILD"
    INFANT = "INFANT"

class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"

class MessageChannel(str, enum.Enum):
    EMAIL = "EMAIL"

class MessageStatus(str, enum.Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"
    DISABLED = "DISABLED"


# Models
class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=_uuid)
    reference = Column(String(6), unique=True, nullable=False, index=True)
    status = Column(SQLEnum(BookingStatus), default=BookingStatus.PENDING, nullable=False)

    # Flight snapshot, flights themselves are never persisted
    flight_id = Column(String(255), nullable=False)
    flight_data = Column(JSON, nullable=False)
    seats = Column(JSON, nullable=False, default=dict)
    extras = Column(JSON, nullable=False, default=dict)

    # Payment
    total_amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    payment_id = Column(String(255), nullable=True)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)

    # Relationships
    passengers = relationship(
        "Passenger",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="Passenger.created_at",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_bookings_status_created", "status", "created_at"),
    )


class Passenger(Base):
    __tablename__ = "passengers"

    id = Column(String(36), primary_key=True, default=_uuid)
    booking_id = Column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(SQLEnum(PassengerType), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(SQLEnum(Gender), nullable=False)

    # Passport
    passport_number = Column(String(20), nullable=True)
    passport_expiry = Column(Date, nullable=True)
    nationality = Column(String(100), nullable=True)

    # Contact
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    country_code = Column(String(5), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_now)

    booking = relationship("Booking", back_populates="passengers")

    __table_args__ = (
        Index("idx_passengers_last_name", "last_name"),
    )


class BookingSession(Base):
    """Server-side copy of an in-progress booking wizard."""
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    session_id = Column(String(100), unique=True, nullable=False, index=True)

    search_criteria = Column(JSON, nullable=True)
    selected_flight = Column(JSON, nullable=True)
    selected_seats = Column(JSON, nullable=True)
    passengers = Column(JSON, nullable=True)
    selected_extras = Column(JSON, nullable=True)
    current_step = Column(String(20), default="search", nullable=False)
    booking_reference = Column(String(6), nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), default=_now, onupdate=_now)


class UserInfo(Base):
    __tablename__ = "user_info"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(50), nullable=False)
    name = Column(String(100), nullable=False)
    citizenship = Column(String(50), nullable=False)
    uae_resident = Column(Boolean, default=False, nullable=False)
    details = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    travel_history = relationship(
        "TravelHistory",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(TravelHistory.travel_date)",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_user_info_name", "name"),
    )


class TravelHistory(Base):
    __tablename__ = "travel_history"

    travel_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("user_info.user_id", ondelete="CASCADE"), nullable=False, index=True)
    destination = Column(String(50), nullable=False)
    travel_date = Column(Date, nullable=False)
    purpose = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_now)

    user = relationship("UserInfo", back_populates="travel_history")


class MessageLog(Base):
    __tablename__ = "message_logs"

    id = Column(String(36), primary_key=True, default=_uuid)
    channel = Column(SQLEnum(MessageChannel), default=MessageChannel.EMAIL, nullable=False)
    template = Column(String(100), nullable=False)
    recipient = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=True)
    booking_reference = Column(String(6), nullable=True, index=True)
    provider = Column(String(50), nullable=False)
    status = Column(SQLEnum(MessageStatus), default=MessageStatus.PENDING, nullable=False)
    response_data = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_now)
    sent_at = Column(DateTime(timezone=True), nullable=True)
