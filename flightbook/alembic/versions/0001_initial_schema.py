"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

booking_status = sa.Enum("PENDING", "CONFIRMED", "CANCELLED", name="bookingstatus")
payment_status = sa.Enum("PENDING", "COMPLETED", "FAILED", "REFUNDED", name="paymentstatus")
passenger_type = sa.Enum("ADULT", "CHILD", "INFANT", name="passengertype")
gender = sa.Enum("MALE", "FEMALE", "OTHER", name="gender")
message_channel = sa.Enum("EMAIL", name="messagechannel")
message_status = sa.Enum("PENDING", "SENT", "FAILED", "DISABLED", name="messagestatus")


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("reference", sa.String(6), nullable=False),
        sa.Column("status", booking_status, nullable=False),
        sa.Column("flight_id", sa.String(255), nullable=False),
        sa.Column("flight_data", sa.JSON(), nullable=False),
        sa.Column("seats", sa.JSON(), nullable=False),
        sa.Column("extras", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("payment_id", sa.String(255), nullable=True),
        sa.Column("payment_status", payment_status, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bookings_reference", "bookings", ["reference"], unique=True)
    op.create_index("idx_bookings_status_created", "bookings", ["status", "created_at"])

    op.create_table(
        "passengers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("booking_id", sa.String(36), sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", passenger_type, nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", gender, nullable=False),
        sa.Column("passport_number", sa.String(20), nullable=True),
        sa.Column("passport_expiry", sa.Date(), nullable=True),
        sa.Column("nationality", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("country_code", sa.String(5), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_passengers_booking_id", "passengers", ["booking_id"])
    op.create_index("idx_passengers_last_name", "passengers", ["last_name"])

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("session_id", sa.String(100), nullable=False),
        sa.Column("search_criteria", sa.JSON(), nullable=True),
        sa.Column("selected_flight", sa.JSON(), nullable=True),
        sa.Column("selected_seats", sa.JSON(), nullable=True),
        sa.Column("passengers", sa.JSON(), nullable=True),
        sa.Column("selected_extras", sa.JSON(), nullable=True),
        sa.Column("current_step", sa.String(20), nullable=False),
        sa.Column("booking_reference", sa.String(6), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_sessions_session_id", "sessions", ["session_id"], unique=True)
    op.create_index("ix_sessions_expires_at", "sessions", ["expires_at"])

    op.create_table(
        "user_info",
        sa.Column("user_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("citizenship", sa.String(50), nullable=False),
        sa.Column("uae_resident", sa.Boolean(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_user_info_name", "user_info", ["name"])

    op.create_table(
        "travel_history",
        sa.Column("travel_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user_info.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("destination", sa.String(50), nullable=False),
        sa.Column("travel_date", sa.Date(), nullable=False),
        sa.Column("purpose", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_travel_history_user_id", "travel_history", ["user_id"])

    op.create_table(
        "message_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("channel", message_channel, nullable=False),
        sa.Column("template", sa.String(100), nullable=False),
        sa.Column("recipient", sa.String(255), nullable=False),
        sa.Column("subject", sa.String(255), nullable=True),
        sa.Column("booking_reference", sa.String(6), nullable=True),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("status", message_status, nullable=False),
        sa.Column("response_data", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_message_logs_booking_reference", "message_logs", ["booking_reference"])


def downgrade() -> None:
    op.drop_table("message_logs")
    op.drop_table("travel_history")
    op.drop_table("user_info")
    op.drop_table("sessions")
    op.drop_table("passengers")
    op.drop_table("bookings")

    bind = op.get_bind()
    for enum_type in (message_status, message_channel, gender, passenger_type, payment_status, booking_status):
        enum_type.drop(bind, checkfirst=True)
