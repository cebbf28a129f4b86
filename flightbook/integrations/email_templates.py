"""
HTML bodies for transactional booking emails
"""
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, List, Optional

BRAND_NAME = "FlightBook"

STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #8B4513; color: white; padding: 20px; text-align: center; border-radius: 5px 5px 0 0; }
    .content { background-color: #f9f9f9; padding: 20px; border: 1px solid #ddd; border-top: none; border-radius: 0 0 5px 5px; }
    .booking-ref { font-size: 24px; font-weight: bold; color: #8B4513; text-align: center; margin: 20px 0; padding: 15px; background-color: #fff; border: 2px dashed #8B4513; border-radius: 5px; }
    .section { margin: 20px 0; padding: 15px; background-color: white; border-radius: 5px; }
    .section-title { font-size: 18px; font-weight: bold; color: #8B4513; margin-bottom: 10px; border-bottom: 2px solid #8B4513; padding-bottom: 5px; }
    .price-total { font-size: 20px; font-weight: bold; color: #8B4513; margin-top: 10px; }
    .refund-info { background-color: #e8f5e9; padding: 15px; border-radius: 5px; }
    .footer { text-align: center; margin-top: 20px; font-size: 12px; color: #666; }
"""


IMPORTANT_INFORMATION = [
    "Please arrive at the airport at least 3 hours before departure for international flights",
    "Check-in opens 24 hours before departure",
    "Please bring a valid ID and passport for international travel",
    "Your booking reference is required for check-in",
]

REFUND_NEXT_STEPS = [
    "You will receive the refund in your original payment method",
    "Please allow 7-10 business days for the refund to appear",
    "If you have any questions, please contact our support team",
]


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_long_date(value: Optional[str]) -> str:
    parsed = _parse_datetime(value)
    return parsed.strftime("%A, %B %d, %Y") if parsed else "N/A"


def format_time(value: Optional[str]) -> str:
    parsed = _parse_datetime(value)
    return parsed.strftime("%I:%M %p").lstrip("0") if parsed else "N/A"


def _airport_label(endpoint: Dict[str, Any]) -> str:
    airport = endpoint.get("airport") or {}
    return f"{airport.get('city', 'N/A')} ({airport.get('code', 'N/A')})"


def describe_flight(flight: Dict[str, Any]) -> str:
    """One-line summary: airline, number, route and departure."""
    segments = flight.get("segments") or [{}]
    first, last = segments[0], segments[-1]
    route = f"{_airport_label(first.get('departure') or {})} → {_airport_label(last.get('arrival') or {})}"
    departure = (first.get("departure") or {}).get("dateTime")
    when = f"{format_long_date(departure)} at {format_time(departure)}" if departure else "N/A"
    airline = (flight.get("airline") or {}).get("name", "N/A")
    return f"{airline} {flight.get('flightNumber', 'N/A')} - {route} on {when}"


def _page(title: str, heading: str, body: str) -> str:
    year = datetime.now(timezone.utc).year
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>{STYLE}</style>
</head>
<body>
  <div class="header"><h1>{heading}</h1></div>
  <div class="content">
{body}
    <p>Best regards,<br>The {BRAND_NAME} Team</p>
  </div>
  <div class="footer">
    <p>This is an automated email. Please do not reply to this message.</p>
    <p>&copy; {year} {BRAND_NAME}. All rights reserved.</p>
  </div>
</body>
</html>
"""


def _list_items(items: List[str]) -> str:
    return "".join(f"<li>{item}</li>" for item in items)


def render_booking_confirmation(booking: Dict[str, Any], primary_passenger: Dict[str, Any]) -> str:
    flight = booking.get("flightData") or {}
    segments = flight.get("segments") or [{}]
    departure = segments[0].get("departure") or {}
    arrival = segments[-1].get("arrival") or {}
    airline_name = (flight.get("airline") or {}).get("name", "N/A")
    flight_number = str(flight.get("flightNumber", "N/A"))
    currency = escape(booking.get("currency", "USD"))
    total = float(booking.get("totalAmount", 0))

    passengers = booking.get("passengers", [])
    passenger_items = [
        f"{escape(p['firstName'])} {escape(p['lastName'])} ({escape(p['type'].lower())})"
        for p in passengers
    ]

    seats = booking.get("seats") or {}
    seat_items = []
    for p in passengers:
        seat = seats.get(p["id"])
        if seat:
            seat_items.append(f"{escape(p['firstName'])} {escape(p['lastName'])}: Seat {escape(str(seat.get('row')))}{escape(str(seat.get('column')))}")

    seat_section = ""
    if seat_items:
        seat_section = f"""
    <div class="section">
      <div class="section-title">Seat Assignments</div>
      <ul>{_list_items(seat_items)}</ul>
    </div>"""

    body = f"""
    <p>Dear {escape(primary_passenger['firstName'])} {escape(primary_passenger['lastName'])},</p>
    <p>Thank you for booking with us! Your flight has been confirmed.</p>
    <div class="booking-ref">Booking Reference: {escape(booking['reference'])}</div>
    <div class="section">
      <div class="section-title">Flight Details</div>
      <p><strong>Flight:</strong> {escape(airline_name)} {escape(flight_number)}</p>
      <p><strong>Date:</strong> {format_long_date(departure.get('dateTime'))}</p>
      <p><strong>Route:</strong> {escape(_airport_label(departure))} → {escape(_airport_label(arrival))}</p>
      <p><strong>Departure:</strong> {format_time(departure.get('dateTime'))} from Terminal {escape(str(departure.get('terminal') or 'TBA'))}</p>
      <p><strong>Arrival:</strong> {format_time(arrival.get('dateTime'))} at Terminal {escape(str(arrival.get('terminal') or 'TBA'))}</p>
      <p><strong>Cabin Class:</strong> {escape(str(flight.get('cabinClass', 'N/A')))}</p>
    </div>
    <div class="section">
      <div class="section-title">Passengers</div>
      <ul>{_list_items(passenger_items)}</ul>
    </div>{seat_section}
    <div class="section">
      <div class="section-title">Payment Summary</div>
      <div class="price-total">Total Paid: {currency} {total:.2f}</div>
      <p><strong>Payment Method:</strong> Card</p>
      <p><strong>Transaction ID:</strong> {escape(str(booking.get('paymentId') or 'N/A'))}</p>
    </div>
    <div class="section">
      <div class="section-title">Important Information</div>
      <ul>{_list_items(IMPORTANT_INFORMATION)}</ul>
    </div>
    <p>If you need to manage your booking, please visit our website and use your booking reference.</p>
    <p>We look forward to welcoming you aboard!</p>"""

    return _page("Booking Confirmation", "Booking Confirmation", body)


def render_booking_cancellation(
    reference: str,
    passenger_name: str,
    flight_details: str,
    cancellation_fee: float,
    refund_amount: float,
    currency: str,
) -> str:
    body = f"""
    <p>Dear {escape(passenger_name)},</p>
    <p>Your booking has been successfully cancelled.</p>
    <div class="booking-ref">Booking Reference: {escape(reference)}</div>
    <div class="section">
      <div class="section-title">Cancelled Flight</div>
      <p>{escape(flight_details)}</p>
    </div>
    <div class="section">
      <div class="section-title">Refund Information</div>
      <div class="refund-info">
        <p><strong>Cancellation Fee:</strong> {escape(currency)} {cancellation_fee:.2f}</p>
        <p><strong>Refund Amount:</strong> {escape(currency)} {refund_amount:.2f}</p>
        <p>The refund will be processed to your original payment method within 7-10 business days.</p>
      </div>
    </div>
    <div class="section">
      <div class="section-title">What's Next?</div>
      <ul>{_list_items(REFUND_NEXT_STEPS)}</ul>
    </div>
    <p>We're sorry to see you cancel your booking. We hope to serve you again in the future.</p>"""

    return _page("Booking Cancellation", "Booking Cancellation Confirmation", body)
