"""
Booking itinerary PDF
"""
from html import escape
from io import BytesIO
from typing import Any, Dict

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .email_templates import format_long_date, format_time

GRID_STYLE = TableStyle([
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
    ('BACKGROUND', (0, 0), (-1, 0), colors.lightgrey),
    ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
])


def _table(rows, col_widths) -> Table:
    table = Table(rows, colWidths=col_widths)
    table.setStyle(GRID_STYLE)
    return table


def generate_booking_pdf(booking: Dict[str, Any]) -> bytes:
    """Render a serialized booking as a one-document itinerary."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"Booking {booking['reference']}")
    styles = getSampleStyleSheet()
    story = []

    flight = booking.get("flightData") or {}
    airline = (flight.get("airline") or {}).get("name", "N/A")

    story.append(Paragraph("Booking Confirmation", styles["Title"]))
    story.append(Paragraph(f"Booking Reference: {escape(booking['reference'], quote=False)}", styles["Heading2"]))
    story.append(Paragraph(f"Status: {escape(str(booking['status']), quote=False)}", styles["Normal"]))
    story.append(Spacer(1, 0.3 * inch))

    heading = f"Flight {airline} {flight.get('flightNumber', 'N/A')} ({flight.get('cabinClass', 'N/A')})"
    story.append(Paragraph(escape(heading, quote=False), styles["Heading3"]))
    segment_rows = [["From", "To", "Departure", "Arrival", "Aircraft"]]
    for segment in flight.get("segments", []):
        departure = segment.get("departure") or {}
        arrival = segment.get("arrival") or {}
        segment_rows.append([
            (departure.get("airport") or {}).get("code", "N/A"),
            (arrival.get("airport") or {}).get("code", "N/A"),
            f"{format_long_date(departure.get('dateTime'))}\n{format_time(departure.get('dateTime'))}",
            f"{format_long_date(arrival.get('dateTime'))}\n{format_time(arrival.get('dateTime'))}",
            segment.get("aircraft", "N/A"),
        ])
    story.append(_table(segment_rows, [0.7 * inch, 0.7 * inch, 1.9 * inch, 1.9 * inch, 1.6 * inch]))
    story.append(Spacer(1, 0.3 * inch))

    seats = booking.get("seats") or {}
    passenger_rows = [["Passenger", "Type", "Seat"]]
    for passenger in booking.get("passengers", []):
        seat = seats.get(passenger["id"]) or {}
        passenger_rows.append([
            f"{passenger['firstName']} {passenger['lastName']}",
            passenger["type"].lower(),
            seat.get("id", "-"),
        ])
    story.append(Paragraph("Passengers", styles["Heading3"]))
    story.append(_table(passenger_rows, [3.2 * inch, 1.4 * inch, 1.2 * inch]))
    story.append(Spacer(1, 0.3 * inch))

    story.append(Paragraph("Payment", styles["Heading3"]))
    story.append(_table(
        [
            ["Total", f"{booking['currency']} {float(booking['totalAmount']):.2f}"],
            ["Payment ID", booking.get("paymentId") or "N/A"],
            ["Payment Status", booking.get("paymentStatus", "N/A")],
        ],
        [2 * inch, 3.8 * inch],
    ))

    doc.build(story)
    return buffer.getvalue()
