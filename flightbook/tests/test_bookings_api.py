"""
Booking creation, lookup, cancellation and itinerary PDF.
"""
import re
from decimal import Decimal

import pytest
from sqlalchemy import select

from flightbook.models import MessageLog, MessageStatus
from flightbook.tests.helpers import create_booking, passenger_payload, search_flight


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


class TestCreateBooking:

    @pytest.mark.asyncio
    async def test_requires_a_passenger(self, client):
        flight = await search_flight(client)
        response = await create_booking(client, flight, passengers=[])

        assert response.status_code == 400
        assert "passenger" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_requires_payment_id(self, client):
        flight = await search_flight(client)
        response = await create_booking(client, flight, paymentId="")
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rejects_invalid_passenger(self, client):
        flight = await search_flight(client)
        passenger = passenger_payload(first_name="J0hn")
        response = await create_booking(client, flight, passengers=[passenger])

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_end_to_end_booking(self, client):
        flight = await search_flight(client, origin="JFK", destination="LHR")
        response = await create_booking(client, flight)
        assert response.status_code == 200

        booking = response.json()["booking"]
        assert response.json()["success"] is True
        assert re.fullmatch(r"[A-Z0-9]{6}", booking["reference"])
        assert booking["status"] == "CONFIRMED"
        assert booking["paymentStatus"] == "COMPLETED"
        assert booking["totalAmount"] == f"{flight['price']['amount']:.2f}"
        assert booking["flightData"]["id"] == flight["id"]
        assert booking["passengers"][0]["lastName"] == "Doe"
        assert booking["passengers"][0]["type"] == "ADULT"

    @pytest.mark.asyncio
    async def test_seats_and_extras_follow_stored_passenger_ids(self, client):
        flight = await search_flight(client)
        seat = {"id": "20A", "row": 20, "column": "A", "type": "standard", "position": "window", "price": 0}
        extras = {
            "baggage": {"p1": {"weight": 20, "price": 200}},
            "meals": {},
            "insurance": None,
            "loungeAccess": None,
        }

        response = await create_booking(client, flight, seats={"p1": seat}, extras=extras)
        assert response.status_code == 200

        booking = response.json()["booking"]
        passenger_id = booking["passengers"][0]["id"]
        assert passenger_id != "p1"
        assert booking["seats"] == {passenger_id: seat}
        assert list(booking["extras"]["baggage"]) == [passenger_id]

    @pytest.mark.asyncio
    async def test_confirmation_email_is_logged(self, client, db_session):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        result = await db_session.execute(select(MessageLog).where(MessageLog.booking_reference == reference))
        logs = result.scalars().all()

        assert len(logs) == 1
        assert logs[0].template == "booking_confirmation"
        assert logs[0].recipient == "john.doe@flightmail.com"
        assert logs[0].status == MessageStatus.DISABLED


class TestRetrieveBooking:

    @pytest.mark.asyncio
    async def test_lookup_by_reference_and_last_name(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.get(f"/api/bookings/{reference}", params={"lastName": "doe"})
        assert response.status_code == 200
        assert response.json()["booking"]["reference"] == reference

    @pytest.mark.asyncio
    async def test_wrong_last_name_looks_like_missing(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        wrong_name = await client.get(f"/api/bookings/{reference}", params={"lastName": "Smith"})
        missing = await client.get("/api/bookings/ZZZZZZ", params={"lastName": "Smith"})

        assert wrong_name.status_code == missing.status_code == 404
        assert wrong_name.json() == missing.json() == {"error": "Booking not found or invalid credentials"}

        cancel_wrong_name = await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Smith"})
        cancel_missing = await client.post("/api/bookings/ZZZZZZ/cancel", json={"lastName": "Smith"})
        assert cancel_wrong_name.json() == cancel_missing.json()

    @pytest.mark.asyncio
    async def test_invalid_reference_format(self, client):
        response = await client.get("/api/bookings/abc")
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid booking reference format"

    @pytest.mark.asyncio
    async def test_unknown_reference(self, client):
        response = await client.get("/api/bookings/ZZZZZZ")
        assert response.status_code == 404
        assert response.json()["error"] == "Booking not found"

    @pytest.mark.asyncio
    async def test_itinerary_pdf(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.get(f"/api/bookings/{reference}/pdf", params={"lastName": "Doe"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == f'attachment; filename="booking-{reference}.pdf"'
        assert response.content.startswith(b"%PDF")


class TestCancelBooking:

    @pytest.mark.asyncio
    async def test_economy_keeps_twenty_percent(self, client):
        flight = await search_flight(client, cabin_class="economy")
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Doe"})
        assert response.status_code == 200

        data = response.json()
        total = _money(flight["price"]["amount"])
        fee = (total * Decimal("0.20")).quantize(Decimal("0.01"))
        assert _money(data["cancellationFee"]) == fee
        assert _money(data["refundAmount"]) == total - fee
        assert data["booking"] == {"reference": reference, "status": "CANCELLED", "paymentStatus": "REFUNDED"}

    @pytest.mark.asyncio
    async def test_business_uses_fare_rule_fee(self, client):
        flight = await search_flight(client, cabin_class="business")
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Doe"})
        data = response.json()

        total = _money(flight["price"]["amount"])
        assert _money(data["cancellationFee"]) == min(Decimal("150.00"), total)
        assert _money(data["refundAmount"]) == total - _money(data["cancellationFee"])

    @pytest.mark.asyncio
    async def test_second_cancel_is_rejected(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Doe"})
        response = await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Doe"})

        assert response.status_code == 400
        assert response.json()["error"] == "Booking is already cancelled"

    @pytest.mark.asyncio
    async def test_last_name_required(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.post(f"/api/bookings/{reference}/cancel", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Last name is required for authentication"

    @pytest.mark.asyncio
    async def test_wrong_last_name(self, client):
        flight = await search_flight(client)
        reference = (await create_booking(client, flight)).json()["booking"]["reference"]

        response = await client.post(f"/api/bookings/{reference}/cancel", json={"lastName": "Smith"})
        assert response.status_code == 404

        lookup = await client.get(f"/api/bookings/{reference}")
        assert lookup.json()["booking"]["status"] == "CONFIRMED"
