"""
Flight search, airport autocomplete, seat map and extras endpoints.
"""
import pytest

from flightbook.tests.helpers import future_date, search_payload


class TestAirportSearch:

    @pytest.mark.asyncio
    async def test_missing_query(self, client):
        response = await client.get("/api/airports/search")
        assert response.status_code == 400
        assert response.json()["error"] == "Query parameter 'q' is required"

    @pytest.mark.asyncio
    async def test_short_query_returns_nothing(self, client):
        response = await client.get("/api/airports/search", params={"q": "L"})
        assert response.status_code == 200
        assert response.json() == {"airports": []}

    @pytest.mark.asyncio
    async def test_case_insensitive(self, client):
        lower = await client.get("/api/airports/search", params={"q": "dubai"})
        upper = await client.get("/api/airports/search", params={"q": "DUBAI"})

        assert lower.status_code == 200
        assert lower.json() == upper.json()
        assert [a["code"] for a in lower.json()["airports"]] == ["DXB"]


class TestFlightSearch:

    @pytest.mark.asyncio
    async def test_valid_search(self, client):
        response = await client.post("/api/flights/search", json=search_payload())
        assert response.status_code == 200

        data = response.json()
        assert data["totalResults"] == len(data["flights"])
        assert 15 <= data["totalResults"] <= 25
        assert data["searchId"].startswith("search-")

    @pytest.mark.asyncio
    async def test_identical_searches_hit_cache(self, client):
        first = await client.post("/api/flights/search", json=search_payload())
        second = await client.post("/api/flights/search", json=search_payload())

        assert [f["id"] for f in first.json()["flights"]] == [f["id"] for f in second.json()["flights"]]

    @pytest.mark.asyncio
    async def test_missing_fields(self, client):
        response = await client.post("/api/flights/search", json={"tripType": "one-way"})
        assert response.status_code == 400

        data = response.json()
        assert data["error"] == "Validation failed"
        fields = {d["field"] for d in data["details"]}
        assert {"segments", "passengers", "cabinClass"} <= fields

    @pytest.mark.asyncio
    async def test_same_origin_and_destination(self, client):
        response = await client.post("/api/flights/search", json=search_payload(origin="JFK", destination="JFK"))
        assert response.status_code == 400
        messages = [d["message"] for d in response.json()["details"]]
        assert "Origin and destination must be different" in messages

    @pytest.mark.asyncio
    async def test_past_departure(self, client):
        payload = search_payload()
        payload["segments"][0]["departureDate"] = future_date(-1)

        response = await client.post("/api/flights/search", json=payload)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_round_trip_needs_two_segments(self, client):
        payload = search_payload()
        payload["tripType"] = "round-trip"

        response = await client.post("/api/flights/search", json=payload)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_not_allowed(self, client):
        response = await client.get("/api/flights/search")
        assert response.status_code == 405
        assert response.json()["message"] == "Use POST method to search for flights"


class TestSeatsAndExtras:

    @pytest.mark.asyncio
    async def test_seat_map_for_demo_flight(self, client):
        response = await client.get("/api/seats/FL003")
        assert response.status_code == 200

        data = response.json()
        assert data["flightId"] == "FL003"
        assert data["seatMap"]["aircraft"] == "Boeing 777-300ER"

    @pytest.mark.asyncio
    async def test_seat_map_for_aircraft(self, client):
        response = await client.get("/api/seats/AA-AA1234-1-1", params={"aircraft": "Airbus A380-800"})
        assert response.status_code == 200
        assert response.json()["seatMap"]["aircraft"] == "Airbus A380"

    @pytest.mark.asyncio
    async def test_extras_catalog(self, client):
        response = await client.get("/api/extras")
        assert response.status_code == 200
        assert response.json()["loungeAccess"] == {"price": 45}


class TestHealth:

    @pytest.mark.asyncio
    async def test_banner(self, client):
        response = await client.get("/api/")
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        assert response.status_code == 200

        data = response.json()
        assert data["database"] == "healthy"
        assert data["redis"] == "healthy"
        assert data["status"] == "healthy"
