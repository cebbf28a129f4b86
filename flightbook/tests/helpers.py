"""
Test doubles and request payload builders shared by the tests
"""
import fnmatch
import time
from datetime import date, timedelta

import httpx

from flightbook.data.reference import get_airport_by_code


class InMemoryRedis:
    """Just enough of the redis.asyncio client for RedisService."""

    def __init__(self):
        self.store = {}
        self.expiry = {}

    def _alive(self, key):
        deadline = self.expiry.get(key)
        if deadline is not None and deadline <= time.monotonic():
            self.store.pop(key, None)
            self.expiry.pop(key, None)
        return key in self.store

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key) if self._alive(key) else None

    async def set(self, key, value):
        self.store[key] = value
        self.expiry.pop(key, None)
        return True

    async def setex(self, key, seconds, value):
        self.store[key] = value
        self.expiry[key] = time.monotonic() + seconds
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self._alive(key):
                removed += 1
            self.store.pop(key, None)
            self.expiry.pop(key, None)
        return removed

    async def exists(self, key):
        return 1 if self._alive(key) else 0

    async def expire(self, key, seconds):
        if not self._alive(key):
            return False
        self.expiry[key] = time.monotonic() + seconds
        return True

    async def ttl(self, key):
        if not self._alive(key):
            return -2
        deadline = self.expiry.get(key)
        if deadline is None:
            return -1
        return int(deadline - time.monotonic())

    async def keys(self, pattern):
        return [key for key in list(self.store) if self._alive(key) and fnmatch.fnmatchcase(key, pattern)]

    async def aclose(self):
        pass


class BrokenRedis:
    """Every call fails, as when the Redis server is down."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise ConnectionError("Redis unavailable")
        return fail


def future_date(days: int = 30) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def airport_payload(code: str) -> dict:
    airport = get_airport_by_code(code)
    return {key: airport[key] for key in ("code", "name", "city", "country")}


def search_payload(origin: str = "JFK", destination: str = "LHR", cabin_class: str = "economy", days: int = 30) -> dict:
    return {
        "tripType": "one-way",
        "segments": [
            {
                "origin": airport_payload(origin),
                "destination": airport_payload(destination),
                "departureDate": future_date(days),
            }
        ],
        "passengers": {"adults": 1, "children": 0, "infants": 0},
        "cabinClass": cabin_class,
    }


def passenger_payload(passenger_id: str = "p1", first_name: str = "John", last_name: str = "Doe", email: str = "john.doe@flightmail.com") -> dict:
    return {
        "id": passenger_id,
        "type": "adult",
        "firstName": first_name,
        "lastName": last_name,
        "dateOfBirth": "1990-01-15",
        "gender": "male",
        "passport": {
            "number": "AB1234567",
            "expiryDate": future_date(3650),
            "nationality": "American",
            "issuingCountry": "United States",
        },
        "contact": {
            "email": email,
            "phone": "5551234567",
            "countryCode": "+1",
        },
    }


async def search_flight(client, **kwargs) -> dict:
    response = await client.post("/api/flights/search", json=search_payload(**kwargs))
    assert response.status_code == 200, response.text
    return response.json()["flights"][0]


async def create_booking(client, flight: dict, passengers=None, **overrides) -> httpx.Response:
    passengers = passengers if passengers is not None else [passenger_payload()]
    payload = {
        "flight": flight,
        "passengers": passengers,
        "seats": {},
        "extras": {"baggage": {}, "meals": {}, "insurance": None, "loungeAccess": None},
        "totalAmount": flight["price"]["amount"],
        "currency": "USD",
        "paymentId": "pay_test_123",
    }
    payload.update(overrides)
    return await client.post("/api/bookings/create", json=payload)
