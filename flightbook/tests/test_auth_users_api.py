"""
Cookie auth, user profiles and travel history.
"""
import re

import pytest

from flightbook.auth import decode_token


def _user_payload(name="Amira Haddad", **overrides):
    payload = {
        "category": "business",
        "name": name,
        "citizenship": "Jordan",
        "uaeResident": True,
        "details": "Frequent flyer",
    }
    payload.update(overrides)
    return payload


def _token_from(response) -> str:
    match = re.search(r"auth-token=([^;]+)", response.headers["set-cookie"])
    assert match, response.headers["set-cookie"]
    return match.group(1)


def _auth_header(token: str) -> dict:
    return {"Cookie": f"auth-token={token}"}


class TestAuth:

    @pytest.mark.asyncio
    async def test_register_sets_cookie(self, client):
        response = await client.post("/api/auth/register", json=_user_payload())
        assert response.status_code == 201

        user = response.json()["user"]
        assert user["name"] == "Amira Haddad"
        assert user["uaeResident"] is True
        assert "travelHistory" not in user

        cookie = response.headers["set-cookie"].lower()
        assert "httponly" in cookie
        assert "samesite=lax" in cookie
        assert "path=/" in cookie

        claims = decode_token(_token_from(response))
        assert claims["userId"] == user["id"]
        assert claims["category"] == "business"

    @pytest.mark.asyncio
    async def test_duplicate_name_is_rejected(self, client):
        await client.post("/api/auth/register", json=_user_payload())
        response = await client.post("/api/auth/register", json=_user_payload(name="amira haddad"))

        assert response.status_code == 409
        assert response.json()["error"] == "User with this name already exists"

    @pytest.mark.asyncio
    async def test_register_validation(self, client):
        response = await client.post("/api/auth/register", json={"name": "No Category"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_login_by_name_and_id(self, client):
        user = (await client.post("/api/auth/register", json=_user_payload())).json()["user"]

        by_name = await client.post("/api/auth/login", json={"name": "AMIRA HADDAD"})
        assert by_name.status_code == 200
        assert by_name.json()["user"]["id"] == user["id"]

        by_id = await client.post("/api/auth/login", json={"userId": user["id"]})
        assert by_id.status_code == 200
        assert decode_token(_token_from(by_id))["userId"] == user["id"]

    @pytest.mark.asyncio
    async def test_login_unknown_user(self, client):
        response = await client.post("/api/auth/login", json={"name": "Nobody"})
        assert response.status_code == 401
        assert response.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_login_needs_an_identifier(self, client):
        response = await client.post("/api/auth/login", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_me(self, client):
        registered = await client.post("/api/auth/register", json=_user_payload())
        token = _token_from(registered)

        response = await client.get("/api/auth/me", headers=_auth_header(token))
        assert response.json()["user"]["name"] == "Amira Haddad"

        client.cookies.clear()
        anonymous = await client.get("/api/auth/me")
        assert anonymous.status_code == 200
        assert anonymous.json() == {"user": None}

    @pytest.mark.asyncio
    async def test_me_with_tampered_token(self, client):
        client.cookies.clear()
        response = await client.get("/api/auth/me", headers=_auth_header("not.a.jwt"))
        assert response.json() == {"user": None}

    @pytest.mark.asyncio
    async def test_token_handoff(self, client):
        token = _token_from(await client.post("/api/auth/register", json=_user_payload()))

        response = await client.get("/api/auth/token", headers=_auth_header(token))
        assert response.json() == {"token": token}

        client.cookies.clear()
        unauthenticated = await client.get("/api/auth/token")
        assert unauthenticated.status_code == 401
        assert unauthenticated.json()["error"] == "Not authenticated"

    @pytest.mark.asyncio
    async def test_logout_clears_cookie(self, client):
        response = await client.post("/api/auth/logout")
        assert response.json() == {"success": True}
        assert "auth-token=" in response.headers["set-cookie"]
        assert "max-age=0" in response.headers["set-cookie"].lower()


class TestUsers:

    @pytest.mark.asyncio
    async def test_crud(self, client):
        created = await client.post("/api/users", json=_user_payload())
        assert created.status_code == 201
        user = created.json()["user"]
        assert user["travelHistory"] == []

        fetched = await client.get(f"/api/users/{user['id']}")
        assert fetched.json()["user"]["name"] == "Amira Haddad"

        updated = await client.put(f"/api/users/{user['id']}", json={"citizenship": "Egypt"})
        assert updated.status_code == 200
        assert updated.json()["user"]["citizenship"] == "Egypt"
        assert updated.json()["user"]["category"] == "business"

        deleted = await client.delete(f"/api/users/{user['id']}")
        assert deleted.json() == {"success": True}

        missing = await client.get(f"/api/users/{user['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_list_filters(self, client):
        await client.post("/api/users", json=_user_payload(name="Resident One"))
        await client.post("/api/users", json=_user_payload(name="Visitor One", uaeResident=False, category="tourist"))

        residents = await client.get("/api/users", params={"uaeResident": "true"})
        assert [u["name"] for u in residents.json()["users"]] == ["Resident One"]

        tourists = await client.get("/api/users", params={"category": "tourist"})
        assert [u["name"] for u in tourists.json()["users"]] == ["Visitor One"]

        everyone = await client.get("/api/users")
        assert len(everyone.json()["users"]) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "category", "citizenship", "uaeResident"])
    async def test_update_cannot_null_required_field(self, client, field):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]

        response = await client.put(f"/api/users/{user['id']}", json={field: None})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

        unchanged = await client.get(f"/api/users/{user['id']}")
        assert unchanged.json()["user"]["name"] == "Amira Haddad"

    @pytest.mark.asyncio
    async def test_update_details_to_null(self, client):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]

        response = await client.put(f"/api/users/{user['id']}", json={"details": None})
        assert response.status_code == 200
        assert response.json()["user"]["details"] is None

    @pytest.mark.asyncio
    async def test_rename_to_existing_name(self, client):
        await client.post("/api/users", json=_user_payload())
        other = (await client.post("/api/users", json=_user_payload(name="Omar Saleh"))).json()["user"]

        response = await client.put(f"/api/users/{other['id']}", json={"name": "AMIRA haddad"})
        assert response.status_code == 409
        assert response.json()["error"] == "User with this name already exists"

        same_name = await client.put(f"/api/users/{other['id']}", json={"name": "omar saleh"})
        assert same_name.status_code == 200

    @pytest.mark.asyncio
    async def test_update_unknown_user(self, client):
        response = await client.put("/api/users/9999", json={"name": "Ghost"})
        assert response.status_code == 404


class TestTravelHistory:

    @pytest.fixture
    def trip(self):
        def build(user_id, destination="Dubai", travel_date="2024-03-10", purpose="business"):
            return {"userId": user_id, "destination": destination, "travelDate": travel_date, "purpose": purpose}
        return build

    @pytest.mark.asyncio
    async def test_unknown_user(self, client, trip):
        response = await client.post("/api/travel-history", json=trip(9999))
        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_create_and_filter(self, client, trip):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]

        created = await client.post("/api/travel-history", json=trip(user["id"]))
        assert created.status_code == 201
        entry = created.json()["travelHistory"]
        assert entry["user"]["name"] == "Amira Haddad"
        assert entry["travelDate"] == "2024-03-10"

        await client.post("/api/travel-history", json=trip(user["id"], destination="Abu Dhabi", travel_date="2024-06-01", purpose="leisure"))
        await client.post("/api/travel-history", json=trip(user["id"], destination="London", travel_date="2023-12-24", purpose="leisure"))

        all_trips = await client.get("/api/travel-history", params={"userId": user["id"]})
        assert [t["destination"] for t in all_trips.json()["travelHistory"]] == ["Abu Dhabi", "Dubai", "London"]

        by_destination = await client.get("/api/travel-history", params={"destination": "DHABI"})
        assert [t["destination"] for t in by_destination.json()["travelHistory"]] == ["Abu Dhabi"]

        by_purpose = await client.get("/api/travel-history", params={"purpose": "leisure"})
        assert len(by_purpose.json()["travelHistory"]) == 2

        profile = await client.get(f"/api/users/{user['id']}")
        assert [t["destination"] for t in profile.json()["user"]["travelHistory"]] == ["Abu Dhabi", "Dubai", "London"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client, trip):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]
        entry = (await client.post("/api/travel-history", json=trip(user["id"]))).json()["travelHistory"]

        updated = await client.put(f"/api/travel-history/{entry['id']}", json={"destination": "Doha"})
        assert updated.json()["travelHistory"]["destination"] == "Doha"
        assert updated.json()["travelHistory"]["purpose"] == "business"

        deleted = await client.delete(f"/api/travel-history/{entry['id']}")
        assert deleted.json() == {"success": True}

        missing = await client.get(f"/api/travel-history/{entry['id']}")
        assert missing.status_code == 404
        assert missing.json()["error"] == "Travel history not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["travelDate", "destination"])
    async def test_update_cannot_null_required_field(self, client, trip, field):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]
        entry = (await client.post("/api/travel-history", json=trip(user["id"]))).json()["travelHistory"]

        response = await client.put(f"/api/travel-history/{entry['id']}", json={field: None})
        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"

    @pytest.mark.asyncio
    async def test_deleting_user_removes_history(self, client, trip):
        user = (await client.post("/api/users", json=_user_payload())).json()["user"]
        entry = (await client.post("/api/travel-history", json=trip(user["id"]))).json()["travelHistory"]

        await client.delete(f"/api/users/{user['id']}")

        response = await client.get(f"/api/travel-history/{entry['id']}")
        assert response.status_code == 404
