"""
Reference data, mock flight generation, seat maps and the extras catalog.
"""
import random
from datetime import date, timedelta

import pytest

from flightbook.data.extras import baggage_price, extras_catalog, insurance_option, meal_price
from flightbook.data.mock_flights import generate_mock_flights
from flightbook.data.reference import AIRLINE_HUBS, AIRPORTS, get_airport_by_code, search_airports
from flightbook.data.seat_maps import FLIGHT_AIRCRAFT, find_seat, layout_for_aircraft, seat_map_for_aircraft, seat_map_for_flight


class TestReferenceData:

    def test_airport_codes_are_unique(self):
        codes = [a["code"] for a in AIRPORTS]
        assert len(codes) == len(set(codes))

    def test_every_hub_is_a_known_airport(self):
        for hubs in AIRLINE_HUBS.values():
            for code in hubs:
                assert get_airport_by_code(code) is not None

    def test_search_is_case_insensitive(self):
        assert search_airports("london") == search_airports("LONDON")
        assert any(a["code"] == "LHR" for a in search_airports("london"))

    def test_search_matches_code(self):
        assert search_airports("jfk")[0]["code"] == "JFK"

    def test_unknown_lookups(self):
        assert get_airport_by_code("XXX") is None


class TestMockFlights:

    @pytest.fixture
    def flights(self):
        departure = date.today() + timedelta(days=30)
        return generate_mock_flights(
            get_airport_by_code("JFK"),
            get_airport_by_code("LHR"),
            departure,
            "economy",
            rng=random.Random(42),
        )

    def test_offer_count(self, flights):
        assert 15 <= len(flights) <= 25

    def test_sorted_by_price(self, flights):
        prices = [f["price"]["amount"] for f in flights]
        assert prices == sorted(prices)

    def test_price_adds_up(self, flights):
        for flight in flights:
            breakdown = flight["price"]["breakdown"]
            assert flight["price"]["amount"] == breakdown["baseFare"] + breakdown["taxes"] + breakdown["fees"]

    def test_ids_are_unique(self, flights):
        assert len({f["id"] for f in flights}) == len(flights)

    def test_connections_route_through_a_hub(self, flights):
        for flight in flights:
            segments = flight["segments"]
            assert len(segments) == flight["stops"] + 1
            assert segments[0]["departure"]["airport"]["code"] == "JFK"
            assert segments[-1]["arrival"]["airport"]["code"] == "LHR"
            if flight["stops"]:
                hub = segments[0]["arrival"]["airport"]["code"]
                assert hub not in ("JFK", "LHR")
                assert segments[1]["departure"]["airport"]["code"] == hub

    def test_segments_carry_aircraft(self, flights):
        assert all(segment["aircraft"] for f in flights for segment in f["segments"])

    def test_cabin_fare_rules(self):
        departure = date.today() + timedelta(days=30)
        jfk, lhr = get_airport_by_code("JFK"), get_airport_by_code("LHR")

        economy = generate_mock_flights(jfk, lhr, departure, "economy", rng=random.Random(1))[0]
        business = generate_mock_flights(jfk, lhr, departure, "business", rng=random.Random(1))[0]
        first = generate_mock_flights(jfk, lhr, departure, "first", rng=random.Random(1))[0]

        assert economy["fareRules"]["cancellationFee"] is None
        assert business["fareRules"]["cancellationFee"] == 150
        assert first["fareRules"]["cancellationFee"] == 0
        assert first["price"]["amount"] > economy["price"]["amount"]


class TestSeatMaps:

    @pytest.mark.parametrize("flight_id", sorted(FLIGHT_AIRCRAFT))
    def test_demo_flights_use_their_aircraft(self, flight_id):
        seat_map = seat_map_for_flight(flight_id)
        assert seat_map["aircraft"] == FLIGHT_AIRCRAFT[flight_id]
        assert len(seat_map["seats"]) == seat_map["rows"] * len(seat_map["columns"])

    def test_unknown_flight_gets_default_layout(self):
        assert seat_map_for_flight("UNKNOWN")["aircraft"] == "Boeing 737-800"

    def test_narrow_body_positions(self):
        seat_map = seat_map_for_aircraft("Boeing 737-800")
        assert find_seat(seat_map, "20A")["position"] == "window"
        assert find_seat(seat_map, "20C")["position"] == "aisle"
        assert find_seat(seat_map, "20B")["position"] == "middle"

    def test_wide_body_positions(self):
        seat_map = seat_map_for_aircraft("Boeing 777-300ER")
        assert find_seat(seat_map, "20K")["position"] == "window"
        assert find_seat(seat_map, "20G")["position"] == "aisle"
        assert find_seat(seat_map, "20E")["position"] == "middle"

    def test_seat_types_and_prices(self):
        seat_map = seat_map_for_aircraft("Boeing 737-800")
        assert find_seat(seat_map, "12A")["type"] == "exit-row"
        assert find_seat(seat_map, "12A")["price"] == 25
        assert find_seat(seat_map, "2A")["type"] == "preferred"
        assert find_seat(seat_map, "4A")["type"] == "extra-legroom"
        assert find_seat(seat_map, "20A")["price"] == 0

    def test_occupied_seats(self):
        seat_map = seat_map_for_aircraft("Boeing 737-800")
        assert find_seat(seat_map, "1A")["status"] == "occupied"
        assert find_seat(seat_map, "20A")["status"] == "available"

    def test_missing_seat_raises(self):
        with pytest.raises(KeyError):
            find_seat(seat_map_for_aircraft("Airbus A320"), "40A")

    @pytest.mark.parametrize("aircraft,layout", [
        ("Boeing 787-9 Dreamliner", "boeing787"),
        ("Airbus A380-800", "airbusA380"),
        ("Airbus A320neo", "airbusA320"),
        ("Airbus A350-1000", "boeing737"),
    ])
    def test_layout_lookup(self, aircraft, layout):
        assert layout_for_aircraft(aircraft) == layout


class TestExtrasCatalog:

    def test_catalog_sections(self):
        catalog = extras_catalog()
        assert set(catalog) == {"baggage", "meals", "insurance", "loungeAccess"}

    def test_prices(self):
        assert baggage_price(20) == 200
        assert baggage_price(7) is None
        assert meal_price("kosher") == 18
        assert meal_price("pizza") is None
        assert insurance_option("comprehensive")["price"] == 50
        assert insurance_option("gold") is None
