"""
Aircraft seat map layouts.

Maps are generated per aircraft type; occupancy is a fixed sample
and no seat is reserved against concurrent bookers.
"""
from typing import Any, Dict, List

EXIT_ROW_PRICE = 25
PREFERRED_PRICE = 15
EXTRA_LEGROOM_PRICE = 20
EXTRA_LEGROOM_LAST_ROW = 5

LAYOUTS: Dict[str, Dict[str, Any]] = {
    "boeing737": {
        "aircraft": "Boeing 737-800",
        "columns": list("ABCDEF"),
        "rows": 30,
        "exitRows": [12, 13],
        "preferredRows": [1, 2, 3],
        "occupied": [
            "1A", "1B", "2C", "3D", "4E", "5F", "7A", "8B", "9C", "10D", "11E",
            "14A", "15C", "16E", "18B", "19D", "22A", "23C", "24E", "25B", "26D",
        ],
    },
    "airbusA320": {
        "aircraft": "Airbus A320",
        "columns": list("ABCDEF"),
        "rows": 28,
        "exitRows": [10, 11],
        "preferredRows": [1, 2],
        "occupied": [
            "1A", "2B", "3C", "4D", "5E", "8A", "9B", "11C", "12D", "13E",
            "16A", "17B", "19C", "20D", "22E",
        ],
    },
    "boeing777": {
        "aircraft": "Boeing 777-300ER",
        "columns": list("ABCDEFGHJK"),
        "rows": 35,
        "exitRows": [15, 16],
        "preferredRows": [1, 2, 3, 4],
        "occupied": [
            "1A", "1B", "2C", "2D", "3E", "3F", "4G", "4H", "6A", "7B", "8C",
            "9D", "10E", "11F", "12G", "17A", "18B", "19C", "20D", "21E", "22F",
            "25A", "26B", "27C", "28D", "29E", "30F",
        ],
    },
    "airbusA380": {
        "aircraft": "Airbus A380",
        "columns": list("ABCDEFGHJK"),
        "rows": 40,
        "exitRows": [18, 19],
        "preferredRows": [1, 2, 3, 4, 5],
        "occupied": [
            "1A", "1K", "2B", "2J", "3C", "3H", "4D", "4G", "6A", "7B", "8C",
            "9D", "10E", "11F", "12G", "13H", "20A", "21B", "22C", "23D", "24E",
            "25F", "26G", "30A", "31B", "32C", "33D", "34E", "35F",
        ],
    },
    "boeing787": {
        "aircraft": "Boeing 787 Dreamliner",
        "columns": list("ABCDEFGH"),
        "rows": 32,
        "exitRows": [14, 15],
        "preferredRows": [1, 2, 3],
        "occupied": [
            "1A", "1H", "2B", "2G", "3C", "3F", "5A", "6B", "7C", "8D", "9E",
            "10F", "16A", "17B", "18C", "19D", "20E", "24A", "25B", "26C",
            "27D", "28E",
        ],
    },
}

# Demo flight ids with a known aircraft
FLIGHT_AIRCRAFT = {
    "FL001": "Boeing 737-800",
    "FL002": "Airbus A320",
    "FL003": "Boeing 777-300ER",
    "FL004": "Airbus A380",
    "FL005": "Boeing 787 Dreamliner",
}
DEFAULT_AIRCRAFT = "Boeing 737-800"


def seat_position(column: str, columns: List[str]) -> str:
    total = len(columns)
    if total == 6:
        if column in ("A", "F"):
            return "window"
        if column in ("C", "D"):
            return "aisle"
        return "middle"
    if total == 8:
        if column in ("A", "H"):
            return "window"
        if column in ("B", "C", "F", "G"):
            return "aisle"
        return "middle"
    if total == 10:
        if column in ("A", "K"):
            return "window"
        if column in ("C", "D", "G", "H"):
            return "aisle"
        return "middle"

    index = columns.index(column)
    if index in (0, total - 1):
        return "window"
    if index in (total // 2 - 1, total // 2):
        return "aisle"
    return "middle"


def _row_seats(row: int, layout: Dict[str, Any], occupied: set) -> List[Dict[str, Any]]:
    if row in layout["exitRows"]:
        seat_type, price = "exit-row", EXIT_ROW_PRICE
    elif row in layout["preferredRows"]:
        seat_type, price = "preferred", PREFERRED_PRICE
    elif row <= EXTRA_LEGROOM_LAST_ROW:
        seat_type, price = "extra-legroom", EXTRA_LEGROOM_PRICE
    else:
        seat_type, price = "standard", 0

    seats = []
    for column in layout["columns"]:
        seat_id = f"{row}{column}"
        seats.append({
            "id": seat_id,
            "row": row,
            "column": column,
            "status": "occupied" if seat_id in occupied else "available",
            "type": seat_type,
            "position": seat_position(column, layout["columns"]),
            "price": price,
        })
    return seats


def build_seat_map(layout_key: str) -> Dict[str, Any]:
    layout = LAYOUTS[layout_key]
    occupied = set(layout["occupied"])
    seats = []
    for row in range(1, layout["rows"] + 1):
        seats.extend(_row_seats(row, layout, occupied))

    return {
        "aircraft": layout["aircraft"],
        "rows": layout["rows"],
        "columns": list(layout["columns"]),
        "seats": seats,
        "exitRows": list(layout["exitRows"]),
    }


def layout_for_aircraft(aircraft: str) -> str:
    name = aircraft.lower()
    if "737" in name:
        return "boeing737"
    if "a320" in name or "airbus 320" in name:
        return "airbusA320"
    if "777" in name:
        return "boeing777"
    if "a380" in name or "airbus 380" in name:
        return "airbusA380"
    if "787" in name or "dreamliner" in name:
        return "boeing787"
    return "boeing737"


def seat_map_for_aircraft(aircraft: str) -> Dict[str, Any]:
    return build_seat_map(layout_for_aircraft(aircraft))


def seat_map_for_flight(flight_id: str) -> Dict[str, Any]:
    return seat_map_for_aircraft(FLIGHT_AIRCRAFT.get(flight_id, DEFAULT_AIRCRAFT))


def find_seat(seat_map: Dict[str, Any], seat_id: str) -> Dict[str, Any]:
    """Return the seat with seat_id, raising KeyError if the map has none."""
    for seat in seat_map["seats"]:
        if seat["id"] == seat_id:
            return seat
    raise KeyError(seat_id)
