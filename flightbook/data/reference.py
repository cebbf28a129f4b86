"""
Static reference data: airlines, airports and aircraft types
"""
from typing import Dict, List, Optional

AIRLINES: List[Dict[str, str]] = [
    {"code": "EY", "name": "Etihad Airways", "logo": "/airlines/etihad.png"},
    {"code": "EK", "name": "Emirates", "logo": "/airlines/emirates.png"},
    {"code": "QR", "name": "Qatar Airways", "logo": "/airlines/qatar.png"},
    {"code": "BA", "name": "British Airways", "logo": "/airlines/british-airways.png"},
    {"code": "LH", "name": "Lufthansa", "logo": "/airlines/lufthansa.png"},
    {"code": "AF", "name": "Air France", "logo": "/airlines/air-france.png"},
    {"code": "AA", "name": "American Airlines", "logo": "/airlines/american.png"},
    {"code": "UA", "name": "United Airlines", "logo": "/airlines/united.png"},
    {"code": "DL", "name": "Delta Air Lines", "logo": "/airlines/delta.png"},
    {"code": "SQ", "name": "Singapore Airlines", "logo": "/airlines/singapore.png"},
]

PREMIUM_AIRLINES = {"EY", "EK", "QR", "SQ"}

AIRLINE_HUBS: Dict[str, List[str]] = {
    "EY": ["AUH"],
    "EK": ["DXB"],
    "QR": ["DOH"],
    "BA": ["LHR"],
    "LH": ["FRA", "MUC"],
    "AF": ["CDG"],
    "AA": ["JFK", "ORD", "MIA"],
    "UA": ["ORD", "SFO"],
    "DL": ["JFK", "LAX"],
    "SQ": ["SIN"],
}
DEFAULT_HUBS = ["AUH", "DXB", "DOH"]

AIRPORTS: List[Dict[str, str]] = [
    # Middle East
    {"code": "AUH", "name": "Abu Dhabi International Airport", "city": "Abu Dhabi", "country": "United Arab Emirates"},
    {"code": "DXB", "name": "Dubai International Airport", "city": "Dubai", "country": "United Arab Emirates"},
    {"code": "DOH", "name": "Hamad International Airport", "city": "Doha", "country": "Qatar"},
    {"code": "RUH", "name": "King Khalid International Airport", "city": "Riyadh", "country": "Saudi Arabia"},
    {"code": "JED", "name": "King Abdulaziz International Airport", "city": "Jeddah", "country": "Saudi Arabia"},
    # Europe
    {"code": "LHR", "name": "London Heathrow Airport", "city": "London", "country": "United Kingdom"},
    {"code": "CDG", "name": "Charles de Gaulle Airport", "city": "Paris", "country": "France"},
    {"code": "FRA", "name": "Frankfurt Airport", "city": "Frankfurt", "country": "Germany"},
    {"code": "AMS", "name": "Amsterdam Airport Schiphol", "city": "Amsterdam", "country": "Netherlands"},
    {"code": "MAD", "name": "Adolfo Suárez Madrid-Barajas Airport", "city": "Madrid", "country": "Spain"},
    {"code": "FCO", "name": "Leonardo da Vinci-Fiumicino Airport", "city": "Rome", "country": "Italy"},
    {"code": "MUC", "name": "Munich Airport", "city": "Munich", "country": "Germany"},
    {"code": "ZRH", "name": "Zurich Airport", "city": "Zurich", "country": "Switzerland"},
    # North America
    {"code": "JFK", "name": "John F. Kennedy International Airport", "city": "New York", "country": "United States"},
    {"code": "LAX", "name": "Los Angeles International Airport", "city": "Los Angeles", "country": "United States"},
    {"code": "ORD", "name": "O'Hare International Airport", "city": "Chicago", "country": "United States"},
    {"code": "MIA", "name": "Miami International Airport", "city": "Miami", "country": "United States"},
    {"code": "SFO", "name": "San Francisco International Airport", "city": "San Francisco", "country": "United States"},
    {"code": "YYZ", "name": "Toronto Pearson International Airport", "city": "Toronto", "country": "Canada"},
    # Asia
    {"code": "SIN", "name": "Singapore Changi Airport", "city": "Singapore", "country": "Singapore"},
    {"code": "HKG", "name": "Hong Kong International Airport", "city": "Hong Kong", "country": "Hong Kong"},
    {"code": "NRT", "name": "Narita International Airport", "city": "Tokyo", "country": "Japan"},
    {"code": "ICN", "name": "Incheon International Airport", "city": "Seoul", "country": "South Korea"},
    {"code": "BKK", "name": "Suvarnabhumi Airport", "city": "Bangkok", "country": "Thailand"},
    {"code": "DEL", "name": "Indira Gandhi International Airport", "city": "New Delhi", "country": "India"},
    {"code": "BOM", "name": "Chhatrapati Shivaji Maharaj International Airport", "city": "Mumbai", "country": "India"},
    # Oceania
    {"code": "SYD", "name": "Sydney Kingsford Smith Airport", "city": "Sydney", "country": "Australia"},
    {"code": "MEL", "name": "Melbourne Airport", "city": "Melbourne", "country": "Australia"},
]

AIRCRAFT_TYPES = [
    "Boeing 787-9 Dreamliner",
    "Boeing 777-300ER",
    "Airbus A380-800",
    "Airbus A350-1000",
    "Boeing 737-800",
    "Airbus A320neo",
    "Boeing 787-10 Dreamliner",
    "Airbus A330-300",
]

MAX_AIRPORT_RESULTS = 10


def search_airports(query: str) -> List[Dict[str, str]]:
    """Case-insensitive match on code, name, city or country."""
    needle = query.lower()
    matches = [
        airport for airport in AIRPORTS
        if needle in airport["code"].lower()
        or needle in airport["name"].lower()
        or needle in airport["city"].lower()
        or needle in airport["country"].lower()
    ]
    return matches[:MAX_AIRPORT_RESULTS]


def get_airport_by_code(code: str) -> Optional[Dict[str, str]]:
    for airport in AIRPORTS:
        if airport["code"] == code:
            return airport
    return None
