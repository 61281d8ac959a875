"""Command-line helper for loading airline and flight catalog rows."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from database.database import get_db_manager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirlineSeed:
    air_id: int
    name: str
    founded: int
    country: str
    hub: str


@dataclass(frozen=True)
class Route:
    """Represents a route template; each template yields one or more flights."""

    code: str
    origin: str
    destination: str
    duration_minutes: int


AIRLINES: List[AirlineSeed] = [
    AirlineSeed(1, "American Airlines", 1926, "United States", "DFW"),
    AirlineSeed(2, "Delta Air Lines", 1924, "United States", "ATL"),
    AirlineSeed(3, "United Airlines", 1926, "United States", "ORD"),
    AirlineSeed(4, "Southwest Airlines", 1967, "United States", "DAL"),
    AirlineSeed(5, "British Airways", 1974, "United Kingdom", "LHR"),
    AirlineSeed(6, "Lufthansa", 1953, "Germany", "FRA"),
]

AIRLINE_CODES = {1: "AA", 2: "DL", 3: "UA", 4: "WN", 5: "BA", 6: "LH"}

ROUTES: List[Route] = [
    Route("10", "JFK", "LAX", 366),
    Route("11", "JFK", "ATL", 138),
    Route("12", "ORD", "SFO", 258),
    Route("13", "DAL", "DEN", 132),
    Route("14", "BOS", "LHR", 408),
    Route("15", "FRA", "SFO", 660),
    Route("16", "MIA", "JFK", 174),
    Route("17", "SEA", "LAX", 150),
    Route("18", "IAH", "ORD", 156),
    Route("19", "PHX", "LAS", 66),
]

# (plane, seats)
FLEET = [
    ("Boeing 737-800", 189),
    ("Airbus A320", 180),
    ("Boeing 787-9", 296),
    ("Airbus A350-900", 325),
    ("Embraer E175", 76),
]


def insert_airline(cursor, airline: AirlineSeed) -> bool:
    cursor.execute("""
        INSERT INTO airlines (air_id, name, founded, country, hub)
        VALUES (%s, %s, %s, %s, %s)
        ON CONFLICT (air_id) DO NOTHING
        RETURNING air_id
    """, (airline.air_id, airline.name, airline.founded, airline.country, airline.hub))
    return cursor.fetchone() is not None


def insert_flight(cursor, *, flight_num: str, air_id: int, origin: str, destination: str,
                  plane: str, seats: int, duration: int) -> bool:
    """Insert one catalog flight unless the number already exists; return True if created."""
    cursor.execute("""
        INSERT INTO flights (flight_num, air_id, origin, destination, plane, seats, duration)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
        ON CONFLICT (flight_num) DO NOTHING
        RETURNING flight_num
    """, (flight_num, air_id, origin, destination, plane, seats, duration))
    return cursor.fetchone() is not None


def populate_catalog(*, flights_per_route: int = 2, seat_scale: float = 1.0) -> int:
    """Load airlines and ``flights_per_route`` flights for every route; return flights created."""

    created = 0
    with get_db_manager().transaction() as conn:
        with conn.cursor() as cursor:
            for airline in AIRLINES:
                insert_airline(cursor, airline)

            for route in ROUTES:
                for slot in range(1, flights_per_route + 1):
                    airline = random.choice(AIRLINES)
                    plane, seats = random.choice(FLEET)
                    flight_num = f"{AIRLINE_CODES[airline.air_id]}{route.code}{slot:02d}"
                    if insert_flight(
                        cursor,
                        flight_num=flight_num,
                        air_id=airline.air_id,
                        origin=route.origin,
                        destination=route.destination,
                        plane=plane,
                        seats=max(1, int(seats * seat_scale)),
                        duration=route.duration_minutes + random.randint(-10, 25),
                    ):
                        created += 1
    return created


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the airline/flight catalog with sample routes")
    parser.add_argument("--flights-per-route", type=int, default=2, help="Flights to create per route")
    parser.add_argument("--seat-scale", type=float, default=1.0,
                        help="Multiply fleet seat counts (small values make flights fill up quickly)")
    parser.add_argument("--seed", type=int, help="Seed for reproducible catalogs")

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    if args.seed is not None:
        random.seed(args.seed)

    get_db_manager().create_tables()
    created = populate_catalog(flights_per_route=args.flights_per_route, seat_scale=args.seat_scale)
    logger.info("Created %d flights across %d routes", created, len(ROUTES))


if __name__ == "__main__":
    main()
