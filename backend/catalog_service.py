"""
Catalog reader
Read-only access to airline and flight data owned outside the booking core
"""
from typing import List, Optional

from database import Airline, Flight, row_to_airline, row_to_flight, get_db_manager

from .errors import persistence_errors

# Airline columns with al_ prefix for joined queries
_AIRLINE_COLS = """al.air_id as al_air_id, al.name as al_name, al.founded as al_founded,
    al.country as al_country, al.hub as al_hub"""

_FLIGHT_WITH_AIRLINE_QUERY = f"""
    SELECT f.flight_num, f.air_id, f.origin, f.destination, f.plane, f.seats, f.duration,
           {_AIRLINE_COLS}
    FROM flights f
    LEFT JOIN airlines al ON f.air_id = al.air_id
"""


def _build_flight_with_airline(row) -> Optional[Flight]:
    """Build a Flight with its airline relation from a joined row."""
    if not row:
        return None
    flight = row_to_flight(row)
    if row.get('al_air_id') is not None:
        flight.airline = Airline(
            air_id=row['al_air_id'],
            name=row['al_name'],
            founded=row['al_founded'],
            country=row['al_country'],
            hub=row['al_hub']
        )
    return flight


class CatalogService:
    """Lookups by flight number, route and airline"""

    @staticmethod
    def fetch_flight(cursor, flight_num: str) -> Optional[Flight]:
        """Flight lookup on a caller-supplied cursor (e.g. inside a booking transaction)"""
        cursor.execute(f"{_FLIGHT_WITH_AIRLINE_QUERY} WHERE f.flight_num = %s", (flight_num,))
        return _build_flight_with_airline(cursor.fetchone())

    @staticmethod
    def fetch_route(cursor, origin: str, destination: str) -> List[Flight]:
        """All flights serving origin -> destination, by flight number"""
        cursor.execute(f"""
            {_FLIGHT_WITH_AIRLINE_QUERY}
            WHERE f.origin = %s AND f.destination = %s
            ORDER BY f.flight_num
        """, (origin, destination))
        return [_build_flight_with_airline(row) for row in cursor.fetchall()]

    @staticmethod
    def get_flight(flight_num: str) -> Optional[Flight]:
        """Get flight by flight number"""
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                return CatalogService.fetch_flight(cursor, flight_num)

    @staticmethod
    def find_flights(origin: str, destination: str) -> List[Flight]:
        """Get flights for a route"""
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                return CatalogService.fetch_route(cursor, origin, destination)

    @staticmethod
    def get_airline(air_id: int) -> Optional[Airline]:
        """Get airline by ID"""
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute("""
                    SELECT air_id, name, founded, country, hub
                    FROM airlines
                    WHERE air_id = %s
                """, (air_id,))
                return row_to_airline(cursor.fetchone())

    @staticmethod
    def list_flights_for_airline(air_id: int) -> List[Flight]:
        """Flights operated by an airline"""
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute(f"""
                    {_FLIGHT_WITH_AIRLINE_QUERY}
                    WHERE f.air_id = %s
                    ORDER BY f.flight_num
                """, (air_id,))
                return [_build_flight_with_airline(row) for row in cursor.fetchall()]

    @staticmethod
    def fetch_route_by_duration(cursor, origin: str, destination: str, limit: int) -> List[Flight]:
        """Shortest flights first for a route, at most ``limit`` of them"""
        cursor.execute(f"""
            {_FLIGHT_WITH_AIRLINE_QUERY}
            WHERE f.origin = %s AND f.destination = %s
            ORDER BY f.duration ASC, f.flight_num ASC
            LIMIT %s
        """, (origin, destination, limit))
        return [_build_flight_with_airline(row) for row in cursor.fetchall()]
