"""
Query service
Read-only statistics and availability; each query runs in its own snapshot
and only sees committed bookings and ratings
"""
from typing import List

from database import DestinationCount, FlightAvailability, FlightListing, RatedRoute, get_db_manager

from .capacity_ledger import CapacityLedger
from .catalog_service import CatalogService
from .errors import NoSuchRoute, persistence_errors
from .validation import parse_date, require_text, validate_positive

_AVAILABILITY_QUERY = """
    SELECT f.flight_num, f.origin, f.destination,
           COALESCE(b.booked, 0) AS booked,
           f.seats AS capacity,
           GREATEST(f.seats - COALESCE(b.booked, 0), 0) AS available
    FROM flights f
    LEFT JOIN (
        SELECT flight_num, COUNT(*) AS booked
        FROM bookings
        WHERE departure = %s
        GROUP BY flight_num
    ) b ON b.flight_num = f.flight_num
"""


def _row_to_availability(row) -> FlightAvailability:
    return FlightAvailability(
        flight_num=row['flight_num'],
        origin=row['origin'],
        destination=row['destination'],
        booked=row['booked'],
        capacity=row['capacity'],
        available=row['available']
    )


class QueryService:
    """Aggregate queries over the catalog, bookings and ratings"""

    @staticmethod
    def popular_destinations(k: int) -> List[DestinationCount]:
        """
        The k destinations served by the most flights

        Ties are broken by destination name.
        """
        k = validate_positive(k, 'k')
        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                cursor.execute("""
                    SELECT destination, COUNT(*) AS flight_count
                    FROM flights
                    GROUP BY destination
                    ORDER BY flight_count DESC, destination ASC
                    LIMIT %s
                """, (k,))
                return [DestinationCount(row['destination'], row['flight_count'])
                        for row in cursor.fetchall()]

    @staticmethod
    def highest_rated_routes(k: int) -> List[RatedRoute]:
        """
        The k flights with the best average score

        Ordered by average score, then number of ratings, then by which flight
        was rated first.
        """
        k = validate_positive(k, 'k')
        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                cursor.execute("""
                    SELECT al.name AS airline_name, f.flight_num, f.origin, f.destination, f.plane,
                           r.avg_score, r.rating_count
                    FROM (
                        SELECT flight_num, AVG(score) AS avg_score, COUNT(*) AS rating_count,
                               MIN(id) AS first_rating
                        FROM ratings
                        GROUP BY flight_num
                    ) r
                    JOIN flights f ON f.flight_num = r.flight_num
                    JOIN airlines al ON al.air_id = f.air_id
                    ORDER BY r.avg_score DESC, r.rating_count DESC, r.first_rating ASC
                    LIMIT %s
                """, (k,))
                return [
                    RatedRoute(
                        airline_name=row['airline_name'],
                        flight_num=row['flight_num'],
                        origin=row['origin'],
                        destination=row['destination'],
                        plane=row['plane'],
                        avg_score=float(row['avg_score']),
                        rating_count=row['rating_count']
                    )
                    for row in cursor.fetchall()
                ]

    @staticmethod
    def flights_ordered_by_duration(origin: str, destination: str, limit: int) -> FlightListing:
        """
        Up to ``limit`` flights on a route, shortest first

        A route with fewer flights than ``limit`` is not an error: every flight
        is returned and ``fewer_than_requested`` is set.
        """
        origin = require_text(origin, 'origin', max_length=60)
        destination = require_text(destination, 'destination', max_length=60)
        limit = validate_positive(limit, 'limit')

        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                flights = CatalogService.fetch_route_by_duration(cursor, origin, destination, limit)

        return FlightListing(
            flights=flights,
            requested=limit,
            fewer_than_requested=len(flights) < limit
        )

    @staticmethod
    def availability_report(departure) -> List[FlightAvailability]:
        """Flights with at least one free seat on ``departure``, by origin and destination"""
        departure = parse_date(departure)
        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                cursor.execute(f"""
                    {_AVAILABILITY_QUERY}
                    WHERE f.seats - COALESCE(b.booked, 0) > 0
                    ORDER BY f.origin, f.destination, f.flight_num
                """, (departure,))
                return [_row_to_availability(row) for row in cursor.fetchall()]

    @staticmethod
    def flights_between(origin: str, destination: str, departure) -> List[FlightAvailability]:
        """
        A route's flights with their seat usage on ``departure``

        This is what a caller is shown before choosing a flight to book; full
        flights are included with ``available == 0``.

        Raises:
            NoSuchRoute: If no flight serves the route
        """
        origin = require_text(origin, 'origin', max_length=60)
        destination = require_text(destination, 'destination', max_length=60)
        departure = parse_date(departure)

        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                cursor.execute(f"""
                    {_AVAILABILITY_QUERY}
                    WHERE f.origin = %s AND f.destination = %s
                    ORDER BY f.flight_num
                """, (departure, origin, destination))
                rows = cursor.fetchall()

        if not rows:
            raise NoSuchRoute(f"No flights from {origin} to {destination}")
        return [_row_to_availability(row) for row in rows]

    @staticmethod
    def seats_available(flight_num: str, departure) -> int:
        """Free seats on one flight for one date"""
        return CapacityLedger.available_seats(flight_num, departure)
