"""
Capacity ledger
Sole arbiter of seat admission per (flight, departure date)

Admission is one conditional UPDATE on a per-departure counter row. The row lock
it takes serialises competing reservations; under READ COMMITTED a waiting
UPDATE re-checks ``seats_booked < seats`` against the winner's committed
value, so at most ``seats`` reservations ever succeed. ``seats`` is the flight's
current catalog capacity, read in the booking transaction and written back to
the counter row on every admission. The table's CHECK constraint backs this up
inside the database.
"""
import logging
from datetime import date

from database import Flight, Reservation, get_db_manager

from .catalog_service import CatalogService
from .errors import CapacityError, UnknownFlight, persistence_errors
from .validation import parse_date, validate_flight_number

logger = logging.getLogger(__name__)


class CapacityLedger:
    """Seat availability and atomic reservation"""

    @staticmethod
    def count_booked(cursor, flight_num: str, departure: date) -> int:
        cursor.execute("""
            SELECT COUNT(*) AS booked
            FROM bookings
            WHERE flight_num = %s AND departure = %s
        """, (flight_num, departure))
        return cursor.fetchone()['booked']

    @staticmethod
    def available_seats(flight_num: str, departure) -> int:
        """
        Seats still free on a flight for a departure date

        Args:
            flight_num: Flight number
            departure: Departure date

        Returns:
            capacity - committed bookings, never below zero

        Raises:
            UnknownFlight: If the flight is not in the catalog
        """
        flight_num = validate_flight_number(flight_num)
        departure = parse_date(departure)

        with persistence_errors():
            with get_db_manager().snapshot() as cursor:
                flight = CatalogService.fetch_flight(cursor, flight_num)
                if not flight:
                    raise UnknownFlight(f"Flight {flight_num} not found")
                booked = CapacityLedger.count_booked(cursor, flight_num, departure)
                # A catalog shrink can leave more bookings than seats
                return max(flight.seats - booked, 0)

    @staticmethod
    def reserve(conn, flight: Flight, departure: date) -> Reservation:
        """
        Admit one seat on ``flight`` for ``departure`` within the caller's transaction

        Capacity is ``flight.seats`` as read by the caller, so a catalog change
        applies to the next admission even for a departure that already has
        bookings.

        The reservation commits or rolls back together with whatever else the
        caller writes on ``conn``; the caller must insert the booking row before
        committing.

        Raises:
            CapacityError: If the departure is full
        """
        with conn.cursor() as cursor:
            # First booking for a departure creates its counter row
            cursor.execute("""
                INSERT INTO seat_ledger (flight_num, departure, capacity, seats_booked)
                VALUES (%s, %s, %s, 0)
                ON CONFLICT (flight_num, departure) DO NOTHING
            """, (flight.flight_num, departure, flight.seats))

            cursor.execute("""
                UPDATE seat_ledger
                SET seats_booked = seats_booked + 1, capacity = %(seats)s
                WHERE flight_num = %(flight_num)s AND departure = %(departure)s
                  AND seats_booked < %(seats)s
                RETURNING seats_booked, capacity
            """, {'flight_num': flight.flight_num, 'departure': departure, 'seats': flight.seats})

            row = cursor.fetchone()
            if not row:
                logger.info("Flight %s full on %s", flight.flight_num, departure)
                raise CapacityError(flight.flight_num, departure)

            return Reservation(
                flight_num=flight.flight_num,
                departure=departure,
                seats_booked=row['seats_booked'],
                capacity=row['capacity']
            )
