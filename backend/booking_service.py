"""
Booking service
Validates a booking request, admits it through the capacity ledger and stores
the booking row in the same transaction as the reservation
"""
import logging
from datetime import date
from typing import List

from psycopg2 import errors as pg_errors

from database import Booking, row_to_booking, get_db_manager

from .capacity_ledger import CapacityLedger
from .catalog_service import CatalogService
from .errors import (
    BookingNotFound, ConflictError, NoSuchRoute, UnknownFlight, UnknownPassenger,
    ValidationError, persistence_errors
)
from .identifiers import IdentifierGenerator, BOOKING_REFERENCE_LENGTH
from .passenger_service import PassengerService
from .retry import run_with_retry
from .validation import parse_date, require_text, validate_flight_number, validate_passport

logger = logging.getLogger(__name__)

_BOOKING_COLS = "booking_ref, departure, flight_num, passenger_id, booked_at"


class BookingService:
    """Service for booking operations with transaction safety"""

    @staticmethod
    def book(passport_number: str, origin: str, destination: str, departure, flight_num: str) -> Booking:
        """
        Book a seat for a passenger on a selected flight

        The caller picks ``flight_num`` among the route's flights (see
        QueryService.flights_between). Identical requests create separate
        bookings; there is no deduplication.

        Args:
            passport_number: Passenger's passport number
            origin: Route origin
            destination: Route destination
            departure: Departure date
            flight_num: Selected flight on that route

        Returns:
            Booking with passenger and flight attached

        Raises:
            ValidationError: Malformed passport, date or route
            UnknownPassenger, NoSuchRoute, UnknownFlight: Unknown references
            CapacityError: No seat left for that departure
            Busy: Lock timeout or retries exhausted
        """
        passport_number = validate_passport(passport_number)
        origin = require_text(origin, 'origin', max_length=60)
        destination = require_text(destination, 'destination', max_length=60)
        departure = parse_date(departure)
        flight_num = validate_flight_number(flight_num)

        booking = run_with_retry(
            BookingService._book_transaction,
            passport_number, origin, destination, departure, flight_num
        )
        logger.info("Booked %s on flight %s for %s", booking.booking_ref, flight_num, departure)
        return booking

    @staticmethod
    def _book_transaction(passport_number: str, origin: str, destination: str,
                          departure: date, flight_num: str) -> Booking:
        """One attempt: lookup, admission, reference and insert commit together"""
        with persistence_errors():
            with get_db_manager().transaction() as conn:
                with conn.cursor() as cursor:
                    passenger = PassengerService.fetch_by_passport(cursor, passport_number)
                    if not passenger:
                        raise UnknownPassenger(f"No passenger with passport number {passport_number}")

                    route = CatalogService.fetch_route(cursor, origin, destination)
                    if not route:
                        raise NoSuchRoute(f"No flights from {origin} to {destination}")

                    flight = next((f for f in route if f.flight_num == flight_num), None)
                    if not flight:
                        raise UnknownFlight(
                            f"Flight {flight_num} does not fly from {origin} to {destination}"
                        )

                    CapacityLedger.reserve(conn, flight, departure)

                    reference = IdentifierGenerator.next_booking_reference(cursor)
                    try:
                        cursor.execute(f"""
                            INSERT INTO bookings (booking_ref, departure, flight_num, passenger_id)
                            VALUES (%s, %s, %s, %s)
                            RETURNING {_BOOKING_COLS}
                        """, (reference, departure, flight.flight_num, passenger.id))
                    except pg_errors.UniqueViolation as e:
                        # Same reference committed by a concurrent booking after our check
                        raise ConflictError(f"Booking reference {reference} taken concurrently") from e

                    booking = row_to_booking(cursor.fetchone())

        booking.passenger = passenger
        booking.flight = flight
        return booking

    @staticmethod
    def get_booking(booking_ref: str) -> Booking:
        """Get booking by reference"""
        if not isinstance(booking_ref, str) or len(booking_ref.strip()) != BOOKING_REFERENCE_LENGTH:
            raise ValidationError(
                f"Booking reference must be {BOOKING_REFERENCE_LENGTH} characters", field='booking_ref'
            )
        booking_ref = booking_ref.strip().upper()

        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute(f"SELECT {_BOOKING_COLS} FROM bookings WHERE booking_ref = %s",
                               (booking_ref,))
                booking = row_to_booking(cursor.fetchone())
                if not booking:
                    raise BookingNotFound(f"Booking {booking_ref} not found")

                booking.passenger = PassengerService.fetch_by_id(cursor, booking.passenger_id)
                booking.flight = CatalogService.fetch_flight(cursor, booking.flight_num)
                return booking

    @staticmethod
    def list_bookings_for_flight(flight_num: str, departure) -> List[Booking]:
        """Bookings on one departure, in booking order"""
        flight_num = validate_flight_number(flight_num)
        departure = parse_date(departure)

        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute(f"""
                    SELECT {_BOOKING_COLS}
                    FROM bookings
                    WHERE flight_num = %s AND departure = %s
                    ORDER BY booked_at, booking_ref
                """, (flight_num, departure))
                return [row_to_booking(row) for row in cursor.fetchall()]
