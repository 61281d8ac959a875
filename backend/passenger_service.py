"""
Passenger management service
Creates passenger profiles and looks them up by id or passport number
"""
import logging
from datetime import date
from typing import List

from psycopg2 import errors as pg_errors

from database import Booking, Passenger, row_to_booking, row_to_passenger, get_db_manager

from .errors import ConflictError, DuplicatePassport, UnknownPassenger, persistence_errors
from .identifiers import IdentifierGenerator
from .retry import run_with_retry
from .validation import require_text, validate_birth_date, validate_id, validate_passport

logger = logging.getLogger(__name__)

_PASSENGER_COLS = "id, passport_number, full_name, birth_date, country, created_at"


class PassengerService:
    """Service for passenger management operations"""

    @staticmethod
    def create_passenger(passport_number: str, full_name: str, birth_date, country: str) -> Passenger:
        """
        Create a new passenger profile

        Args:
            passport_number: 10 character passport number
            full_name: Full name
            birth_date: Date of birth (date or YYYY-MM-DD / MM/DD/YYYY)
            country: Country of residence

        Returns:
            Created passenger object

        Raises:
            ValidationError: On malformed input
            DuplicatePassport: If the passport number is already registered
        """
        passport_number = validate_passport(passport_number)
        full_name = require_text(full_name, 'full_name')
        birth_date = validate_birth_date(birth_date)
        country = require_text(country, 'country', max_length=60)

        return run_with_retry(
            PassengerService._create_passenger_transaction,
            passport_number, full_name, birth_date, country
        )

    @staticmethod
    def _create_passenger_transaction(passport_number: str, full_name: str,
                                      birth_date: date, country: str) -> Passenger:
        with persistence_errors():
            with get_db_manager().transaction() as conn:
                with conn.cursor() as cursor:
                    # Taking the id lock first also serialises the duplicate check
                    passenger_id = IdentifierGenerator.next_passenger_id(cursor)

                    cursor.execute("SELECT id FROM passengers WHERE passport_number = %s",
                                   (passport_number,))
                    if cursor.fetchone():
                        raise DuplicatePassport(
                            f"Passenger with passport number {passport_number} already exists"
                        )

                    try:
                        cursor.execute(f"""
                            INSERT INTO passengers (id, passport_number, full_name, birth_date, country)
                            VALUES (%s, %s, %s, %s, %s)
                            RETURNING {_PASSENGER_COLS}
                        """, (passenger_id, passport_number, full_name, birth_date, country))
                    except pg_errors.UniqueViolation as e:
                        if e.diag.constraint_name == 'passengers_passport_number_key':
                            raise DuplicatePassport(
                                f"Passenger with passport number {passport_number} already exists"
                            ) from e
                        raise ConflictError(f"Passenger id {passenger_id} taken concurrently") from e

                    passenger = row_to_passenger(cursor.fetchone())

        logger.info("Created passenger %s", passenger.id)
        return passenger

    @staticmethod
    def fetch_by_passport(cursor, passport_number: str):
        cursor.execute(f"SELECT {_PASSENGER_COLS} FROM passengers WHERE passport_number = %s",
                       (passport_number,))
        return row_to_passenger(cursor.fetchone())

    @staticmethod
    def fetch_by_id(cursor, passenger_id: int):
        cursor.execute(f"SELECT {_PASSENGER_COLS} FROM passengers WHERE id = %s", (passenger_id,))
        return row_to_passenger(cursor.fetchone())

    @staticmethod
    def get_passenger(passenger_id: int) -> Passenger:
        """Get passenger by ID"""
        passenger_id = validate_id(passenger_id, 'passenger_id')
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                passenger = PassengerService.fetch_by_id(cursor, passenger_id)
        if not passenger:
            raise UnknownPassenger(f"Passenger with ID {passenger_id} not found")
        return passenger

    @staticmethod
    def get_passenger_by_passport(passport_number: str) -> Passenger:
        """Get passenger by passport number"""
        passport_number = validate_passport(passport_number)
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                passenger = PassengerService.fetch_by_passport(cursor, passport_number)
        if not passenger:
            raise UnknownPassenger(f"No passenger with passport number {passport_number}")
        return passenger

    @staticmethod
    def list_bookings(passenger_id: int) -> List[Booking]:
        """All bookings of a passenger, most recent departure first"""
        passenger = PassengerService.get_passenger(passenger_id)
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute("""
                    SELECT booking_ref, departure, flight_num, passenger_id, booked_at
                    FROM bookings
                    WHERE passenger_id = %s
                    ORDER BY departure DESC, booked_at DESC
                """, (passenger.id,))
                return [row_to_booking(row) for row in cursor.fetchall()]
