"""
Rating service
A passenger may rate a flight once, and only after booking it
"""
import logging
from typing import List

from psycopg2 import errors as pg_errors

from database import Rating, row_to_rating, get_db_manager

from .catalog_service import CatalogService
from .errors import (
    AlreadyRated, ConflictError, NotFlown, NotFoundError, UnknownFlight, UnknownPassenger,
    persistence_errors
)
from .identifiers import IdentifierGenerator
from .passenger_service import PassengerService
from .retry import run_with_retry
from .validation import validate_comment, validate_flight_number, validate_id, validate_score

logger = logging.getLogger(__name__)

_RATING_COLS = "id, passenger_id, flight_num, score, comment, created_at"
_UNIQUE_PAIR_CONSTRAINT = 'ratings_passenger_flight_key'


class RatingService:
    """Service for post-flight ratings"""

    @staticmethod
    def rate(passenger_id: int, flight_num: str, score: int, comment: str = None) -> Rating:
        """
        Record a passenger's rating of a flight

        Args:
            passenger_id: Passenger ID
            flight_num: Flight number
            score: Integer score 0-5
            comment: Optional free text

        Returns:
            Stored rating

        Raises:
            InvalidScore: Score outside 0-5
            UnknownPassenger, UnknownFlight: Unknown references
            NotFlown: The passenger never booked this flight
            AlreadyRated: The passenger already rated this flight
        """
        score = validate_score(score)
        passenger_id = validate_id(passenger_id, 'passenger_id')
        flight_num = validate_flight_number(flight_num)
        comment = validate_comment(comment)

        rating = run_with_retry(
            RatingService._rate_transaction, passenger_id, flight_num, score, comment
        )
        logger.info("Passenger %s rated flight %s: %s", passenger_id, flight_num, score)
        return rating

    @staticmethod
    def _rate_transaction(passenger_id: int, flight_num: str, score: int, comment) -> Rating:
        with persistence_errors():
            with get_db_manager().transaction() as conn:
                with conn.cursor() as cursor:
                    if not PassengerService.fetch_by_id(cursor, passenger_id):
                        raise UnknownPassenger(f"Passenger with ID {passenger_id} not found")

                    if not CatalogService.fetch_flight(cursor, flight_num):
                        raise UnknownFlight(f"Flight {flight_num} not found")

                    cursor.execute("""
                        SELECT 1 FROM bookings
                        WHERE passenger_id = %s AND flight_num = %s
                        LIMIT 1
                    """, (passenger_id, flight_num))
                    if not cursor.fetchone():
                        raise NotFlown(
                            f"Passenger {passenger_id} has no booking on flight {flight_num}"
                        )

                    # Serialises rating writers; the check below sees every committed rating
                    rating_id = IdentifierGenerator.next_rating_id(cursor)

                    cursor.execute("""
                        SELECT id FROM ratings
                        WHERE passenger_id = %s AND flight_num = %s
                    """, (passenger_id, flight_num))
                    if cursor.fetchone():
                        raise AlreadyRated(
                            f"Passenger {passenger_id} already rated flight {flight_num}"
                        )

                    try:
                        cursor.execute(f"""
                            INSERT INTO ratings (id, passenger_id, flight_num, score, comment)
                            VALUES (%s, %s, %s, %s, %s)
                            RETURNING {_RATING_COLS}
                        """, (rating_id, passenger_id, flight_num, score, comment))
                    except pg_errors.UniqueViolation as e:
                        if e.diag.constraint_name == _UNIQUE_PAIR_CONSTRAINT:
                            raise AlreadyRated(
                                f"Passenger {passenger_id} already rated flight {flight_num}"
                            ) from e
                        raise ConflictError(f"Rating id {rating_id} taken concurrently") from e

                    return row_to_rating(cursor.fetchone())

    @staticmethod
    def get_rating(rating_id: int) -> Rating:
        """Get rating by ID"""
        rating_id = validate_id(rating_id, 'rating_id')
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute(f"SELECT {_RATING_COLS} FROM ratings WHERE id = %s", (rating_id,))
                rating = row_to_rating(cursor.fetchone())
        if not rating:
            raise NotFoundError(f"Rating with ID {rating_id} not found")
        return rating

    @staticmethod
    def ratings_for_flight(flight_num: str) -> List[Rating]:
        """Ratings of a flight in the order they were recorded"""
        flight_num = validate_flight_number(flight_num)
        with persistence_errors():
            with get_db_manager().get_cursor() as cursor:
                cursor.execute(f"""
                    SELECT {_RATING_COLS}
                    FROM ratings
                    WHERE flight_num = %s
                    ORDER BY id
                """, (flight_num,))
                return [row_to_rating(row) for row in cursor.fetchall()]
