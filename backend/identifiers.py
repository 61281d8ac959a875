"""
Identifier generation for bookings, passengers and ratings
"""
import logging
import secrets
import string
import zlib

from .errors import IdentifierExhausted

logger = logging.getLogger(__name__)

BOOKING_REFERENCE_LENGTH = 10
BOOKING_REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
MAX_REFERENCE_ATTEMPTS = 32


def _sequence_lock_key(table: str) -> int:
    """Stable advisory lock key for a table's id sequence"""
    return zlib.crc32(f"booking-core:{table}:id".encode())


class IdentifierGenerator:
    """Identifiers derived from persisted state, never from in-process counters"""

    @staticmethod
    def generate_booking_reference() -> str:
        """Draw a random 10 character reference from A-Z0-9"""
        return ''.join(secrets.choice(BOOKING_REFERENCE_ALPHABET)
                       for _ in range(BOOKING_REFERENCE_LENGTH))

    @staticmethod
    def next_booking_reference(cursor, generator=None, max_attempts: int = MAX_REFERENCE_ATTEMPTS) -> str:
        """
        Generate a booking reference not yet present in the bookings table

        Args:
            cursor: Cursor inside the booking transaction
            generator: Reference source (defaults to the CSPRNG draw)
            max_attempts: Draws allowed before giving up

        Returns:
            Unused booking reference

        Raises:
            IdentifierExhausted: If every draw collided
        """
        generator = generator or IdentifierGenerator.generate_booking_reference

        for attempt in range(1, max_attempts + 1):
            reference = generator()
            cursor.execute("SELECT 1 FROM bookings WHERE booking_ref = %s", (reference,))
            if not cursor.fetchone():
                return reference
            logger.warning("Booking reference collision on attempt %d", attempt)

        raise IdentifierExhausted(
            f"No unused booking reference after {max_attempts} attempts"
        )

    @staticmethod
    def _next_id(cursor, table: str) -> int:
        # Held until the surrounding transaction ends, so concurrent allocators queue here
        cursor.execute("SELECT pg_advisory_xact_lock(%s)", (_sequence_lock_key(table),))
        cursor.execute(f"SELECT COALESCE(MAX(id), 0) + 1 AS next_id FROM {table}")
        return cursor.fetchone()['next_id']

    @staticmethod
    def next_passenger_id(cursor) -> int:
        """max(passengers.id) + 1, or 1 for an empty table"""
        return IdentifierGenerator._next_id(cursor, 'passengers')

    @staticmethod
    def next_rating_id(cursor) -> int:
        """max(ratings.id) + 1, or 1 for an empty table"""
        return IdentifierGenerator._next_id(cursor, 'ratings')
