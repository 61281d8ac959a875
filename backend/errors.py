"""
Error taxonomy for the booking core

Every failure a caller can observe derives from ReservationError and carries a
stable ``code``. Business rejections (capacity, duplicate rating, ...) are
ordinary outcomes at the command boundary; transient errors are safe to retry.
"""
from contextlib import contextmanager
from datetime import date

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import pool
from psycopg2.extensions import TransactionRollbackError

from database import DatabaseUnavailableError


class ReservationError(Exception):
    """Base class for all booking core errors"""
    code = 'reservation_error'
    retryable = False


# Malformed input, rejected before any persistence access

class ValidationError(ReservationError, ValueError):
    code = 'validation_error'

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class InvalidPassport(ValidationError):
    code = 'invalid_passport'


class InvalidDate(ValidationError):
    code = 'invalid_date'


class InvalidScore(ValidationError):
    code = 'invalid_score'


# Unknown references

class NotFoundError(ReservationError, LookupError):
    code = 'not_found'


class UnknownPassenger(NotFoundError):
    code = 'unknown_passenger'


class UnknownFlight(NotFoundError):
    code = 'unknown_flight'


class NoSuchRoute(NotFoundError):
    code = 'no_such_route'


class BookingNotFound(NotFoundError):
    code = 'booking_not_found'


# Business-rule rejections

class RuleViolation(ReservationError):
    code = 'rule_violation'


class CapacityError(RuleViolation):
    """No seat left on the flight for that departure date"""
    code = 'capacity_exceeded'

    def __init__(self, flight_num: str, departure: date):
        super().__init__(f"Flight {flight_num} is full on {departure.isoformat()}")
        self.flight_num = flight_num
        self.departure = departure


class AlreadyRated(RuleViolation):
    code = 'already_rated'


class NotFlown(RuleViolation):
    code = 'not_flown'


class DuplicatePassport(RuleViolation):
    code = 'duplicate_passport'


# Transient

class TransientError(ReservationError):
    code = 'transient'
    retryable = True


class ConflictError(TransientError):
    """A concurrent transaction won a race; the whole unit of work may be retried"""
    code = 'conflict'


class Busy(TransientError):
    """A lock could not be acquired in time, or retries ran out"""
    code = 'busy'


# Fatal

class PersistenceUnavailable(ReservationError):
    code = 'persistence_unavailable'


class IdentifierExhausted(ReservationError):
    code = 'identifier_exhausted'


@contextmanager
def persistence_errors():
    """Translate driver-level failures into the booking core taxonomy"""
    try:
        yield
    except pg_errors.LockNotAvailable as e:
        raise Busy("Timed out waiting for a competing transaction") from e
    except TransactionRollbackError as e:
        # serialization_failure and deadlock_detected
        raise ConflictError(f"Transaction rolled back by the database: {e.pgcode}") from e
    except pool.PoolError as e:
        raise Busy(f"No database connection available: {e}") from e
    except DatabaseUnavailableError as e:
        raise PersistenceUnavailable(str(e)) from e
    except (psycopg2.OperationalError, psycopg2.InterfaceError) as e:
        raise PersistenceUnavailable(f"Database error: {e}") from e
