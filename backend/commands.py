"""
Command surface of the booking core

Callers build one of the command dataclasses below and pass it to ``execute``.
The result is always a CommandResult: either ``ok`` with a value, or the
ReservationError that rejected the command. Programming errors (anything that
is not a ReservationError) still propagate.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Union

from .booking_service import BookingService
from .errors import IdentifierExhausted, PersistenceUnavailable, ReservationError, TransientError
from .passenger_service import PassengerService
from .query_service import QueryService
from .rating_service import RatingService

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


@dataclass(frozen=True)
class CreatePassenger:
    passport_number: str
    full_name: str
    birth_date: DateLike
    country: str


@dataclass(frozen=True)
class BookFlight:
    passport_number: str
    origin: str
    destination: str
    departure: DateLike
    flight_num: str


@dataclass(frozen=True)
class RateFlight:
    passenger_id: int
    flight_num: str
    score: int
    comment: Optional[str] = None


@dataclass(frozen=True)
class ListPopularDestinations:
    k: int


@dataclass(frozen=True)
class ListHighestRatedRoutes:
    k: int


@dataclass(frozen=True)
class ListFlightsByDuration:
    origin: str
    destination: str
    limit: int


@dataclass(frozen=True)
class AvailabilityReport:
    departure: DateLike


@dataclass(frozen=True)
class ListFlightsBetween:
    origin: str
    destination: str
    departure: DateLike


@dataclass(frozen=True)
class FindAvailableSeats:
    flight_num: str
    departure: DateLike


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    value: Any = None
    error: Optional[ReservationError] = None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @classmethod
    def success(cls, value):
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ReservationError):
        return cls(ok=False, error=error)


_HANDLERS = {
    CreatePassenger: lambda c: PassengerService.create_passenger(
        c.passport_number, c.full_name, c.birth_date, c.country),
    BookFlight: lambda c: BookingService.book(
        c.passport_number, c.origin, c.destination, c.departure, c.flight_num),
    RateFlight: lambda c: RatingService.rate(c.passenger_id, c.flight_num, c.score, c.comment),
    ListPopularDestinations: lambda c: QueryService.popular_destinations(c.k),
    ListHighestRatedRoutes: lambda c: QueryService.highest_rated_routes(c.k),
    ListFlightsByDuration: lambda c: QueryService.flights_ordered_by_duration(
        c.origin, c.destination, c.limit),
    AvailabilityReport: lambda c: QueryService.availability_report(c.departure),
    ListFlightsBetween: lambda c: QueryService.flights_between(c.origin, c.destination, c.departure),
    FindAvailableSeats: lambda c: QueryService.seats_available(c.flight_num, c.departure),
}


def execute(command) -> CommandResult:
    """
    Run a command and wrap its outcome

    Raises:
        TypeError: For objects that are not a known command
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported command: {type(command).__name__}")

    name = type(command).__name__
    try:
        return CommandResult.success(handler(command))
    except (PersistenceUnavailable, IdentifierExhausted) as e:
        logger.error("%s failed: %s", name, e, exc_info=True)
        return CommandResult.failure(e)
    except TransientError as e:
        logger.warning("%s rejected (%s): %s", name, e.code, e)
        return CommandResult.failure(e)
    except ReservationError as e:
        logger.info("%s rejected (%s): %s", name, e.code, e)
        return CommandResult.failure(e)
