"""Booking core services"""
from .booking_service import BookingService
from .capacity_ledger import CapacityLedger
from .catalog_service import CatalogService
from .commands import (
    CreatePassenger, BookFlight, RateFlight, ListPopularDestinations, ListHighestRatedRoutes,
    ListFlightsByDuration, AvailabilityReport, ListFlightsBetween, FindAvailableSeats,
    CommandResult, execute
)
from .identifiers import IdentifierGenerator
from .passenger_service import PassengerService
from .query_service import QueryService
from .rating_service import RatingService

__all__ = [
    'BookingService', 'CapacityLedger', 'CatalogService', 'IdentifierGenerator',
    'PassengerService', 'QueryService', 'RatingService',
    'CreatePassenger', 'BookFlight', 'RateFlight', 'ListPopularDestinations',
    'ListHighestRatedRoutes', 'ListFlightsByDuration', 'AvailabilityReport',
    'ListFlightsBetween', 'FindAvailableSeats', 'CommandResult', 'execute'
]
