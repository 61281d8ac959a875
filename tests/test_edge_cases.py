"""
Edge case tests for malformed input
Every rejection here must happen before the database is touched
"""
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import backend.capacity_ledger
import backend.catalog_service
import backend.query_service
import backend.retry
from backend.booking_service import BookingService
from backend.capacity_ledger import CapacityLedger
from backend.commands import (
    BookFlight, ListFlightsByDuration, ListHighestRatedRoutes, ListPopularDestinations,
    RateFlight, execute
)
from backend.errors import InvalidDate, InvalidPassport, InvalidScore, ValidationError
from backend.passenger_service import PassengerService
from backend.query_service import QueryService
from backend.rating_service import RatingService


@pytest.fixture(autouse=True)
def no_database(monkeypatch):
    """Fail loudly if any code path reaches for a database connection."""
    def forbidden():
        raise AssertionError("database accessed before input validation")

    for module in (backend.retry, backend.capacity_ledger, backend.catalog_service,
                   backend.query_service):
        monkeypatch.setattr(module, 'get_db_manager', forbidden)


class TestBookingInput:

    @pytest.mark.parametrize('passport', ['AB1234567', 'AB123456789', 'AB12-45678', '', None, 1234567890])
    def test_bad_passport(self, passport):
        with pytest.raises(InvalidPassport):
            BookingService.book(passport, 'JFK', 'LAX', '2030-01-01', 'TA100')

    @pytest.mark.parametrize('departure', ['2030-02-30', '2030-13-01', '2030-00-10', '31/12/2030',
                                           'tomorrow', '', None])
    def test_bad_date(self, departure):
        with pytest.raises(InvalidDate):
            BookingService.book('AB12345678', 'JFK', 'LAX', departure, 'TA100')

    def test_blank_route(self):
        with pytest.raises(ValidationError):
            BookingService.book('AB12345678', '   ', 'LAX', '2030-01-01', 'TA100')

    def test_bad_flight_number(self):
        with pytest.raises(ValidationError):
            BookingService.book('AB12345678', 'JFK', 'LAX', '2030-01-01', 'TA 100')

    def test_command_returns_validation_failure(self):
        result = execute(BookFlight('short', 'JFK', 'LAX', '2030-01-01', 'TA100'))
        assert not result.ok
        assert result.error_code == 'invalid_passport'
        assert result.error.field == 'passport_number'


class TestRatingInput:

    @pytest.mark.parametrize('score', [-1, 6, 2.5, '4', True, None])
    def test_bad_score(self, score):
        with pytest.raises(InvalidScore):
            RatingService.rate(1, 'TA100', score)

    def test_bad_passenger_id(self):
        with pytest.raises(ValidationError):
            RatingService.rate(0, 'TA100', 3)

    def test_comment_too_long(self):
        with pytest.raises(ValidationError):
            RatingService.rate(1, 'TA100', 3, 'x' * 1001)

    def test_command_reports_invalid_score(self):
        result = execute(RateFlight(1, 'TA100', 9))
        assert result.error_code == 'invalid_score'


class TestPassengerInput:

    def test_future_birth_date(self):
        with pytest.raises(InvalidDate):
            PassengerService.create_passenger('AB12345678', 'Jane', date(2999, 1, 1), 'USA')

    def test_blank_name(self):
        with pytest.raises(ValidationError):
            PassengerService.create_passenger('AB12345678', '', '1990-01-01', 'USA')


class TestQueryInput:

    @pytest.mark.parametrize('k', [0, -3, 1.5, None])
    def test_k_must_be_positive(self, k):
        with pytest.raises(ValidationError):
            QueryService.popular_destinations(k)
        assert not execute(ListHighestRatedRoutes(k)).ok
        assert not execute(ListPopularDestinations(k)).ok

    def test_limit_must_be_positive(self):
        result = execute(ListFlightsByDuration('JFK', 'LAX', 0))
        assert result.error_code == 'validation_error'

    def test_report_date_validated(self):
        with pytest.raises(InvalidDate):
            QueryService.availability_report('2030-04-31')

    def test_seat_lookup_validated(self):
        with pytest.raises(InvalidDate):
            CapacityLedger.available_seats('TA100', '2031-02-29')
