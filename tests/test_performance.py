"""Performance tests for the booking core.

Loads a generated dataset and measures booking admission and read-model
response times. Run with: ``pytest tests/test_performance.py --performance``.
"""
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database.database as db_module
from database.database import DatabaseManager, DatabaseUnavailableError, set_db_manager
from backend.booking_service import BookingService
from backend.capacity_ledger import CapacityLedger
from backend.errors import RuleViolation
from backend.passenger_service import PassengerService
from backend.query_service import QueryService
from data.data_generator import DataGenerator
from data.populate_flights import ROUTES


pytestmark = pytest.mark.performance


@pytest.fixture(scope='module')
def large_dataset(request):
    """
    Generate a large dataset for performance testing
    This fixture is module-scoped to avoid regenerating data for each test
    """
    perf_db_url = os.getenv('PERFORMANCE_DATABASE_URL', 'postgresql://localhost/airline_booking_perf')

    previous_manager = db_module._db_manager
    try:
        db_manager = DatabaseManager(database_url=perf_db_url, echo=False)
    except DatabaseUnavailableError as e:
        pytest.skip(f"PostgreSQL performance database unavailable: {e}")
    set_db_manager(db_manager)
    db_manager.drop_tables()
    db_manager.create_tables()

    generator = DataGenerator(seed=42)
    data = generator.generate_sample_dataset(
        passengers=request.config.getoption("--performance-passengers"),
        bookings=request.config.getoption("--performance-bookings"),
    )

    with db_manager.get_cursor() as cursor:
        cursor.execute("SELECT COUNT(*) AS count FROM bookings")
        booking_count_db = cursor.fetchone()['count']

    print(f"\nDataset generated: {len(data['passengers'])} passengers, "
          f"{booking_count_db} bookings, {len(data['ratings'])} ratings")

    if booking_count_db == 0:
        raise RuntimeError("Performance dataset generation failed; no bookings were created.")

    try:
        yield data
    finally:
        db_manager.drop_tables()
        db_manager.close_all_connections()
        set_db_manager(previous_manager)


class TestQueryPerformance:
    """Read models over the generated dataset"""

    def test_popular_destinations(self, large_dataset):
        start_time = time.time()
        destinations = QueryService.popular_destinations(5)
        elapsed = time.time() - start_time

        print(f"\nPopular destinations in {elapsed:.3f} seconds")
        assert destinations
        assert elapsed < 1.0, f"Popular destinations took too long: {elapsed:.3f}s"

    def test_highest_rated_routes(self, large_dataset):
        start_time = time.time()
        routes = QueryService.highest_rated_routes(10)
        elapsed = time.time() - start_time

        print(f"\nHighest rated routes in {elapsed:.3f} seconds")
        assert len(routes) <= 10
        assert elapsed < 1.0, f"Highest rated routes took too long: {elapsed:.3f}s"

    def test_availability_report(self, large_dataset):
        departure = large_dataset['bookings'][0].departure

        start_time = time.time()
        report = QueryService.availability_report(departure)
        elapsed = time.time() - start_time

        print(f"\nAvailability report ({len(report)} flights) in {elapsed:.3f} seconds")
        assert all(row.available > 0 for row in report)
        assert elapsed < 2.0, f"Availability report took too long: {elapsed:.3f}s"

    def test_flights_by_duration(self, large_dataset):
        route = ROUTES[0]

        start_time = time.time()
        listing = QueryService.flights_ordered_by_duration(route.origin, route.destination, 3)
        elapsed = time.time() - start_time

        durations = [flight.duration for flight in listing.flights]
        assert durations == sorted(durations)
        assert elapsed < 0.5, f"Duration listing took too long: {elapsed:.3f}s"


class TestIndexEfficiency:
    """Point lookups that should be served by an index"""

    def test_passenger_passport_index(self, large_dataset):
        passenger = large_dataset['passengers'][0]

        start_time = time.time()
        retrieved = PassengerService.get_passenger_by_passport(passenger.passport_number)
        elapsed = time.time() - start_time

        print(f"\nPassenger lookup by passport: {elapsed:.4f} seconds")
        assert elapsed < 0.05, f"Indexed lookup too slow: {elapsed:.4f}s"
        assert retrieved.id == passenger.id

    def test_booking_reference_index(self, large_dataset):
        booking = large_dataset['bookings'][0]

        start_time = time.time()
        retrieved = BookingService.get_booking(booking.booking_ref)
        elapsed = time.time() - start_time

        print(f"\nBooking lookup by reference: {elapsed:.4f} seconds")
        assert elapsed < 0.05, f"Indexed lookup too slow: {elapsed:.4f}s"
        assert retrieved.passenger_id == booking.passenger_id

    def test_seat_count(self, large_dataset):
        booking = large_dataset['bookings'][0]

        start_time = time.time()
        CapacityLedger.available_seats(booking.flight_num, booking.departure)
        elapsed = time.time() - start_time

        assert elapsed < 0.05, f"Seat count too slow: {elapsed:.4f}s"


class TestBookingPerformance:
    """Booking admission under load"""

    def test_sequential_booking_performance(self, large_dataset):
        passengers = large_dataset['passengers'][:100]
        route = ROUTES[1]
        flight_nums = [f.flight_num for f in
                       QueryService.flights_ordered_by_duration(route.origin, route.destination, 10).flights]
        departure = date.today() + timedelta(days=90)

        start_time = time.time()
        bookings_created = 0
        for i, passenger in enumerate(passengers):
            try:
                BookingService.book(passenger.passport_number, route.origin, route.destination,
                                    departure, flight_nums[i % len(flight_nums)])
                bookings_created += 1
            except RuleViolation:
                continue

        elapsed = time.time() - start_time
        avg_time = elapsed / bookings_created if bookings_created > 0 else 0

        print(f"\nCreated {bookings_created} bookings in {elapsed:.3f} seconds")
        print(f"Average: {avg_time*1000:.1f}ms per booking")
        assert bookings_created > 0
        assert avg_time < 0.5, f"Average booking time too slow: {avg_time:.3f}s"

    def test_concurrent_booking_never_oversells(self, large_dataset):
        passengers = large_dataset['passengers'][100:300]
        route = ROUTES[2]
        flight = QueryService.flights_ordered_by_duration(route.origin, route.destination, 1).flights[0]
        departure = date.today() + timedelta(days=120)

        def book(passenger):
            try:
                return BookingService.book(passenger.passport_number, route.origin,
                                           route.destination, departure, flight.flight_num)
            except RuleViolation:
                return None

        start_time = time.time()
        with ThreadPoolExecutor(max_workers=10) as executor:
            results = list(executor.map(book, passengers))
        elapsed = time.time() - start_time

        successful = len([r for r in results if r is not None])
        print(f"\nCreated {successful} bookings concurrently in {elapsed:.3f} seconds")
        assert successful == min(len(passengers), flight.seats)
        assert CapacityLedger.available_seats(flight.flight_num, departure) == flight.seats - successful


def run_performance_tests():
    """
    Helper function to run performance tests
    Usage: python test_performance.py
    """
    pytest.main([__file__, '--performance', '-v', '-s'])


if __name__ == '__main__':
    run_performance_tests()
