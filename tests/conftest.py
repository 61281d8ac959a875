"""Pytest configuration and fixtures."""
import os
import sys
from datetime import date

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database.database import DatabaseManager, DatabaseUnavailableError, set_db_manager
from backend.passenger_service import PassengerService
from data.populate_flights import AirlineSeed, insert_airline, insert_flight

TEST_AIRLINES = [
    AirlineSeed(1, 'Test Air', 1990, 'United States', 'JFK'),
    AirlineSeed(2, 'Sample Airways', 2001, 'Canada', 'YYZ'),
]


def create_flight_directly(db, flight_num: str, origin: str, destination: str, seats: int,
                           duration: int = 120, air_id: int = 1, plane: str = 'Boeing 737-800'):
    """Insert a catalog flight directly; the core never writes the catalog."""
    with db.get_cursor() as cursor:
        insert_flight(
            cursor,
            flight_num=flight_num,
            air_id=air_id,
            origin=origin,
            destination=destination,
            plane=plane,
            seats=seats,
            duration=duration,
        )


def create_passengers(count: int, prefix: str = 'PX'):
    """Create ``count`` passengers with passports PX00000000, PX00000001, ..."""
    return [
        PassengerService.create_passenger(
            passport_number=f'{prefix}{i:08d}',
            full_name=f'Passenger {i}',
            birth_date=date(1985, 1, 1),
            country='USA',
        )
        for i in range(count)
    ]


def pytest_addoption(parser):
    """Register custom CLI options for the test suite."""
    parser.addoption(
        "--performance",
        action="store_true",
        default=False,
        help="Run the performance test suite",
    )
    parser.addoption(
        "--performance-passengers",
        type=int,
        default=500,
        help="Number of passengers to generate for performance tests",
    )
    parser.addoption(
        "--performance-bookings",
        type=int,
        default=2000,
        help="Number of bookings to generate for performance tests",
    )


def pytest_configure(config):
    """Declare custom markers to avoid pytest warnings."""
    config.addinivalue_line(
        "markers",
        "performance: marks performance tests that only run when --performance is supplied",
    )


def pytest_collection_modifyitems(config, items):
    """Skip performance tests unless the dedicated flag is present."""
    if config.getoption("--performance"):
        return

    skip_marker = pytest.mark.skip(
        reason="Performance tests only run when --performance flag is provided",
    )
    for item in items:
        if "performance" in item.keywords:
            item.add_marker(skip_marker)


@pytest.fixture(scope='function')
def db_manager():
    """Create a test database manager with a PostgreSQL test database."""
    test_db_url = os.getenv('TEST_DATABASE_URL', 'postgresql://localhost/airline_booking_test')
    try:
        db = DatabaseManager(database_url=test_db_url, echo=False)
    except DatabaseUnavailableError as e:
        pytest.skip(f"PostgreSQL test database unavailable: {e}")

    db.drop_tables()  # Clean slate for each test
    db.create_tables()
    with db.get_cursor() as cursor:
        for airline in TEST_AIRLINES:
            insert_airline(cursor, airline)
    set_db_manager(db)
    yield db
    set_db_manager(None)
    db.drop_tables()  # Cleanup after test
    db.close_all_connections()


@pytest.fixture(scope='function')
def test_flight(db_manager):
    """A 3-seat flight JFK -> LAX"""
    create_flight_directly(db_manager, 'TA100', 'JFK', 'LAX', seats=3, duration=360)
    return 'TA100'


@pytest.fixture(scope='function')
def test_passenger(db_manager):
    """Create a test passenger"""
    return PassengerService.create_passenger(
        passport_number='AB12345678',
        full_name='John Doe',
        birth_date=date(1990, 1, 1),
        country='USA',
    )


@pytest.fixture(scope='function')
def departure():
    return date(2030, 6, 15)
