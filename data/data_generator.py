"""
Sample data generator
Loads the catalog, then drives passengers, bookings and ratings through the services
"""
import logging
import os
import random
import sys
from datetime import date, timedelta
from typing import Optional

from faker import Faker

# Add parent directory to path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database.database import get_db_manager
from backend.booking_service import BookingService
from backend.catalog_service import CatalogService
from backend.errors import ReservationError, RuleViolation
from backend.passenger_service import PassengerService
from backend.rating_service import RatingService
from data.populate_flights import ROUTES, populate_catalog

logger = logging.getLogger(__name__)


class DataGenerator:
    """Generate realistic data for the booking core"""

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize data generator

        Args:
            seed: Random seed for reproducibility
        """
        if seed is not None:
            random.seed(seed)
            Faker.seed(seed)

        self.faker = Faker()

    def generate_passengers(self, count: int = 100):
        """
        Generate passengers

        Args:
            count: Number of passengers to generate

        Returns:
            List of created passengers
        """
        passengers = []
        logger.info("Generating %d passengers...", count)

        for _ in range(count):
            try:
                passenger = PassengerService.create_passenger(
                    passport_number=self.faker.unique.bothify(
                        text='??########', letters='ABCDEFGHIJKLMNOPQRSTUVWXYZ'
                    ),
                    full_name=self.faker.name(),
                    birth_date=self.faker.date_of_birth(minimum_age=18, maximum_age=80),
                    country=self.faker.country()[:60],
                )
                passengers.append(passenger)
            except ReservationError as e:
                logger.warning("Error creating passenger: %s", e)

        logger.info("Generated %d passengers", len(passengers))
        return passengers

    def generate_bookings(self, passengers: list, count: int = 500, days_ahead: int = 30,
                          max_attempt_multiplier: float = 3.0):
        """
        Book random passengers on random route flights

        Args:
            passengers: Passengers to book
            count: Number of bookings to create
            days_ahead: Departures are spread over this many days from today
            max_attempt_multiplier: Attempts allowed per requested booking

        Returns:
            List of created bookings
        """
        bookings = []
        routes = [(route, CatalogService.find_flights(route.origin, route.destination))
                  for route in ROUTES]
        routes = [(route, flights) for route, flights in routes if flights]
        if not passengers or not routes:
            return bookings

        logger.info("Generating %d bookings...", count)
        attempts = 0
        max_attempts = max(count, int(count * max(1.0, max_attempt_multiplier)))

        while len(bookings) < count and attempts < max_attempts:
            attempts += 1
            passenger = random.choice(passengers)
            route, flights = random.choice(routes)
            flight = random.choice(flights)
            departure = date.today() + timedelta(days=random.randint(0, days_ahead))

            try:
                bookings.append(BookingService.book(
                    passenger.passport_number, route.origin, route.destination,
                    departure, flight.flight_num
                ))
            except RuleViolation:
                # Full departures are expected once the catalog fills up
                continue

        if len(bookings) < count:
            logger.warning("Requested %d bookings but only created %d after %d attempts",
                           count, len(bookings), attempts)
        logger.info("Generated %d bookings", len(bookings))
        return bookings

    def generate_ratings(self, bookings: list, share: float = 0.4):
        """Rate a share of the booked (passenger, flight) pairs"""
        ratings = []
        pairs = {(b.passenger_id, b.flight_num) for b in bookings}

        for passenger_id, flight_num in sorted(pairs):
            if random.random() > share:
                continue
            try:
                ratings.append(RatingService.rate(
                    passenger_id, flight_num,
                    score=random.choices(range(6), weights=[1, 1, 2, 4, 6, 4])[0],
                    comment=self.faker.sentence() if random.random() < 0.6 else None,
                ))
            except RuleViolation as e:
                logger.warning("Skipping rating: %s", e)

        logger.info("Generated %d ratings", len(ratings))
        return ratings

    def generate_sample_dataset(self, passengers: int = 200, bookings: int = 500):
        """
        Generate a complete sample dataset

        Returns:
            Dictionary with all generated data
        """
        flights_created = populate_catalog(flights_per_route=3)
        passenger_list = self.generate_passengers(count=passengers)
        booking_list = self.generate_bookings(passenger_list, count=bookings)
        rating_list = self.generate_ratings(booking_list)

        logger.info("Dataset: %d flights, %d passengers, %d bookings, %d ratings",
                    flights_created, len(passenger_list), len(booking_list), len(rating_list))

        return {
            'flights_created': flights_created,
            'passengers': passenger_list,
            'bookings': booking_list,
            'ratings': rating_list,
        }


def main():
    """Main function for command-line usage"""
    import argparse

    parser = argparse.ArgumentParser(description='Generate sample data for the booking core')
    parser.add_argument('--passengers', type=int, default=200, help='Number of passengers')
    parser.add_argument('--bookings', type=int, default=500, help='Number of bookings')
    parser.add_argument('--seed', type=int, help='Random seed for reproducibility')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    get_db_manager().create_tables()

    generator = DataGenerator(seed=args.seed)
    generator.generate_sample_dataset(passengers=args.passengers, bookings=args.bookings)


if __name__ == '__main__':
    main()
