"""Database package initialization"""
from .models import (
    Airline, Flight, Passenger, Booking, Rating, Reservation,
    DestinationCount, RatedRoute, FlightAvailability, FlightListing,
    row_to_airline, row_to_flight, row_to_passenger, row_to_booking, row_to_rating
)
from .config import Settings, load_settings
from .database import DatabaseManager, DatabaseUnavailableError, get_db_manager, set_db_manager

__all__ = [
    'Airline', 'Flight', 'Passenger', 'Booking', 'Rating', 'Reservation',
    'DestinationCount', 'RatedRoute', 'FlightAvailability', 'FlightListing',
    'row_to_airline', 'row_to_flight', 'row_to_passenger', 'row_to_booking', 'row_to_rating',
    'Settings', 'load_settings',
    'DatabaseManager', 'DatabaseUnavailableError', 'get_db_manager', 'set_db_manager'
]
