"""
Data models for the flight booking core
Plain Python dataclasses (no ORM) plus row converters for RealDictCursor rows
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass
class Airline:
    """Airline catalog entry"""
    air_id: Optional[int] = None
    name: Optional[str] = None
    founded: Optional[int] = None
    country: Optional[str] = None
    hub: Optional[str] = None

    def __repr__(self):
        return f"<Airline(air_id={self.air_id}, name='{self.name}')>"


@dataclass
class Flight:
    """Flight catalog entry with seat capacity and duration (minutes)"""
    flight_num: Optional[str] = None
    air_id: Optional[int] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    plane: Optional[str] = None
    seats: Optional[int] = None
    duration: Optional[int] = None

    # For joined queries
    airline: Optional[Airline] = None

    def __repr__(self):
        return f"<Flight(number='{self.flight_num}', route='{self.origin}->{self.destination}', seats={self.seats})>"


@dataclass
class Passenger:
    """Passenger profile"""
    id: Optional[int] = None
    passport_number: Optional[str] = None
    full_name: Optional[str] = None
    birth_date: Optional[date] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None

    def __repr__(self):
        return f"<Passenger(id={self.id}, name='{self.full_name}', passport='{self.passport_number}')>"


@dataclass
class Booking:
    """A seat booked by a passenger on a flight for one departure date"""
    booking_ref: Optional[str] = None
    departure: Optional[date] = None
    flight_num: Optional[str] = None
    passenger_id: Optional[int] = None
    booked_at: Optional[datetime] = None

    # For joined queries
    passenger: Optional[Passenger] = None
    flight: Optional[Flight] = None

    def __repr__(self):
        return f"<Booking(ref='{self.booking_ref}', flight='{self.flight_num}', departure={self.departure})>"


@dataclass
class Rating:
    """Post-flight rating, one per passenger and flight"""
    id: Optional[int] = None
    passenger_id: Optional[int] = None
    flight_num: Optional[str] = None
    score: Optional[int] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    def __repr__(self):
        return f"<Rating(id={self.id}, flight='{self.flight_num}', score={self.score})>"


@dataclass(frozen=True)
class Reservation:
    """Seat admitted by the capacity ledger"""
    flight_num: str
    departure: date
    seats_booked: int
    capacity: int

    @property
    def seats_left(self) -> int:
        return self.capacity - self.seats_booked


@dataclass(frozen=True)
class DestinationCount:
    destination: str
    flight_count: int


@dataclass(frozen=True)
class RatedRoute:
    airline_name: str
    flight_num: str
    origin: str
    destination: str
    plane: str
    avg_score: float
    rating_count: int


@dataclass(frozen=True)
class FlightAvailability:
    """Seat usage of one flight on one departure date"""
    flight_num: str
    origin: str
    destination: str
    booked: int
    capacity: int
    available: int


@dataclass
class FlightListing:
    """Flights ordered by duration; ``fewer_than_requested`` is set when the route has fewer flights than asked for"""
    flights: List[Flight] = field(default_factory=list)
    requested: int = 0
    fewer_than_requested: bool = False


def row_to_airline(row) -> Airline:
    """Convert database row to Airline object"""
    if not row:
        return None
    return Airline(
        air_id=row['air_id'],
        name=row['name'],
        founded=row.get('founded'),
        country=row.get('country'),
        hub=row.get('hub')
    )


def row_to_flight(row) -> Flight:
    """Convert database row to Flight object"""
    if not row:
        return None
    return Flight(
        flight_num=row['flight_num'],
        air_id=row['air_id'],
        origin=row['origin'],
        destination=row['destination'],
        plane=row['plane'],
        seats=row['seats'],
        duration=row['duration']
    )


def row_to_passenger(row) -> Passenger:
    """Convert database row to Passenger object"""
    if not row:
        return None
    return Passenger(
        id=row['id'],
        passport_number=row['passport_number'],
        full_name=row['full_name'],
        birth_date=row['birth_date'],
        country=row['country'],
        created_at=row.get('created_at')
    )


def row_to_booking(row) -> Booking:
    """Convert database row to Booking object"""
    if not row:
        return None
    return Booking(
        booking_ref=row['booking_ref'],
        departure=row['departure'],
        flight_num=row['flight_num'],
        passenger_id=row['passenger_id'],
        booked_at=row.get('booked_at')
    )


def row_to_rating(row) -> Rating:
    """Convert database row to Rating object"""
    if not row:
        return None
    return Rating(
        id=row['id'],
        passenger_id=row['passenger_id'],
        flight_num=row['flight_num'],
        score=row['score'],
        comment=row.get('comment'),
        created_at=row.get('created_at')
    )
