"""
Fixed demo flights.

Served only when FLIGHT_DEMO_MODE is enabled: for requests without a query,
and as the last resort when no provider found anything.
"""

from typing import List, Optional

from flighttracker.models import Flight, FlightEndpoint, FlightStatus
from flighttracker.services.providers.base import parse_datetime


def _endpoint(code, city, time, tz, lat, lon, terminal=None, gate=None) -> FlightEndpoint:
    return FlightEndpoint(
        code=code,
        city=city,
        time=parse_datetime(time),
        timezone=tz,
        latitude=lat,
        longitude=lon,
        terminal=terminal,
        gate=gate,
    )


def _flight(number, airline, origin, destination, status) -> Flight:
    return Flight(
        flight_number=number,
        airline=airline,
        origin=origin,
        destination=destination,
        status=status,
        scheduled_departure=origin.time,
    )


MOCK_FLIGHTS: List[Flight] = [
    _flight(
        'AA123', 'American Airlines',
        _endpoint('JFK', 'New York', '2025-11-21T08:00:00-05:00', 'EST', 40.6413, -73.7781, '4', 'B32'),
        _endpoint('LHR', 'London', '2025-11-21T20:00:00+00:00', 'GMT', 51.4700, -0.4543, '3', 'A12'),
        FlightStatus.ON_TIME,
    ),
    _flight(
        'BA456', 'British Airways',
        _endpoint('LHR', 'London', '2025-11-21T10:00:00+00:00', 'GMT', 51.4700, -0.4543, '5', 'A22'),
        _endpoint('JFK', 'New York', '2025-11-21T13:00:00-05:00', 'EST', 40.6413, -73.7781, '7', 'C45'),
        FlightStatus.IN_AIR,
    ),
    _flight(
        'DL789', 'Delta Air Lines',
        _endpoint('LAX', 'Los Angeles', '2025-11-21T09:00:00-08:00', 'PST', 33.9416, -118.4085),
        _endpoint('HND', 'Tokyo', '2025-11-22T14:00:00+09:00', 'JST', 35.5494, 139.7798),
        FlightStatus.BOARDING,
    ),
    _flight(
        'UA101', 'United Airlines',
        _endpoint('SFO', 'San Francisco', '2025-11-21T11:30:00-08:00', 'PST', 37.6213, -122.3790),
        _endpoint('SIN', 'Singapore', '2025-11-22T19:30:00+08:00', 'SGT', 1.3644, 103.9915),
        FlightStatus.DELAYED,
    ),
    _flight(
        'AF202', 'Air France',
        _endpoint('CDG', 'Paris', '2025-11-21T14:00:00+01:00', 'CET', 49.0097, 2.5479),
        _endpoint('DXB', 'Dubai', '2025-11-21T23:45:00+04:00', 'GST', 25.2532, 55.3657),
        FlightStatus.ON_TIME,
    ),
]


def search_demo_flights(query: Optional[str]) -> List[Flight]:
    """Match demo flights by flight number, airline, or city (case-insensitive)."""
    if not query:
        return list(MOCK_FLIGHTS)

    needle = query.strip().lower()
    compact = ''.join(needle.split())
    return [
        f for f in MOCK_FLIGHTS
        if compact in f.flight_number.lower()
        or needle in f.airline.lower()
        or needle in f.origin.city.lower()
        or needle in f.destination.city.lower()
    ]
