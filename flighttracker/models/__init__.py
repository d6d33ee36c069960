"""
Data models for the flight tracker.

Flights are transient, request-scoped records; nothing here is persisted.
"""

from flighttracker.models.flight import Flight, FlightEndpoint, FlightStatus

__all__ = [
    'Flight',
    'FlightEndpoint',
    'FlightStatus',
]
