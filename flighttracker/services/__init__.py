"""
External integration services.

Handles third-party API calls (flight providers, weather, routing) with
graceful degradation when services are unavailable.
"""

from flighttracker.services.errors import WidgetError
from flighttracker.services.flight_lookup import FlightLookupService, flight_lookup_service

__all__ = ['FlightLookupService', 'WidgetError', 'flight_lookup_service']
