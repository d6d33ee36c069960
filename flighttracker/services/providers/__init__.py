"""
Third-party flight-data providers, each mapping its payload onto Flight.
"""

from flighttracker.services.providers.base import FlightProvider, ProviderError, normalize_flight_number
from flighttracker.services.providers.aerodatabox import AeroDataBoxProvider
from flighttracker.services.providers.airlabs import AirLabsProvider
from flighttracker.services.providers.aviationstack import AviationStackProvider

__all__ = [
    'FlightProvider',
    'ProviderError',
    'normalize_flight_number',
    'AeroDataBoxProvider',
    'AirLabsProvider',
    'AviationStackProvider',
]
