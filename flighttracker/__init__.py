"""
Flight Tracker Backend Package.

Flight lookup by flight number, with destination weather and driving time
to the departure airport. Built with Flask and requests.

Modules:
    api/         REST endpoints for flight lookup, schedules, weather, travel
    models/      Canonical Flight record (request-scoped, never persisted)
    services/    Provider chain (AeroDataBox, AirLabs, AviationStack),
                 Open-Meteo weather and OSRM routing lookups
    airports/    Static IATA airport table and its CSV preprocessor
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
