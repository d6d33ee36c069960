"""Shared fixtures for the flight tracker test suite.

Provides a Flask test client, a Flight factory, a scriptable stub
provider, and a helper for faking `requests` responses.
"""

import json
from datetime import date
from unittest.mock import MagicMock

import pytest

from flighttracker.app import create_app
from flighttracker.models import Flight, FlightEndpoint, FlightStatus
from flighttracker.services.providers import FlightProvider
from flighttracker.services.providers.base import parse_datetime


# ============================================================
# HELPERS
# ============================================================

def mock_response(payload, status_code=200):
    """Build a fake requests.Response carrying a JSON payload."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    resp.text = json.dumps(payload) if payload is not None else ''
    return resp


def make_flight(
    number='AA123',
    status=FlightStatus.ON_TIME,
    departure='2025-11-21T08:00:00-05:00',
    arrival='2025-11-21T20:00:00+00:00',
    origin='JFK',
    destination='LHR',
    airline='American Airlines',
):
    dep = parse_datetime(departure)
    return Flight(
        flight_number=number,
        airline=airline,
        origin=FlightEndpoint(
            code=origin, city=origin, time=dep, timezone='UTC',
            latitude=0.0, longitude=0.0,
        ),
        destination=FlightEndpoint(
            code=destination, city=destination, time=parse_datetime(arrival),
            timezone='UTC', latitude=0.0, longitude=0.0,
        ),
        status=status,
        scheduled_departure=dep,
    )


class StubProvider(FlightProvider):
    """
    Provider returning canned rows (or raising a canned exception).

    Records every (flight_number, day) it was asked for.
    """

    def __init__(self, name='Stub', rows=None, error=None, today_only=False, api_key='key'):
        super().__init__(api_key=api_key, timeout=1)
        self.name = name
        self.rows = rows or []
        self.error = error
        self.today_only = today_only
        self.calls = []

    def supports_date(self, day: date, today: date) -> bool:
        return day == today if self.today_only else True

    def lookup(self, flight_number, day):
        self.calls.append((flight_number, day))
        if self.error is not None:
            raise self.error
        return list(self.rows)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def app():
    return create_app(preload_airports=False)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def flight_factory():
    return make_flight


@pytest.fixture
def airports_file(tmp_path):
    """A tiny airport table on disk."""
    path = tmp_path / 'airports.json'
    path.write_text(json.dumps({
        'JFK': {'lat': 40.6413, 'lon': -73.7781, 'city': 'New York', 'country': 'US',
                'name': 'John F Kennedy International Airport'},
        'LHR': {'lat': 51.47, 'lon': -0.4543, 'city': 'London', 'country': 'GB',
                'name': 'London Heathrow Airport'},
        'BAD': {'lat': 'not-a-number', 'lon': 1.0},
    }))
    return path
