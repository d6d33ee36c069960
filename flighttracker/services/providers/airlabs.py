"""
AirLabs provider.

Two endpoints are used:
- /flight     current (or next) flight for a number; no date parameter,
              so it is only consulted for today's lookups
- /schedules  raw schedule rows, exposed unnormalized for date discovery

AirLabs wraps results as {"response": ...} and errors as
{"error": {"message": ..., "code": ...}} with an HTTP 200.
"""

import logging
from datetime import date
from typing import Any, List, Optional

from flighttracker.config import config
from flighttracker.models import Flight, FlightStatus
from flighttracker.services.providers.base import (
    FlightProvider,
    ProviderError,
    as_list,
    build_endpoint,
    localize,
    map_status,
    normalize_flight_number,
)

logger = logging.getLogger(__name__)


AIRLABS_STATUS = {
    'scheduled': FlightStatus.ON_TIME,
    'en-route': FlightStatus.IN_AIR,
    'active': FlightStatus.IN_AIR,
    'landed': FlightStatus.LANDED,
    'cancelled': FlightStatus.CANCELLED,
}


class AirLabsProvider(FlightProvider):
    """Current flight status and raw schedules from AirLabs."""

    name = 'AirLabs'

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(api_key or config.airlabs.api_key, timeout)
        self.base_url = base_url or config.airlabs.base_url

    def supports_date(self, day: date, today: date) -> bool:
        # /flight only knows about the current rotation
        return day == today

    def _request(self, endpoint: str, flight_number: str) -> Any:
        data = self._get_json(
            f'{self.base_url}/{endpoint}',
            params={'flight_iata': flight_number, 'api_key': self.api_key},
        )
        if not isinstance(data, dict):
            return None

        error = data.get('error')
        if error:
            if isinstance(error, dict):
                raise ProviderError(self.name, error.get('message', 'unknown error'), error.get('code'))
            raise ProviderError(self.name, str(error))

        return data.get('response')

    def lookup(self, flight_number: str, day: date) -> List[Flight]:
        rows = as_list(self._request('flight', flight_number))
        logger.info(f'{self.name} returned {len(rows)} rows for {flight_number}')
        return [self._to_flight(row, flight_number) for row in rows]

    def schedules(self, flight_number: str) -> List[dict]:
        """Raw schedule rows for a flight number (not normalized)."""
        rows = as_list(self._request('schedules', flight_number))
        logger.info(f'Found {len(rows)} schedules for flight {flight_number}')
        return rows

    def _to_flight(self, row: dict, flight_number: str) -> Flight:
        """Map one AirLabs flight object onto the canonical record."""
        dep_scheduled = localize(row.get('dep_time'), row.get('dep_time_utc'))
        dep_estimated = localize(row.get('dep_estimated'), row.get('dep_estimated_utc'))
        arr_scheduled = localize(row.get('arr_time'), row.get('arr_time_utc'))
        arr_estimated = localize(row.get('arr_estimated'), row.get('arr_estimated_utc'))

        delay = row.get('dep_delayed') or row.get('delayed') or 0
        try:
            delay = max(0, int(delay))
        except (TypeError, ValueError):
            delay = 0

        return Flight(
            flight_number=normalize_flight_number(row.get('flight_iata')) or flight_number,
            airline=row.get('airline_name') or row.get('airline_iata') or flight_number[:2],
            origin=build_endpoint(
                row.get('dep_iata'),
                dep_estimated or dep_scheduled,
                terminal=row.get('dep_terminal'),
                gate=row.get('dep_gate'),
            ),
            destination=build_endpoint(
                row.get('arr_iata'),
                arr_estimated or arr_scheduled,
                terminal=row.get('arr_terminal'),
                gate=row.get('arr_gate'),
                baggage=row.get('arr_baggage'),
            ),
            status=map_status(row.get('status'), AIRLABS_STATUS, delay),
            scheduled_departure=dep_scheduled,
            delay=delay,
        )
