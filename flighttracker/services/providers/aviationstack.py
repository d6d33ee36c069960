"""
AviationStack provider.

The free tier only returns real-time flights, so like AirLabs it is
only consulted for today's lookups. Kept last in the chain: 100 requests
per month go quickly.
"""

import logging
from datetime import date
from typing import List, Optional

from flighttracker.config import config
from flighttracker.models import Flight, FlightStatus
from flighttracker.services.providers.base import (
    FlightProvider,
    ProviderError,
    as_list,
    build_endpoint,
    map_status,
    normalize_flight_number,
    parse_datetime,
)

logger = logging.getLogger(__name__)


AVIATIONSTACK_STATUS = {
    'scheduled': FlightStatus.ON_TIME,
    'active': FlightStatus.IN_AIR,
    'landed': FlightStatus.LANDED,
    'cancelled': FlightStatus.CANCELLED,
    'incident': FlightStatus.DELAYED,
    'diverted': FlightStatus.DELAYED,
}


class AviationStackProvider(FlightProvider):
    """Real-time flight lookups from AviationStack."""

    name = 'AviationStack'

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        super().__init__(api_key or config.aviationstack.api_key, timeout)
        self.base_url = base_url or config.aviationstack.base_url

    def supports_date(self, day: date, today: date) -> bool:
        return day == today

    def lookup(self, flight_number: str, day: date) -> List[Flight]:
        data = self._get_json(
            f'{self.base_url}/flights',
            params={'access_key': self.api_key, 'flight_iata': flight_number},
        )
        if not isinstance(data, dict):
            return []

        if 'error' in data:
            error = data['error'] or {}
            if isinstance(error, dict):
                raise ProviderError(self.name, error.get('message', 'unknown error'), error.get('code'))
            raise ProviderError(self.name, str(error))

        rows = as_list(data.get('data'))
        logger.info(f'{self.name} returned {len(rows)} rows for {flight_number}')
        return [self._to_flight(row, flight_number) for row in rows]

    def _to_flight(self, row: dict, flight_number: str) -> Flight:
        """Map one AviationStack flight object onto the canonical record."""
        departure = row.get('departure') or {}
        arrival = row.get('arrival') or {}

        dep_scheduled = parse_datetime(departure.get('scheduled'))
        dep_estimated = parse_datetime(departure.get('estimated'))
        arr_scheduled = parse_datetime(arrival.get('scheduled'))
        arr_estimated = parse_datetime(arrival.get('estimated'))

        try:
            delay = max(0, int(departure.get('delay') or 0))
        except (TypeError, ValueError):
            delay = 0

        return Flight(
            flight_number=normalize_flight_number((row.get('flight') or {}).get('iata')) or flight_number,
            airline=(row.get('airline') or {}).get('name') or flight_number[:2],
            origin=build_endpoint(
                departure.get('iata'),
                dep_estimated or dep_scheduled,
                tz_name=departure.get('timezone'),
                terminal=departure.get('terminal'),
                gate=departure.get('gate'),
            ),
            destination=build_endpoint(
                arrival.get('iata'),
                arr_estimated or arr_scheduled,
                tz_name=arrival.get('timezone'),
                terminal=arrival.get('terminal'),
                gate=arrival.get('gate'),
                baggage=arrival.get('baggage'),
            ),
            status=map_status(row.get('flight_status'), AVIATIONSTACK_STATUS, delay),
            scheduled_departure=dep_scheduled,
            delay=delay,
        )
