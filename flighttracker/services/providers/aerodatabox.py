"""
AeroDataBox provider (via RapidAPI).

The only provider that answers for arbitrary past and future dates:
GET /flights/number/{number}/{YYYY-MM-DD}

A lookup for today also asks for tomorrow, in parallel, so that a flight
whose last rotation has already landed still shows its next departure.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import List, Optional

from flighttracker.config import config
from flighttracker.models import Flight, FlightStatus
from flighttracker.services.providers.base import (
    FlightProvider,
    ProviderError,
    as_list,
    build_endpoint,
    delay_minutes,
    map_status,
    normalize_flight_number,
    parse_datetime,
)

logger = logging.getLogger(__name__)


# AeroDataBox status vocabulary (lowercased)
AERODATABOX_STATUS = {
    'expected': FlightStatus.ON_TIME,
    'checkin': FlightStatus.ON_TIME,
    'boarding': FlightStatus.BOARDING,
    'gateclosed': FlightStatus.BOARDING,
    'departed': FlightStatus.IN_AIR,
    'enroute': FlightStatus.IN_AIR,
    'approaching': FlightStatus.IN_AIR,
    'delayed': FlightStatus.DELAYED,
    'diverted': FlightStatus.DELAYED,
    'arrived': FlightStatus.LANDED,
    'canceled': FlightStatus.CANCELLED,
    'canceleduncertain': FlightStatus.CANCELLED,
}


def _time_field(movement: dict, key: str) -> Optional[str]:
    """
    Read a local timestamp from a movement block.

    Newer API versions nest it ({'scheduledTime': {'local': ...}}), older
    ones flatten it ('scheduledTimeLocal').
    """
    nested = movement.get(f'{key}Time')
    if isinstance(nested, dict) and nested.get('local'):
        return nested['local']
    return movement.get(f'{key}TimeLocal')


class AeroDataBoxProvider(FlightProvider):
    """Flight status by number and date from AeroDataBox."""

    name = 'AeroDataBox'

    def __init__(
        self,
        api_key: Optional[str] = None,
        host: Optional[str] = None,
        timeout: Optional[float] = None,
        include_next_day: bool = True,
    ):
        super().__init__(api_key or config.aerodatabox.api_key, timeout)
        self.host = host or config.aerodatabox.host
        self.base_url = f'https://{self.host}'
        self.include_next_day = include_next_day

    def lookup(self, flight_number: str, day: date) -> List[Flight]:
        """
        Fetch flights for `day`; for today also fetch tomorrow concurrently.

        Rows from both days are merged. If every call fails, the first error
        is raised so the caller can log it.
        """
        days = [day]
        if self.include_next_day and day == date.today():
            days.append(day + timedelta(days=1))

        if len(days) == 1:
            return self._fetch_day(flight_number, day)

        flights: List[Flight] = []
        errors: List[Exception] = []
        with ThreadPoolExecutor(max_workers=len(days)) as executor:
            futures = [executor.submit(self._fetch_day, flight_number, d) for d in days]
            for future in futures:
                try:
                    flights.extend(future.result())
                except Exception as e:
                    logger.warning(f'{self.name} partial failure: {e}')
                    errors.append(e)

        if errors and len(errors) == len(days):
            raise errors[0]
        return flights

    def _fetch_day(self, flight_number: str, day: date) -> List[Flight]:
        url = f'{self.base_url}/flights/number/{flight_number}/{day.isoformat()}'
        headers = {
            'X-RapidAPI-Key': self.api_key,
            'X-RapidAPI-Host': self.host,
        }
        params = {'withAircraftImage': 'false', 'withLocation': 'false'}

        data = self._get_json(url, params=params, headers=headers)

        if isinstance(data, dict) and data.get('message'):
            raise ProviderError(self.name, data['message'])

        rows = as_list(data)
        logger.info(f'{self.name} returned {len(rows)} rows for {flight_number} on {day.isoformat()}')
        return [self._to_flight(row, flight_number) for row in rows]

    def _to_flight(self, row: dict, flight_number: str) -> Flight:
        """Map one AeroDataBox flight object onto the canonical record."""
        departure = row.get('departure') or {}
        arrival = row.get('arrival') or {}
        dep_airport = departure.get('airport') or {}
        arr_airport = arrival.get('airport') or {}

        dep_scheduled = parse_datetime(_time_field(departure, 'scheduled'))
        dep_revised = parse_datetime(_time_field(departure, 'revised'))
        arr_scheduled = parse_datetime(_time_field(arrival, 'scheduled'))
        arr_revised = parse_datetime(_time_field(arrival, 'revised'))

        delay = delay_minutes(dep_scheduled, dep_revised)

        return Flight(
            flight_number=normalize_flight_number(row.get('number')) or flight_number,
            airline=(row.get('airline') or {}).get('name') or flight_number[:2],
            origin=build_endpoint(
                dep_airport.get('iata'),
                dep_revised or dep_scheduled,
                tz_name=dep_airport.get('timeZone'),
                terminal=departure.get('terminal'),
                gate=departure.get('gate'),
            ),
            destination=build_endpoint(
                arr_airport.get('iata'),
                arr_revised or arr_scheduled,
                tz_name=arr_airport.get('timeZone'),
                terminal=arrival.get('terminal'),
                gate=arrival.get('gate'),
                baggage=arrival.get('baggageBelt'),
            ),
            status=map_status(row.get('status'), AERODATABOX_STATUS, delay),
            scheduled_departure=dep_scheduled,
            delay=delay,
        )
