"""
Flight lookup service - resolves a flight number to one normalized flight.

Queries providers in a fixed priority order:
1. AeroDataBox (any date)
2. AirLabs (today only)
3. AviationStack (today only)

The first provider that returns rows wins. Its rows are deduplicated and a
single flight is selected: active beats upcoming beats finished, and within
a tier the departure closest to now wins.

Provider failures (network, timeout, error payload, malformed JSON) are
logged and treated as "no result", so a lookup degrades to an empty list
rather than an error.
"""

import logging
import time
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

import requests

from flighttracker.config import config
from flighttracker.models import Flight
from flighttracker.services.demo_data import search_demo_flights
from flighttracker.services.providers import (
    AeroDataBoxProvider,
    AirLabsProvider,
    AviationStackProvider,
    FlightProvider,
    ProviderError,
    normalize_flight_number,
)

logger = logging.getLogger(__name__)


def parse_day(value: Optional[str], today: Optional[date] = None) -> date:
    """Parse YYYY-MM-DD; missing or invalid values mean today."""
    today = today or date.today()
    if not value:
        return today
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.debug(f'Ignoring invalid date {value!r}, using {today.isoformat()}')
        return today


def dedupe_flights(flights: Iterable[Flight]) -> List[Flight]:
    """
    Drop rows sharing a derived id, keeping the first occurrence.

    Provider order is preserved, so later duplicates never replace the row
    a provider reported first.
    """
    unique: Dict[str, Flight] = {}
    for flight in flights:
        unique.setdefault(flight.id, flight)
    return list(unique.values())


def _tier(flight: Flight) -> int:
    if flight.status.is_active:
        return 0
    if flight.status.is_past:
        return 2
    return 1


def select_flight(flights: Sequence[Flight], now: Optional[float] = None) -> Optional[Flight]:
    """
    Pick the single most relevant flight.

    Priority: airborne/boarding > upcoming > landed/cancelled. Within the
    first two tiers the departure nearest to `now` (a UNIX timestamp) wins.
    Among finished flights the most recent departure at or before `now`
    wins; rows dated after `now` only come after those.
    """
    if not flights:
        return None
    now = time.time() if now is None else now

    def key(flight: Flight):
        tier = _tier(flight)
        departure = flight.departure_time
        if departure is None:
            return tier, 2, 0.0
        offset = departure.timestamp() - now
        if tier == 2:
            return (tier, 0, -offset) if offset <= 0 else (tier, 1, offset)
        return tier, 0, abs(offset)

    return min(flights, key=key)


class FlightLookupService:
    """
    Ordered chain of flight providers with uniform failure handling.

    Providers without an API key are skipped. Demo mode adds a fixed
    dataset as the final fallback.
    """

    def __init__(
        self,
        providers: Optional[List[FlightProvider]] = None,
        demo_mode: Optional[bool] = None,
    ):
        if providers is None:
            providers = [
                AeroDataBoxProvider(),
                AirLabsProvider(),
                AviationStackProvider(),
            ]
        self.providers = providers
        self.demo_mode = config.lookup.demo_mode if demo_mode is None else demo_mode

        configured = [p.name for p in self.providers if p.is_configured]
        if not configured:
            logger.warning('No flight data provider API key configured - lookups will return nothing')
        else:
            logger.info(f'Flight providers enabled: {", ".join(configured)}')

        if self.demo_mode:
            logger.info('Flight lookup running in DEMO MODE with mock data')

    def lookup(
        self,
        query: Optional[str],
        day: Optional[date] = None,
        now: Optional[float] = None,
    ) -> List[Flight]:
        """
        Resolve a free-text flight number to zero or one flights.

        Args:
            query: flight designator, e.g. 'aa 123'
            day: target date (defaults to today)
            now: reference UNIX time for selection (defaults to time.time())

        Returns:
            List with at most one Flight (the whole demo set when demo
            mode is on and no query was given).
        """
        flight_number = normalize_flight_number(query)
        if not flight_number:
            return search_demo_flights(None) if self.demo_mode else []

        today = date.today()
        day = day or today

        for provider in self.providers:
            if not provider.is_configured:
                logger.debug(f'Skipping {provider.name}: no API key')
                continue
            if not provider.supports_date(day, today):
                logger.debug(f'Skipping {provider.name}: cannot serve {day.isoformat()}')
                continue

            rows = self._try_provider(provider, flight_number, day)
            candidates = dedupe_flights(rows)
            if not candidates:
                continue

            flight = select_flight(candidates, now)
            logger.info(
                f'{provider.name} resolved {flight_number} on {day.isoformat()}: '
                f'{flight.origin.code} -> {flight.destination.code} ({flight.status.value})'
            )
            return [flight]

        if self.demo_mode:
            demo = select_flight(search_demo_flights(query), now)
            if demo:
                logger.info(f'No provider result for {flight_number}, serving demo flight {demo.flight_number}')
                return [demo]

        logger.info(f'No flight found for {flight_number} on {day.isoformat()}')
        return []

    def _try_provider(self, provider: FlightProvider, flight_number: str, day: date) -> List[Flight]:
        """Call one provider; any failure counts as an empty result."""
        started = time.perf_counter()
        try:
            rows = provider.lookup(flight_number, day)
        except ProviderError as e:
            logger.warning(f'Provider returned an error: {e}')
            return []
        except requests.Timeout:
            logger.error(f'{provider.name} timed out after {provider.timeout}s')
            return []
        except requests.RequestException as e:
            logger.error(f'{provider.name} request failed: {e}')
            return []
        except Exception as e:
            logger.error(f'Error parsing {provider.name} response: {e}')
            return []

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f'{provider.name} answered in {elapsed_ms:.0f}ms with {len(rows)} rows')
        return rows

    def schedules(self, query: Optional[str]) -> List[dict]:
        """
        Raw AirLabs schedule rows for a flight number.

        Used by the client to discover which dates have departures. Any
        failure yields an empty list.
        """
        flight_number = normalize_flight_number(query)
        if not flight_number:
            return []

        provider = next((p for p in self.providers if isinstance(p, AirLabsProvider)), None)
        if provider is None or not provider.is_configured:
            logger.debug('AirLabs not configured, no schedules available')
            return []

        try:
            return provider.schedules(flight_number)
        except ProviderError as e:
            logger.warning(f'Provider returned an error: {e}')
        except requests.RequestException as e:
            logger.error(f'AirLabs schedules request failed: {e}')
        except Exception as e:
            logger.error(f'Error parsing AirLabs schedules: {e}')
        return []


# Singleton instance
flight_lookup_service = FlightLookupService()
