"""
Shared plumbing for flight-data providers.

Each provider wraps one third-party HTTP API and maps its payload onto the
canonical Flight record. Providers raise on failure; the lookup service
decides what a failure means (it moves on to the next provider).
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

from flighttracker.airports import airport_table
from flighttracker.config import config
from flighttracker.models import Flight, FlightEndpoint, FlightStatus

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A provider answered, but with an error payload (quota, bad key, ...)."""

    def __init__(self, provider: str, message: str, code: Optional[Any] = None):
        self.provider = provider
        self.code = code
        super().__init__(f'{provider}: {message}' + (f' ({code})' if code is not None else ''))


class FlightProvider(ABC):
    """
    One source of flight data.

    Subclasses set `name` and implement `lookup()`, returning every row the
    API has for that flight number and day (possibly several, possibly
    duplicated). Deduplication and selection happen in the lookup service.
    """

    name: str = 'provider'

    def __init__(self, api_key: Optional[str], timeout: Optional[float] = None):
        self.api_key = api_key
        self.timeout = timeout or config.lookup.timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def supports_date(self, day: date, today: date) -> bool:
        """Whether this provider can answer for `day` at all."""
        return True

    @abstractmethod
    def lookup(self, flight_number: str, day: date) -> List[Flight]:
        """Fetch and normalize flights for a normalized flight number."""

    def _get_json(self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None) -> Any:
        """
        GET a JSON document.

        Returns None for an empty (204) response. Raises requests exceptions
        on network errors and timeouts, ProviderError on HTTP error statuses,
        and ValueError when the body is not JSON.
        """
        logger.debug(f'{self.name}: GET {url}')
        response = requests.get(url, params=params, headers=headers, timeout=self.timeout)

        if response.status_code >= 400:
            if response.status_code == 429:
                logger.warning(f'{self.name} rate limit exceeded')
            raise ProviderError(self.name, f'HTTP {response.status_code}', response.status_code)

        if response.status_code == 204 or not response.text:
            return None

        return response.json()

    def __repr__(self) -> str:
        return f'<{type(self).__name__} configured={self.is_configured}>'


def normalize_flight_number(value: Optional[str]) -> str:
    """'aa 123' -> 'AA123'."""
    return ''.join((value or '').split()).upper()


def parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """
    Parse a provider timestamp.

    Accepts ISO-8601 with either 'T' or a space separator, with or without
    seconds, and a trailing 'Z'. Returns None when unparseable.
    """
    if not dt_str or not isinstance(dt_str, str):
        return None
    try:
        return datetime.fromisoformat(dt_str.strip().replace('Z', '+00:00'))
    except ValueError:
        return None


def localize(local_str: Optional[str], utc_str: Optional[str]) -> Optional[datetime]:
    """
    Attach a fixed UTC offset to a naive local time.

    Some APIs report local wall-clock time and UTC time separately; the
    difference between the two is the airport's offset at that moment.
    """
    local = parse_datetime(local_str)
    if local is None or local.tzinfo is not None:
        return local
    utc = parse_datetime(utc_str)
    if utc is None:
        return local
    if utc.tzinfo is not None:
        utc = utc.astimezone(timezone.utc).replace(tzinfo=None)
    # Offsets are whole quarter-hours; round away clock skew between fields
    minutes = round((local - utc).total_seconds() / 900) * 15
    return local.replace(tzinfo=timezone(timedelta(minutes=minutes)))


def timezone_label(dt: Optional[datetime], tz_name: Optional[str] = None) -> str:
    """Provider timezone name if given, else the offset label, else UTC."""
    if tz_name:
        return tz_name
    if dt is not None and dt.tzinfo is not None:
        return dt.tzname() or 'UTC'
    return 'UTC'


def delay_minutes(scheduled: Optional[datetime], revised: Optional[datetime]) -> int:
    """Positive difference between revised and scheduled time, in minutes."""
    if scheduled is None or revised is None:
        return 0
    if (scheduled.tzinfo is None) != (revised.tzinfo is None):
        return 0
    return max(0, int((revised - scheduled).total_seconds() // 60))


def map_status(
    raw: Optional[str],
    table: Dict[str, FlightStatus],
    delay: int = 0,
) -> FlightStatus:
    """
    Map a provider status onto the canonical set.

    Unknown values become SCHEDULED. A flight reported as on time but
    carrying a significant departure delay is reported as DELAYED.
    """
    status = table.get((raw or '').strip().lower(), FlightStatus.SCHEDULED)
    if status == FlightStatus.ON_TIME and delay >= config.lookup.delayed_threshold_minutes:
        return FlightStatus.DELAYED
    return status


def build_endpoint(
    code: Optional[str],
    time: Optional[datetime],
    tz_name: Optional[str] = None,
    terminal: Optional[Any] = None,
    gate: Optional[Any] = None,
    baggage: Optional[Any] = None,
) -> FlightEndpoint:
    """Build a FlightEndpoint, resolving coordinates from the airport table."""
    code = (code or '').strip().upper()
    lat, lon, city = airport_table.resolve(code)
    return FlightEndpoint(
        code=code,
        city=city,
        time=time,
        timezone=timezone_label(time, tz_name),
        latitude=lat,
        longitude=lon,
        terminal=_clean(terminal),
        gate=_clean(gate),
        baggage=_clean(baggage),
    )


def _clean(value: Optional[Any]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def as_list(payload: Any) -> List[dict]:
    """Coerce a single object, a list, or nothing into a list of dicts."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []
