"""
Flight model - the canonical record returned by the lookup API.

Every provider payload is mapped onto this shape before it leaves the
service layer, so the client never sees provider-specific fields.

Design notes:
- Request-scoped: built fresh from provider JSON, never cached or persisted
- `id` exists only to deduplicate rows within one response
- Serialized with camelCase keys to match the frontend contract
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class FlightStatus(str, Enum):
    """
    Canonical flight status.

    Each provider's own status vocabulary is mapped onto this closed set:
    - ON_TIME / DELAYED / SCHEDULED: departure still ahead
    - BOARDING / IN_AIR: flight currently active
    - LANDED / CANCELLED: flight is over
    """
    ON_TIME = 'On Time'
    DELAYED = 'Delayed'
    BOARDING = 'Boarding'
    IN_AIR = 'In Air'
    LANDED = 'Landed'
    CANCELLED = 'Cancelled'
    SCHEDULED = 'Scheduled'

    @property
    def is_active(self) -> bool:
        return self in (FlightStatus.BOARDING, FlightStatus.IN_AIR)

    @property
    def is_past(self) -> bool:
        return self in (FlightStatus.LANDED, FlightStatus.CANCELLED)


@dataclass
class FlightEndpoint:
    """One end of a flight (departure or arrival airport)."""
    code: str
    city: str
    time: Optional[datetime]
    timezone: str
    latitude: float
    longitude: float
    terminal: Optional[str] = None
    gate: Optional[str] = None
    baggage: Optional[str] = None  # arrival only

    def to_dict(self) -> dict:
        result = {
            'code': self.code,
            'city': self.city,
            'time': self.time.isoformat() if self.time else None,
            'timezone': self.timezone,
            'latitude': self.latitude,
            'longitude': self.longitude,
        }
        # Optional fields are left out entirely rather than sent as null
        for key in ('terminal', 'gate', 'baggage'):
            value = getattr(self, key)
            if value:
                result[key] = value
        return result


@dataclass
class Flight:
    """
    Normalized flight record.

    Built by a provider from its raw payload. The scheduled departure is
    kept separately from `origin.time` (which may be an estimate) because
    the derived id and the selection policy both key on the schedule.
    """
    flight_number: str
    airline: str
    origin: FlightEndpoint
    destination: FlightEndpoint
    status: FlightStatus
    scheduled_departure: Optional[datetime] = None
    delay: int = 0

    @property
    def id(self) -> str:
        """Derived key: flight number plus scheduled departure."""
        when = self.scheduled_departure or self.origin.time
        return f'{self.flight_number}-{when.isoformat() if when else ""}'

    @property
    def departure_time(self) -> Optional[datetime]:
        """Best known departure time (estimate if any, else schedule)."""
        return self.origin.time or self.scheduled_departure

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'id': self.id,
            'flightNumber': self.flight_number,
            'airline': self.airline,
            'origin': self.origin.to_dict(),
            'destination': self.destination.to_dict(),
            'status': self.status.value,
            'delay': self.delay,
        }
