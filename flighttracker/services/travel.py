"""
Driving time to the departure airport, from the public OSRM router.

The user's position normally comes from the browser. When the client
cannot provide one, a single IP-based geolocation attempt is made.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import requests

from flighttracker.config import config
from flighttracker.services.errors import WidgetError

logger = logging.getLogger(__name__)

# Traffic tiers by total drive duration (seconds)
LIGHT_TRAFFIC_MAX_S = 1800
MODERATE_TRAFFIC_MAX_S = 3600


@dataclass(frozen=True)
class DriveRoute:
    duration_s: float
    distance_m: float
    origin: Tuple[float, float]
    destination: Tuple[float, float]

    @property
    def traffic(self) -> str:
        return classify_traffic(self.duration_s)

    @property
    def maps_url(self) -> str:
        """Google Maps driving directions for the same trip."""
        return (
            'https://www.google.com/maps/dir/?api=1'
            f'&origin={self.origin[0]},{self.origin[1]}'
            f'&destination={self.destination[0]},{self.destination[1]}'
            '&travelmode=driving'
        )

    def to_dict(self) -> dict:
        return {
            'duration_s': round(self.duration_s),
            'distance_m': round(self.distance_m),
            'duration': format_duration(self.duration_s),
            'distance': format_distance(self.distance_m),
            'traffic': self.traffic,
            'maps_url': self.maps_url,
        }


def classify_traffic(duration_s: float) -> str:
    """light < 30 min <= moderate < 60 min <= heavy."""
    if duration_s < LIGHT_TRAFFIC_MAX_S:
        return 'light'
    if duration_s < MODERATE_TRAFFIC_MAX_S:
        return 'moderate'
    return 'heavy'


def format_duration(seconds: float) -> str:
    """3900 -> '1h 5min', 1500 -> '25 min'."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    if hours > 0:
        return f'{hours}h {minutes}min'
    return f'{minutes} min'


def format_distance(meters: float) -> str:
    return f'{meters / 1000:.1f} km'


def has_coordinates(lat: Optional[float], lon: Optional[float]) -> bool:
    """(0, 0) is the placeholder for airports missing from the table."""
    return lat is not None and lon is not None and not (lat == 0 and lon == 0)


def detect_user_location() -> Optional[Tuple[float, float]]:
    """Best-effort IP geolocation; None when it fails."""
    try:
        import geocoder
        g = geocoder.ip('me')
        if g.ok and g.latlng:
            location = (float(g.latlng[0]), float(g.latlng[1]))
            logger.info(f'Auto-detected location: {location} ({g.city}, {g.country})')
            return location
    except Exception as e:
        logger.warning(f'Location auto-detect failed: {e}')
    return None


def fetch_drive_route(
    from_lat: float,
    from_lon: float,
    to_lat: float,
    to_lon: float,
    timeout: Optional[float] = None,
) -> DriveRoute:
    """
    Ask OSRM for the driving route between two points.

    Raises:
        WidgetError when the airport has no coordinates, on network
        errors, or when OSRM finds no route.
    """
    if not has_coordinates(to_lat, to_lon):
        raise WidgetError('Airport coordinates not available', status_code=400)

    # OSRM takes lon,lat pairs
    url = (
        f'{config.widgets.osrm_url}/route/v1/driving/'
        f'{from_lon},{from_lat};{to_lon},{to_lat}'
    )

    try:
        resp = requests.get(
            url,
            params={'overview': 'false'},
            timeout=timeout or config.widgets.timeout_seconds,
        )
        data = resp.json()
    except requests.RequestException as e:
        logger.error(f'Routing request failed: {e}')
        raise WidgetError('Routing service unavailable') from e
    except ValueError as e:
        logger.error(f'Invalid routing response: {e}')
        raise WidgetError('Routing service returned invalid data') from e

    routes = data.get('routes') if isinstance(data, dict) else None
    if not isinstance(data, dict) or data.get('code') != 'Ok' or not routes:
        code = data.get('code') if isinstance(data, dict) else None
        logger.warning(f'OSRM could not route: {code}')
        raise WidgetError(f'Unable to compute route ({code or "unknown error"})')

    try:
        duration = float(routes[0]['duration'])
        distance = float(routes[0]['distance'])
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f'Invalid OSRM routes {routes!r}: {e}')
        raise WidgetError('Routing service returned invalid data') from e

    return DriveRoute(
        duration_s=duration,
        distance_m=distance,
        origin=(from_lat, from_lon),
        destination=(to_lat, to_lon),
    )
