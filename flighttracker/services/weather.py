"""
Current weather at an airport, from Open-Meteo (no API key).

One request per call, no retries. The WMO weather code is reduced to an
icon and a short description with fixed numeric ranges:

    0        clear
    1-3      cloudy
    45-48    fog
    51-67    rain (drizzle, rain, freezing rain)
    71-77    snow
    >= 95    thunderstorm
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Tuple

import requests

from flighttracker.config import config
from flighttracker.services.errors import WidgetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentWeather:
    temperature_c: Optional[float]
    weather_code: Optional[int]
    is_day: bool
    icon: str
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


def describe_weather_code(code: Optional[int], is_day: bool = True) -> Tuple[str, str]:
    """Map a WMO weather code to (icon, description)."""
    if code is None:
        return '🌤️', 'Variable'
    if code == 0:
        return ('☀️' if is_day else '🌙'), 'Clear sky'
    if 1 <= code <= 3:
        return ('🌤️' if is_day else '☁️'), 'Cloudy'
    if 45 <= code <= 48:
        return '🌫️', 'Fog'
    if 51 <= code <= 67:
        return '🌧️', 'Rain'
    if 71 <= code <= 77:
        return '❄️', 'Snow'
    if code >= 95:
        return '⚡', 'Thunderstorm'
    return '🌤️', 'Variable'


def fetch_current_weather(lat: float, lon: float, timeout: Optional[float] = None) -> CurrentWeather:
    """
    Fetch current conditions for a coordinate.

    Raises:
        WidgetError on network errors or an unexpected payload.
    """
    params = {
        'latitude': lat,
        'longitude': lon,
        'current': 'temperature_2m,weather_code,is_day',
    }

    try:
        resp = requests.get(
            config.widgets.open_meteo_url,
            params=params,
            timeout=timeout or config.widgets.timeout_seconds,
        )
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        logger.error(f'Failed to fetch weather for ({lat}, {lon}): {e}')
        raise WidgetError('Weather service unavailable') from e
    except ValueError as e:
        logger.error(f'Invalid weather response: {e}')
        raise WidgetError('Weather service returned invalid data') from e

    current = data.get('current') if isinstance(data, dict) else None
    if not isinstance(current, dict) or not current:
        raise WidgetError('Weather service returned no current conditions')

    code_val = current.get('weather_code')
    temp = current.get('temperature_2m')
    try:
        code = int(code_val) if code_val is not None else None
        temperature = float(temp) if temp is not None else None
    except (TypeError, ValueError) as e:
        logger.error(f'Invalid weather fields {current!r}: {e}')
        raise WidgetError('Weather service returned invalid data') from e

    is_day = bool(current.get('is_day', 1))
    icon, description = describe_weather_code(code, is_day)

    return CurrentWeather(
        temperature_c=temperature,
        weather_code=code,
        is_day=is_day,
        icon=icon,
        description=description,
    )
