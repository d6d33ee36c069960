"""
Configuration management for the flight tracker.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent


def _parse_bool(value: Optional[str]) -> bool:
    """Parse common truthy strings ('1', 'true', 'yes')."""
    return (value or '').strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class AeroDataBoxConfig:
    """AeroDataBox (RapidAPI) configuration - supports any date."""
    api_key: Optional[str] = os.getenv('AERODATABOX_API_KEY') or None
    host: str = os.getenv('AERODATABOX_HOST', 'aerodatabox.p.rapidapi.com')

    @property
    def base_url(self) -> str:
        return f'https://{self.host}'

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class AirLabsConfig:
    """AirLabs API configuration for current flights and schedules."""
    api_key: Optional[str] = os.getenv('AIRLABS_API_KEY') or None
    base_url: str = 'https://airlabs.co/api/v9'

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class AviationStackConfig:
    """AviationStack API configuration for flight route data."""
    api_key: Optional[str] = os.getenv('AVIATIONSTACK_API_KEY') or None
    base_url: str = 'http://api.aviationstack.com/v1'

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class LookupConfig:
    """Flight lookup behaviour."""
    # Hosting platforms cap request duration, keep every outbound call short
    timeout_seconds: float = float(os.getenv('PROVIDER_TIMEOUT_SECONDS', '8'))
    demo_mode: bool = _parse_bool(os.getenv('FLIGHT_DEMO_MODE'))
    delayed_threshold_minutes: int = 15


@dataclass(frozen=True)
class AirportsConfig:
    """Static airport reference table."""
    path: Path = Path(os.getenv('AIRPORTS_PATH') or PACKAGE_DIR / 'data' / 'airports.json')


@dataclass(frozen=True)
class WidgetConfig:
    """Weather and travel-time lookups (public, unkeyed APIs)."""
    open_meteo_url: str = os.getenv('OPEN_METEO_URL', 'https://api.open-meteo.com/v1/forecast')
    osrm_url: str = os.getenv('OSRM_URL', 'https://router.project-osrm.org')
    timeout_seconds: float = float(os.getenv('WIDGET_TIMEOUT_SECONDS', '8'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    aerodatabox: AeroDataBoxConfig
    airlabs: AirLabsConfig
    aviationstack: AviationStackConfig
    lookup: LookupConfig
    airports: AirportsConfig
    widgets: WidgetConfig

    # Flask settings
    secret_key: str
    debug: bool
    port: int


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        aerodatabox=AeroDataBoxConfig(),
        airlabs=AirLabsConfig(),
        aviationstack=AviationStackConfig(),
        lookup=LookupConfig(),
        airports=AirportsConfig(),
        widgets=WidgetConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
        port=int(os.getenv('PORT', '5000')),
    )


# Singleton instance
config = load_config()
