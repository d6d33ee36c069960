"""
Airport reference table.

Maps 3-letter IATA codes to coordinates and display names. The table is a
JSON file generated offline from the OurAirports CSV (see
`flighttracker.airports.preprocess`) and loaded once per process.

Usage:
    from flighttracker.airports import airport_table

    record = airport_table.get('JFK')
    print(record.city)  # 'New York'
"""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Tuple

from flighttracker.config import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirportRecord:
    """Static airport information."""
    iata: str
    name: str
    city: str
    country: str
    lat: float
    lon: float

    def to_dict(self) -> dict:
        return {
            'lat': self.lat,
            'lon': self.lon,
            'city': self.city,
            'country': self.country,
            'name': self.name,
        }


class AirportTable:
    """
    Read-only IATA -> AirportRecord lookup.

    Loads lazily on first access and never mutates afterwards, so lookups
    after the first one need no locking.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path or config.airports.path)
        self._records: Optional[Dict[str, AirportRecord]] = None
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, AirportRecord]:
        """Read the JSON table from disk."""
        if not self.path.exists():
            logger.error(f'Airport table not found: {self.path}')
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f'Failed to read airport table {self.path}: {e}')
            return {}

        if not isinstance(raw, dict):
            logger.error(f'Airport table {self.path} is not a JSON object')
            return {}

        records = {}
        for code, entry in raw.items():
            try:
                records[code.upper()] = AirportRecord(
                    iata=code.upper(),
                    name=entry.get('name', ''),
                    city=entry.get('city', ''),
                    country=entry.get('country', ''),
                    lat=float(entry['lat']),
                    lon=float(entry['lon']),
                )
            except (KeyError, TypeError, ValueError):
                logger.debug(f'Skipping malformed airport entry {code!r}')

        logger.info(f'Loaded {len(records)} airports from {self.path}')
        return records

    @property
    def records(self) -> Dict[str, AirportRecord]:
        if self._records is None:
            with self._lock:
                if self._records is None:
                    self._records = self._load()
        return self._records

    def get(self, code: Optional[str]) -> Optional[AirportRecord]:
        """Look up an airport by IATA code (case-insensitive)."""
        code = (code or '').strip().upper()
        if len(code) != 3:
            return None
        return self.records.get(code)

    def resolve(self, code: Optional[str]) -> Tuple[float, float, str]:
        """
        Resolve a code to (lat, lon, city).

        Unknown codes resolve to (0, 0) with the raw code as the city label,
        so callers can always render something.
        """
        record = self.get(code)
        if record is None:
            return 0.0, 0.0, (code or '').strip().upper()
        return record.lat, record.lon, record.city or record.iata

    def __len__(self) -> int:
        return len(self.records)


# Singleton instance
airport_table = AirportTable()
