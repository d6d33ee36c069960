"""
Build the airport reference table from the OurAirports CSV.

Run once, offline, whenever the dataset is refreshed:

    python -m flighttracker.airports.preprocess airports.csv -o flighttracker/data/airports.json

Expected CSV header (https://ourairports.com/data/airports.csv):
id,ident,type,name,latitude_deg,longitude_deg,elevation_ft,continent,
iso_country,iso_region,municipality,scheduled_service,icao_code,iata_code,...
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable

from flighttracker.config import config

logger = logging.getLogger(__name__)


def parse_airport_rows(rows: Iterable[dict]) -> Dict[str, dict]:
    """
    Convert CSV rows into the {IATA: {lat, lon, city, country, name}} table.

    Rows without a 3-letter IATA code or with non-numeric coordinates are
    dropped. Later rows win when a code appears twice.
    """
    airports = {}

    for row in rows:
        iata = (row.get('iata_code') or '').strip().upper()
        if len(iata) != 3:
            continue

        try:
            lat = float(row.get('latitude_deg') or '')
            lon = float(row.get('longitude_deg') or '')
        except ValueError:
            continue

        airports[iata] = {
            'lat': lat,
            'lon': lon,
            'city': (row.get('municipality') or '').strip(),
            'country': (row.get('iso_country') or '').strip(),
            'name': (row.get('name') or '').strip(),
        }

    return airports


def build_airport_table(csv_path: Path, output_path: Path) -> int:
    """
    Read the CSV at csv_path and write the JSON table to output_path.

    Returns count of airports written.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f'Airport CSV not found: {csv_path}')

    logger.info(f'Processing airports from {csv_path}')

    with open(csv_path, 'r', encoding='utf-8', errors='ignore', newline='') as f:
        airports = parse_airport_rows(csv.DictReader(f))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(airports, f, indent=2, ensure_ascii=False)

    logger.info(f'Processed {len(airports)} airports with IATA codes into {output_path}')
    return len(airports)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Generate the IATA airport table from the OurAirports CSV.')
    parser.add_argument('csv_path', type=Path, help='Path to airports.csv')
    parser.add_argument(
        '-o', '--output',
        type=Path,
        default=config.airports.path,
        help=f'Output JSON path (default: {config.airports.path})',
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    try:
        build_airport_table(args.csv_path, args.output)
    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
