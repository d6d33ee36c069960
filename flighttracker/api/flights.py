"""
Flight lookup API endpoints.

Provides endpoints for:
- GET /api/flights            - Look up one flight by number and date
- GET /api/flights/schedules  - Raw schedule rows for date discovery
"""

import logging
import time

from flask import Blueprint, jsonify, request

from flighttracker.services import flight_lookup
from flighttracker.services.flight_lookup import parse_day

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    Look up a flight.

    Query parameters:
    - query: flight number, case and spacing ignored (e.g. 'aa 123')
    - date: YYYY-MM-DD, defaults to today

    Always answers 200 with a JSON array of zero or one flight. A missing
    query or a failing provider yields an empty array, never a 4xx.
    """
    start_time = time.perf_counter()

    query = request.args.get('query', '')
    day = parse_day(request.args.get('date'))

    flights = flight_lookup.flight_lookup_service.lookup(query, day)

    query_time_ms = (time.perf_counter() - start_time) * 1000
    logger.debug(f'Lookup {query!r} on {day.isoformat()} took {query_time_ms:.0f}ms')

    return jsonify([f.to_dict() for f in flights])


@flights_bp.route('/schedules', methods=['GET'])
def list_schedules():
    """
    Raw schedule entries for a flight number.

    Query parameters:
    - query: flight number

    Intended for client-side date discovery, not for display. Any error
    yields an empty array.
    """
    query = request.args.get('query', '')
    return jsonify(flight_lookup.flight_lookup_service.schedules(query))
