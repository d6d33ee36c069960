"""
Weather and travel-time API endpoints.

Provides endpoints for:
- GET /api/weather - Current weather at a coordinate
- GET /api/travel  - Driving time from the user to an airport

Each call makes a single upstream request; failures surface as JSON errors
so the card can show its own error state independently of the flight.
"""

import logging
from typing import Optional

from flask import Blueprint, jsonify, request

from flighttracker.services import travel, weather
from flighttracker.services.errors import WidgetError

logger = logging.getLogger(__name__)

widgets_bp = Blueprint('widgets', __name__, url_prefix='/api')


def _coordinate(name: str, limit: float) -> Optional[float]:
    """Read a float query parameter within [-limit, limit], else None."""
    value = request.args.get(name)
    if value is None or value == '':
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if not (-limit <= value <= limit):
        return None
    return value


@widgets_bp.errorhandler(WidgetError)
def widget_error(e: WidgetError):
    return jsonify({'error': str(e)}), e.status_code


@widgets_bp.route('/weather', methods=['GET'])
def get_weather():
    """
    Current weather for a destination.

    Query parameters:
    - lat, lon: destination coordinates
    """
    lat = _coordinate('lat', 90)
    lon = _coordinate('lon', 180)
    if lat is None or lon is None:
        return jsonify({'error': 'lat and lon required'}), 400

    current = weather.fetch_current_weather(lat, lon)
    return jsonify(current.to_dict())


@widgets_bp.route('/travel', methods=['GET'])
def get_travel_time():
    """
    Driving time to the departure airport.

    Query parameters:
    - lat, lon: airport coordinates
    - from_lat, from_lon: user position (optional, IP geolocation if absent)
    """
    lat = _coordinate('lat', 90)
    lon = _coordinate('lon', 180)
    if not travel.has_coordinates(lat, lon):
        return jsonify({'error': 'Airport coordinates not available'}), 400

    from_lat = _coordinate('from_lat', 90)
    from_lon = _coordinate('from_lon', 180)
    if from_lat is None or from_lon is None:
        location = travel.detect_user_location()
        if location is None:
            return jsonify({'error': 'User location unavailable'}), 422
        from_lat, from_lon = location

    route = travel.fetch_drive_route(from_lat, from_lon, lat, lon)
    return jsonify(route.to_dict())
