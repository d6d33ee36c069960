"""
API module for the flight tracker.

Provides REST endpoints for:
- Flight lookup and schedules
- Destination weather and travel time
"""

from flighttracker.api.flights import flights_bp
from flighttracker.api.widgets import widgets_bp

__all__ = ['flights_bp', 'widgets_bp']
