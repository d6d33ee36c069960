"""Exceptions raised by the weather and travel-time lookups."""


class WidgetError(Exception):
    """An auxiliary lookup (weather, routing, geolocation) failed."""

    def __init__(self, message: str, status_code: int = 502):
        self.status_code = status_code
        super().__init__(message)
