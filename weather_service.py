"""Custom exception hierarchy and provider contract for the Weather Aggregator application.

This module defines the base exception shared by every weather service
and the single capability every provider exposes. By inheriting from a
common base class, it allows the application to distinguish between generic
Python errors and managed weather service exceptions.

Example:
    try:
        kelvin = provider.temperature(city)
    except WeatherServiceError as e:
        logger.error(f"Weather service failed: {e}")
"""

from typing import Protocol


class WeatherServiceError(Exception):
    """Base class for any exception raised by a weather service.

        Catching this exception will intercept any error specifically defined
        within this application, regardless of the underlying service provider.
    """
    pass


class WeatherProvider(Protocol):
    """Anything able to produce a temperature reading for a city."""

    def temperature(self, city_name: str) -> float:
        """Returns the current temperature for city_name in Kelvin, or raises."""
        ...
