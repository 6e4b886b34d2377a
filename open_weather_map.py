"""OpenWeatherMap Service Provider Module.

OpenWeatherMap reports temperatures in Kelvin by default, so its reading
is passed to the aggregator without conversion.
"""

import logging

import requests

from weather_service import WeatherServiceError

logger = logging.getLogger(__name__)

OPEN_WEATHER_MAP_ENDPOINT = "https://api.openweathermap.org/data/2.5/weather"


class OpenWeatherMapError(WeatherServiceError):
    """Base exception for errors originating from the OpenWeatherMap service."""
    pass


class OpenWeatherMapRequestError(OpenWeatherMapError):
    """Raised when a network or protocol-level error occurs during an API request.

        Attributes:
            error: The underlying requests exception that triggered this error.
    """
    def __init__(self, error: requests.exceptions.RequestException):
        super().__init__(f"OpenWeatherMap request failed: {error}")
        self.error = error

    def __repr__(self):
        return f"{self.__class__.__name__}({repr(self.error)})"


class OpenWeatherMapResponseError(OpenWeatherMapError):
    """Raised when OpenWeatherMap answers successfully but without a usable temperature."""
    pass


class OpenWeatherMapProvider:
    """OpenWeatherMap as a WeatherProvider.

        Attributes:
            api_key: The OpenWeatherMap APPID.
    """
    def __init__(self, api_key: str):
        self.api_key = api_key

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def temperature(self, city_name: str) -> float:
        try:
            response = requests.get(OPEN_WEATHER_MAP_ENDPOINT, params={"APPID": self.api_key, "q": city_name})
            response.raise_for_status()
            data = response.json()
        except ValueError as err:
            logger.error("openWeatherMap: %s: invalid JSON", city_name)
            raise OpenWeatherMapResponseError(f"OpenWeatherMap returned invalid JSON: {err}")
        except requests.exceptions.RequestException as err:
            logger.error("openWeatherMap: %s: %s", city_name, err)
            raise OpenWeatherMapRequestError(err)

        main_dict = data.get("main") if isinstance(data, dict) else None
        kelvin = main_dict.get("temp", None) if isinstance(main_dict, dict) else None
        if kelvin is None:
            logger.error("openWeatherMap: %s: response has no temperature", city_name)
            raise OpenWeatherMapResponseError(f"OpenWeatherMap returned no temperature for '{city_name}'")

        kelvin = float(kelvin)
        logger.info("openWeatherMap: %s: %.2f", city_name, kelvin)
        return kelvin
