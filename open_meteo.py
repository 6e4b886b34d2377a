"""OpenMeteo Service Provider Module.

This module implements the integration with the Open-Meteo.com service.
Open-Meteo is queried by coordinates, so a city name is first resolved
through the Open-Meteo geocoding API and the resulting latitude and
longitude are then used for the forecast request.

The module follows a clean separation of concerns:
    1. Exception handling for network and logic errors.
    2. Data modeling via the OpenMeteoLocation and OpenMeteoResponse classes.
    3. API interaction through geocode_city_open_meteo and fetch_data_open_meteo.
    4. Kelvin readings through OpenMeteoProvider.temperature.
"""

import logging

import requests

import utils
from weather_service import WeatherServiceError

logger = logging.getLogger(__name__)

OPEN_METEO_GEOCODING_ENDPOINT = "https://geocoding-api.open-meteo.com/v1/search"
OPEN_METEO_FORECAST_ENDPOINT = "https://api.open-meteo.com/v1/forecast"


class OpenMeteoError(WeatherServiceError):
    """Base exception for errors originating from the Open-Meteo service."""
    pass


class OpenMeteoCityNotFoundError(OpenMeteoError):
    """Raised when the geocoding API has no match for the requested city."""
    def __init__(self, city_name: str):
        super().__init__(f"OpenMeteo: no matching city found for '{city_name}'")
        self.city_name = city_name


class OpenMeteoRequestError(OpenMeteoError):
    """Raised when a network or protocol-level error occurs during an API request.

        Attributes:
            error: The underlying requests exception that triggered this error.
    """
    def __init__(self, error: requests.exceptions.RequestException):
        """Initializes the error with the original requests exception.

                Args:
                    error: The source HTTPError or RequestException.
        """
        super().__init__(f"OpenMeteo request failed: {error}")
        self.error = error

    def __repr__(self):
        """Returns a string representation of the OpenMeteoRequestError instance, including the wrapped error."""
        return f"{self.__class__.__name__}({repr(self.error)})"


class OpenMeteoResponseError(OpenMeteoError):
    """Raised when Open-Meteo answers successfully but the payload lacks the expected data."""
    pass


class OpenMeteoLocation:
    """A geocoding match returned by Open-Meteo."""
    def __init__(self, name: str, country: str, latitude: float, longitude: float):
        self.name = name
        self.country = country
        self.latitude = latitude
        self.longitude = longitude

    def __repr__(self):
        return (
            f"OpenMeteoLocation("
            f"name={self.name!r}, "
            f"country={self.country!r}, "
            f"latitude={self.latitude!r}, "
            f"longitude={self.longitude!r})"
        )


class OpenMeteoResponse:
    """A data container for weather information retrieved from OpenMeteo.

        Attributes:
            latitude: Geographic latitude coordinate.
            longitude: Geographic longitude coordinate.
            time: Time of the observation, as reported by OpenMeteo (e.g. '2024-01-01T12:00').
            temp_c: Current temperature in degrees Celsius.
    """
    def __init__(self, latitude: float, longitude: float, time: str, temp_c: float):
        self.latitude = latitude
        self.longitude = longitude
        self.time = time
        self.temp_c = temp_c

    def __repr__(self):
        """Returns a string representation of the OpenMeteoResponse instance."""
        return (
            f"OpenMeteoResponse("
            f"latitude={self.latitude!r}, "
            f"longitude={self.longitude!r}, "
            f"time={self.time!r}, "
            f"temp_c={self.temp_c!r})"
        )


def _get_json(url: str, params: dict) -> dict:
    try:
        response = requests.get(url, params=params)

        # Raise an exception for bad status codes (4xx or 5xx)
        response.raise_for_status()

        data = response.json()
    except ValueError as err:
        raise OpenMeteoResponseError(f"OpenMeteo returned invalid JSON: {err}")
    except requests.exceptions.RequestException as err:
        raise OpenMeteoRequestError(err)

    if not isinstance(data, dict):
        raise OpenMeteoResponseError("OpenMeteo returned a non-object JSON body")
    return data


def geocode_city_open_meteo(city_name: str) -> OpenMeteoLocation:
    """Resolves a city name to coordinates with the OpenMeteo geocoding service.

        Args:
            city_name: The name of the city to look up.

        Returns:
            The best OpenMeteoLocation match.

        Raises:
            OpenMeteoCityNotFoundError: If the search returns no results.
            OpenMeteoRequestError: If a network error occurs or the API
                returns a non-success status code.
    """
    data = _get_json(OPEN_METEO_GEOCODING_ENDPOINT, {"name": city_name, "count": 1})

    results = data.get("results") or []
    if len(results) == 0:
        raise OpenMeteoCityNotFoundError(city_name)

    result = results[0]
    if result.get("latitude") is None or result.get("longitude") is None:
        raise OpenMeteoResponseError(f"OpenMeteo geocoding returned no coordinates for '{city_name}'")

    return OpenMeteoLocation(result.get("name"), result.get("country"), result["latitude"], result["longitude"])


def fetch_data_open_meteo(latitude: float, longitude: float) -> OpenMeteoResponse:
    """Fetches real-time weather data from the OpenMeteo service.

        Args:
            latitude: The North-South geographic coordinate.
            longitude: The East-West geographic coordinate.

        Returns:
            An OpenMeteoResponse object populated with location metadata and the current temperature.

        Raises:
            OpenMeteoRequestError: If a network error occurs or the API
                returns a non-success status code.
    """
    data = _get_json(OPEN_METEO_FORECAST_ENDPOINT,
                     {"latitude": latitude, "longitude": longitude, "current_weather": "true"})

    current_weather_dict = data.get("current_weather", {})

    return OpenMeteoResponse(data.get("latitude", None), data.get("longitude", None),
                             current_weather_dict.get("time", None), current_weather_dict.get("temperature", None))


class OpenMeteoProvider:
    """Open-Meteo as a WeatherProvider. Needs no access key."""

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def temperature(self, city_name: str) -> float:
        try:
            location = geocode_city_open_meteo(city_name)
            open_meteo_response = fetch_data_open_meteo(location.latitude, location.longitude)
        except OpenMeteoError as e:
            logger.error("openMeteo: %s: %s", city_name, e)
            raise

        if open_meteo_response.temp_c is None:
            logger.error("openMeteo: %s: response has no temperature", city_name)
            raise OpenMeteoResponseError(f"OpenMeteo returned no temperature for '{city_name}'")

        kelvin = utils.celsius_to_kelvin(float(open_meteo_response.temp_c))
        logger.info("openMeteo: %s: %.2f", city_name, kelvin)
        return kelvin
