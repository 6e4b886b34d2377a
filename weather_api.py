"""WeatherAPI Service Provider Module.

This module implements the integration with the WeatherAPI.com service.
It provides a functional utility for fetching real-time weather data,
a structured data model for internal consumption, a specialized
exception hierarchy to handle API-specific failure modes, and the
WeatherApiProvider adapter used by the aggregator.

The module follows a clean separation of concerns:
    1. Exception handling for network and logic errors.
    2. Data modeling via the WeatherApiResponse class.
    3. API interaction through the fetch_data_weather_api function.
    4. Kelvin readings through WeatherApiProvider.temperature.
"""

import logging

import requests

import utils
from weather_service import WeatherServiceError

logger = logging.getLogger(__name__)

WEATHER_API_ENDPOINT = "https://api.weatherapi.com/v1/current.json"
WEATHER_API_CITY_NOT_FOUND_CODE = 1006


class WeatherApiError(WeatherServiceError):
    """Base exception for errors originating from the WeatherAPI service."""
    pass


class WeatherApiCityNotFoundError(WeatherApiError):
    """Raised when the requested city cannot be found in the WeatherAPI database."""
    def __init__(self, city_name: str):
        super().__init__(f"WeatherAPI: no matching city found for '{city_name}'")
        self.city_name = city_name


class WeatherApiRequestError(WeatherApiError):
    """Raised when a network or protocol-level error occurs during an API request.

        Attributes:
            error: The underlying requests exception that triggered this error.
    """
    def __init__(self, error: requests.exceptions.RequestException):
        """Initializes the error with the original requests exception.

                Args:
                    error: The source HTTPError or RequestException.
        """
        super().__init__(f"WeatherAPI request failed: {error}")
        self.error = error

    def __repr__(self):
        """Returns a string representation of the WeatherApiRequestError instance, including the wrapped error."""
        return f"{self.__class__.__name__}({repr(self.error)})"


class WeatherApiResponseError(WeatherApiError):
    """Raised when WeatherAPI answers successfully but without a usable temperature."""
    pass


class WeatherApiResponse:
    """A data container for weather information retrieved from WeatherAPI.

        Attributes:
            city_name: Name of the city (e.g., 'London').
            country_name: Name of the country.
            latitude: Geographic latitude coordinate.
            longitude: Geographic longitude coordinate.
            last_update_epoch: The time of the last weather update (on WeatherApi's end) in Unix epoch format.
            temp_c: Current temperature in degrees Celsius.
    """
    def __init__(self, city_name: str, country_name: str,
                 latitude: float, longitude: float, last_update_epoch: int, temp_c: float):
        self.city_name = city_name
        self.country_name = country_name
        self.latitude = latitude
        self.longitude = longitude
        self.last_update_epoch = last_update_epoch
        self.temp_c = temp_c

    def __repr__(self) -> str:
        """Returns a string representation of the WeatherApiResponse instance."""
        return (
            f"{self.__class__.__name__}("
            f"city_name={self.city_name!r}, "
            f"country_name={self.country_name!r}, "
            f"latitude={self.latitude!r}, "
            f"longitude={self.longitude!r}, "
            f"last_update_epoch={self.last_update_epoch!r}, "
            f"temp_c={self.temp_c!r})"
        )


def _is_city_not_found(response: requests.Response) -> bool:
    try:
        data = response.json()
    except ValueError:
        return False
    error = data.get("error") if isinstance(data, dict) else None
    return isinstance(error, dict) and error.get("code", -1) == WEATHER_API_CITY_NOT_FOUND_CODE


def fetch_data_weather_api(api_key: str, city_name: str) -> WeatherApiResponse:
    """Fetches real-time weather data from the WeatherAPI service.

        Connects to the WeatherAPI external endpoint to retrieve city location
        metadata (i.e. latitude, longitude) and the current temperature in
        Celsius for a specific city.

        Args:
            api_key: The WeatherAPI access key.
            city_name: The name of the city to query (e.g., "London" or "Tel Aviv").

        Returns:
            A WeatherApiResponse object populated with location metadata and current weather conditions.

        Raises:
            WeatherApiCityNotFoundError: If the API returns a 1006 error code
                indicating the city was not found.
            WeatherApiRequestError: If a network error occurs or the API
                returns a non-success status code.
    """
    try:
        response = requests.get(WEATHER_API_ENDPOINT, params={"key": api_key, "q": city_name})

        # Raise an exception for bad status codes (4xx or 5xx)
        response.raise_for_status()

        data = response.json()
    except ValueError as err:
        raise WeatherApiResponseError(f"WeatherAPI returned invalid JSON: {err}")
    except requests.exceptions.RequestException as err:
        if err.response is not None and _is_city_not_found(err.response):
            raise WeatherApiCityNotFoundError(city_name)
        raise WeatherApiRequestError(err)

    if not isinstance(data, dict):
        raise WeatherApiResponseError("WeatherAPI returned a non-object JSON body")

    location_dict = data.get("location") or {}
    current_dict = data.get("current") or {}

    return WeatherApiResponse(location_dict.get("name"), location_dict.get("country"),
                              location_dict.get("lat", None), location_dict.get("lon", None),
                              current_dict.get("last_updated_epoch", None), current_dict.get("temp_c", None))


class WeatherApiProvider:
    """WeatherAPI.com as a WeatherProvider.

        Attributes:
            api_key: The WeatherAPI access key.
    """
    def __init__(self, api_key: str):
        self.api_key = api_key

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def temperature(self, city_name: str) -> float:
        try:
            weather_api_response = fetch_data_weather_api(self.api_key, city_name)
        except WeatherApiError as e:
            logger.error("weatherApi: %s: %s", city_name, e)
            raise

        if weather_api_response.temp_c is None:
            logger.error("weatherApi: %s: response has no temperature", city_name)
            raise WeatherApiResponseError(f"WeatherAPI returned no temperature for '{city_name}'")

        kelvin = utils.celsius_to_kelvin(float(weather_api_response.temp_c))
        logger.info("weatherApi: %s: %.2f", city_name, kelvin)
        return kelvin
