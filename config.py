"""Environment-based configuration for the Weather Aggregator.

Variables:
    OPEN_WEATHER_MAP_API_KEY: Enables the OpenWeatherMap provider.
    WEATHER_API_KEY: Enables the WeatherAPI provider.
    OPEN_METEO_ENABLED: Enables the (keyless) Open-Meteo provider. Defaults to true.
    REQUEST_LOG_TABLE: DynamoDB table used for the per-IP request audit trail.
        The audit trail is disabled when unset.
    LOG_LEVEL: Logging level name. Defaults to INFO.
"""

import logging
import os
from typing import Mapping, Optional, Tuple

from open_meteo import OpenMeteoProvider
from open_weather_map import OpenWeatherMapProvider
from weather_api import WeatherApiProvider
from weather_service import WeatherProvider

logger = logging.getLogger(__name__)

TRUTHY_VALUES = ("1", "true", "yes", "on")


def is_enabled(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY_VALUES


def get_request_log_table_name(environ: Mapping[str, str] = os.environ) -> Optional[str]:
    return environ.get("REQUEST_LOG_TABLE") or None


def get_log_level(environ: Mapping[str, str] = os.environ) -> int:
    level_name = environ.get("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(environ: Mapping[str, str] = os.environ) -> None:
    """Applies LOG_LEVEL to the root logger, so every module logger follows it."""
    logging.getLogger().setLevel(get_log_level(environ))


def build_weather_providers(environ: Mapping[str, str] = os.environ) -> Tuple[WeatherProvider, ...]:
    """Builds the provider set from the environment.

        Providers are returned in a fixed order: OpenWeatherMap, WeatherAPI, Open-Meteo.
        A provider needing an access key is only included when its key is set.

        Args:
            environ: The environment mapping to read, os.environ by default.

        Returns:
            An immutable tuple of providers. May be empty.
    """
    providers = []

    open_weather_map_api_key = environ.get("OPEN_WEATHER_MAP_API_KEY")
    if open_weather_map_api_key:
        providers.append(OpenWeatherMapProvider(open_weather_map_api_key))

    weather_api_key = environ.get("WEATHER_API_KEY")
    if weather_api_key:
        providers.append(WeatherApiProvider(weather_api_key))

    if is_enabled(environ.get("OPEN_METEO_ENABLED"), default=True):
        providers.append(OpenMeteoProvider())

    if len(providers) == 0:
        logger.warning("No weather providers configured, every request will fail")

    return tuple(providers)
