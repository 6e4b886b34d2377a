"""Multi-Provider Temperature Aggregation Module.

This module provides the core business logic for the Weather Aggregator. It
fans a single city query out to every configured provider concurrently,
collects the readings in the order they complete and reduces them to
their arithmetic mean.

Failure policy:
    The first failure observed in completion order is raised as-is. Providers
    still running at that point are not cancelled; they finish in the
    background and their results are dropped.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from weather_service import WeatherProvider, WeatherServiceError


class EmptyProviderSetError(WeatherServiceError):
    """Raised when a temperature is requested from zero providers."""
    def __init__(self):
        super().__init__("no weather providers configured")

    def __repr__(self):
        """Returns a string representation of the EmptyProviderSetError instance."""
        return f"{self.__class__.__name__}()"


def temperature(providers: Sequence[WeatherProvider], city_name: str) -> float:
    """Fetches the average temperature for a city from all providers concurrently.

        Every provider gets its own worker thread. Readings are summed as they
        arrive; the average is returned only once all of them succeeded.

        Args:
            providers: The provider set to query. Must not be empty.
            city_name: Passed unchanged to every provider.

        Returns:
            The mean of all provider readings, in Kelvin.

        Raises:
            EmptyProviderSetError: If providers is empty.
            Exception: Whatever the first failing provider raised, unchanged.
    """
    if len(providers) == 0:
        raise EmptyProviderSetError()

    executor = ThreadPoolExecutor(max_workers=len(providers), thread_name_prefix="weather-provider")
    try:
        futures = [executor.submit(provider.temperature, city_name) for provider in providers]

        sum_kelvin = 0.0
        for future in as_completed(futures):
            # re-raises the provider's own exception
            sum_kelvin += future.result()

        return sum_kelvin / len(providers)
    finally:
        # never join: providers still running after a failure finish on their own
        executor.shutdown(wait=False)


class MultiWeatherProvider:
    """A fixed set of providers that is itself a WeatherProvider.

        Attributes:
            providers: The immutable, ordered provider set.
    """
    def __init__(self, providers: Sequence[WeatherProvider]):
        self.providers = tuple(providers)

    def __repr__(self):
        """Returns a string representation of the MultiWeatherProvider instance."""
        return f"{self.__class__.__name__}(providers={self.providers!r})"

    def __len__(self):
        return len(self.providers)

    def temperature(self, city_name: str) -> float:
        return temperature(self.providers, city_name)
