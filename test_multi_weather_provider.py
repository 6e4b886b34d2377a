"""Unit tests for concurrent multi-provider temperature aggregation.

This module validates the core business logic of the weather aggregator:
averaging readings from every provider, failing fast on the first provider
error, and never waiting on providers that are still running once a
failure has been observed.
"""

import threading
import time

import pytest

from multi_weather_provider import EmptyProviderSetError, MultiWeatherProvider, temperature


class StubProvider:
    """Returns a fixed reading after an optional delay, counting its calls."""
    def __init__(self, kelvin: float, delay_seconds: float = 0.0):
        self.kelvin = kelvin
        self.delay_seconds = delay_seconds
        self.calls = []
        self.finished = threading.Event()

    def temperature(self, city_name: str) -> float:
        self.calls.append(city_name)
        time.sleep(self.delay_seconds)
        self.finished.set()
        return self.kelvin


class FailingProvider:
    """Raises the given error after an optional delay."""
    def __init__(self, error: Exception, delay_seconds: float = 0.0):
        self.error = error
        self.delay_seconds = delay_seconds

    def temperature(self, city_name: str) -> float:
        time.sleep(self.delay_seconds)
        raise self.error


@pytest.mark.parametrize("delays", [
    (0.0, 0.0, 0.0),
    (0.05, 0.0, 0.02),
    (0.0, 0.05, 0.1),
])
def test_average_of_all_readings_regardless_of_completion_order(delays):
    """Verifies the mean of all readings is returned no matter in which order providers finish."""
    providers = [StubProvider(kelvin, delay) for kelvin, delay in zip((280.0, 290.0, 300.0), delays)]

    assert temperature(providers, "London") == pytest.approx(290.0)


def test_first_failure_is_returned_instead_of_partial_average():
    """Ensures one failing provider turns the whole result into that failure, never a partial average."""
    error = ConnectionError("unreachable")
    providers = [StubProvider(290.0), FailingProvider(error)]

    with pytest.raises(ConnectionError, match="unreachable") as excinfo:
        temperature(providers, "London")

    assert excinfo.value is error


def test_failure_does_not_wait_for_slow_providers():
    """Validates that a fast failure returns well before a slow provider finishes.

        The slow provider is not cancelled: it still runs to completion in the
        background and its reading is discarded.
    """
    slow_provider = StubProvider(290.0, delay_seconds=0.2)
    providers = [slow_provider, FailingProvider(ConnectionError("unreachable"))]

    begin = time.monotonic()
    with pytest.raises(ConnectionError):
        temperature(providers, "London")
    elapsed = time.monotonic() - begin

    assert elapsed < 0.15
    assert not slow_provider.finished.is_set()
    assert slow_provider.finished.wait(timeout=2)


def test_waits_for_every_provider_before_averaging():
    """Ensures fast readings are never returned early while a slow provider is still running."""
    slow_provider = StubProvider(300.0, delay_seconds=0.1)
    providers = [StubProvider(280.0), slow_provider]

    result = temperature(providers, "London")

    assert slow_provider.finished.is_set()
    assert result == pytest.approx(290.0)


def test_single_provider_reading_is_returned_unchanged():
    assert temperature([StubProvider(291.15)], "Tel Aviv") == 291.15


def test_single_provider_failure_is_returned_unchanged():
    error = ValueError("malformed response")

    with pytest.raises(ValueError) as excinfo:
        temperature([FailingProvider(error)], "Tel Aviv")

    assert excinfo.value is error


def test_empty_provider_set_raises():
    """An empty provider set is an explicit error rather than a division by zero."""
    with pytest.raises(EmptyProviderSetError):
        temperature([], "London")


def test_city_is_passed_unchanged_to_every_provider():
    providers = [StubProvider(280.0), StubProvider(300.0)]

    temperature(providers, "  são paulo,BR ")

    assert [provider.calls for provider in providers] == [["  são paulo,BR "], ["  são paulo,BR "]]


def test_repeated_invocations_are_independent():
    """Validates that consecutive calls query every provider again and share no state."""
    providers = [StubProvider(280.0), StubProvider(300.0)]
    multi_weather_provider = MultiWeatherProvider(providers)

    first = multi_weather_provider.temperature("London")
    second = multi_weather_provider.temperature("London")

    assert first == second == pytest.approx(290.0)
    assert [len(provider.calls) for provider in providers] == [2, 2]


def test_provider_set_is_immutable():
    providers = [StubProvider(280.0)]
    multi_weather_provider = MultiWeatherProvider(providers)

    providers.append(FailingProvider(ConnectionError("unreachable")))

    assert len(multi_weather_provider) == 1
    assert multi_weather_provider.temperature("London") == 280.0


def test_multi_weather_provider_can_be_nested():
    """A MultiWeatherProvider is itself a provider, so aggregates can be combined."""
    inner = MultiWeatherProvider([StubProvider(280.0), StubProvider(300.0)])

    assert temperature([inner, StubProvider(310.0)], "London") == pytest.approx(300.0)
