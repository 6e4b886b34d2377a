from datetime import datetime, timezone
from typing import List, Any

KELVIN_OFFSET = 273.15


def celsius_to_kelvin(temp_c: float) -> float:
    """Converts a temperature in degrees Celsius to Kelvin."""
    return temp_c + KELVIN_OFFSET


def kelvin_to_celsius(temp_k: float) -> float:
    """Converts a temperature in Kelvin to degrees Celsius."""
    return temp_k - KELVIN_OFFSET


def kelvin_to_fahrenheit(temp_k: float) -> float:
    """Converts a temperature in Kelvin to degrees Fahrenheit."""
    return kelvin_to_celsius(temp_k) * 9 / 5 + 32


def epoch_timestamp_to_iso_format(timestamp_epoch: int) -> str:
    """Converts a Unix epoch timestamp to an ISO 8601 formatted string.

        The conversion ensures the resulting string is UTC-aligned and follows
        the standard ISO format (YYYY-MM-DDTHH:MM:SS+00:00).

        Args:
            timestamp_epoch: The integer Unix timestamp (seconds since the epoch).

        Returns:
            A string representing the date and time in ISO 8601 format.
    """
    return datetime.fromtimestamp(timestamp_epoch, tz=timezone.utc).isoformat()


def format_duration(num_seconds: float) -> str:
    """Formats an elapsed time for display, e.g. 0.25 -> '250.00ms' and 1.5 -> '1.500s'."""
    if num_seconds < 1:
        return f"{num_seconds * 1000:.2f}ms"
    return f"{num_seconds:.3f}s"


def remove_list_dups(lst: List[Any]) -> List[Any]:
    """
        Removes duplicate elements from a list while preserving order.

        This function leverages the property of Python dictionaries (3.7+)
        where keys are unique and maintain insertion order.

        Args:
            lst (List[Any]): The input list containing potential duplicates.

        Returns:
            List[Any]: A new list containing only unique elements from the
                original list, in the order they first appeared.

        Example:
            >>> remove_list_dups(["London", "Paris", "London"])
            ['London', 'Paris']
    """
    return list(dict.fromkeys(lst))
