"""AWS Lambda Handler and Request Orchestration Module.

This module acts as the entry point for the Weather Aggregator service. It
manages the end-to-end lifecycle of an HTTP request, including:
    1. Extracting the city (query parameter or /weather/<city> path) and client metadata (IP).
    2. Optionally tracking user access patterns and history in DynamoDB.
    3. Asking every configured weather provider for the city's temperature and averaging it.
    4. Mapping internal outcomes to standard HTTP status codes and responses.

Environment Requirements:
    - See config.py. When REQUEST_LOG_TABLE is set, that DynamoDB table must exist with 'ip' as the Partition Key.
"""
from __future__ import annotations

import functools
import json
import logging
import time
from urllib.parse import unquote
from typing import Optional, List, Tuple, TYPE_CHECKING

import boto3
from botocore.exceptions import ClientError

# makes AWS specific type hinting available in IDE, without bundling the library when deploying to the cloud
if TYPE_CHECKING:
    from aws_lambda_typing.context import Context

import config
import utils
from multi_weather_provider import MultiWeatherProvider

config.configure_logging()
logger = logging.getLogger(__name__)

WEATHER_PATH_PREFIX = "/weather/"

# built once per container, shared read-only by every invocation
multi_weather_provider = MultiWeatherProvider(config.build_weather_providers())


@functools.lru_cache(maxsize=1)
def get_ip_table():
    """Returns the DynamoDB audit trail table, or None when the audit trail is disabled."""
    table_name = config.get_request_log_table_name()
    if not table_name:
        return None
    return boto3.resource('dynamodb').Table(table_name)


def get_request_ip(event: dict) -> Optional[str]:
    """Extracts the source IP address from the Lambda Proxy integration event."""
    return (event.get('requestContext') or {}).get('http', {}).get('sourceIp', None)


def get_request_city_param(event: dict) -> Optional[str]:
    """Retrieves the city from the 'city' query string parameter, or from a /weather/<city> path."""
    city = (event.get('queryStringParameters') or {}).get('city', None)
    if city:
        return city.strip()

    raw_path = event.get('rawPath') or ""
    if raw_path.startswith(WEATHER_PATH_PREFIX):
        # rawPath arrives percent-encoded
        city = unquote(raw_path[len(WEATHER_PATH_PREFIX):]).strip("/ ")
        return city or None

    return None


def get_response(status_code: int, context: Context, content_type: str = "application/json", **kwargs) -> dict:
    """Constructs a standardized HTTP response for the Lambda Gateway.

        Args:
            status_code: HTTP status code to return.
            context: AWS Lambda context object (used for Request ID).
            content_type: MIME type for the response header.
            **kwargs: Arbitrary key-value pairs to include in the JSON body.

        Returns:
            A dictionary formatted as an AWS Lambda HTTP response.
    """
    return {
        'statusCode': status_code,
        'headers': {
            'Content-Type': content_type,
            "X-Request-ID": context.aws_request_id
        },
        'body': json.dumps({
            "requestId": context.aws_request_id,
        } | kwargs)  # add kwargs to body dict
    }


def get_ip_last_accessed_timestamp_from_db(ip_table, ip: str) -> Tuple[Optional[int], bool]:
    """Retrieves the most recent access timestamp for a specific IP from DynamoDB.

        Returns:
            A tuple containing (timestamp_epoch, success_flag).
    """
    try:
        # Only retrieve the 'LastAccessTimestamp' attribute
        response = ip_table.get_item(Key={'ip': ip},
                                     ProjectionExpression='LastAccessTimestamp')
        last_access_timestamp = response.get('Item', {}).get('LastAccessTimestamp', None)

        return (int(last_access_timestamp) if last_access_timestamp else None), True
    except ClientError as e:
        logger.error("Error retrieving LastAccessTimestamp: %s", e)
        return None, False


def update_ip_fields_in_db(ip_table, ip: str, last_access_timestamp: int, new_city: str) \
        -> Tuple[Optional[int], Optional[List[str]], bool]:
    """Updates the user's audit trail (last_access_timestamp and recent_cities) in DynamoDB.

        Atomically updates the 'LastAccessTimestamp' and prepends the requested
        city to the IP's 'recent_cities' list.

        Returns:
            A tuple containing (updated_timestamp, recent_city_list, success_flag).
    """
    try:
        response = ip_table.update_item(
            Key={
                'ip': ip
            },
            UpdateExpression="SET LastAccessTimestamp = :t,"
                             " recent_cities = list_append(:c, if_not_exists(recent_cities, :empty))",
            ExpressionAttributeValues={
                ':t': last_access_timestamp,
                ':c': [new_city],
                ':empty': []
            },
            ReturnValues="UPDATED_NEW"
        )
        response_attributes = response['Attributes']
        logger.debug("IP fields update successful: %s", response_attributes)
        return int(response_attributes['LastAccessTimestamp']), list(response_attributes['recent_cities']), True

    except ClientError as e:
        logger.error("LastAccessTimestamp update failed: %s", e)
        return None, None, False


def track_request(event: dict, city: str) -> Tuple[str, List[str], bool]:
    """Records the request in the audit trail, when enabled.

        Returns:
            A tuple containing (previous_last_access_message, previously_requested_cities, success_flag).
    """
    ip_table = get_ip_table()
    if ip_table is None:
        return "N / A", [], True

    request_ip = get_request_ip(event)
    if not request_ip:
        logger.error("Request has no source IP")
        return "N / A", [], False

    logger.info("Received request from IP: %s", request_ip)

    prev_last_access_timestamp, success = get_ip_last_accessed_timestamp_from_db(ip_table, request_ip)
    if not success:
        return "N / A", [], False

    _, recent_cities, success = update_ip_fields_in_db(ip_table, request_ip, int(time.time()), city)
    if not success:
        return "N / A", [], False

    prev_last_access_timestamp_message = utils.epoch_timestamp_to_iso_format(prev_last_access_timestamp) \
        if prev_last_access_timestamp else "N / A"

    # the first entry is the city just requested
    return prev_last_access_timestamp_message, utils.remove_list_dups(recent_cities[1:]), True


def handle_missing_parameter_city(context: Context) -> dict:
    """Returns a formatted HTTP 400 Bad Request response for a missing city."""
    return get_response(400, context, error="Bad Request",
                        message="The required query parameter 'city' is missing.",
                        details="Please include ?city=CityName in the request URL or request /weather/CityName.")


def handle_internal_server_error(context: Context):
    """Returns a formatted HTTP 500 Internal Server Error response for DB access failures."""
    return get_response(500, context, error="Internal Server Error",
                        message="An unexpected error occurred.",
                        details="Please try again later.")


def handle_weather_provider_error(context: Context, error: Exception) -> dict:
    """Returns a formatted HTTP 500 Internal Server Error response carrying the provider's error text."""
    return get_response(500, context, error="Internal Server Error", message=str(error))


def lambda_handler(event, context: Context) -> dict:
    """The primary execution entry point for the AWS Lambda function.

        Execution Flow:
            1. Parse and validate the city.
            2. Identify client IP and retrieve/update audit trail in DynamoDB, when enabled.
            3. Query every weather provider concurrently and average their readings.
            4. Return a JSON structured HTTP response with the temperature in Kelvin, Celsius
            and Fahrenheit, or an appropriate error status.
    """
    begin = time.monotonic()

    city = get_request_city_param(event)

    if not city:
        logger.info("Request missing 'city' parameter")
        return handle_missing_parameter_city(context)

    last_access_message, recent_cities, success = track_request(event, city)

    if not success:
        return handle_internal_server_error(context)

    try:
        temp_k = multi_weather_provider.temperature(city)
    except Exception as e:
        logger.error("Temperature fetching failed for %s: %r", city, e)
        return handle_weather_provider_error(context, e)

    return get_response(200, context, city=city, temp=temp_k,
                        temp_c=round(utils.kelvin_to_celsius(temp_k), 2),
                        temp_f=round(utils.kelvin_to_fahrenheit(temp_k), 2),
                        took=utils.format_duration(time.monotonic() - begin),
                        last_access=last_access_message,
                        recent_cities=recent_cities)
