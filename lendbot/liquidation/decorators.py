"""
Decorators and API request utilities.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional

import requests

from .exceptions import DataSourceError


def retry_request(logger: logging.Logger, max_retries: int = 1, delay: int = 10) -> Callable:
    """
    Decorator to retry a function on RequestException.

    With the default of a single attempt the first failure is final.

    Args:
        logger: Logger instance for retry logging.
        max_retries: Maximum number of attempts.
        delay: Delay between retries in seconds.

    Returns:
        Decorated function with retry logic. Raises DataSourceError once all
        attempts are exhausted.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(1, max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except requests.RequestException as e:
                    logger.error("Error in API request (attempt %s/%s): %s", attempt, max_retries, e)

                    if attempt == max_retries:
                        logger.error("Failed after %s attempts.", max_retries)
                        raise DataSourceError(f"Request failed after {max_retries} attempts: {e}") from e

                    logger.info("Waiting %s seconds before retrying.", delay)
                    time.sleep(delay)

        return wrapper

    return decorator


def post_graphql_request(
    url: str, query: str, variables: Optional[Dict[str, Any]] = None, timeout: int = 30
) -> Dict[str, Any]:
    """
    POST a GraphQL query and return its `data` member.

    Args:
        url: GraphQL endpoint.
        query: Query document.
        variables: Query variables.
        timeout: Request timeout in seconds.

    Returns:
        The `data` object of the response.
    """
    response = requests.post(url, json={"query": query, "variables": variables or {}}, timeout=timeout)
    response.raise_for_status()
    payload = response.json()
    if payload.get("errors"):
        raise DataSourceError(f"Indexer returned errors: {payload['errors']}")
    if not isinstance(payload.get("data"), dict):
        raise DataSourceError("Indexer response has no data")
    return payload["data"]
