"""
HTTP transport shared by the session builder and ticket operations.

Every request is recorded in the monitoring counters under the category
given by the caller.
"""

import json
import logging
import time
from typing import Any, Dict, Mapping, Optional

import requests

from zendesk_client.config import DEFAULT_TIMEOUT
from zendesk_client.monitoring import track_api_call

logger = logging.getLogger(__name__)

_timeout = DEFAULT_TIMEOUT


def set_default_timeout(seconds: float) -> None:
    """Set the timeout applied to every request, in seconds."""
    global _timeout
    if seconds <= 0:
        raise ValueError("Timeout must be positive")
    _timeout = seconds


def get_default_timeout() -> float:
    return _timeout


def is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def send_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    payload: Optional[Dict[str, Any]] = None,
    category: str = "other",
) -> requests.Response:
    """
    Issue a single HTTP request and track it.

    Args:
        method: HTTP method (GET, POST, PUT)
        url: Absolute URL
        headers: Request headers, including Authorization
        payload: Optional JSON body
        category: Monitoring category for the call

    Returns:
        requests.Response: The raw response; status is not checked here

    Raises:
        requests.RequestException: On transport failure
    """
    data = json.dumps(payload) if payload is not None else None

    logger.debug("%s %s", method, url)
    start_time = time.time()
    failed = True
    try:
        response = requests.request(
            method,
            url,
            headers=dict(headers),
            data=data,
            timeout=_timeout,
        )
        failed = not is_success(response)
        return response
    finally:
        track_api_call(category, time.time() - start_time, failed=failed)


def decode_response(response: requests.Response) -> Any:
    """Decode a JSON response body; an empty body decodes to an empty dict."""
    if not response.content:
        return {}
    return response.json()
