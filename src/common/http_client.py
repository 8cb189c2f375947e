"""HTTP access for the release catalog and the release notes page.

Responses come back as ``(status_code, headers, body)`` tuples. Transport
failures are retried up to ``Constants.HTTP_RETRY_MAX`` times and reported as
status 0 instead of raising. Successful (2xx) responses are kept in a small
TTL cache keyed on URL and query parameters.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from constants import Constants

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, str], str]

# cache key -> (response, stored at)
_http_cache: Dict[str, Tuple[Response, float]] = {}


def clear_cache() -> None:
    """Drop every cached response."""
    _http_cache.clear()


def _cache_key(url: str, params: Optional[Any]) -> str:
    if isinstance(params, dict):
        params = sorted(params.items())
    return f"GET {url} {params or ''}"


def _cached(key: str) -> Optional[Response]:
    entry = _http_cache.get(key)
    if entry is None:
        return None
    response, stored_at = entry
    if time.time() - stored_at >= Constants.HTTP_CACHE_TTL_SEC:
        del _http_cache[key]
        return None
    return response


def _trace(message: str, target: str, **fields: Any) -> None:
    if is_debug_enabled(logger):
        logger.debug(message, extra=extra_context(component="http_client", target=target, **fields))


def robust_get(
    url: str,
    *,
    params: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Response:
    """GET ``url`` with a timeout and retries on transport errors.

    Returns:
        Tuple of (status_code, headers_dict, body). A status of 0 means every
        attempt failed at the transport level; the body then holds the reason.
    """
    key = _cache_key(url, params)
    target = safe_url(url)

    cached = _cached(key)
    if cached is not None:
        _trace("HTTP cache hit", target, event="cache_hit", action="GET")
        return cached

    reason = outcome = None
    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        _trace("HTTP request", target, event="http_request", action="GET", attempt=attempt)
        try:
            with Timer() as timer:
                response = requests.get(
                    url, params=params, headers=headers, timeout=Constants.REQUEST_TIMEOUT, **kwargs
                )
        except requests.Timeout:
            reason = outcome = "timeout"
        except requests.RequestException as exc:
            reason, outcome = str(exc), "request_exception"
        else:
            result = (response.status_code, dict(response.headers), response.text)
            if 200 <= response.status_code < 300:
                _http_cache[key] = (result, time.time())
            _trace(
                "HTTP response", target, event="http_response", action="GET",
                status_code=response.status_code, duration_ms=timer.duration_ms(),
            )
            return result
        _trace("HTTP request failed", target, event="http_exception", action="GET",
               outcome=outcome, attempt=attempt)

    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {reason}"


def get_json(
    url: str,
    *,
    params: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Like :func:`robust_get` but decodes a 200 body as JSON.

    The third element is None for any other status, an empty body or a body
    that is not valid JSON.
    """
    status_code, response_headers, text = robust_get(url, params=params, headers=headers, **kwargs)
    if status_code != 200 or not text:
        return status_code, response_headers, None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        _trace("JSON decode error", safe_url(url), event="parse", action="get_json",
               outcome="json_decode_error", position=exc.pos)
        return status_code, response_headers, None
    return status_code, response_headers, data
