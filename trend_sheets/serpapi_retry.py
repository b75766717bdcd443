"""Retry wrapper for SerpApi trending-now calls with exponential backoff.

SerpApi reports most failures inside the response body rather than as HTTP
errors.  :func:`check_response_for_errors` sorts those into transient and
permanent :class:`~trend_sheets.errors.TrendFetchError` subclasses, and
:func:`fetch_with_retry` retries the transient ones along with network
blips, so one flaky call doesn't fail the whole collection run.
"""

import logging
import random

from requests.exceptions import ChunkedEncodingError, ConnectionError, Timeout
from serpapi import GoogleSearch
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from trend_sheets.errors import TrendFetchError
from trend_sheets.types import TrendingNowRequestParams, TrendingNowResponse

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 5


class SerpApiTransientError(TrendFetchError):
    """Retryable API error (429 rate-limit, 5xx server error)."""


class SerpApiPermanentError(TrendFetchError):
    """Non-retryable API error (bad API key, invalid params)."""


_TRANSIENT_KEYWORDS = (
    "rate limit",
    "too many requests",
    "429",
    "500",
    "502",
    "503",
    "504",
    "server error",
    "internal error",
    "temporarily unavailable",
    "timeout",
    "timed out",
)


def check_response_for_errors(results: TrendingNowResponse) -> None:
    """Raise if a SerpApi response carries an ``"error"`` entry.

    Args:
        results: The raw response dictionary from SerpApi.

    Raises:
        SerpApiTransientError: If the error is retryable (429, 5xx,
            timeouts).
        SerpApiPermanentError: Otherwise (bad key, invalid params,
            exhausted account).
    """
    error = results.get("error")
    if error is None:
        return

    message = f"SerpApi error: {error}"
    if any(kw in str(error).lower() for kw in _TRANSIENT_KEYWORDS):
        raise SerpApiTransientError(message)
    raise SerpApiPermanentError(message)


def add_jitter(retry_state):
    """Exponential backoff (2s..60s, x2) plus 0-2s random jitter."""
    exp_wait = wait_exponential(multiplier=2, min=2, max=60)
    return exp_wait(retry_state) + random.uniform(0, 2)


@retry(
    retry=retry_if_exception_type(
        (ConnectionError, Timeout, ChunkedEncodingError, SerpApiTransientError)
    ),
    stop=stop_after_attempt(MAX_ATTEMPTS),
    wait=add_jitter,
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def fetch_with_retry(params: TrendingNowRequestParams) -> TrendingNowResponse:
    """Call SerpApi, retrying transient failures up to :data:`MAX_ATTEMPTS`.

    Args:
        params: Parameters forwarded to ``GoogleSearch(params).get_dict()``.

    Returns:
        The raw, error-free response dictionary.

    Raises:
        SerpApiPermanentError: Immediately on non-retryable errors.
        SerpApiTransientError: After all retry attempts are exhausted.
        requests.RequestException: Network failures after all retry
            attempts are exhausted.
    """
    logger.info("SerpApi %s request for geo '%s'",
                params.get("engine", "<unknown>"), params.get("geo", ""))

    results = GoogleSearch(params).get_dict()
    check_response_for_errors(results)
    return results
