"""Fetch Google "trending now" searches through SerpApi."""

import logging
from typing import List, Optional

from requests.exceptions import RequestException

from trend_sheets.config import Settings, load_settings, require
from trend_sheets.countries import normalize_geo_code
from trend_sheets.errors import TrendFetchError
from trend_sheets.normalize import (
    filter_valid_records,
    normalize_trending_now_response,
)
from trend_sheets.serpapi_retry import fetch_with_retry
from trend_sheets.types import (
    TrendingNowRequestParams,
    TrendingNowResponse,
    TrendRecord,
)

logger = logging.getLogger(__name__)

TRENDING_NOW_ENGINE = "google_trends_trending_now"


def build_trending_now_params(
    api_key: str,
    geo: str = "IN",
    hours: int = 24,
    hl: str = "en",
    only_active: bool = True,
    no_cache: bool = True,
) -> TrendingNowRequestParams:
    """Assemble the SerpApi request parameters.

    Args:
        api_key: SerpApi key.
        geo: Two-letter geo code (see
            :func:`~trend_sheets.countries.normalize_geo_code`).
        hours: Lookback window in hours.
        hl: Interface language.
        only_active: Return only searches that are still trending.
        no_cache: Ask SerpApi to bypass its result cache.

    Returns:
        Parameters ready for :func:`~trend_sheets.serpapi_retry.fetch_with_retry`.
    """
    return {
        "engine": TRENDING_NOW_ENGINE,
        "geo": geo,
        "hours": str(hours),
        "hl": hl,
        "only_active": _flag(only_active),
        "no_cache": _flag(no_cache),
        "api_key": api_key,
    }


def _flag(value: bool) -> str:
    return "true" if value else "false"


def fetch_google_trends(
    country: str = "IN",
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
    **options,
) -> List[TrendRecord]:
    """Fetch and normalise the trending searches for *country*.

    Args:
        country: Country name or geo code; normalised with
            :func:`~trend_sheets.countries.normalize_geo_code`.
        api_key: SerpApi key.  Resolved from *settings* (or
            :func:`~trend_sheets.config.load_settings`) when omitted.
        settings: Pre-loaded settings.
        **options: Extra keyword arguments for
            :func:`build_trending_now_params` (``hours``, ``hl``, ...).

    Returns:
        Valid trend records in the order SerpApi returned them.

    Raises:
        MissingCredentialError: If no SerpApi key is configured.
        TrendFetchError: On API errors (see
            :mod:`~trend_sheets.serpapi_retry`) or network failures that
            outlast the retries.
    """
    if api_key is None:
        api_key = require(settings or load_settings(), "serpapi_key")

    geo = normalize_geo_code(country)
    params = build_trending_now_params(api_key, geo=geo, **options)

    try:
        response: TrendingNowResponse = fetch_with_retry(params)
    except RequestException as exc:
        raise TrendFetchError(
            f"Failed to fetch Google trends for {country} (geo {geo}): {exc}"
        ) from exc
    records = filter_valid_records(normalize_trending_now_response(response))
    logger.info("Retrieved %d Google trends for geo '%s'", len(records), geo)
    return records
