"""Scrape per-country tweet volumes from getdaytrends.com."""

import logging
from typing import List, Optional

import requests
from bs4 import BeautifulSoup
from requests.exceptions import ConnectionError, Timeout
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from trend_sheets.countries import normalize_twitter_slug
from trend_sheets.errors import TrendFetchError
from trend_sheets.normalize import is_valid_record
from trend_sheets.parsing import parse_volume
from trend_sheets.types import TrendRecord

logger = logging.getLogger(__name__)

TRENDS_URL_TEMPLATE = "https://getdaytrends.com/{slug}/top/tweeted/day/"

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
}

DEFAULT_TIMEOUT = 30


def build_trends_url(country: str) -> str:
    """Return the top-tweeted-today page URL for *country*."""
    return TRENDS_URL_TEMPLATE.format(slug=normalize_twitter_slug(country))


def parse_trends_table(html: str) -> List[TrendRecord]:
    """Extract trend records from a getdaytrends table page.

    Each ``table tbody tr`` row is expected to hold the trending term in
    its first cell and the tweet count (``"120K Tweets"``) in its second.
    Rows with fewer than two cells, an empty term, or no parsable volume
    are skipped.

    Args:
        html: Page markup.

    Returns:
        Records in page order, with empty ``categories``.
    """
    soup = BeautifulSoup(html, "html.parser")
    records: List[TrendRecord] = []

    for row in soup.select("table tbody tr"):
        cells = row.find_all("td")
        if len(cells) < 2:
            continue

        record: TrendRecord = {
            "query": cells[0].get_text(" ", strip=True),
            "search_volume": parse_volume(cells[1].get_text(" ", strip=True)),
            "categories": [],
            "increase_percentage": 0,
        }
        if is_valid_record(record):
            records.append(record)

    return records


@retry(
    retry=retry_if_exception_type((ConnectionError, Timeout)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)
def _get_page(session: requests.Session, url: str,
              timeout: float) -> requests.Response:
    return session.get(url, headers=HEADERS, timeout=timeout)


def fetch_trending_tweets(
    country: str = "india",
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[TrendRecord]:
    """Fetch today's most-tweeted trends for *country*.

    Args:
        country: Free-form country name (``"United States"``, ``"uk"``).
        session: HTTP session to use; a fresh one is created when omitted.
        timeout: Per-request timeout in seconds.

    Returns:
        Valid trend records in page order.

    Raises:
        TrendFetchError: If the page cannot be retrieved or answers with
            a non-2xx status.
    """
    url = build_trends_url(country)
    logger.info("Fetching trends from: %s", url)

    owns_session = session is None
    session = session or requests.Session()
    try:
        response = _get_page(session, url, timeout)
    except requests.RequestException as exc:
        raise TrendFetchError(
            f"Failed to fetch page for {country} ({url}): {exc}"
        ) from exc
    finally:
        if owns_session:
            session.close()

    if not response.ok:
        raise TrendFetchError(
            f"Failed to fetch page for {country} ({url}): "
            f"{response.status_code}"
        )

    records = parse_trends_table(response.text)
    logger.info("Parsed %d tweet trends for '%s'", len(records), country)
    return records
