"""Reshape raw SerpApi trending-now responses into uniform records."""

import logging
from typing import Iterable, List, Optional

from trend_sheets.types import (
    Category,
    TrendingNowEntry,
    TrendingNowResponse,
    TrendRecord,
)

logger = logging.getLogger(__name__)


def normalize_trending_now_response(
    response: TrendingNowResponse,
) -> List[TrendRecord]:
    """Flatten a raw SerpApi trending-now response into trend records.

    Args:
        response: Raw JSON response dict from SerpApi's
            ``google_trends_trending_now`` engine.

    Returns:
        One record per ``trending_searches`` entry, in response order.
        Returns an empty list if ``trending_searches`` is missing or
        empty.  Invalid records are *not* removed here; see
        :func:`filter_valid_records`.
    """
    entries = response.get("trending_searches")
    if not entries:
        return []

    return [_to_record(entry) for entry in entries if entry]


def _to_record(entry: TrendingNowEntry) -> TrendRecord:
    """Build a record from one entry, defaulting absent fields."""
    categories: List[Category] = [
        {"name": cat["name"]}
        for cat in entry.get("categories") or []
        if cat and cat.get("name")
    ]
    return {
        "query": entry.get("query") or "",
        "search_volume": int(entry.get("search_volume") or 0),
        "categories": categories,
        "increase_percentage": entry.get("increase_percentage") or 0,
    }


def is_valid_record(record: TrendRecord) -> bool:
    """Return True if *record* has a non-blank query and a non-zero volume."""
    query = record.get("query") or ""
    return bool(query.strip()) and (record.get("search_volume") or 0) > 0


def filter_valid_records(records: Iterable[TrendRecord]) -> List[TrendRecord]:
    """Drop invalid records, preserving the order of the rest.

    Args:
        records: Records from either trend source.

    Returns:
        The records for which :func:`is_valid_record` holds.
    """
    records = list(records)
    kept = [record for record in records if is_valid_record(record)]
    dropped = len(records) - len(kept)
    if dropped:
        logger.debug("Dropped %d record(s) with empty query or zero volume",
                     dropped)
    return kept


def find_by_query(records: Iterable[TrendRecord],
                  query: str) -> Optional[TrendRecord]:
    """Return the first record whose query equals *query*, ignoring case."""
    wanted = query.lower()
    for record in records:
        if record["query"].lower() == wanted:
            return record
    return None


def filter_by_category(records: Iterable[TrendRecord],
                       category_name: str) -> List[TrendRecord]:
    """Return records with a category whose name contains *category_name*.

    Matching is a case-insensitive substring test, so ``"sport"`` matches
    ``"Sports"``.
    """
    needle = category_name.lower()
    return [
        record for record in records
        if any(needle in cat["name"].lower() for cat in record["categories"])
    ]
