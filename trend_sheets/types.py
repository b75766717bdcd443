"""Shared type aliases and typed dictionaries for the trend_sheets package."""

from typing import Any, Dict, List, TypedDict, Union

Json = Dict[str, Any]
"""A JSON-like dictionary with string keys and arbitrary values."""

Number = Union[int, float]


class Category(TypedDict):
    """A named category attached to a trending search."""

    name: str


class TrendRecord(TypedDict):
    """A single normalised trending topic, from either source."""

    query: str
    search_volume: int
    categories: List[Category]
    increase_percentage: Number


class TrendingNowRequestParams(TypedDict, total=False):
    """Parameters sent to SerpApi's Google Trends "trending now" engine."""

    engine: str
    geo: str
    hours: str
    hl: str
    only_active: str
    no_cache: str
    api_key: str


class SearchMetadata(TypedDict, total=False):
    """Metadata about the SerpApi search request."""

    id: str
    status: str
    created_at: str


class RawCategory(TypedDict, total=False):
    """A category object as returned by SerpApi."""

    id: int
    name: str


class TrendingNowEntry(TypedDict, total=False):
    """A single entry of the ``trending_searches`` list."""

    query: str
    search_volume: int
    increase_percentage: Number
    categories: List[RawCategory]
    active: bool


class TrendingNowResponse(TypedDict, total=False):
    """Top-level SerpApi trending-now response."""

    search_metadata: SearchMetadata
    trending_searches: List[TrendingNowEntry]
    error: str


class ValidationReport(TypedDict):
    """Report produced by validate_trend_records."""

    record_count: int
    schema_errors: List[str]
    anomalies: List[str]
    valid: bool
