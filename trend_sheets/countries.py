"""Map free-form country names onto the tokens each trend source expects."""

import re
from typing import Dict

_WHITESPACE = re.compile(r"\s+")

_TWITTER_SLUG_ALIASES: Dict[str, str] = {
    "usa": "united-states",
    "us": "united-states",
    "uk": "united-kingdom",
}

COUNTRY_CODE_MAP: Dict[str, str] = {
    "india": "IN",
    "usa": "US",
    "us": "US",
    "united states": "US",
    "uk": "GB",
    "united kingdom": "GB",
    "great britain": "GB",
    "algeria": "DZ",
    "canada": "CA",
    "australia": "AU",
    "germany": "DE",
    "france": "FR",
    "japan": "JP",
    "brazil": "BR",
    "mexico": "MX",
    "spain": "ES",
    "italy": "IT",
    "nigeria": "NG",
    "indonesia": "ID",
}
"""Lower-cased country names accepted by :func:`normalize_geo_code`."""


def normalize_twitter_slug(country: str) -> str:
    """Return the getdaytrends.com URL slug for *country*.

    ``"United States"`` becomes ``"united-states"``; the abbreviations
    ``usa``/``us`` and ``uk`` expand to their full slugs.
    """
    slug = _WHITESPACE.sub("-", (country or "").strip().lower())
    return _TWITTER_SLUG_ALIASES.get(slug, slug)


def normalize_geo_code(country: str) -> str:
    """Return the SerpApi ``geo`` code for *country*.

    Known names map through :data:`COUNTRY_CODE_MAP`.  An unmapped
    two-letter input is taken to be a code already and is upper-cased;
    any other unmapped input comes back lower-cased and trimmed.

    Args:
        country: Country name or code, in any case and with any padding.

    Returns:
        A geo code such as ``"IN"``, or the normalised input.
    """
    normalized = _WHITESPACE.sub(" ", (country or "").strip().lower())
    if normalized in COUNTRY_CODE_MAP:
        return COUNTRY_CODE_MAP[normalized]
    if len(normalized) == 2 and normalized.isalpha():
        return normalized.upper()
    return normalized
