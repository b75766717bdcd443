"""Run both trend collectors and append their results to the sheet."""

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from trend_sheets import setup_logging
from trend_sheets.config import Settings, load_settings, require
from trend_sheets.export import save_trends_json, summarize_trends
from trend_sheets.google_trends import fetch_google_trends
from trend_sheets.scraper import fetch_trending_tweets
from trend_sheets.sheets import SheetWriter
from trend_sheets.types import TrendRecord
from trend_sheets.validation import validate_trend_records

logger = logging.getLogger(__name__)

GOOGLE_SHEET_NAME = "Sheet1"


def build_writer(settings: Settings,
                 sheet_name: str = GOOGLE_SHEET_NAME) -> SheetWriter:
    """Create a :class:`SheetWriter` from resolved settings.

    Raises:
        MissingCredentialError: If no spreadsheet ID is configured.
    """
    return SheetWriter(
        require(settings, "spreadsheet_id"),
        settings.credentials_path,
        sheet_name=sheet_name,
    )


def collect_google_trends(
    country: str,
    writer: SheetWriter,
    settings: Settings,
    json_out: Optional[Union[str, Path]] = None,
) -> int:
    """Fetch Google trending searches and append them to the default tab.

    The ranked summary is logged, and the records are also written to
    *json_out* when given.

    Returns:
        Rows written.
    """
    records: List[TrendRecord] = fetch_google_trends(country,
                                                     settings=settings)
    validate_trend_records(records)
    summarize_trends(records)
    if json_out is not None:
        save_trends_json(records, json_out)
    return writer.save_trends(records)


def collect_twitter_trends(country: str, writer: SheetWriter) -> int:
    """Scrape tweet trends and append them to the Twitter tab.

    Returns:
        Rows written.
    """
    records: List[TrendRecord] = fetch_trending_tweets(country)
    validate_trend_records(records)
    return writer.save_twitter_trends(records)


def run(country: str = "india",
        settings: Optional[Settings] = None,
        writer: Optional[SheetWriter] = None,
        json_out: Optional[Union[str, Path]] = None) -> Dict[str, int]:
    """Run the Google and Twitter flows one after the other.

    A failure in one flow is logged and does not prevent the other from
    running.

    Args:
        country: Country name used by both flows.
        settings: Resolved settings; loaded when omitted.
        writer: Sheet writer; built from *settings* when omitted.
        json_out: Optional path for a JSON copy of the Google trends.

    Returns:
        Rows written per flow, keyed ``"google"`` and ``"twitter"``.

    Raises:
        MissingCredentialError: If no spreadsheet ID is configured and no
            *writer* was given.
    """
    settings = settings if settings is not None else load_settings()
    writer = writer or build_writer(settings)

    flows = {
        "google": lambda: collect_google_trends(country, writer, settings,
                                                json_out=json_out),
        "twitter": lambda: collect_twitter_trends(country, writer),
    }

    written: Dict[str, int] = {}
    for name, flow in flows.items():
        logger.info("--- Processing %s trends for %s ---", name, country)
        try:
            written[name] = flow()
        except Exception:
            logger.exception("%s trends flow failed", name.capitalize())
            written[name] = 0

    logger.info("Collection finished: %s", written)
    return written


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point for ``trend-sheets-collect``."""
    parser = argparse.ArgumentParser(
        description="Append today's Google and Twitter trends to a sheet.",
    )
    parser.add_argument("--country", default="india")
    parser.add_argument("--credentials", default=None,
                        help="credentials JSON (default: credentials.json)")
    parser.add_argument("--json-out", default=None,
                        help="also save the Google trends to this JSON file")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    written = run(args.country, settings=load_settings(args.credentials),
                  json_out=args.json_out)
    return 0 if any(written.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
