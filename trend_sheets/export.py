"""Export and summarise trend records outside the spreadsheet."""

import json
import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from trend_sheets.sheets import format_categories
from trend_sheets.types import TrendRecord

logger = logging.getLogger(__name__)

DEFAULT_JSON_PATH: Path = Path("trends_filtered.json")

_SUMMARY_COLUMNS = ["query", "search_volume", "categories",
                    "increase_percentage"]


def trends_to_json(records: List[TrendRecord], indent: int = 2) -> str:
    """Serialise *records* as a JSON array, one object per record.

    Records are written exactly as held; numbers keep their int or float
    type.
    """
    return json.dumps(list(records), indent=indent, ensure_ascii=False)


def save_trends_json(
    records: List[TrendRecord],
    output_path: Union[str, Path] = DEFAULT_JSON_PATH,
) -> Path:
    """Write *records* to *output_path* as JSON.

    Missing parent directories are created.

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(trends_to_json(records), encoding="utf-8")
    logger.info("Filtered data saved to %s", output_path)
    return output_path


def summarize_trends(records: List[TrendRecord]) -> pd.DataFrame:
    """Rank *records* by search volume and log the table.

    Returns:
        A DataFrame indexed from 1 with ``query``, ``search_volume``,
        ``categories`` (names joined, ``"No categories"`` when empty) and
        ``increase_percentage`` columns.
    """
    logger.info("Total trending searches: %d", len(records))
    if not records:
        return pd.DataFrame(columns=_SUMMARY_COLUMNS)

    df = pd.DataFrame(records, columns=_SUMMARY_COLUMNS)
    df["categories"] = df["categories"].map(
        lambda cats: format_categories(cats) or "No categories"
    )
    df["increase_percentage"] = df["increase_percentage"].fillna(0)
    df = df.sort_values("search_volume", ascending=False, kind="stable")
    df.index = range(1, len(df) + 1)

    logger.info("Trending searches:\n%s", df.to_string())
    return df
