"""Validate trend records for schema consistency and anomalies."""

import logging
from typing import Dict, List

import pandas as pd

from trend_sheets.types import TrendRecord, ValidationReport

logger = logging.getLogger(__name__)

_NUMERIC_FIELDS: frozenset = frozenset({"search_volume", "increase_percentage"})
_LIST_FIELDS: frozenset = frozenset({"categories"})

EXPECTED_SCHEMA: Dict[str, str] = {
    field: ("numeric" if field in _NUMERIC_FIELDS
            else "list" if field in _LIST_FIELDS
            else "string")
    for field in TrendRecord.__annotations__
}


def validate_trend_records(records: List[TrendRecord]) -> ValidationReport:
    """Validate trend records and log any anomalies found.

    Runs two categories of checks against the supplied records:

    1. **Schema consistency** -- expected columns present, no extras,
       numeric columns hold numbers.
    2. **Anomaly detection** -- empty queries, zero ``search_volume``
       and duplicate queries.  Duplicates are a soft warning and do not
       invalidate the report.

    Args:
        records: Records produced by either trend source.

    Returns:
        A report dict with keys ``record_count`` (int),
        ``schema_errors`` (list[str]), ``anomalies`` (list[str]) and
        ``valid`` (bool).
    """
    report: ValidationReport = {
        "record_count": len(records),
        "schema_errors": [],
        "anomalies": [],
        "valid": True,
    }

    if not records:
        logger.warning("Validation: no records to validate.")
        report["valid"] = False
        return report

    df = pd.DataFrame(records)

    _check_schema(df, report)
    _check_empty_queries(df, report)
    _check_zero_volumes(df, report)
    _check_duplicate_queries(df, report)

    if report["valid"]:
        logger.info("Validation passed, %d records.", len(df))
    else:
        total = len(report["schema_errors"]) + len(report["anomalies"])
        logger.warning("Validation found %d issue(s). "
                       "See report for details.", total)

    return report


def _check_schema(df: pd.DataFrame, report: ValidationReport):
    """Verify column presence and numeric dtypes.

    Args:
        df: DataFrame built from the trend records.
        report: Mutable validation report dict to update in-place.
    """
    expected_cols = set(EXPECTED_SCHEMA)
    actual_cols = set(df.columns)

    missing = expected_cols - actual_cols
    extra = actual_cols - expected_cols

    if missing:
        _fail(report, "schema_errors", f"Missing columns: {sorted(missing)}")
    if extra:
        _fail(report, "schema_errors", f"Unexpected columns: {sorted(extra)}")

    for col, expected_kind in EXPECTED_SCHEMA.items():
        if col not in actual_cols or expected_kind != "numeric":
            continue
        if not pd.api.types.is_numeric_dtype(df[col]):
            _fail(report, "schema_errors",
                  f"Column '{col}' expected numeric, got {df[col].dtype}")


def _check_empty_queries(df: pd.DataFrame, report: ValidationReport):
    if "query" not in df.columns:
        return
    empty = (df["query"].isna()
             | (df["query"].astype(str).str.strip() == "")).sum()
    if empty:
        _fail(report, "anomalies", f"{empty} record(s) with empty query")


def _check_zero_volumes(df: pd.DataFrame, report: ValidationReport):
    if ("search_volume" not in df.columns
            or not pd.api.types.is_numeric_dtype(df["search_volume"])):
        return
    zero_count = (df["search_volume"].fillna(0) <= 0).sum()
    if zero_count:
        _fail(report, "anomalies",
              f"{zero_count} record(s) with zero search_volume")


def _check_duplicate_queries(df: pd.DataFrame, report: ValidationReport):
    """Flag repeated queries without invalidating the report."""
    if "query" not in df.columns:
        return
    dupes = df["query"].astype(str).str.lower().duplicated().sum()
    if dupes:
        msg = f"{dupes} duplicate query value(s)"
        logger.warning("Anomaly: %s", msg)
        report["anomalies"].append(msg)


def _fail(report: ValidationReport, section: str, msg: str):
    logger.warning("%s: %s", section, msg)
    report[section].append(msg)
    report["valid"] = False
