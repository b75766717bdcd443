"""Append trend records to a Google Sheet."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from gspread.exceptions import GSpreadException, WorksheetNotFound

from trend_sheets.timestamps import batch_timestamp
from trend_sheets.types import Category, TrendRecord

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

HEADERS: List[str] = ["Date", "Query", "Search Volume", "Categories",
                      "Percentage"]

DEFAULT_SHEET_NAME = "TrendsData"
TWITTER_SHEET_NAME = "Sheet2"

# Failures that are logged instead of aborting the run.
_SHEET_ERRORS = (GSpreadException, GoogleAuthError, OSError, ValueError)


def format_categories(categories: Sequence[Union[Category, str]]) -> str:
    """Render category names joined by ``", "``; empty renders as ``""``."""
    names = []
    for cat in categories or []:
        name = cat.get("name", "") if isinstance(cat, dict) else str(cat)
        if name:
            names.append(name)
    return ", ".join(names)


def shape_row(record: TrendRecord, timestamp: str) -> list:
    """Flatten *record* into the five sheet columns of :data:`HEADERS`."""
    return [
        timestamp,
        record["query"],
        record["search_volume"],
        format_categories(record.get("categories", [])),
        record.get("increase_percentage") or 0,
    ]


def shape_rows(records: Iterable[TrendRecord], timestamp: str) -> List[list]:
    """Shape every record with the same batch *timestamp*."""
    return [shape_row(record, timestamp) for record in records]


class SheetWriter:
    """Append trend records to tabs of one spreadsheet.

    The gspread client is created lazily from the service-account file so
    that constructing a writer never touches the network.

    Args:
        spreadsheet_id: Key of the target spreadsheet.
        credentials_path: Service-account JSON file.
        sheet_name: Tab used when :meth:`save_trends` is given none.
        client: Pre-authorised gspread client, mainly for tests.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_path: Union[str, Path],
        sheet_name: str = DEFAULT_SHEET_NAME,
        client: Optional[gspread.Client] = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        self.credentials_path = Path(credentials_path)
        self.sheet_name = sheet_name
        self._client = client
        self._spreadsheet = None

    def _get_spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            if self._client is None:
                creds = Credentials.from_service_account_file(
                    str(self.credentials_path), scopes=SCOPES,
                )
                self._client = gspread.authorize(creds)
            self._spreadsheet = self._client.open_by_key(self.spreadsheet_id)
        return self._spreadsheet

    def _get_worksheet(self, sheet_name: str) -> gspread.Worksheet:
        spreadsheet = self._get_spreadsheet()
        try:
            return spreadsheet.worksheet(sheet_name)
        except WorksheetNotFound:
            logger.info("Worksheet '%s' not found, creating it", sheet_name)
            return spreadsheet.add_worksheet(
                title=sheet_name, rows=1000, cols=len(HEADERS),
            )

    def ensure_headers(self, sheet_name: Optional[str] = None) -> None:
        """Write :data:`HEADERS` into row 1 if it is empty.

        Errors are logged, not raised; :meth:`save_trends` still attempts
        the append afterwards.
        """
        sheet_name = sheet_name or self.sheet_name
        try:
            worksheet = self._get_worksheet(sheet_name)
            if not worksheet.row_values(1):
                worksheet.update(
                    values=[HEADERS],
                    range_name="A1",
                    value_input_option="USER_ENTERED",
                )
                logger.info("Headers added to %s.", sheet_name)
        except _SHEET_ERRORS as exc:
            logger.error("Error checking headers: %s. Ensure sheet '%s' "
                         "is accessible.", exc, sheet_name)

    def save_trends(
        self,
        records: Sequence[TrendRecord],
        sheet_name: Optional[str] = None,
    ) -> int:
        """Append *records* to *sheet_name*, stamped with one timestamp.

        A failed append is logged and swallowed so that a save problem
        never crashes the collection run.

        Args:
            records: Records to append.
            sheet_name: Target tab; defaults to the writer's
                ``sheet_name``.

        Returns:
            The number of rows appended (``0`` on empty input or failure).
        """
        sheet_name = sheet_name or self.sheet_name
        if not records:
            logger.info("No data to save to %s.", sheet_name)
            return 0

        self.ensure_headers(sheet_name)

        timestamp = batch_timestamp()
        rows = shape_rows(records, timestamp)

        try:
            worksheet = self._get_worksheet(sheet_name)
            worksheet.append_rows(
                rows,
                value_input_option="USER_ENTERED",
                insert_data_option="INSERT_ROWS",
                table_range="A2",
            )
        except _SHEET_ERRORS as exc:
            logger.error("Error appending data to %s: %s", sheet_name, exc)
            return 0

        logger.info("Successfully appended %d rows to %s at %s",
                    len(rows), sheet_name, timestamp)
        return len(rows)

    def save_twitter_trends(self, records: Sequence[TrendRecord]) -> int:
        """Append scraped tweet trends to the dedicated ``Sheet2`` tab."""
        return self.save_trends(records, TWITTER_SHEET_NAME)
