"""Batch timestamps for rows appended to the trends sheet."""

from datetime import datetime
from typing import Optional

from dateutil import tz

SHEET_TIMEZONE = "Asia/Kolkata"
SHEET_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def batch_timestamp(now: Optional[datetime] = None,
                    timezone_name: str = SHEET_TIMEZONE) -> str:
    """Return the timestamp stamped on every row of one append batch.

    Captured once per batch, not per record, so all rows written together
    share the same ``Date`` cell.

    Args:
        now: Moment to format.  Naive values are taken to be UTC.
            Defaults to the current time.
        timezone_name: IANA zone the sheet is kept in.

    Returns:
        A ``YYYY-MM-DD HH:MM:SS`` string in *timezone_name*.
    """
    zone = tz.gettz(timezone_name)
    if now is None:
        now = datetime.now(tz=tz.UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz.UTC)
    return now.astimezone(zone).strftime(SHEET_TIMESTAMP_FORMAT)
