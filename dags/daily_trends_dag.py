import logging
from datetime import datetime, timedelta
from typing import Dict, List

from airflow.decorators import dag, task
from airflow.models import Variable

from trend_sheets.google_trends import fetch_google_trends
from trend_sheets.scraper import fetch_trending_tweets
from trend_sheets.sheets import SheetWriter
from trend_sheets.serpapi_retry import SerpApiPermanentError
from trend_sheets.types import TrendRecord, ValidationReport
from trend_sheets.validation import validate_trend_records

logger: logging.Logger = logging.getLogger(__name__)


@dag(
    dag_id="daily_trends_dag",
    default_args={
        "owner": "trend_sheets",
        "depends_on_past": False,
        "start_date": datetime(2024, 1, 1),
        "email_on_failure": False,
        "email_on_retry": False,
        "retries": 1,
        "retry_delay": timedelta(minutes=5),
    },
    description="Append Google and Twitter trends for a country to a sheet",
    schedule=timedelta(days=1),
    catchup=False,
    tags=["google_trends", "twitter", "serpapi", "sheets"],
)
def daily_trends_dag() -> None:
    """Daily trends collection DAG.

    Fetches Google trending searches via SerpApi and scrapes the top
    tweeted topics for one country, validates both record sets, and
    appends them to their tabs of the configured spreadsheet.
    """

    @task
    def fetch_google() -> List[TrendRecord]:
        """Fetch Google trending searches.

        Reads ``trends_country`` and ``serpapi_key`` from Airflow
        Variables at runtime.

        Raises:
            ValueError: If the ``serpapi_key`` Airflow Variable is not set.
        """
        country: str = Variable.get("trends_country", default_var="india")
        api_key: str = Variable.get("serpapi_key", default_var="")
        if not api_key:
            raise ValueError("Airflow Variable 'serpapi_key' is not set")

        try:
            return fetch_google_trends(country, api_key=api_key)
        except SerpApiPermanentError as exc:
            logger.warning("Permanent API error for '%s', skipping: %s",
                           country, exc)
            return []

    @task
    def fetch_twitter() -> List[TrendRecord]:
        """Scrape the most tweeted topics of the day."""
        country: str = Variable.get("trends_country", default_var="india")
        return fetch_trending_tweets(country)

    @task
    def save_to_sheet(
        google: List[TrendRecord],
        twitter: List[TrendRecord],
    ) -> Dict[str, int]:
        """Validate both record sets and append them to the spreadsheet.

        Raises:
            ValueError: If the ``spreadsheet_id`` Airflow Variable is not
                set.
        """
        spreadsheet_id: str = Variable.get("spreadsheet_id", default_var="")
        if not spreadsheet_id:
            raise ValueError("Airflow Variable 'spreadsheet_id' is not set")
        credentials_path: str = Variable.get(
            "sheets_credentials_path", default_var="credentials.json",
        )

        for name, records in (("google", google), ("twitter", twitter)):
            report: ValidationReport = validate_trend_records(records)
            logger.info("Validation report for %s: %s", name, report)

        writer = SheetWriter(spreadsheet_id, credentials_path,
                             sheet_name="Sheet1")
        return {
            "google": writer.save_trends(google),
            "twitter": writer.save_twitter_trends(twitter),
        }

    save_to_sheet(fetch_google(), fetch_twitter())


daily_trends_dag()
