import pytest
import requests
from tenacity import wait_none

from trend_sheets import google_trends, serpapi_retry
from trend_sheets.config import Settings
from trend_sheets.errors import (
    MissingCredentialError,
    TrendFetchError,
    TrendSheetsError,
)
from trend_sheets.google_trends import (
    build_trending_now_params,
    fetch_google_trends,
)
from trend_sheets.serpapi_retry import (
    SerpApiPermanentError,
    SerpApiTransientError,
    check_response_for_errors,
    fetch_with_retry,
)

RESPONSE = {
    "search_metadata": {"status": "Success"},
    "trending_searches": [
        {"query": "ipl", "search_volume": 500000, "increase_percentage": 1000,
         "categories": [{"id": 17, "name": "Sports"}]},
        {"query": "", "search_volume": 1000},
        {"query": "budget", "search_volume": 0},
        {"query": "monsoon", "search_volume": 20000,
         "categories": [{"id": 3, "name": "Climate"}, {"id": 10, "name": "News"}]},
    ],
}


@pytest.fixture
def captured(monkeypatch):
    """Replace the SerpApi call and record the params it receives."""
    calls = []

    def fake_fetch(params):
        calls.append(params)
        return RESPONSE

    monkeypatch.setattr(google_trends, "fetch_with_retry", fake_fetch)
    return calls


class TestBuildParams:
    def test_defaults(self):
        assert build_trending_now_params("key") == {
            "engine": "google_trends_trending_now",
            "geo": "IN",
            "hours": "24",
            "hl": "en",
            "only_active": "true",
            "no_cache": "true",
            "api_key": "key",
        }

    def test_flags_and_window(self):
        params = build_trending_now_params("key", geo="US", hours=4,
                                           only_active=False, no_cache=False)
        assert params["hours"] == "4"
        assert params["only_active"] == "false"
        assert params["no_cache"] == "false"


class TestFetchGoogleTrends:
    def test_normalised_and_filtered(self, captured):
        records = fetch_google_trends("India", api_key="key")

        assert [r["query"] for r in records] == ["ipl", "monsoon"]
        assert records[1]["categories"] == [{"name": "Climate"}, {"name": "News"}]
        assert captured[0]["geo"] == "IN"

    def test_options_forwarded(self, captured):
        fetch_google_trends("uk", api_key="key", hours=48, hl="de")
        assert captured[0]["geo"] == "GB"
        assert captured[0]["hours"] == "48"
        assert captured[0]["hl"] == "de"

    def test_key_from_settings(self, captured, tmp_path):
        settings = Settings(serpapi_key="from-settings",
                            credentials_path=tmp_path / "absent.json")
        fetch_google_trends("IN", settings=settings)
        assert captured[0]["api_key"] == "from-settings"

    def test_missing_key_fails_closed(self, captured, clean_env):
        settings = Settings(credentials_path=clean_env / "absent.json")
        with pytest.raises(MissingCredentialError):
            fetch_google_trends("IN", settings=settings)
        assert captured == []


class TestErrorClassification:
    def test_no_error_passes(self):
        check_response_for_errors({"trending_searches": []})

    @pytest.mark.parametrize("message", [
        "Rate limit exceeded", "502 Bad Gateway", "Request timed out",
    ])
    def test_transient(self, message):
        with pytest.raises(SerpApiTransientError):
            check_response_for_errors({"error": message})

    def test_permanent(self):
        with pytest.raises(SerpApiPermanentError):
            check_response_for_errors({"error": "Invalid API key."})

    def test_errors_share_the_package_base(self):
        with pytest.raises(TrendSheetsError):
            check_response_for_errors({"error": "Invalid API key."})
        assert issubclass(SerpApiTransientError, TrendFetchError)
        assert issubclass(SerpApiPermanentError, TrendFetchError)


class TestFetchErrors:
    def test_network_failure_wrapped(self, monkeypatch):
        def fake_fetch(params):
            raise requests.ConnectionError("connection reset")

        monkeypatch.setattr(google_trends, "fetch_with_retry", fake_fetch)

        with pytest.raises(TrendFetchError, match="India \\(geo IN\\)"):
            fetch_google_trends("India", api_key="key")

    def test_api_error_is_package_error(self, monkeypatch):
        def fake_fetch(params):
            check_response_for_errors({"error": "Invalid API key."})

        monkeypatch.setattr(google_trends, "fetch_with_retry", fake_fetch)

        with pytest.raises(TrendSheetsError, match="Invalid API key"):
            fetch_google_trends("India", api_key="bad")


class FakeSearch:
    """Stand-in for ``serpapi.GoogleSearch`` replaying canned responses."""

    responses = []
    calls = 0

    def __init__(self, params):
        self.params = params

    def get_dict(self):
        FakeSearch.calls += 1
        return FakeSearch.responses.pop(0)


@pytest.fixture
def fake_search(monkeypatch):
    FakeSearch.responses = []
    FakeSearch.calls = 0
    monkeypatch.setattr(serpapi_retry, "GoogleSearch", FakeSearch)
    monkeypatch.setattr(fetch_with_retry.retry, "wait", wait_none())
    return FakeSearch


class TestFetchWithRetry:
    def test_transient_error_retried_then_succeeds(self, fake_search):
        fake_search.responses = [{"error": "503 Service Unavailable"}, RESPONSE]

        assert fetch_with_retry({"engine": "x", "geo": "IN"}) == RESPONSE
        assert fake_search.calls == 2

    def test_permanent_error_not_retried(self, fake_search):
        fake_search.responses = [{"error": "Invalid API key."}, RESPONSE]

        with pytest.raises(SerpApiPermanentError):
            fetch_with_retry({"engine": "x", "geo": "IN"})
        assert fake_search.calls == 1

    def test_gives_up_after_max_attempts(self, fake_search):
        fake_search.responses = [
            {"error": "Rate limit exceeded"}
        ] * serpapi_retry.MAX_ATTEMPTS

        with pytest.raises(SerpApiTransientError):
            fetch_with_retry({"engine": "x", "geo": "IN"})
        assert fake_search.calls == serpapi_retry.MAX_ATTEMPTS
