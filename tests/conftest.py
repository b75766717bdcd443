import pytest

SETTINGS_ENV = (
    "SERPAPI_KEY",
    "SPREADSHEET_ID",
    "CREDENTIALS_PATH",
    "TREND_SHEETS_CREDENTIALS",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without settings from the environment or a local ``.env``."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
