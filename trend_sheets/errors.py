"""Exception hierarchy for the trend_sheets package."""


class TrendSheetsError(Exception):
    """Base class for errors raised by this package."""


class TrendFetchError(TrendSheetsError):
    """A trend source could not be fetched or returned an unusable page."""


class MissingCredentialError(TrendSheetsError):
    """A required setting (API key, spreadsheet ID) is not configured."""
