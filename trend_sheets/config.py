"""Runtime settings from the environment, ``.env`` and the credentials file.

The credentials file is the Google service-account JSON, optionally
extended with ``serpapi_key`` and ``spreadsheet_id`` entries.  Precedence,
highest first: explicit keyword arguments, environment variables
(``SERPAPI_KEY``, ``SPREADSHEET_ID``), ``.env``, the credentials file.
No secret has a built-in default: a value that is needed but not
configured raises :class:`MissingCredentialError`.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from trend_sheets.errors import MissingCredentialError

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_PATH: Path = Path("credentials.json")


class CredentialsFileSource(JsonConfigSettingsSource):
    """Settings source over the credentials JSON.

    An unreadable or malformed file contributes no values; a missing one
    is skipped by the base class.
    """

    def _read_file(self, file_path: Path) -> Dict[str, Any]:
        try:
            data = super()._read_file(file_path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read credentials file %s: %s",
                           file_path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Credentials file %s does not hold a JSON object",
                           file_path)
            return {}
        return data


class CredentialsLocation(BaseSettings):
    """Where the credentials file lives (``TREND_SHEETS_CREDENTIALS``)."""

    model_config = SettingsConfigDict(
        env_prefix="TREND_SHEETS_", env_file=".env",
        env_file_encoding="utf-8", extra="ignore",
    )

    credentials: Path = DEFAULT_CREDENTIALS_PATH


class Settings(BaseSettings):
    """Resolved configuration for the collectors and the sheet writer."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore",
    )

    serpapi_key: str = ""
    spreadsheet_id: str = ""
    credentials_path: Path = DEFAULT_CREDENTIALS_PATH

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        path = Path(init_settings.init_kwargs.get(
            "credentials_path", DEFAULT_CREDENTIALS_PATH))
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            CredentialsFileSource(settings_cls, json_file=path),
        )


def load_settings(
    credentials_path: Optional[Union[str, Path]] = None,
    **overrides: Any,
) -> Settings:
    """Build :class:`Settings`.

    Args:
        credentials_path: Path to the credentials JSON.  Defaults to
            ``$TREND_SHEETS_CREDENTIALS`` or ``./credentials.json``.
        **overrides: Field values that win over every other source.

    Returns:
        Settings holding whichever values could be resolved.  A missing
        credentials file is logged, not raised.
    """
    path = Path(credentials_path or CredentialsLocation().credentials)
    if not path.exists():
        logger.warning("Credentials file %s not found", path)
    return Settings(credentials_path=path, **overrides)


def require(settings: Settings, key: str) -> str:
    """Return the setting *key* or fail closed.

    Raises:
        MissingCredentialError: If *key* is unset or empty.
    """
    value = getattr(settings, key, "")
    if not value:
        raise MissingCredentialError(
            f"'{key}' is not configured; set {key.upper()} or add it to "
            f"{settings.credentials_path}"
        )
    return str(value)
