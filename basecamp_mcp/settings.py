"""Service configuration loaded from BASECAMP_* environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when required credentials are missing."""


_MISSING_TOKEN_HELP = """\
Basecamp credentials not found.

Set environment variables (or put them in a .env file):
   export BASECAMP_ACCESS_TOKEN="your_token"
   export BASECAMP_ACCOUNT_ID="your_account_id"   (optional, auto-detected)

To get an access token, create a Basecamp app at
https://launchpad.37signals.com/integrations and complete the OAuth flow."""


class BasecampSettings(BaseSettings):
    """Basecamp MCP bridge settings.

    All fields are read from environment variables with the ``BASECAMP_`` prefix.
    For example, ``BASECAMP_LOG_LEVEL=DEBUG`` maps to ``log_level``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BASECAMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_file: str | None = None
    """Optional log file, in addition to stderr."""

    # -- Credentials -----------------------------------------------------------
    access_token: SecretStr | None = None
    """OAuth bearer token.  Required for every remote call."""

    account_id: str | None = None
    """Basecamp account id.  Resolved from the authorization endpoint if empty."""

    # -- Remote ----------------------------------------------------------------
    api_base: str = "https://3.basecampapi.com"
    launchpad_base: str = "https://launchpad.37signals.com"
    user_agent: str = "Basecamp MCP Server"
    request_timeout: float | None = None
    """Per-request timeout in seconds.  ``None`` keeps the httpx default."""

    # -- Index storage ---------------------------------------------------------
    data_root: str = "./data"
    """Directory holding the persisted project index."""

    index_file: str = "index-cache.json"

    # -- Helpers ---------------------------------------------------------------

    @property
    def index_path(self) -> Path:
        return Path(self.data_root) / self.index_file

    def require_access_token(self) -> str:
        """Return the configured token or raise ``ConfigurationError``."""
        if self.access_token is None or not self.access_token.get_secret_value():
            raise ConfigurationError(_MISSING_TOKEN_HELP)
        return self.access_token.get_secret_value()


def get_settings() -> BasecampSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> BasecampSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return BasecampSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
