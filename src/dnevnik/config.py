"""Client configuration loaded from environment variables.

One DnevnikConfig instance travels with each SessionManager, so sessions
with different settings can live in the same process.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Page sizes the portal offers in its items_perpage selector
ITEMS_PER_PAGE_CHOICES = (10, 20, 30, 50, 1000)


class DnevnikConfig(BaseSettings):
    """Client configuration loaded from environment variables.

    Settings are loaded from environment variables with sensible defaults.
    For local development, create a .env file in the project root.
    """

    # Portal settings
    dnevnik_url: str = Field(
        default="https://my.dnevnik76.ru",
        description="dnevnik76 portal base URL",
    )
    dnevnik_user: str = Field(
        default="",
        description="Portal login (without the @school suffix)",
    )
    dnevnik_pass: str = Field(
        default="",
        description="Portal password",
    )
    dnevnik_school_id: int = Field(
        default=0,
        description="School id appended to the login as <login>@<school_id>",
    )

    # Session settings
    items_per_page: int = Field(
        default=1000,
        description="items_perpage cookie value (10, 20, 30, 50 or 1000)",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for the default requests transport",
    )
    verify_tls: bool = Field(
        default=True,
        description="Verify TLS certificates in the default requests transport",
    )
    timezone: str = Field(
        default="Europe/Moscow",
        description="Time zone attached to dates parsed from portal pages",
    )
    debug: bool = Field(
        default=False,
        description="Emit extra page diagnostics from extractors",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # Optional CSS selectors (override if the portal layout changes)
    dnevnik_token_selector: str = Field(
        default=".login__form > input[name='csrfmiddlewaretoken']",
        description="CSS selector for the anti-forgery token on the login page",
    )

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("items_per_page")
    @classmethod
    def _check_items_per_page(cls, value: int) -> int:
        if value not in ITEMS_PER_PAGE_CHOICES:
            raise ValueError(f"items_per_page must be one of {ITEMS_PER_PAGE_CHOICES}, got {value}")
        return value

    @property
    def portal_host(self) -> str:
        """Host part of dnevnik_url, used as the cookie domain."""
        return self.dnevnik_url.split("://", 1)[-1].split("/", 1)[0]


# Singleton pattern
_config: DnevnikConfig | None = None


def get_config() -> DnevnikConfig:
    """Get the client configuration singleton.

    Returns:
        DnevnikConfig: Client configuration instance
    """
    global _config
    if _config is None:
        _config = DnevnikConfig()
    return _config
