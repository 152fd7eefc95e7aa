"""Process configuration.

Values come from the environment (and ``.env``, loaded in ``__init__``).
A ``Settings`` instance is built once at startup and passed explicitly to
the code that needs it; it is frozen so request handlers can share it.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TWITTER_API_BASE = "https://api.twitter.com/2"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(frozen=True, extra="ignore")

    twitter_bearer_token: str | None = Field(
        None, description="Bearer token for the Twitter API v2"
    )
    twitter_api_base: str = Field(
        DEFAULT_TWITTER_API_BASE, description="Base URL of the Twitter API"
    )
    request_timeout: float = Field(
        10.0, gt=0, description="Timeout in seconds for the outbound API call"
    )
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    @property
    def has_credential(self) -> bool:
        return bool(self.twitter_bearer_token)


def load_settings() -> Settings:
    return Settings()
