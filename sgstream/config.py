from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sgstream.utils.exceptions import ConfigurationError

DEFAULT_ENDPOINT = "https://sourcegraph.com/.api/search/stream"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sourcegraph
    SRC_ENDPOINT: str = DEFAULT_ENDPOINT
    SRC_ACCESS_TOKEN: str = ""
    SRC_OAUTH_TOKEN: str = ""
    SRC_THROW_ON_ERROR: bool = False
    SRC_TIMEOUT: float | None = Field(default=None, description="Seconds; unset means no timeout")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()


# ── Credentials ──────────────────────────────────────────────────────


class AccessToken(BaseModel):
    """Sourcegraph access token, sent as ``Authorization: token <value>``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["access_token"] = "access_token"
    token: str = Field(min_length=1)

    def authorization(self) -> str:
        return f"token {self.token}"


class OAuthToken(BaseModel):
    """OAuth token with ``user:all`` scope, sent as ``Authorization: Bearer <value>``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["oauth_token"] = "oauth_token"
    token: str = Field(min_length=1)

    def authorization(self) -> str:
        return f"Bearer {self.token}"


Credential = Annotated[AccessToken | OAuthToken, Field(discriminator="kind")]


def credential_from_tokens(access_token: str | None = None, oauth_token: str | None = None) -> AccessToken | OAuthToken:
    """Pick the single credential kind supplied; zero or both is an error."""
    if access_token and oauth_token:
        raise ConfigurationError("Only one of access_token or oauth_token may be provided")
    if access_token:
        return AccessToken(token=access_token)
    if oauth_token:
        return OAuthToken(token=oauth_token)
    raise ConfigurationError("Either access_token or oauth_token must be provided")


class ClientConfig(BaseModel):
    """Immutable configuration shared by every call a client serves."""

    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_ENDPOINT
    credential: Credential
    headers: dict[str, str] = Field(default_factory=dict, description="Extra request headers")
    timeout: float | None = None
    throw_on_error: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> ClientConfig:
        return cls(
            url=settings.SRC_ENDPOINT,
            credential=credential_from_tokens(settings.SRC_ACCESS_TOKEN, settings.SRC_OAUTH_TOKEN),
            timeout=settings.SRC_TIMEOUT,
            throw_on_error=settings.SRC_THROW_ON_ERROR,
        )
