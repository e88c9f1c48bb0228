from typing import Annotated, Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from octogate.utils.scopes import parse_scopes

ProviderMode = Literal["live", "demo"]


class GitHubProviderSettings(BaseSettings):
    """GitHub OAuth app credentials loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="OCTOGATE_GITHUB_",
        env_file=".env",
        extra="ignore",
    )

    client_id: str = Field(default="")
    client_secret: SecretStr = Field(default=SecretStr(""))
    redirect_uri: str = Field(default="http://localhost:5173/auth/callback")
    scopes: Annotated[list[str], NoDecode] = Field(default=["user:email", "read:user"])
    allow_signup: bool = Field(default=True)
    timeout: float = Field(default=10.0, gt=0)

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_scopes(value)
        return value

    @property
    def configured(self) -> bool:
        return bool(self.client_id.strip() and self.client_secret.get_secret_value().strip())


class SessionSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OCTOGATE_SESSION_",
        env_file=".env",
        extra="ignore",
    )

    ttl: int = Field(default=86400, gt=0)  # 24 hours


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OCTOGATE_CLIENT_",
        env_file=".env",
        extra="ignore",
    )

    api_base_url: str = Field(default="http://localhost:3001")
    github_client_id: str = Field(default="")
    redirect_uri: str = Field(default="http://localhost:5173/auth/callback")
    scopes: Annotated[list[str], NoDecode] = Field(default=["user:email", "read:user"])
    request_timeout: float = Field(default=10.0, gt=0)
    health_timeout: float = Field(default=5.0, gt=0)

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_scopes(value)
        return value


class OctogateSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OCTOGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(default="Octogate Login API")
    frontend_url: str = Field(default="http://localhost:5173")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3001)
    log_level: str = Field(default="INFO")

    provider_mode: ProviderMode = Field(default="live")
    fallback_to_demo: bool = Field(default=True)

    github: GitHubProviderSettings = Field(default_factory=GitHubProviderSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("service_name", "frontend_url")
    @classmethod
    def validate_non_empty(cls, value: str, info) -> str:  # noqa: ANN001
        """Ensure required settings are non-empty."""
        if not value or not value.strip():
            msg = f"{info.field_name} must be a non-empty string"
            raise ValueError(msg)
        return value.strip()
