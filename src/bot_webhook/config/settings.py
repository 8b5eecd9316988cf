"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
PositiveInt = Annotated[int, Field(gt=0)]


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    bot_token: NonEmptyStr = Field(validation_alias="BOT_TOKEN")
    bot_api_base_url: HttpUrl = Field(
        default="https://api.telegram.org",
        validation_alias="BOT_API_BASE_URL",
        validate_default=True,
    )
    bot_api_timeout_seconds: NonNegativeFloat = Field(
        default=20.0,
        validation_alias="BOT_API_TIMEOUT_SECONDS",
    )
    deployment_env: str | None = Field(default=None, validation_alias="VERCEL_ENV")
    deployment_url: str | None = Field(default=None, validation_alias="VERCEL_URL")
    edge_runtime: bool = Field(default=False, validation_alias="EDGE_RUNTIME")
    webhook_path: str = Field(default="api/update", validation_alias="WEBHOOK_PATH")
    webhook_url_prefix: str = Field(default="", validation_alias="WEBHOOK_URL_PREFIX")
    webhook_host_header: NonEmptyStr = Field(
        default="x-forwarded-host",
        validation_alias="WEBHOOK_HOST_HEADER",
    )
    webhook_allowed_envs: list[str] = Field(
        default_factory=lambda: ["development"],
        validation_alias="WEBHOOK_ALLOWED_ENVS",
    )
    webhook_on_error: Literal["throw", "return"] = Field(
        default="throw",
        validation_alias="WEBHOOK_ON_ERROR",
    )
    webhook_secret_token: NonEmptyStr | None = Field(
        default=None,
        validation_alias="WEBHOOK_SECRET_TOKEN",
    )
    stream_responses: bool = Field(default=True, validation_alias="STREAM_RESPONSES")
    stream_timeout_ms: PositiveInt = Field(default=55_000, validation_alias="STREAM_TIMEOUT_MS")
    stream_interval_ms: PositiveInt = Field(default=1000, validation_alias="STREAM_INTERVAL_MS")
    stream_chunk: NonEmptyStr = Field(default=".", validation_alias="STREAM_CHUNK")
    polling_timeout_seconds: PositiveInt = Field(
        default=30,
        validation_alias="POLLING_TIMEOUT_SECONDS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
