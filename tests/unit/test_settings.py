import pytest
from pydantic import ValidationError

from bot_webhook.config.settings import Settings

OPTIONAL_ENV = (
    "BOT_API_BASE_URL",
    "BOT_API_TIMEOUT_SECONDS",
    "VERCEL_ENV",
    "VERCEL_URL",
    "EDGE_RUNTIME",
    "WEBHOOK_PATH",
    "WEBHOOK_URL_PREFIX",
    "WEBHOOK_HOST_HEADER",
    "WEBHOOK_ALLOWED_ENVS",
    "WEBHOOK_ON_ERROR",
    "WEBHOOK_SECRET_TOKEN",
    "STREAM_RESPONSES",
    "STREAM_TIMEOUT_MS",
    "STREAM_INTERVAL_MS",
    "STREAM_CHUNK",
    "POLLING_TIMEOUT_SECONDS",
    "LOG_LEVEL",
)


def _set_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    for key in OPTIONAL_ENV:
        monkeypatch.delenv(key, raising=False)


def test_bot_token_missing_raises_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.delenv("BOT_TOKEN", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults_are_deterministic(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required_env(monkeypatch)

    settings = Settings(_env_file=None)

    assert settings.deployment_env is None
    assert settings.deployment_url is None
    assert settings.edge_runtime is False
    assert str(settings.bot_api_base_url) == "https://api.telegram.org/"
    assert settings.webhook_path == "api/update"
    assert settings.webhook_url_prefix == ""
    assert settings.webhook_host_header == "x-forwarded-host"
    assert settings.webhook_allowed_envs == ["development"]
    assert settings.webhook_on_error == "throw"
    assert settings.webhook_secret_token is None
    assert settings.stream_responses is True
    assert settings.stream_timeout_ms == 55_000
    assert settings.stream_interval_ms == 1000
    assert settings.stream_chunk == "."
    assert settings.polling_timeout_seconds == 30
    assert settings.log_level == "INFO"


def test_deployment_env_vars_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.setenv("VERCEL_ENV", "preview")
    monkeypatch.setenv("VERCEL_URL", "bot-git-main.vercel.app")
    monkeypatch.setenv("WEBHOOK_ALLOWED_ENVS", '["development", "preview"]')

    settings = Settings(_env_file=None)

    assert settings.deployment_env == "preview"
    assert settings.deployment_url == "bot-git-main.vercel.app"
    assert settings.webhook_allowed_envs == ["development", "preview"]


def test_invalid_error_policy_raises_validation_error(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.setenv("WEBHOOK_ON_ERROR", "ignore")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_non_positive_stream_interval_raises_validation_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _set_required_env(monkeypatch)
    monkeypatch.setenv("STREAM_INTERVAL_MS", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
