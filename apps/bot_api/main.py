"""bot-api entrypoint and HTTP route wiring."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response

from bot_webhook.application.dto.update_models import WebhookRegistrationOptions
from bot_webhook.application.ports.bot_api_port import WebhookRegistrarPort
from bot_webhook.application.ports.update_handler_port import UpdateHandlerPort
from bot_webhook.application.services.update_callback import (
    InvalidUpdateError,
    build_update_callback,
)
from bot_webhook.application.services.webhook_registration_service import (
    build_set_webhook_handler,
)
from bot_webhook.application.services.webhook_stream import build_webhook_stream
from bot_webhook.config.settings import Settings, load_settings
from bot_webhook.domain.deployment import DeploymentContext
from bot_webhook.infrastructure.http.json_response import json_response
from bot_webhook.infrastructure.http.keepalive_stream import KeepAliveOptions
from bot_webhook.infrastructure.logging import configure_logging
from bot_webhook.infrastructure.telegram.bot_api_client import TelegramBotApiClient
from bot_webhook.infrastructure.telegram.logging_update_handler import LoggingUpdateHandler

BOT_API_HOST = "0.0.0.0"
BOT_API_PORT = 8000
SET_WEBHOOK_ROUTE = "/api/set-webhook"
logger = logging.getLogger(__name__)


def build_deployment_context(settings: Settings) -> DeploymentContext:
    """Capture deployment environment once at startup."""

    return DeploymentContext(
        environment=settings.deployment_env,
        url=settings.deployment_url,
        edge_runtime=settings.edge_runtime,
    )


def build_bot_api_client(settings: Settings) -> TelegramBotApiClient:
    """Build Bot API adapter from runtime settings."""

    return TelegramBotApiClient(
        token=settings.bot_token,
        base_url=str(settings.bot_api_base_url),
        timeout_seconds=settings.bot_api_timeout_seconds,
    )


def build_keepalive_options(settings: Settings) -> KeepAliveOptions:
    """Map stream settings into responder options."""

    return KeepAliveOptions(
        timeout_ms=settings.stream_timeout_ms,
        interval_ms=settings.stream_interval_ms,
        chunk=settings.stream_chunk,
    )


def create_app(
    *,
    settings: Settings | None = None,
    bot_api: WebhookRegistrarPort | None = None,
    update_handler: UpdateHandlerPort | None = None,
) -> FastAPI:
    """Create FastAPI app for update delivery and webhook registration routes."""

    if settings is None:
        settings = load_settings()
        configure_logging(level=settings.log_level, environment=settings.deployment_env)

    deployment = build_deployment_context(settings)
    if bot_api is None:
        bot_api = build_bot_api_client(settings)
    if update_handler is None:
        update_handler = LoggingUpdateHandler()

    keepalive_options = build_keepalive_options(settings)
    stream_update = build_webhook_stream(update_handler, options=keepalive_options)
    handle_update = build_update_callback(
        update_handler,
        timeout_seconds=keepalive_options.timeout_seconds,
    )
    register_webhook = build_set_webhook_handler(
        bot_api,
        deployment=deployment,
        path=settings.webhook_path,
        prefix=settings.webhook_url_prefix,
        header=settings.webhook_host_header,
        on_error=settings.webhook_on_error,
        allowed_envs=settings.webhook_allowed_envs,
        options=WebhookRegistrationOptions(secret_token=settings.webhook_secret_token),
    )
    update_route = "/" + settings.webhook_path.strip("/")

    app = FastAPI()

    @app.post(update_route)
    async def receive_update(request: Request) -> Response:
        if settings.stream_responses:
            return await stream_update(request)
        try:
            await handle_update(request)
        except InvalidUpdateError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return json_response({"ok": True})

    @app.get(SET_WEBHOOK_ROUTE)
    async def set_webhook(request: Request) -> Response:
        return await register_webhook(request)

    @app.get("/healthz")
    async def healthz() -> Response:
        return json_response({"ok": True})

    logger.info(
        "bot_api_app_created update_route=%s stream_responses=%s environment=%s",
        update_route,
        settings.stream_responses,
        deployment.environment,
    )
    return app


def run_asgi_server(*, host: str = BOT_API_HOST, port: int = BOT_API_PORT) -> None:
    """Run bot-api as a long-lived ASGI process using application factory mode."""

    uvicorn.run(
        "apps.bot_api.main:create_app",
        host=host,
        port=port,
        factory=True,
    )


def main() -> None:
    """Run bot-api runtime process."""

    run_asgi_server()


if __name__ == "__main__":
    main()
