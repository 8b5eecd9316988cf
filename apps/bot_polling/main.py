"""bot-polling entrypoint for running the bot without webhook hosting."""

from __future__ import annotations

import asyncio
import logging

from bot_webhook.application.ports.bot_api_port import BotApiPort
from bot_webhook.application.ports.update_handler_port import UpdateHandlerPort
from bot_webhook.application.services.polling_service import run_polling_listener
from bot_webhook.config.settings import Settings, load_settings
from bot_webhook.domain.deployment import DeploymentContext
from bot_webhook.infrastructure.logging import configure_logging
from bot_webhook.infrastructure.runtime.shutdown import install_graceful_shutdown
from bot_webhook.infrastructure.telegram.bot_api_client import TelegramBotApiClient
from bot_webhook.infrastructure.telegram.logging_update_handler import LoggingUpdateHandler

logger = logging.getLogger(__name__)

_POLL_HTTP_TIMEOUT_BUFFER_SECONDS = 10.0


async def run_bot_polling(
    *,
    settings: Settings,
    bot_api: BotApiPort | None = None,
    update_handler: UpdateHandlerPort | None = None,
    stop_event: asyncio.Event | None = None,
) -> None:
    """Poll updates until a termination signal (or stop_event) ends the loop."""

    runtime_stop_event = stop_event or asyncio.Event()
    runtime_bot_api = bot_api or TelegramBotApiClient(
        token=settings.bot_token,
        base_url=str(settings.bot_api_base_url),
        timeout_seconds=_POLL_HTTP_TIMEOUT_BUFFER_SECONDS,
    )
    deployment = DeploymentContext(
        environment=settings.deployment_env,
        url=settings.deployment_url,
        edge_runtime=settings.edge_runtime,
    )
    install_graceful_shutdown(runtime_stop_event, deployment=deployment)
    await run_polling_listener(
        bot_api=runtime_bot_api,
        update_handler=update_handler or LoggingUpdateHandler(),
        stop_event=runtime_stop_event,
        timeout_seconds=settings.polling_timeout_seconds,
    )


async def _run_bot_polling() -> None:
    settings = load_settings()
    configure_logging(level=settings.log_level, environment=settings.deployment_env)
    logger.info(
        "bot_polling_starting polling_timeout_seconds=%s",
        settings.polling_timeout_seconds,
    )
    await run_bot_polling(settings=settings)


def main() -> None:
    """Run bot long-polling runtime."""

    asyncio.run(_run_bot_polling())


if __name__ == "__main__":
    main()
