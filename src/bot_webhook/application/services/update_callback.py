"""Inner webhook handler that decodes an update and hands it to the bot framework."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import ValidationError
from starlette.requests import Request

from bot_webhook.application.dto.update_models import TelegramUpdate
from bot_webhook.application.ports.update_handler_port import UpdateHandlerPort

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Request], Awaitable[TelegramUpdate]]


class InvalidUpdateError(ValueError):
    """Raised when the request body is not a decodable update."""


class UpdateTimeoutError(TimeoutError):
    """Raised when the bot framework does not finish an update in time."""

    def __init__(self, *, update_id: int, timeout_seconds: float) -> None:
        super().__init__(
            f"update {update_id} not handled within {timeout_seconds:g} seconds"
        )
        self.update_id = update_id
        self.timeout_seconds = timeout_seconds


def parse_update(raw_body: bytes) -> TelegramUpdate:
    """Decode raw request body into an update envelope."""

    try:
        return TelegramUpdate.model_validate_json(raw_body)
    except ValidationError as error:
        raise InvalidUpdateError(f"invalid update payload: {error}") from error


def build_update_callback(
    update_handler: UpdateHandlerPort,
    *,
    timeout_seconds: float,
) -> UpdateCallback:
    """Build request handler bounded by ``timeout_seconds`` per update."""

    async def handle(request: Request) -> TelegramUpdate:
        update = parse_update(await request.body())
        logger.info("webhook_update_received update_id=%s", update.update_id)
        try:
            await asyncio.wait_for(
                update_handler.handle_update(update.as_payload()),
                timeout=timeout_seconds,
            )
        except asyncio.TimeoutError as error:
            logger.warning(
                "webhook_update_timeout update_id=%s timeout_seconds=%s",
                update.update_id,
                timeout_seconds,
            )
            raise UpdateTimeoutError(
                update_id=update.update_id,
                timeout_seconds=timeout_seconds,
            ) from error
        logger.info("webhook_update_handled update_id=%s", update.update_id)
        return update

    return handle
