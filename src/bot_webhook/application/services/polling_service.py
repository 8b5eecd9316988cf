"""Long-polling update loop used when the bot runs outside webhook hosting."""

from __future__ import annotations

import asyncio
import logging

from bot_webhook.application.ports.bot_api_port import BotApiPort
from bot_webhook.application.ports.update_handler_port import UpdateHandlerPort
from bot_webhook.infrastructure.telegram.bot_api_client import BotApiError

logger = logging.getLogger(__name__)


async def poll_updates_once(
    *,
    bot_api: BotApiPort,
    update_handler: UpdateHandlerPort,
    offset: int | None,
    timeout_seconds: int,
) -> tuple[int | None, int]:
    """Fetch one batch of updates, dispatch them, and return (next_offset, count)."""

    updates = await bot_api.get_updates(offset=offset, timeout_seconds=timeout_seconds)
    next_offset = offset
    handled = 0
    for update in updates:
        update_id = update.get("update_id")
        if not isinstance(update_id, int):
            logger.warning("polling_update_without_id skipped")
            continue
        next_offset = max(next_offset or 0, update_id + 1)
        try:
            await update_handler.handle_update(update)
        except Exception:  # noqa: BLE001
            logger.exception("polling_update_failed update_id=%s", update_id)
            continue
        handled += 1
    return next_offset, handled


async def run_polling_listener(
    *,
    bot_api: BotApiPort,
    update_handler: UpdateHandlerPort,
    stop_event: asyncio.Event,
    timeout_seconds: int,
    retry_interval_seconds: float = 1.0,
    drop_pending_updates: bool = False,
) -> None:
    """Continuously poll the bot platform and dispatch updates until stopped.

    A registered webhook blocks ``getUpdates``, so it is removed first.
    """

    webhook_info = await bot_api.get_webhook_info()
    if webhook_info.get("url"):
        logger.info(
            "bot_polling_replacing_webhook url=%s pending_update_count=%s",
            webhook_info.get("url"),
            webhook_info.get("pending_update_count", 0),
        )
    await bot_api.delete_webhook(drop_pending_updates=drop_pending_updates)
    logger.info("bot_polling_listener_started timeout_seconds=%s", timeout_seconds)
    offset: int | None = None
    while not stop_event.is_set():
        try:
            offset, handled = await poll_updates_once(
                bot_api=bot_api,
                update_handler=update_handler,
                offset=offset,
                timeout_seconds=timeout_seconds,
            )
        except BotApiError:
            logger.warning("Bot API polling failure; retrying on next poll cycle.")
            if retry_interval_seconds > 0:
                await asyncio.sleep(retry_interval_seconds)
            continue
        if handled:
            logger.info("bot_polling_routed updates=%s next_offset=%s", handled, offset)
        else:
            logger.debug("bot_polling_idle")
    logger.info("bot_polling_listener_stopped")
