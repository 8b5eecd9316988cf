"""Keep-alive streaming webhook route built on the update callback."""

from __future__ import annotations

from bot_webhook.application.ports.update_handler_port import UpdateHandlerPort
from bot_webhook.application.services.update_callback import build_update_callback
from bot_webhook.infrastructure.http.keepalive_stream import (
    KeepAliveOptions,
    RequestResponder,
    build_keepalive_responder,
)


def build_webhook_stream(
    update_handler: UpdateHandlerPort,
    *,
    options: KeepAliveOptions | None = None,
) -> RequestResponder:
    """Stream keep-alive chunks while the bot framework handles one update.

    ``options.timeout_ms`` bounds the update callback; the stream itself only
    reacts to the callback settling.
    """

    resolved = options or KeepAliveOptions()
    callback = build_update_callback(update_handler, timeout_seconds=resolved.timeout_seconds)
    return build_keepalive_responder(callback, options=resolved)
