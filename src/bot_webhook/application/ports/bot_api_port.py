"""Port for remote bot platform API calls used by webhook helpers."""

from __future__ import annotations

from typing import Any, Protocol


class WebhookRegistrarPort(Protocol):
    """Remote webhook registration contract."""

    async def set_webhook(self, url: str, **options: Any) -> bool:
        """Register url as the update delivery target and return platform result."""


class BotApiPort(WebhookRegistrarPort, Protocol):
    """Bot platform API operations used by registration, polling and build helpers."""

    async def delete_webhook(self, *, drop_pending_updates: bool = False) -> bool:
        """Remove registered webhook so long polling can be used."""

    async def get_webhook_info(self) -> dict[str, Any]:
        """Return current webhook registration state."""

    async def get_me(self) -> dict[str, Any]:
        """Return bot account information."""

    async def get_updates(
        self,
        *,
        offset: int | None,
        timeout_seconds: int,
    ) -> list[dict[str, Any]]:
        """Long-poll pending updates starting at offset."""
