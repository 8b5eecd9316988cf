"""Port for the external bot framework that processes incoming updates."""

from __future__ import annotations

from typing import Any, Protocol


class UpdateHandlerPort(Protocol):
    """Update processing contract owned by the bot framework."""

    async def handle_update(self, update: dict[str, Any]) -> None:
        """Process one decoded platform update."""
