"""Default update sink used when no bot framework handler is wired in."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LoggingUpdateHandler:
    """Update handler that records which update kinds arrive and drops them."""

    async def handle_update(self, update: dict[str, Any]) -> None:
        kinds = sorted(key for key in update if key != "update_id")
        logger.info(
            "update_logged update_id=%s kinds=%s",
            update.get("update_id"),
            ",".join(kinds) or "-",
        )
