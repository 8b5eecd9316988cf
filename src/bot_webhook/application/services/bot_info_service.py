"""Build-time helper that snapshots the bot account info to a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from bot_webhook.application.ports.bot_api_port import BotApiPort

logger = logging.getLogger(__name__)


async def save_bot_info(bot_api: BotApiPort, *, path: str | Path) -> dict[str, Any]:
    """Fetch bot identity and write it as JSON to path."""

    info = await bot_api.get_me()
    target = Path(path)
    target.write_text(json.dumps(info, ensure_ascii=False), encoding="utf-8")
    logger.info("bot_info_saved path=%s username=%s", target, info.get("username"))
    return info
