"""build-info entrypoint: write bot identity JSON for deploy-time bundling."""

from __future__ import annotations

import argparse
import asyncio

from bot_webhook.application.services.bot_info_service import save_bot_info
from bot_webhook.config.settings import load_settings
from bot_webhook.infrastructure.logging import configure_logging
from bot_webhook.infrastructure.telegram.bot_api_client import TelegramBotApiClient

DEFAULT_OUTPUT_PATH = "bot-info.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Save bot account info as JSON.")
    parser.add_argument("--path", default=DEFAULT_OUTPUT_PATH, help="output JSON file")
    return parser


async def _run_build_info(path: str) -> None:
    settings = load_settings()
    configure_logging(level=settings.log_level, environment=settings.deployment_env)
    bot_api = TelegramBotApiClient(
        token=settings.bot_token,
        base_url=str(settings.bot_api_base_url),
        timeout_seconds=settings.bot_api_timeout_seconds,
    )
    await save_bot_info(bot_api, path=path)


def main(argv: list[str] | None = None) -> None:
    """Run build-info helper."""

    args = build_parser().parse_args(argv)
    asyncio.run(_run_build_info(args.path))


if __name__ == "__main__":
    main()
