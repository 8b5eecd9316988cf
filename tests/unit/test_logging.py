from __future__ import annotations

import logging

import pytest

from bot_webhook.infrastructure.logging import build_log_format, resolve_log_level


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("", logging.INFO),
        ("verbose", logging.INFO),
    ],
)
def test_resolve_log_level_falls_back_to_info(raw: str, expected: int) -> None:
    assert resolve_log_level(raw) == expected


def test_log_format_tags_records_with_deployment_environment() -> None:
    record = logging.LogRecord("bot", logging.INFO, __file__, 1, "webhook_set", None, None)

    tagged = logging.Formatter(build_log_format("preview")).format(record)
    plain = logging.Formatter(build_log_format(None)).format(record)

    assert " env=preview INFO [bot] webhook_set" in tagged
    assert "env=" not in plain
    assert plain.endswith("INFO [bot] webhook_set")


def test_log_format_escapes_percent_in_environment_name() -> None:
    record = logging.LogRecord("bot", logging.INFO, __file__, 1, "ok", None, None)

    formatted = logging.Formatter(build_log_format("100%done")).format(record)

    assert "env=100%done" in formatted
