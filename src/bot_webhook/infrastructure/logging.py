"""Process logging setup for the webhook, polling and build-info entrypoints.

Serverless log drains interleave preview and production output, so records
carry the deployment environment when one is known.
"""

from __future__ import annotations

import logging

_RECORD_FORMAT = "%(levelname)s [%(name)s] %(message)s"


def resolve_log_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value, falling back to INFO."""

    resolved = logging.getLevelName(level.strip().upper() or "INFO")
    return resolved if isinstance(resolved, int) else logging.INFO


def build_log_format(environment: str | None = None) -> str:
    if not environment:
        return f"%(asctime)s {_RECORD_FORMAT}"
    return f"%(asctime)s env={environment.replace('%', '%%')} {_RECORD_FORMAT}"


def configure_logging(*, level: str, environment: str | None = None) -> None:
    """Install the root handler once per process."""

    logging.basicConfig(level=resolve_log_level(level), format=build_log_format(environment))
