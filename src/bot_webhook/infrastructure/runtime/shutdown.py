"""Signal-driven graceful shutdown for long-running polling processes."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Iterable

from bot_webhook.domain.deployment import DeploymentContext

logger = logging.getLogger(__name__)

DEFAULT_SHUTDOWN_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM)


def install_graceful_shutdown(
    stop_event: asyncio.Event,
    *,
    deployment: DeploymentContext,
    loop: asyncio.AbstractEventLoop | None = None,
    signals: Iterable[signal.Signals] = DEFAULT_SHUTDOWN_SIGNALS,
) -> bool:
    """Set stop_event on termination signals; no-op on edge-constrained hosts.

    Returns whether at least one signal handler was installed.
    """

    if deployment.edge_runtime:
        logger.debug("graceful_shutdown_skipped reason=edge_runtime")
        return False

    running_loop = loop or asyncio.get_running_loop()
    installed = False
    for sig in signals:
        try:
            running_loop.add_signal_handler(sig, _request_stop, stop_event, sig)
        except (NotImplementedError, RuntimeError):
            logger.warning("graceful_shutdown_unsupported signal=%s", sig.name)
            continue
        installed = True
    return installed


def _request_stop(stop_event: asyncio.Event, sig: signal.Signals) -> None:
    if not stop_event.is_set():
        logger.info("graceful_shutdown_requested signal=%s", sig.name)
    stop_event.set()
