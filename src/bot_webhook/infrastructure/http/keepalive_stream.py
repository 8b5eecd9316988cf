"""Keep-alive streaming responder for long-running webhook handlers.

Serverless hosts drop a function that produces no output within their
timeout window. The responder answers the request immediately with a
streaming body, writes a filler chunk on a fixed cadence while the inner
handler runs, and closes the body once the handler settles.

Per invocation the stream moves ``IDLE -> STREAMING -> CLOSED``. Teardown
always cancels the tick task before the stream is closed, and the stream
closes normally whether the inner handler resolved or raised.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from starlette.requests import Request
from starlette.responses import StreamingResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS: Final = 55_000
DEFAULT_INTERVAL_MS: Final = 1000
DEFAULT_CHUNK: Final = "."
STREAM_MEDIA_TYPE: Final = "text/plain"

InnerHandler = Callable[[Request], Awaitable[object]]
RequestResponder = Callable[[Request], Awaitable[StreamingResponse]]

# Inner handlers outliving a disconnected consumer stay referenced until done.
_DETACHED_HANDLERS: set[asyncio.Task[object]] = set()


@dataclass(frozen=True)
class KeepAliveOptions:
    """Cadence and filler configuration for one keep-alive responder."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    interval_ms: int = DEFAULT_INTERVAL_MS
    chunk: str = DEFAULT_CHUNK

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        if not self.chunk:
            raise ValueError("chunk must be non-empty")

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class KeepAliveState(Enum):
    """Lifecycle states of one keep-alive stream."""

    IDLE = "idle"
    STREAMING = "streaming"
    CLOSED = "closed"


class KeepAliveStream:
    """Async byte stream that ticks filler chunks until an inner outcome settles."""

    def __init__(
        self,
        outcome_factory: Callable[[], Awaitable[object]],
        *,
        interval_seconds: float,
        chunk: str,
    ) -> None:
        self._outcome_factory = outcome_factory
        self._interval_seconds = interval_seconds
        self._payload = chunk.encode("utf-8")
        self._state = KeepAliveState.IDLE
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        self._stop_ticking = asyncio.Event()
        self._tick_task: asyncio.Task[None] | None = None
        self._handler_task: asyncio.Task[object] | None = None
        self._completion_task: asyncio.Task[None] | None = None
        self.chunks_emitted = 0
        self.close_count = 0

    @property
    def state(self) -> KeepAliveState:
        return self._state

    def start(self) -> None:
        """Start the tick timer and the inner handler; later calls are no-ops."""

        if self._state is not KeepAliveState.IDLE:
            return
        self._state = KeepAliveState.STREAMING
        self._tick_task = asyncio.create_task(self._tick())
        self._handler_task = asyncio.create_task(self._run_outcome())
        self._completion_task = asyncio.create_task(self._await_completion(self._handler_task))

    async def __aiter__(self) -> AsyncIterator[bytes]:
        self.start()
        try:
            while True:
                item = await self._queue.get()
                if item is None:
                    return
                yield item
        finally:
            if self._state is not KeepAliveState.CLOSED:
                self._detach()

    async def _run_outcome(self) -> object:
        return await self._outcome_factory()

    async def _tick(self) -> None:
        loop = asyncio.get_running_loop()
        next_tick_at = loop.time() + self._interval_seconds
        while not self._stop_ticking.is_set():
            await asyncio.sleep(max(0.0, next_tick_at - loop.time()))
            if self._stop_ticking.is_set():
                return
            self._queue.put_nowait(self._payload)
            self.chunks_emitted += 1
            next_tick_at += self._interval_seconds

    async def _await_completion(self, handler_task: asyncio.Task[object]) -> None:
        try:
            await handler_task
        except asyncio.CancelledError:
            if not handler_task.cancelled():
                raise
            logger.warning("keepalive_inner_handler_cancelled")
        except Exception:  # noqa: BLE001
            logger.exception("keepalive_inner_handler_failed")
        finally:
            self.close()

    def close(self) -> None:
        """Cancel the tick timer, then close the stream; repeated calls are no-ops."""

        self._cancel_timer()
        self._close_stream()

    def _cancel_timer(self) -> None:
        self._stop_ticking.set()
        if self._tick_task is not None and not self._tick_task.done():
            self._tick_task.cancel()

    def _close_stream(self) -> None:
        if self._state is KeepAliveState.CLOSED:
            return
        self._state = KeepAliveState.CLOSED
        self.close_count += 1
        self._queue.put_nowait(None)

    def _detach(self) -> None:
        """Stop ticking for a consumer that went away; let the inner handler finish."""

        logger.info("keepalive_consumer_detached chunks_emitted=%s", self.chunks_emitted)
        self._cancel_timer()
        if self._handler_task is not None and not self._handler_task.done():
            _DETACHED_HANDLERS.add(self._handler_task)
            self._handler_task.add_done_callback(_DETACHED_HANDLERS.discard)


def build_keepalive_responder(
    handler: InnerHandler,
    *,
    options: KeepAliveOptions | None = None,
) -> RequestResponder:
    """Wrap an inner request handler into a keep-alive streaming responder.

    The returned callable answers immediately; the inner handler is started
    before the response is returned and runs while the body streams.
    ``options.timeout_ms`` is not enforced here, it belongs to the inner handler.

    The request body is read up front: once the streaming response is sent the
    server's disconnect listener owns the receive channel, so the inner handler
    must find the body already cached on the request.
    """

    resolved = options or KeepAliveOptions()

    async def respond(request: Request) -> StreamingResponse:
        await request.body()
        stream = KeepAliveStream(
            lambda: handler(request),
            interval_seconds=resolved.interval_seconds,
            chunk=resolved.chunk,
        )
        stream.start()
        return StreamingResponse(aiter(stream), media_type=STREAM_MEDIA_TYPE)

    return respond
