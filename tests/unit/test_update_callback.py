from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest
from starlette.requests import Request

from bot_webhook.application.services.update_callback import (
    InvalidUpdateError,
    UpdateTimeoutError,
    build_update_callback,
    parse_update,
)
from bot_webhook.application.services.webhook_stream import build_webhook_stream
from bot_webhook.infrastructure.http.keepalive_stream import KeepAliveOptions


class _RecordingUpdateHandler:
    def __init__(self, *, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds
        self.updates: list[dict[str, Any]] = []

    async def handle_update(self, update: dict[str, Any]) -> None:
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        self.updates.append(update)


def _post(body: bytes) -> Request:
    async def receive() -> dict[str, object]:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(
        {"type": "http", "method": "POST", "path": "/api/update", "headers": []},
        receive,
    )


def _update_body(update_id: int = 10) -> bytes:
    return json.dumps(
        {"update_id": update_id, "message": {"message_id": 1, "text": "/start"}}
    ).encode("utf-8")


def test_parse_update_keeps_unknown_fields() -> None:
    update = parse_update(_update_body(7))

    assert update.update_id == 7
    assert update.as_payload()["message"] == {"message_id": 1, "text": "/start"}


@pytest.mark.parametrize("raw_body", [b"", b"not json", b"{}", b'{"update_id": "x"}'])
def test_parse_update_rejects_invalid_bodies(raw_body: bytes) -> None:
    with pytest.raises(InvalidUpdateError):
        parse_update(raw_body)


@pytest.mark.asyncio
async def test_callback_hands_decoded_update_to_handler() -> None:
    handler = _RecordingUpdateHandler()
    callback = build_update_callback(handler, timeout_seconds=1.0)

    update = await callback(_post(_update_body(42)))

    assert update.update_id == 42
    assert handler.updates == [
        {"update_id": 42, "message": {"message_id": 1, "text": "/start"}}
    ]


@pytest.mark.asyncio
async def test_callback_raises_timeout_when_handler_is_too_slow() -> None:
    handler = _RecordingUpdateHandler(delay_seconds=0.5)
    callback = build_update_callback(handler, timeout_seconds=0.01)

    with pytest.raises(UpdateTimeoutError) as exc_info:
        await callback(_post(_update_body(5)))

    assert exc_info.value.update_id == 5
    assert handler.updates == []


@pytest.mark.asyncio
async def test_webhook_stream_streams_while_update_is_handled() -> None:
    handler = _RecordingUpdateHandler(delay_seconds=0.05)
    respond = build_webhook_stream(
        handler,
        options=KeepAliveOptions(timeout_ms=1000, interval_ms=10, chunk="."),
    )

    response = await respond(_post(_update_body(3)))
    body = b"".join([chunk async for chunk in response.body_iterator])

    assert set(body) <= {ord(".")}
    assert len(body) >= 3
    assert [update["update_id"] for update in handler.updates] == [3]


@pytest.mark.asyncio
async def test_webhook_stream_hides_timeout_from_consumer() -> None:
    handler = _RecordingUpdateHandler(delay_seconds=0.5)
    respond = build_webhook_stream(
        handler,
        options=KeepAliveOptions(timeout_ms=30, interval_ms=10, chunk="."),
    )

    response = await respond(_post(_update_body(4)))
    body = b"".join([chunk async for chunk in response.body_iterator])

    assert set(body) <= {ord(".")}
    assert handler.updates == []
