"""Concrete Telegram Bot API adapter for webhook, identity and polling calls.

Every Bot API method is a JSON ``POST`` to ``<base>/bot<token>/<method>``
answering ``{"ok": bool, "result" | "description", "error_code"?}``. The
transport only moves bytes; envelope checks live in the adapter.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

DEFAULT_BOT_API_BASE_URL = "https://api.telegram.org"
JSON_CONTENT_TYPE = "application/json"

BotApiReply = tuple[int, bytes]


class BotApiTransportPort(Protocol):
    """Sends one encoded method call and returns ``(status_code, raw_body)``."""

    async def post_json(self, url: str, body: bytes, *, timeout_seconds: float) -> BotApiReply:
        """Post a JSON body; HTTP error statuses are returned, not raised."""


class BotApiError(RuntimeError):
    """Raised when a Bot API call fails in transport or is answered with ``ok: false``."""

    def __init__(
        self,
        message: str,
        *,
        error_code: int | None = None,
        description: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.description = description


class UrllibBotApiTransport:
    """Blocking urllib POST pushed to a worker thread."""

    async def post_json(self, url: str, body: bytes, *, timeout_seconds: float) -> BotApiReply:
        return await asyncio.to_thread(_post_json_sync, url, body, timeout_seconds)


def _post_json_sync(url: str, body: bytes, timeout_seconds: float) -> BotApiReply:
    request = Request(url, data=body, headers={"Content-Type": JSON_CONTENT_TYPE}, method="POST")
    try:
        with urlopen(request, timeout=timeout_seconds) as response:
            return int(response.status), response.read()
    except HTTPError as error:
        # Bot API error envelopes arrive with 4xx/5xx statuses.
        return int(error.code), error.read()
    except URLError as error:
        raise BotApiError(f"transport connection failure: {error.reason}") from error


class TelegramBotApiClient:
    """Bot API adapter implementing webhook registration and polling operations."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = DEFAULT_BOT_API_BASE_URL,
        transport: BotApiTransportPort | None = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._transport = transport or UrllibBotApiTransport()
        self._timeout_seconds = timeout_seconds

    async def set_webhook(self, url: str, **options: Any) -> bool:
        """Register webhook URL; extra options are sent as ``setWebhook`` params."""

        result = await self._call("setWebhook", {"url": url, **options})
        return bool(result)

    async def delete_webhook(self, *, drop_pending_updates: bool = False) -> bool:
        """Remove webhook registration so updates can be fetched by polling."""

        result = await self._call(
            "deleteWebhook",
            {"drop_pending_updates": drop_pending_updates},
        )
        return bool(result)

    async def get_webhook_info(self) -> dict[str, Any]:
        """Return current webhook registration state."""

        return _expect_object(await self._call("getWebhookInfo", {}), method="getWebhookInfo")

    async def get_me(self) -> dict[str, Any]:
        """Return bot account information."""

        return _expect_object(await self._call("getMe", {}), method="getMe")

    async def get_updates(
        self,
        *,
        offset: int | None,
        timeout_seconds: int,
    ) -> list[dict[str, Any]]:
        """Long-poll pending updates; the HTTP timeout covers the poll window."""

        params: dict[str, Any] = {"timeout": timeout_seconds}
        if offset is not None:
            params["offset"] = offset
        result = await self._call(
            "getUpdates",
            params,
            timeout_seconds=self._timeout_seconds + timeout_seconds,
        )
        if not isinstance(result, list):
            raise BotApiError("getUpdates returned non-list result")
        return [item for item in result if isinstance(item, dict)]

    async def _call(
        self,
        method: str,
        params: dict[str, Any],
        *,
        timeout_seconds: float | None = None,
    ) -> Any:
        url = f"{self._base_url}/bot{quote(self._token, safe=':')}/{method}"
        body = json.dumps(params, ensure_ascii=False).encode("utf-8")
        try:
            status_code, raw_body = await self._transport.post_json(
                url,
                body,
                timeout_seconds=timeout_seconds or self._timeout_seconds,
            )
        except BotApiError:
            raise
        except Exception as error:  # noqa: BLE001
            raise BotApiError(f"{method} transport failure") from error

        decoded = _decode_payload(raw_body, method=method)
        if decoded is None:
            raise BotApiError(
                f"{method} failed with status {status_code}: "
                f"{_describe_raw_payload(raw_body)}",
                error_code=status_code,
            )
        if not 200 <= status_code < 300 or decoded.get("ok") is not True:
            description = decoded.get("description")
            error_code = decoded.get("error_code", status_code)
            raise BotApiError(
                f"{method} failed with status {status_code}: {description}",
                error_code=error_code if isinstance(error_code, int) else None,
                description=description if isinstance(description, str) else None,
            )
        return decoded.get("result")


def _decode_payload(payload: bytes, *, method: str) -> dict[str, Any] | None:
    try:
        decoded = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(decoded, dict):
        raise BotApiError(f"{method} returned non-object JSON payload")
    return decoded


def _expect_object(result: Any, *, method: str) -> dict[str, Any]:
    if isinstance(result, dict):
        return result
    raise BotApiError(f"{method} returned non-object result")


def _describe_raw_payload(payload: bytes) -> str:
    if not payload:
        return "empty response body"
    try:
        decoded = payload.decode("utf-8")
    except UnicodeDecodeError:
        return "<binary>"
    return decoded[:200]
