"""Pydantic models for inbound platform updates and webhook registration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TelegramUpdate(BaseModel):
    """Inbound update envelope; only ``update_id`` is interpreted here."""

    model_config = ConfigDict(extra="allow")

    update_id: int = Field(ge=0)

    def as_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class WebhookRegistrationOptions(BaseModel):
    """Pass-through ``setWebhook`` options sent along with the webhook URL."""

    model_config = ConfigDict(extra="forbid")

    secret_token: str | None = Field(default=None, min_length=1, max_length=256)
    max_connections: int | None = Field(default=None, ge=1, le=100)
    allowed_updates: list[str] | None = None
    drop_pending_updates: bool | None = None
    ip_address: str | None = None

    def as_api_params(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class WebhookRegistrationResponse(BaseModel):
    """JSON body returned by the webhook registration route."""

    ok: bool
