"""Environment-gated webhook registration callback."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Literal

from starlette.requests import Request
from starlette.responses import Response

from bot_webhook.application.dto.update_models import (
    WebhookRegistrationOptions,
    WebhookRegistrationResponse,
)
from bot_webhook.application.ports.bot_api_port import WebhookRegistrarPort
from bot_webhook.domain.deployment import DEFAULT_ALLOWED_ENVS, DeploymentContext
from bot_webhook.infrastructure.http.json_response import json_response
from bot_webhook.infrastructure.http.urls import (
    DEFAULT_HOST_HEADER,
    DEFAULT_WEBHOOK_PATH,
    get_url,
)

logger = logging.getLogger(__name__)

OnErrorPolicy = Literal["throw", "return"]
JsonFormatter = Callable[[Any], Response]
RegistrationHandler = Callable[[Request], Awaitable[Response]]


def build_set_webhook_handler(
    bot_api: WebhookRegistrarPort,
    *,
    deployment: DeploymentContext,
    path: str = DEFAULT_WEBHOOK_PATH,
    prefix: str = "",
    header: str = DEFAULT_HOST_HEADER,
    fallback: str | None = None,
    on_error: OnErrorPolicy = "throw",
    allowed_envs: Iterable[str] = DEFAULT_ALLOWED_ENVS,
    options: WebhookRegistrationOptions | None = None,
    json: JsonFormatter = json_response,
) -> RegistrationHandler:
    """Build handler that registers this deployment's webhook URL with the platform.

    Registration only runs when the deployment environment is allowlisted;
    otherwise the handler answers ``{"ok": false}`` without a remote call.
    The URL host comes from the request's forwarded-host header, then
    ``fallback``, then the deployment URL.
    """

    if on_error not in ("throw", "return"):
        raise ValueError(f"unsupported on_error policy: {on_error}")
    allowlist = tuple(allowed_envs)
    api_params = (options or WebhookRegistrationOptions()).as_api_params()
    resolved_fallback = fallback or deployment.url

    async def set_webhook(request: Request) -> Response:
        try:
            if not deployment.allows(allowlist):
                logger.info(
                    "webhook_registration_skipped environment=%s allowed_envs=%s",
                    deployment.environment,
                    ",".join(allowlist),
                )
                return json(WebhookRegistrationResponse(ok=False).model_dump())
            url = get_url(
                path=path,
                prefix=prefix,
                headers=request.headers,
                header=header,
                fallback=resolved_fallback,
            )
            ok = await bot_api.set_webhook(url, **api_params)
            logger.info("webhook_registration_result url=%s ok=%s", url, ok)
            return json(WebhookRegistrationResponse(ok=bool(ok)).model_dump())
        except Exception as error:
            if on_error == "throw":
                raise
            logger.exception("webhook_registration_failed")
            return json(describe_error(error))

    return set_webhook


def describe_error(error: BaseException) -> dict[str, Any]:
    """Serialize a registration failure into a JSON-compatible body."""

    body: dict[str, Any] = {
        "ok": False,
        "error": type(error).__name__,
        "description": str(error),
    }
    error_code = getattr(error, "error_code", None)
    if isinstance(error_code, int):
        body["error_code"] = error_code
    return body
