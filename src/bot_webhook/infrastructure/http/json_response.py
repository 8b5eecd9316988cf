"""JSON response formatting for webhook routes."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

from starlette.background import BackgroundTask
from starlette.responses import Response

JSON_MEDIA_TYPE = "application/json"


class JsonResponse(Response):
    """Starlette response carrying a pre-serialized JSON body.

    Headers passed explicitly (including ``Content-Type``) win over defaults.
    ``status_text`` is informational: ASGI has no reason-phrase field, so the
    server always sends the standard phrase for ``status_code``.
    """

    media_type = JSON_MEDIA_TYPE

    def __init__(
        self,
        content: str,
        *,
        status_code: int = 200,
        status_text: str | None = None,
        headers: Mapping[str, str] | None = None,
        background: BackgroundTask | None = None,
    ) -> None:
        self.status_text = status_text
        super().__init__(
            content=content,
            status_code=status_code,
            headers=dict(headers) if headers is not None else None,
            media_type=JSON_MEDIA_TYPE,
            background=background,
        )


def json_response(
    value: Any,
    *,
    space: int | str | None = None,
    default: Callable[[Any], Any] | None = None,
    status: int = 200,
    status_text: str | None = None,
    headers: Mapping[str, str] | None = None,
) -> JsonResponse:
    """Serialize value as JSON and wrap it in a response.

    Without ``space`` the body is compact (``{"a":1}``); with ``space`` it is
    indented by that many spaces (or that string). ``default`` converts values
    the encoder does not support.
    """

    return JsonResponse(
        dump_json(value, space=space, default=default),
        status_code=status,
        status_text=status_text,
        headers=headers,
    )


def dump_json(
    value: Any,
    *,
    space: int | str | None = None,
    default: Callable[[Any], Any] | None = None,
) -> str:
    if space is None or space == 0 or space == "":
        return json.dumps(value, default=default, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(value, default=default, ensure_ascii=False, indent=space)

