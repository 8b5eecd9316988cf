"""Public hostname and webhook URL derivation from request headers."""

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit

from bot_webhook.infrastructure.http.headers import HeadersLike, as_header_source

DEFAULT_HOST_HEADER = "x-forwarded-host"
DEFAULT_WEBHOOK_PATH = "api/update"
LOCALHOST = "localhost"


class InvalidWebhookUrlError(ValueError):
    """Raised when host/path/prefix inputs do not form an absolute URL."""


def get_host(
    *,
    host: str | None = None,
    headers: HeadersLike = None,
    header: str = DEFAULT_HOST_HEADER,
    fallback: str | None = None,
) -> str:
    """Resolve public host: explicit host, then forwarded header, then fallback."""

    if host:
        return host
    forwarded = as_header_source(headers).lookup(header)
    if forwarded:
        return forwarded
    return fallback or LOCALHOST


def get_url(
    *,
    path: str = DEFAULT_WEBHOOK_PATH,
    prefix: str = "",
    host: str | None = None,
    headers: HeadersLike = None,
    header: str = DEFAULT_HOST_HEADER,
    fallback: str | None = None,
) -> str:
    """Build the absolute HTTPS URL the bot platform should deliver updates to."""

    resolved_host = get_host(host=host, headers=headers, header=header, fallback=fallback)
    raw_url = f"{prefix}https://{resolved_host}/{path.lstrip('/')}"
    return _normalize_url(raw_url)


def _normalize_url(raw_url: str) -> str:
    try:
        parts = urlsplit(raw_url.strip())
    except ValueError as error:
        raise InvalidWebhookUrlError(f"webhook url is malformed: {raw_url}") from error
    if not parts.scheme or not parts.netloc:
        raise InvalidWebhookUrlError(f"webhook url is not absolute: {raw_url}")
    if parts.hostname is None:
        raise InvalidWebhookUrlError(f"webhook url has no host: {raw_url}")
    path = parts.path or "/"
    return urlunsplit(
        (parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment)
    )
