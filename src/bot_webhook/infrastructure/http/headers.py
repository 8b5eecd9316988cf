"""Header lookup over plain mappings and case-insensitive header accessors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class HeaderSource(Protocol):
    """Single-operation capability for reading one request header."""

    def lookup(self, name: str) -> str | None:
        """Return header value for name, or None when absent."""


@runtime_checkable
class HeaderAccessor(Protocol):
    """Objects exposing case-insensitive ``get(name)`` (Starlette/httpx headers)."""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return header value for key."""


class MappingHeaderSource:
    """Header source backed by a plain mapping with exact key lookup."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = headers

    def lookup(self, name: str) -> str | None:
        value = self._headers.get(name)
        return value if isinstance(value, str) else None


class AccessorHeaderSource:
    """Header source backed by an object with its own (case-insensitive) ``get``."""

    def __init__(self, headers: HeaderAccessor) -> None:
        self._headers = headers

    def lookup(self, name: str) -> str | None:
        value = self._headers.get(name)
        return value if isinstance(value, str) else None


class _EmptyHeaderSource:
    def lookup(self, name: str) -> str | None:
        _ = name
        return None


HeadersLike = HeaderSource | HeaderAccessor | Mapping[str, str] | None


def as_header_source(headers: HeadersLike) -> HeaderSource:
    """Adapt supported header shapes into a ``HeaderSource``.

    Plain ``dict`` instances use exact key lookup. Any other object exposing
    ``get`` is treated as an accessor, which covers Starlette ``Headers``
    (itself a mapping) and its case-insensitive semantics.
    """

    if headers is None:
        return _EmptyHeaderSource()
    if isinstance(headers, HeaderSource):
        return headers
    if isinstance(headers, dict):
        return MappingHeaderSource(headers)
    if isinstance(headers, HeaderAccessor):
        return AccessorHeaderSource(headers)
    raise TypeError(f"unsupported headers object: {type(headers).__name__}")
