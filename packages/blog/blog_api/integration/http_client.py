"""Envelope-aware HTTP client for the blog API.

Every verb has exactly two outcomes: the full ``ApiSuccess`` envelope of the
response, or a raised ``ApiError``. Non-2xx statuses, transport failures,
timeouts and unparseable bodies are all normalized before they leave this
module.

The client holds only immutable configuration; each call opens its own
``httpx.AsyncClient`` so concurrent calls share nothing.
"""

from __future__ import annotations

import io
import logging
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from functools import lru_cache
from types import MappingProxyType
from typing import Any, TypedDict

import httpx

from blog_api.config.settings import BlogSettings, get_settings, resolve_api_origin
from blog_api.integration.api_error import ApiError, ensure_ok
from blog_api.integration.error_normalizer import to_api_error_async
from blog_api.integration.response_parser import parse_api_response
from blog_api.models.envelope import ApiSuccess

logger = logging.getLogger(__name__)

_BODY_OPTION_KEYS = ("json", "content", "data", "files")

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM = "multipart/form-data"


class RequestOptions(TypedDict, total=False):
    """Per-call overrides."""

    headers: dict[str, str]
    params: Any
    timeout: float
    json: Any
    content: Any
    data: Any
    files: Any


@dataclass(frozen=True)
class FormData:
    """Multipart form body: plain fields plus file parts.

    ``files`` takes anything httpx accepts for ``files=`` (e.g.
    ``{"avatar": ("me.png", b"...", "image/png")}``).
    """

    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, Any] = field(default_factory=dict)

    def parts(self) -> list[tuple[str, Any]]:
        """Multipart parts; plain fields are sent as filename-less parts."""
        parts: list[tuple[str, Any]] = [
            (name, (None, str(value))) for name, value in self.fields.items()
        ]
        parts.extend(self.files.items())
        return parts


@dataclass(frozen=True)
class ClientConfig:
    """Immutable base configuration shared by every call.

    ``headers`` is stored as a read-only mapping.
    """

    base_url: str
    timeout: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_settings(cls, settings: BlogSettings) -> ClientConfig:
        return cls(
            base_url=resolve_api_origin(),
            timeout=settings.api_timeout_seconds,
            headers=dict(settings.api_default_headers),
        )

    def merged(self, overrides: dict[str, Any] | None = None) -> ClientConfig:
        """Copy with ``overrides`` applied; headers are merged, not replaced."""
        if not overrides:
            return self
        changes = dict(overrides)
        headers = {**self.headers, **(changes.pop("headers", None) or {})}
        return replace(self, headers=headers, **changes)


def _set_content_type(options: RequestOptions, value: str, *, override: bool) -> None:
    headers = dict(options.get("headers") or {})
    existing = [name for name in headers if name.lower() == "content-type"]
    if existing and not override:
        return
    for name in existing:
        del headers[name]
    headers["Content-Type"] = value
    options["headers"] = headers


def _is_binary(body: Any) -> bool:
    if isinstance(body, (bytes, bytearray, memoryview)):
        return True
    return isinstance(body, (io.RawIOBase, io.BufferedIOBase))


def select_body(options: RequestOptions | None, body: Any) -> RequestOptions:
    """Merge an explicit ``body`` into request options.

    An explicit body replaces any json/content/data/files already present
    in ``options``. Binary values, multipart forms, url-encoded params and
    strings go on the wire as-is; anything else is sent as JSON.
    """
    merged: RequestOptions = dict(options or {})  # type: ignore[assignment]
    if body is None:
        return merged

    for key in _BODY_OPTION_KEYS:
        merged.pop(key, None)  # type: ignore[misc]

    if isinstance(body, FormData):
        parts = body.parts()
        if parts:
            merged["files"] = parts
        else:
            # httpx sends nothing for an empty files list
            boundary = secrets.token_hex(16)
            merged["content"] = f"--{boundary}--\r\n".encode()
            _set_content_type(merged, f"{MULTIPART_FORM}; boundary={boundary}", override=True)
    elif _is_binary(body):
        merged["content"] = body.read() if hasattr(body, "read") else bytes(body)
    elif isinstance(body, httpx.QueryParams):
        merged["content"] = str(body)
        _set_content_type(merged, FORM_URLENCODED, override=False)
    elif isinstance(body, str):
        merged["content"] = body
    else:
        merged["json"] = body
    return merged


class HttpClient:
    """HTTP verbs returning the full success envelope.

    Parameters
    ----------
    config:
        Base URL, default timeout and default headers.
    transport:
        Optional httpx transport (e.g. ``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def get(self, url: str, options: RequestOptions | None = None) -> ApiSuccess[Any, Any]:
        return await self._request("GET", url, dict(options or {}))

    async def delete(self, url: str, options: RequestOptions | None = None) -> ApiSuccess[Any, Any]:
        return await self._request("DELETE", url, dict(options or {}))

    async def post(
        self, url: str, body: Any = None, options: RequestOptions | None = None
    ) -> ApiSuccess[Any, Any]:
        return await self._request("POST", url, select_body(options, body))

    async def put(
        self, url: str, body: Any = None, options: RequestOptions | None = None
    ) -> ApiSuccess[Any, Any]:
        return await self._request("PUT", url, select_body(options, body))

    async def patch(
        self, url: str, body: Any = None, options: RequestOptions | None = None
    ) -> ApiSuccess[Any, Any]:
        return await self._request("PATCH", url, select_body(options, body))

    async def _request(self, method: str, url: str, options: dict[str, Any]) -> ApiSuccess[Any, Any]:
        timeout = options.pop("timeout", self._config.timeout)
        try:
            async with httpx.AsyncClient(
                base_url=self._config.base_url,
                headers=self._config.headers,
                timeout=self._config.timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, timeout=timeout, **options)
                response.raise_for_status()
                parsed = await parse_api_response(response)
            return ensure_ok(parsed)
        except ApiError as exc:
            logger.debug("%s %s failed: %r", method, url, exc)
            raise
        except Exception as exc:
            api_error = await to_api_error_async(exc)
            logger.debug("%s %s failed: %r", method, url, api_error)
            raise api_error from exc


class HttpDataClient:
    """Same verbs as ``HttpClient``, returning only ``data``."""

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    async def get(self, url: str, options: RequestOptions | None = None) -> Any:
        return (await self._client.get(url, options)).data

    async def delete(self, url: str, options: RequestOptions | None = None) -> Any:
        return (await self._client.delete(url, options)).data

    async def post(self, url: str, body: Any = None, options: RequestOptions | None = None) -> Any:
        return (await self._client.post(url, body, options)).data

    async def put(self, url: str, body: Any = None, options: RequestOptions | None = None) -> Any:
        return (await self._client.put(url, body, options)).data

    async def patch(self, url: str, body: Any = None, options: RequestOptions | None = None) -> Any:
        return (await self._client.patch(url, body, options)).data


@lru_cache(maxsize=1)
def get_http_client() -> HttpClient:
    """Process-wide client, configured once from settings on first use."""
    return HttpClient(ClientConfig.from_settings(get_settings()))


def create_http_client(
    overrides: dict[str, Any] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpClient:
    """New client whose config is the process default with ``overrides`` applied."""
    return HttpClient(get_http_client().config.merged(overrides), transport=transport)
