"""Document sources: HTTP retrieval via aiohttp and local file reads."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import unquote, urlparse

import aiohttp

from pyiothours.exceptions import IoTPayloadError, IoTTransportError

_logger = logging.getLogger(__name__)

_HTTP_SCHEMES = frozenset({"http", "https"})


class DocumentSource(Protocol):
    """Structural interface for anything that can produce the telemetry document.

    The client only depends on this protocol, so tests can pass simple
    fakes instead of standing up a server.
    """

    @property
    def location(self) -> str: ...

    async def fetch_document(self) -> dict[str, Any]: ...


def is_http_location(location: str) -> bool:
    return urlparse(location).scheme.lower() in _HTTP_SCHEMES


def _decode_object(raw: bytes, location: str) -> dict[str, Any]:
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise IoTPayloadError(f"Document from {location} is not valid UTF-8: {exc}", source=location) from exc
    try:
        body = json.loads(text)
    except json.JSONDecodeError as exc:
        raise IoTPayloadError(f"Invalid JSON from {location}: {text[:200]}", source=location) from exc
    if not isinstance(body, dict):
        raise IoTPayloadError(
            f"Expected a JSON object from {location}, got {type(body).__name__}",
            source=location,
        )
    return body


class HttpDocumentSource:
    """GET a JSON document over HTTP(S) with a shared aiohttp session."""

    def __init__(
        self,
        url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
    ) -> None:
        self._url = url
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout is not None else None

    @property
    def location(self) -> str:
        return self._url

    async def fetch_document(self) -> dict[str, Any]:
        _logger.debug("GET %s", self._url)
        kwargs: dict[str, Any] = {"headers": {"accept": "application/json"}}
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout

        try:
            async with self._http.get(self._url, **kwargs) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    snippet = raw[:200].decode("utf-8", errors="replace")
                    raise IoTTransportError(
                        f"HTTP {resp.status} from {self._url}: {snippet}",
                        status_code=resp.status,
                        source=self._url,
                    )
        except IoTTransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise IoTTransportError(f"Request to {self._url} failed: {exc!r}", source=self._url) from exc

        return _decode_object(raw, self._url)


class FileDocumentSource:
    """Read a JSON document from the local filesystem.

    The read runs in a worker thread so a slow disk never stalls the loop.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def location(self) -> str:
        return str(self._path)

    async def fetch_document(self) -> dict[str, Any]:
        _logger.debug("Reading %s", self._path)
        try:
            raw = await asyncio.to_thread(self._path.read_bytes)
        except OSError as exc:
            raise IoTTransportError(f"Cannot read {self._path}: {exc}", source=str(self._path)) from exc
        return _decode_object(raw, str(self._path))


def file_path_from_location(location: str) -> Path:
    """Resolve a ``file://`` URL or plain path to a :class:`Path`."""
    parsed = urlparse(location)
    if parsed.scheme.lower() == "file":
        return Path(unquote(parsed.path))
    return Path(location)
