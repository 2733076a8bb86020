"""HTTP helpers for the Lightroom services.

Every JSON document the service returns is prefixed with a ``while(1){}``
guard to defeat cross-site script inclusion. The guard has to be stripped
before the remainder can be parsed.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

import httpx

from .config import Settings, get_settings
from .errors import MalformedResponseError, TransportError
from .logging import get_logger

logger = get_logger(__name__)

GUARD_PATTERN = re.compile(r"^while\s*\(\s*1\s*\)\s*{\s*}\s*")


def _build_headers(api_key: str, bearer_token: Optional[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {"X-API-Key": api_key}
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    return headers


def strip_guard(body: str) -> str:
    """Remove the leading guard from a response body.

    Raises:
        MalformedResponseError: If the body does not start with the guard.
    """

    stripped, count = GUARD_PATTERN.subn("", body, count=1)
    if count != 1:
        raise MalformedResponseError("response is missing the while(1){} guard")
    return stripped


def parse_guarded_json(body: str) -> Any:
    """Parse a guarded JSON body, returning ``None`` for an empty body."""

    if not body:
        return None
    try:
        return json.loads(strip_guard(body))
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"invalid JSON after guard: {exc.msg}") from exc


def content_range(start: int, end: int, total: int) -> str:
    """Format a ``Content-Range`` value covering bytes ``start``..``end`` inclusive."""

    if total <= 0 or not 0 <= start <= end < total:
        raise ValueError(f"invalid byte range {start}-{end}/{total}")
    return f"bytes {start}-{end}/{total}"


class LrHttp:
    """Thin async wrapper issuing authenticated requests to the Lightroom origin.

    The wrapper owns its ``httpx.AsyncClient`` unless one is passed in. A
    custom ``transport`` may be supplied instead, which is how tests stub the
    service.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None
        self._transport = transport

    @property
    def api_key(self) -> str:
        return self._settings.api_key

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                timeout=httpx.Timeout(self._settings.timeout),
                transport=self._transport,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        # an injected client belongs to the caller
        if not self._owns_client:
            return
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def request(
        self,
        method: str,
        relative_url: str,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue a request and raise ``TransportError`` on any failure."""

        request_headers = _build_headers(self.api_key, token)
        if headers:
            request_headers.update(headers)
        client = self._get_client()
        try:
            response = await client.request(method, relative_url, headers=request_headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.debug("lightroom request rejected", method=method, url=relative_url, status=status)
            raise TransportError(f"{method} {relative_url} failed", status) from exc
        except httpx.HTTPError as exc:
            logger.debug("lightroom request error", method=method, url=relative_url, error=str(exc))
            raise TransportError(f"{method} {relative_url} failed: {exc}") from exc
        return response

    async def get_json(self, token: str, relative_url: str) -> Any:
        """GET a guarded JSON resource and return the parsed document."""

        response = await self.request("GET", relative_url, token=token)
        return parse_guarded_json(response.text)

    async def put_json(
        self,
        token: str,
        relative_url: str,
        content: Any,
        sha256: Optional[str] = None,
    ) -> httpx.Response:
        """PUT a JSON document.

        When ``sha256`` is given it is sent as ``If-None-Match`` so that the
        service refuses the write with 412 if that content already exists.
        """

        headers = {"Content-Type": "application/json"}
        if sha256:
            headers["If-None-Match"] = sha256
        return await self.request(
            "PUT",
            relative_url,
            token=token,
            headers=headers,
            content=json.dumps(content).encode("utf-8"),
        )

    async def put_master(
        self,
        token: str,
        relative_url: str,
        content_type: str,
        content_range: str,
        data: bytes,
    ) -> httpx.Response:
        """PUT (a chunk of) master bytes and ask for all renditions to be generated.

        May be called several times for one master, each call carrying its own
        ``Content-Range``.
        """

        headers = {
            "Content-Type": content_type,
            "Content-Range": content_range,
            "X-Generate-Renditions": "all",
        }
        return await self.request("PUT", relative_url, token=token, headers=headers, content=data)


__all__ = ["GUARD_PATTERN", "LrHttp", "content_range", "parse_guarded_json", "strip_guard"]
