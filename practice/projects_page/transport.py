# File: /practice/projects_page/transport.py | Version: 1.0 | Title: HTTP Read/Write Contract over httpx
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from practice.core.config import settings

log = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response (status_code=0 for transport failures)."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


def _error_message(response: httpx.Response) -> tuple[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, None
    if isinstance(body, dict):
        # Standardized envelope: {"error": {"code", "message"}}
        if isinstance(body.get("error"), dict):
            return str(body["error"].get("message") or response.reason_phrase), body
        if "detail" in body:
            return str(body["detail"]), body
    return response.reason_phrase, body


class ApiClient:
    """
    `fetch(resource, params)` for reads and `mutate(method, resource, payload)`
    for writes against the practice API. A bearer token is attached when given.
    """

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        *,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        if client is None:
            client = httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout)
        else:
            client.headers.update(headers)
        self._client = client

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, resource: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, resource, **kwargs)
        except httpx.HTTPError as exc:
            raise ApiError(0, f"network error: {exc}") from exc

        if response.status_code >= 400:
            message, payload = _error_message(response)
            log.debug("%s %s -> %s %s", method, resource, response.status_code, message)
            raise ApiError(response.status_code, message, payload)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def fetch(self, resource: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        clean = {k: v for k, v in (params or {}).items() if v is not None}
        return await self._send("GET", resource, params=clean)

    async def mutate(self, method: str, resource: str, payload: Any = None) -> Any:
        kwargs = {"json": payload} if payload is not None else {}
        return await self._send(method.upper(), resource, **kwargs)
