"""Token-authenticated JSON client for the Calog backend.

One instance per backend; nothing is module-global. The access token lives
in memory only. A 401 clears it *before* the unauthorized callback runs, so
anything the callback sends goes out anonymous. No retries here.
"""

from __future__ import annotations

import inspect
import json
from typing import Any, Awaitable, Callable

import httpx
import structlog

from calog.config import settings
from calog.session.errors import ApiError, AuthError, NetworkError, ProtocolError

logger = structlog.get_logger(__name__)

UnauthorizedCallback = Callable[[], Awaitable[None] | None]


def _is_json(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "").lower()
    media_type = content_type.split(";", 1)[0].strip()
    return media_type == "application/json" or media_type.endswith("+json")


def _server_message(payload: Any) -> str | None:
    """Error text from `{message}` or, failing that, `{error}`."""
    if not isinstance(payload, dict):
        return None
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise ProtocolError(f"invalid JSON response: {exc}", response.status_code) from exc


class SessionClient:
    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Bind to `base_url` (default from settings).

        Pass `http` to supply the transport; otherwise the client owns an
        httpx.AsyncClient and closes it in `aclose()`.
        """
        self._base_url = base_url if base_url is not None else settings.api_base_url
        self._owns_http = http is None
        if http is None:
            http = httpx.AsyncClient(
                timeout=timeout if timeout is not None else settings.request_timeout_seconds
            )
        self._http = http
        self._access_token: str | None = None
        self._on_unauthorized: UnauthorizedCallback | None = None

    async def __aenter__(self) -> SessionClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def is_authenticated(self) -> bool:
        return self._access_token is not None

    def set_access_token(self, token: str | None) -> None:
        """Install or clear the bearer token. An empty string clears it."""
        self._access_token = token or None

    def set_unauthorized_callback(self, callback: UnauthorizedCallback | None) -> None:
        """Replace the single callback slot. It may be sync or async.

        Concurrent 401s each fire it, so it must tolerate repeat calls.
        """
        self._on_unauthorized = callback

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._access_token is not None:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def _notify_unauthorized(self) -> None:
        self._access_token = None
        callback = self._on_unauthorized
        if callback is None:
            return
        result = callback()
        if inspect.isawaitable(result):
            await result

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send one request and return the parsed (and unwrapped) body.

        Raises NetworkError, AuthError, ApiError or ProtocolError.
        """
        url = f"{self._base_url}{path}"
        content = json.dumps(body) if body is not None else None
        log = logger.bind(method=method, path=path)

        try:
            response = await self._http.request(method, url, headers=self._headers(), content=content)
        except httpx.TransportError as exc:
            log.warning("transport failure", error=str(exc))
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

        status = response.status_code
        log.debug("response received", status=status)

        if status == 401:
            payload = None
            if response.content and _is_json(response):
                try:
                    payload = response.json()
                except ValueError:
                    payload = None  # message falls back to the default
            message = _server_message(payload) or "unauthorized"
            log.info("session cleared after 401", message=message)
            try:
                await self._notify_unauthorized()
            except Exception as exc:
                log.exception("unauthorized callback failed")
                raise AuthError(message) from exc
            raise AuthError(message)

        if status == 204 or not response.content:
            if response.is_success:
                return {}
            raise ApiError(f"HTTP {status}", status)

        if not _is_json(response):
            log.warning(
                "unexpected response format",
                status=status,
                content_type=response.headers.get("content-type"),
            )
            raise ProtocolError("unexpected response format", status)

        payload = _decode(response)

        if not response.is_success:
            raise ApiError(_server_message(payload) or f"HTTP {status}", status)

        # Backend envelopes are inconsistent: accept {success, data} and bare bodies.
        if isinstance(payload, dict) and "success" in payload:
            if payload["success"] is False:
                raise ApiError(_server_message(payload) or "request failed", status)
            return payload["data"] if "data" in payload else payload
        return payload

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Any = None) -> Any:
        return await self.request("PUT", path, body)

    async def delete(self, path: str, body: Any = None) -> Any:
        return await self.request("DELETE", path, body)
