"""Authenticated HTTP access to the daycare backend using httpx."""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from core.errors import ApiError, AuthenticationError, SessionExpiredError

DEFAULT_BASE_URL = "http://localhost:5000/api"
DEFAULT_TIMEOUT_S = 15.0


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Extract `message` from a JSON error body, or use `fallback`."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return fallback


class AuthenticatedClient:
    """Bearer-token HTTP client.

    Relative URLs are joined to `base_url`; absolute `http(s)://` URLs are
    used verbatim.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._http = httpx.Client(timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    def resolve_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")):
            return url
        clean = url if url.startswith("/") else f"/{url}"
        return f"{self._base_url}{clean}"

    def request_raw(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and return the response; non-2xx raises."""
        if not self._token:
            raise AuthenticationError()
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self._token}"
        final_url = self.resolve_url(url)
        try:
            response = self._http.request(method, final_url, headers=headers, **kwargs)
        except httpx.HTTPError as ex:
            logger.error("{} {} failed: {}", method, final_url, ex)
            raise ApiError(None, str(ex)) from ex

        if response.status_code == 401:
            logger.warning("{} {} rejected: session expired", method, final_url)
            raise SessionExpiredError()
        if not response.is_success:
            message = _error_message(response, "Request failed")
            logger.error("{} {} -> {} {}", method, final_url, response.status_code, message)
            raise ApiError(response.status_code, message)
        return response

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return the parsed JSON body (None when empty)."""
        response = self.request_raw(method, url, **kwargs)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as ex:
            raise ApiError(response.status_code, f"Invalid JSON response: {ex}") from ex

    def download(self, url: str) -> bytes:
        """Fetch raw bytes (image payloads)."""
        return self.request_raw("GET", url).content

    def close(self) -> None:
        self._http.close()
