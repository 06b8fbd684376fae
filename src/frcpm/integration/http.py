"""Base HTTP client for the external FRC data APIs.

Calls are synchronous: they are meant to run inside executor tasks, never
on the interactive thread. There is no retry policy; a failed request
raises :class:`IntegrationError` and the caller's failure callback decides
what to do.

Example:
    >>> import httpx
    >>> from frcpm.integration.http import ApiClient
    >>> transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True}))
    >>> with ApiClient("https://example.test", transport=transport) as client:
    ...     client.get_json("/status")
    {'ok': True}
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from frcpm.core.exceptions import IntegrationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "FRCPM/0.1"


class ApiClient:
    """Thin JSON-over-HTTP client.

    The underlying ``httpx.Client`` is created on first use and reused
    until :meth:`close`.

    Args:
        base_url: Prefix for relative request paths.
        headers: Extra default headers.
        auth: httpx auth (for example ``httpx.BasicAuth``).
        timeout: Request timeout in seconds.
        transport: Custom transport, used by tests.
        client: Pre-built client; takes precedence over the other options.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        auth: httpx.Auth | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._extra_headers = headers or {}
        self._auth = auth
        self._timeout = timeout
        self._transport = transport
        self._client = client

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def headers(self) -> dict[str, str]:
        """Default headers for requests."""
        return {
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
            **self._extra_headers,
        }

    def _ensure_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers=self.headers,
                auth=self._auth,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            self._client.close()
        self._client = None

    def __enter__(self) -> ApiClient:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET ``path`` and decode the JSON body.

        Returns:
            The decoded body, or None when the server answers 404.

        Raises:
            IntegrationError: On transport errors, other error statuses or
                an undecodable body.
        """
        client = self._ensure_client()
        try:
            response = client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.error("Request to %s%s failed: %s", self.base_url, path, exc)
            raise IntegrationError(f"GET {path} failed: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            logger.warning("Not found: %s%s", self.base_url, path)
            return None
        if response.is_error:
            logger.error("HTTP %d from %s%s", response.status_code, self.base_url, path)
            raise IntegrationError(
                f"GET {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise IntegrationError(f"GET {path} returned invalid JSON", status_code=response.status_code) from exc

    @staticmethod
    def is_rate_limited(error: IntegrationError) -> bool:
        """True if ``error`` is the server throttling us (HTTP 429)."""
        return error.status_code == httpx.codes.TOO_MANY_REQUESTS
