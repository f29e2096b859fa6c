"""
HTTP transport.

Sends one request per execute() call with httpx and hands back the raw
response text. Everything about the wire (timeouts, proxy, TLS, auth
header) is decided here from the ClientConfig; callers only pass a path
and a body.
"""

import threading
from typing import Any, Protocol

import httpx

from netapi.core.config import (
    CONNECT_TIMEOUT,
    PROXY_HOSTNAME,
    PROXY_PASSWORD,
    PROXY_PORT,
    PROXY_USERNAME,
    SOCKET_TIMEOUT,
    TOKEN,
    URL,
    VERIFY_TLS,
    ClientConfig,
)
from netapi.core.exceptions import TransportError
from netapi.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

AUTH_HEADER = "X-Auth-Token"


class Transport(Protocol):
    def execute(self, path: str, body: str | None, config: ClientConfig) -> str:
        """
        Send body to path and return the response text.

        A body of None sends a GET, anything else (including "") a POST.

        Raises:
            TransportError: On I/O error, timeout or non-success status
        """
        ...


def _proxy_url(config: ClientConfig) -> str | None:
    hostname = config.get(PROXY_HOSTNAME)
    if not hostname:
        return None
    userinfo = ""
    username = config.get(PROXY_USERNAME)
    if username:
        password = config.get(PROXY_PASSWORD)
        userinfo = f"{username}:{password}@" if password else f"{username}@"
    return f"http://{userinfo}{hostname}:{config.get(PROXY_PORT)}"


class HttpTransport:
    """
    httpx-backed Transport.

    The underlying httpx.Client is created on first use and rebuilt when
    connection settings in the config change. The session token is read
    from the config on every request.

    Args:
        transport: httpx transport to send requests through (tests pass an httpx.MockTransport)
    """

    def __init__(self, transport: httpx.BaseTransport | None = None):
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_settings: tuple[Any, ...] | None = None
        self._lock = threading.Lock()

    def _get_client(self, config: ClientConfig) -> httpx.Client:
        """Get or create the HTTP client for the current connection settings."""
        base_url = config.get(URL)
        if not base_url:
            raise TransportError("No API URL configured")

        settings = (
            base_url,
            config.get(CONNECT_TIMEOUT),
            config.get(SOCKET_TIMEOUT),
            config.get(VERIFY_TLS),
            _proxy_url(config),
        )
        with self._lock:
            if self._client is None or self._client.is_closed or settings != self._client_settings:
                if self._client is not None:
                    self._client.close()
                self._client = httpx.Client(
                    base_url=base_url,
                    timeout=httpx.Timeout(settings[2], connect=settings[1]),
                    verify=settings[3],
                    proxy=settings[4],
                    transport=self._transport,
                    headers={"Accept": "application/json"},
                )
                self._client_settings = settings
            return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        with self._lock:
            if self._client is not None and not self._client.is_closed:
                self._client.close()
            self._client = None

    def execute(self, path: str, body: str | None, config: ClientConfig) -> str:
        client = self._get_client(config)
        method = "GET" if body is None else "POST"

        headers = {}
        if body is not None:
            headers["Content-Type"] = "application/json"
        token = config.get(TOKEN)
        if token:
            headers[AUTH_HEADER] = token

        log_with_source(logger, "transport", "debug", "API request", method=method, path=path)

        try:
            response = client.request(method, path, content=body, headers=headers)
        except httpx.TimeoutException as e:
            log_with_source(logger, "transport", "error", "API request timed out", method=method, path=path, error=str(e))
            raise TransportError(f"{method} {path} timed out: {e}", path=path) from e
        except httpx.HTTPError as e:
            log_with_source(logger, "transport", "error", "API request failed", method=method, path=path, error=str(e))
            raise TransportError(f"{method} {path} failed: {e}", path=path) from e

        log_with_source(
            logger,
            "transport",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        if not response.is_success:
            raise TransportError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                path=path,
            )
        return response.text
