"""
Shared Test Fixtures.

FakeTransport stands in for the HTTP transport in unit tests: it records
every request and answers with queued response texts, so tests can assert
on the exact request body without any network.
"""

import json
from typing import Any

import pytest

from netapi.client.client import NetApiClient
from netapi.core.config import TOKEN, ClientConfig
from netapi.core.exceptions import TransportError

API_URL = "http://salt.test:8000"


class FakeTransport:
    """Transport double with queued responses."""

    def __init__(self):
        self.requests: list[dict[str, Any]] = []
        self._responses: list[Any] = []

    def respond(self, response: Any) -> "FakeTransport":
        """
        Queue a response.

        Strings are returned verbatim, dicts and lists are JSON-encoded,
        exceptions are raised.
        """
        self._responses.append(response)
        return self

    def execute(self, path: str, body: str | None, config: ClientConfig) -> str:
        self.requests.append({"path": path, "body": body, "token": config.get(TOKEN)})
        if not self._responses:
            raise AssertionError(f"Unexpected request to {path}")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    @property
    def last_request(self) -> dict[str, Any]:
        return self.requests[-1]

    @property
    def last_payload(self) -> dict[str, Any]:
        """The single call object of the last request body."""
        body = json.loads(self.last_request["body"])
        assert isinstance(body, list) and len(body) == 1
        return body[0]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(fake_transport: FakeTransport) -> NetApiClient:
    """NetApiClient wired to a FakeTransport."""
    return NetApiClient(API_URL, transport=fake_transport)


@pytest.fixture
def unauthorized() -> TransportError:
    return TransportError("POST /login returned HTTP 401", status_code=401, path="/login")
