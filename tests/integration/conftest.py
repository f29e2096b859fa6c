"""
Integration Test Fixtures.

Fixtures for integration tests - the real HttpTransport and httpx.Client
talk to an in-process Salt API stub through httpx.MockTransport, so every
layer from LocalCall down to the HTTP request is exercised without a network.
"""

import json
import uuid
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from netapi.client.client import LOGOUT_MESSAGE, NetApiClient
from netapi.client.transport import AUTH_HEADER, HttpTransport

API_URL = "http://salt.test:8000"
USERS = {"admin": "secret"}


# =============================================================================
# Salt API Stub
# =============================================================================


class SaltApiStub:
    """
    Minimal rest_cherrypy lookalike.

    Knows a fixed set of minions and a handful of execution functions.
    Tokens issued by /login are accepted on / until /logout clears them.
    """

    def __init__(self, minions: dict[str, dict[str, Any]]):
        self.minions = minions
        self.tokens: set[str] = set()
        self.events: list[tuple[str, Any]] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/login":
            return self._login(request)
        if path == "/logout":
            return self._logout(request)
        if path == "/stats":
            return httpx.Response(200, json={
                "CherryPy Applications": {"Enabled": True, "Uptime": 42.0},
                "CherryPy HTTPServer 139822408": {"Accepts": len(self.requests)},
            })
        if path.startswith("/hook/"):
            self.events.append((path[len("/hook/"):], json.loads(request.content)))
            return httpx.Response(200, json={"success": True})
        if path == "/":
            if request.headers.get(AUTH_HEADER) not in self.tokens:
                return httpx.Response(401, text="401 Unauthorized")
            return self._run(json.loads(request.content)[0])
        if path == "/run":
            lowstate = json.loads(request.content)[0]
            if USERS.get(lowstate.get("username")) != lowstate.get("password"):
                return httpx.Response(401, text="401 Unauthorized")
            return self._run(lowstate)
        return httpx.Response(404, text="Not Found")

    def _login(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if USERS.get(body.get("username")) != body.get("password"):
            return httpx.Response(401, text="401 Unauthorized")
        token = uuid.uuid4().hex
        self.tokens.add(token)
        return httpx.Response(200, json={"return": [{
            "token": token,
            "start": 1400000000.0,
            "expire": 1400043200.0,
            "user": body["username"],
            "eauth": body.get("eauth", "auto"),
            "perms": [".*"],
        }]})

    def _logout(self, request: httpx.Request) -> httpx.Response:
        token = request.headers.get(AUTH_HEADER)
        if token not in self.tokens:
            return httpx.Response(401, text="401 Unauthorized")
        self.tokens.discard(token)
        return httpx.Response(200, json={"return": LOGOUT_MESSAGE})

    def _matched(self, lowstate: dict[str, Any]) -> list[str]:
        tgt = lowstate["tgt"]
        if lowstate["expr_form"] == "list":
            return [m for m in tgt.split(",") if m in self.minions]
        if tgt == "*":
            return list(self.minions)
        return [m for m in self.minions if m == tgt]

    def _execute(self, minion: str, fun: str, arg: list[Any]) -> Any:
        if fun == "test.ping":
            return True
        if fun == "grains.items":
            return self.minions[minion]
        if fun == "cmd.retcode":
            return 0
        return f"'{fun}' is not available."

    def _run(self, lowstate: dict[str, Any]) -> httpx.Response:
        matched = self._matched(lowstate)
        fun = lowstate["fun"]
        arg = lowstate.get("arg", [])
        client = lowstate["client"]

        if client == "local":
            ret = [{m: self._execute(m, fun, arg) for m in matched}]
        elif client == "local_batch":
            ret = [{m: {"ret": self._execute(m, fun, arg), "retcode": 0}} for m in matched]
        elif client == "local_async":
            ret = [{"jid": "20240101120000000000", "minions": matched} if matched else {}]
        elif client == "ssh":
            ret = [{
                m: {
                    "return": self._execute(m, fun, arg),
                    "retcode": 0,
                    "stdout": "",
                    "stderr": "",
                    "fun": fun,
                    "fun_args": arg,
                    "id": m,
                    "jid": "20240101120000000001",
                }
                for m in matched
            }]
        else:
            return httpx.Response(400, text=f"Unknown client {client}")
        return httpx.Response(200, json={"return": ret})


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def salt_api() -> SaltApiStub:
    """Salt API stub with two minions."""
    return SaltApiStub({
        "minion1": {"os": "SUSE", "osrelease": "15.5"},
        "minion2": {"os": "Ubuntu", "osrelease": "24.04"},
    })


@pytest.fixture
def api_client(salt_api: SaltApiStub) -> Generator[NetApiClient, None, None]:
    """
    NetApiClient using the real HttpTransport against the stub.

    Usage:
        def test_ping(api_client):
            api_client.login("admin", "secret")
            assert test.ping().call_sync(api_client, Glob("*"))["minion1"] == Ok(True)
    """
    with NetApiClient(API_URL, transport=HttpTransport(httpx.MockTransport(salt_api))) as client:
        yield client
