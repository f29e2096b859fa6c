"""
Salt API client.

NetApiClient owns the client configuration (base URL, session token,
connection settings) and turns calls into requests:

    client = NetApiClient("https://salt.example.com:8000")
    client.login("admin", "secret", AuthModule.PAM)

    results = test.ping().call_sync(client, Glob("*"))
    # {"minion1": Ok(True), ...}

Every request blocks for one round trip. Transport failures surface as
TransportError, responses of the wrong shape as DecodeError, rejected
logins as AuthError. Nothing is retried.
"""

import json
from typing import Any

from netapi import types
from netapi.calls.auth import AuthContext, AuthModule
from netapi.calls.batch import Batch
from netapi.calls.local_call import LocalCall
from netapi.calls.modes import Entrypoint, ExecutionMode, resolve
from netapi.calls.ssh import SSHConfig
from netapi.calls.targets import Target
from netapi.client.codec import Codec, JsonCodec
from netapi.client.transport import HttpTransport, Transport
from netapi.core.config import (
    PROXY_HOSTNAME,
    PROXY_PASSWORD,
    PROXY_PORT,
    PROXY_USERNAME,
    TOKEN,
    URL,
    ClientConfig,
    ProxySettings,
)
from netapi.core.exceptions import AuthError, DecodeError, TransportError
from netapi.core.logging import get_logger, log_with_source
from netapi.results.session import Stats, Token
from netapi.types import ANY, STR, ListOf, MapOf, TypeDescriptor, Wrapper, return_of

logger = get_logger(__name__)

LOGOUT_MESSAGE = "Your token has been cleared"

_LOGIN_TYPE = return_of(ListOf(Wrapper(types.TOKEN, ANY)))
_LOGOUT_TYPE = return_of(ANY)
_STATS_TYPE = Wrapper(types.STATS, ANY)
_HOOK_TYPE = MapOf(STR, ANY)


class NetApiClient:
    """
    Client for the Salt API (rest_cherrypy).

    Args:
        url: API base URL; required unless config already holds one
        config: Configuration to use; a new one is created when omitted
        transport: Transport collaborator (default: HttpTransport)
        codec: Codec collaborator (default: JsonCodec)
    """

    def __init__(
        self,
        url: str | None = None,
        config: ClientConfig | None = None,
        transport: Transport | None = None,
        codec: Codec | None = None,
    ):
        self.config = config if config is not None else ClientConfig()
        if url is not None:
            self.config.put(URL, url.rstrip("/"))
        if not self.config.get(URL):
            raise ValueError("NetApiClient needs an API URL")

        self.transport = transport if transport is not None else HttpTransport()
        self.codec = codec if codec is not None else JsonCodec()

    def __enter__(self) -> "NetApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release the transport's connections, if it holds any."""
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()

    def set_proxy(self, settings: ProxySettings) -> None:
        """Route requests through an HTTP proxy."""
        if settings.hostname is not None:
            self.config.put(PROXY_HOSTNAME, settings.hostname)
            self.config.put(PROXY_PORT, settings.port)
        if settings.username is not None:
            self.config.put(PROXY_USERNAME, settings.username)
            if settings.password is not None:
                self.config.put(PROXY_PASSWORD, settings.password)

    # =========================================================================
    # Session
    # =========================================================================

    def login(self, username: str, password: str, eauth: AuthModule = AuthModule.AUTO) -> Token:
        """
        Log in and keep the session token for later calls.

        POST /login

        Raises:
            AuthError: If the backend rejects the credentials
        """
        eauth_value = AuthModule(eauth).value
        body = json.dumps({"username": username, "password": password, "eauth": eauth_value})

        log_with_source(logger, "client", "debug", "Logging in", user=username, eauth=eauth_value)
        try:
            raw = self.transport.execute("/login", body, self.config)
        except TransportError as e:
            if e.status_code in (401, 403):
                log_with_source(logger, "client", "warning", "Login rejected", user=username, status_code=e.status_code)
                raise AuthError(f"Login rejected for user {username!r}", status_code=e.status_code) from e
            raise

        envelope = self.codec.decode(raw, _LOGIN_TYPE)
        if not envelope.value:
            raise DecodeError("Login response contains no token", "$.return")

        # The backend answers with a list of tokens; the first one is ours.
        token = envelope.value[0]
        self.config.put(TOKEN, token.token)
        log_with_source(logger, "client", "info", "Logged in", user=token.user, expire=token.expire)
        return token

    def logout(self) -> bool:
        """
        Invalidate the session token.

        POST /logout

        Returns:
            True if the backend confirmed the token was cleared. False when
            no token is held, the token was already invalid, or the backend
            answered with anything else.
        """
        if not self.config.get(TOKEN):
            log_with_source(logger, "client", "debug", "Logout without a session token")
            return False

        try:
            raw = self.transport.execute("/logout", "", self.config)
        except TransportError as e:
            if e.status_code == 401:
                log_with_source(logger, "client", "info", "Session token already invalid")
                return False
            raise

        envelope = self.codec.decode(raw, _LOGOUT_TYPE)
        cleared = envelope.value == LOGOUT_MESSAGE
        if cleared:
            self.config.remove(TOKEN)
        log_with_source(logger, "client", "debug", "Logged out", cleared=cleared)
        return cleared

    # =========================================================================
    # Server endpoints
    # =========================================================================

    def stats(self) -> Stats:
        """
        Query CherryPy server statistics.

        GET /stats
        """
        raw = self.transport.execute("/stats", None, self.config)
        return self.codec.decode(raw, _STATS_TYPE)

    def send_event(self, tag: str | None, data: str) -> bool:
        """
        Fire an event on the master's event bus.

        POST /hook/{tag}

        Args:
            tag: Event tag, e.g. "my/tag"
            data: Event data as JSON text, sent unchanged

        Returns:
            The backend's success flag. False means the backend declined the
            event, not that the request failed.
        """
        path = f"/hook/{tag or ''}"
        raw = self.transport.execute(path, data, self.config)
        response = self.codec.decode(raw, _HOOK_TYPE)
        return response.get("success") is True

    # =========================================================================
    # Calls
    # =========================================================================

    def call(
        self,
        call: LocalCall[Any],
        mode: ExecutionMode,
        endpoint: str,
        extra: dict[str, Any] | None,
        descriptor: TypeDescriptor,
    ) -> Any:
        """
        Send a call with the given client mode and decode the response.

        The request body is a one-element list holding the call payload,
        the client mode and any extra fields. The decoded value is returned
        as is; no unwrapping happens here.
        """
        call.validate()

        payload = call.get_payload()
        payload["client"] = mode.value
        if extra:
            payload.update(extra)
        body = json.dumps([payload])

        log_with_source(
            logger,
            "client",
            "debug",
            "Dispatching call",
            fun=call.function_name,
            mode=mode.value,
            endpoint=endpoint,
            tgt=payload.get("tgt"),
        )

        raw = self.transport.execute(endpoint, body, self.config)
        try:
            return self.codec.decode(raw, descriptor)
        except DecodeError as e:
            log_with_source(
                logger,
                "codec",
                "error",
                "Response does not match the expected shape",
                fun=call.function_name,
                expected=str(descriptor),
                error=str(e),
            )
            raise

    def dispatch(
        self,
        call: LocalCall[Any],
        target: Target,
        entrypoint: Entrypoint,
        batch: Batch | None = None,
        auth: AuthContext | None = None,
        ssh_config: SSHConfig | None = None,
    ) -> Any:
        """
        Resolve the execution mode, run the call and unwrap the result.

        Raises:
            ValidationError: Empty function name or target, before any request
        """
        call.validate()
        resolution = resolve(target, entrypoint, batch=batch, auth=auth, ssh_config=ssh_config)
        descriptor = resolution.mode.compose(call.descriptor)

        envelope = self.call(call, resolution.mode, resolution.endpoint, resolution.extra, descriptor)
        return resolution.mode.unwrap(envelope.value)
