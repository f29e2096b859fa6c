"""
Exception hierarchy for the netapi client.

Every failure of a call surfaces as one of these types so calling
automation can branch on the kind of failure:

- ValidationError: rejected before any I/O (empty target, empty function name)
- TransportError: the network or the backend failed (connection, timeout, status)
- DecodeError: the backend answered, but not in the declared shape
- AuthError: the backend rejected the login

Per-node failures are not exceptions. They are Err values inside the
decoded result mapping.
"""


class NetApiError(Exception):
    """Base exception for netapi."""
    pass


class ValidationError(NetApiError):
    """
    Call rejected before dispatch.

    Raised when a call or target is not usable, for example an empty
    function name, an empty target expression, an out-of-range batch or a
    non-SSH target passed to the SSH entrypoint. No request is built.
    """
    pass


class TransportError(NetApiError):
    """
    The request did not produce a usable response.

    Covers connection failures, timeouts, TLS failures and non-success
    HTTP statuses. The underlying httpx exception is chained as __cause__.
    """

    def __init__(self, message: str, status_code: int | None = None, path: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class DecodeError(NetApiError):
    """
    The response did not match the composed result shape.

    Attributes:
        path: Location inside the response where decoding failed, e.g. "$.return[0].minion1"
    """

    def __init__(self, message: str, path: str = "$"):
        super().__init__(f"{message} at {path}")
        self.path = path


class AuthError(NetApiError):
    """Login rejected by the backend."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
