"""
Execution modes and mode resolution.

The backend runs a call with one of four clients. Which one is never a free
choice: it follows from the entrypoint the caller used and whether a batch
was given. Each mode also fixes the shape of the response, so the mode is
where the expected result type is composed and where the decoded envelope
is unwrapped.

    Mode          Composed shape
    ------------  -------------------------------------------------
    LOCAL         Return[List[Map[str, Result[R]]]]
    LOCAL_BATCH   Return[List[Map[str, Result[R]]]]   (one per wave)
    LOCAL_ASYNC   Return[List[AsyncJobHandle[R]]]
    SSH           Return[List[Map[str, Result[SSHResult[R]]]]]
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from netapi.calls.auth import AuthContext, Credentials
from netapi.calls.batch import Batch
from netapi.calls.ssh import SSHConfig
from netapi.calls.targets import Target
from netapi.core.exceptions import DecodeError, ValidationError
from netapi.types import (
    STR,
    ListOf,
    MapOf,
    TypeDescriptor,
    Wrapper,
    async_job_of,
    result_of,
    return_of,
    ssh_result_of,
)

TOKEN_ENDPOINT = "/"
CREDENTIALS_ENDPOINT = "/run"


class Entrypoint(str, Enum):
    """How the caller invoked the call."""

    SYNC = "sync"
    ASYNC = "async"
    SSH = "ssh"


class ExecutionMode(str, Enum):
    """Backend client used to run a call; the value is the wire id."""

    LOCAL = "local"
    LOCAL_ASYNC = "local_async"
    LOCAL_BATCH = "local_batch"
    SSH = "ssh"

    def compose(self, return_type: TypeDescriptor) -> Wrapper:
        """Build the full response descriptor for a call returning return_type."""
        if self is ExecutionMode.LOCAL_ASYNC:
            element: TypeDescriptor = async_job_of(return_type)
        elif self is ExecutionMode.SSH:
            element = MapOf(STR, result_of(ssh_result_of(return_type)))
        else:
            element = MapOf(STR, result_of(return_type))
        return return_of(ListOf(element))

    def unwrap(self, returned: list[Any]) -> Any:
        """
        Strip the return list.

        LOCAL_BATCH keeps one element per wave, in received order. Every
        other mode answers with exactly one element, which is returned.
        """
        if self is ExecutionMode.LOCAL_BATCH:
            return list(returned)
        if len(returned) != 1:
            raise DecodeError(
                f"Expected exactly one element in the {self.value} response, got {len(returned)}",
                "$.return",
            )
        return returned[0]


@dataclass(frozen=True)
class Resolution:
    """Outcome of mode resolution: where to send the call and what to add to it."""

    mode: ExecutionMode
    endpoint: str
    extra: dict[str, Any] = field(default_factory=dict)


def resolve(
    target: Target,
    entrypoint: Entrypoint,
    batch: Batch | None = None,
    auth: AuthContext | None = None,
    ssh_config: SSHConfig | None = None,
) -> Resolution:
    """
    Pick mode, endpoint and extra payload fields for a call.

    Precedence:
        1. Inline credentials go to /run with username/password/eauth;
           token auth goes to / with no auth fields.
        2. A batch selects LOCAL_BATCH, whatever the entrypoint.
        3. The async entrypoint selects LOCAL_ASYNC.
        4. The SSH entrypoint selects SSH, always on /run, with the ssh
           options passed through.
        5. Otherwise LOCAL.

    Raises:
        ValidationError: Empty target expression, or a target the ssh
            client cannot address used in SSH mode
    """
    if not target.target:
        raise ValidationError(f"Empty target expression for {type(target).__name__}")

    extra: dict[str, Any] = dict(target.to_payload())

    if isinstance(auth, Credentials):
        endpoint = CREDENTIALS_ENDPOINT
        extra.update(auth.to_payload())
    else:
        endpoint = TOKEN_ENDPOINT

    if batch is not None:
        mode = ExecutionMode.LOCAL_BATCH
        extra["batch"] = str(batch)
    elif entrypoint is Entrypoint.ASYNC:
        mode = ExecutionMode.LOCAL_ASYNC
    elif entrypoint is Entrypoint.SSH:
        if not target.ssh_capable:
            raise ValidationError(f"{type(target).__name__} targets cannot be used with salt-ssh")
        mode = ExecutionMode.SSH
        endpoint = CREDENTIALS_ENDPOINT
        if ssh_config is not None:
            extra.update(ssh_config.to_payload())
    else:
        mode = ExecutionMode.LOCAL

    return Resolution(mode=mode, endpoint=endpoint, extra=extra)
