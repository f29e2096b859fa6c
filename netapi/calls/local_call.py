"""
Call descriptor for execution module functions.

A LocalCall describes one function invocation (name, arguments, declared
return type) independently of where and how it is run. The same descriptor
can be dispatched synchronously, as a background job, in batches or over
salt-ssh:

    ping = LocalCall("test.ping", return_type=bool)

    ping.call_sync(client, Glob("*"))
    # {"minion1": Ok(True), "minion2": Err(SaltError(...))}

    ping.call_sync(client, Glob("*"), batch=Batch.percent(50))
    # [{"minion1": Ok(True)}, {"minion2": Ok(True)}]

    ping.call_async(client, Glob("*"))
    # AsyncJobHandle(jid="20240101...", minions=["minion1", "minion2"], ...)
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Generic, Mapping, Sequence, TypeVar

from netapi.calls.auth import AuthContext
from netapi.calls.batch import Batch
from netapi.calls.modes import Entrypoint
from netapi.calls.ssh import SSHConfig
from netapi.calls.targets import Target
from netapi.core.exceptions import ValidationError
from netapi.results.job import AsyncJobHandle
from netapi.results.result import Result, SSHResult
from netapi.types import ANY, TypeDescriptor, as_descriptor

if TYPE_CHECKING:
    from netapi.client.client import NetApiClient

R = TypeVar("R")


@dataclass(frozen=True)
class LocalCall(Generic[R]):
    """
    Immutable description of an execution module call.

    Attributes:
        function_name: Module function, e.g. "cmd.run"
        arg: Positional arguments, omitted from the request when None
        kwarg: Keyword arguments, omitted from the request when None
        return_type: Declared return type; a type hint (bool, dict[str, int])
            or a TypeDescriptor
        metadata: Opaque value attached to the job for tracing, omitted when None
    """

    function_name: str
    arg: Sequence[Any] | None = None
    kwarg: Mapping[str, Any] | None = None
    return_type: Any = field(default=ANY)
    metadata: Any = None

    def __post_init__(self):
        object.__setattr__(self, "return_type", as_descriptor(self.return_type))
        if isinstance(self.arg, (str, bytes)):
            raise ValidationError(f"arg must be a sequence of arguments, not {type(self.arg).__name__}")
        if self.arg is not None:
            object.__setattr__(self, "arg", tuple(self.arg))
        if self.kwarg is not None:
            object.__setattr__(self, "kwarg", dict(self.kwarg))

    @property
    def descriptor(self) -> TypeDescriptor:
        return self.return_type

    def with_metadata(self, metadata: Any) -> "LocalCall[R]":
        """Return a copy of this call carrying metadata."""
        return replace(self, metadata=metadata)

    def without_metadata(self) -> "LocalCall[R]":
        """Return a copy of this call without metadata."""
        return replace(self, metadata=None)

    def validate(self) -> None:
        if not self.function_name:
            raise ValidationError("Function name must not be empty")

    def get_payload(self) -> dict[str, Any]:
        """Request fields describing the function invocation."""
        payload: dict[str, Any] = {"fun": self.function_name}
        if self.arg is not None:
            payload["arg"] = list(self.arg)
        if self.kwarg is not None:
            payload["kwarg"] = dict(self.kwarg)
        if self.metadata is not None:
            payload["metadata"] = self.metadata
        return payload

    def call_sync(
        self,
        client: "NetApiClient",
        target: Target,
        batch: Batch | None = None,
        auth: AuthContext | None = None,
    ) -> dict[str, Result[R]] | list[dict[str, Result[R]]]:
        """
        Run the function and wait for the results.

        Without a batch, returns a mapping of minion id to Result. With a
        batch, returns one such mapping per wave in the order the backend
        reported them.
        """
        return client.dispatch(self, target, Entrypoint.SYNC, batch=batch, auth=auth)

    def call_async(
        self,
        client: "NetApiClient",
        target: Target,
        auth: AuthContext | None = None,
    ) -> AsyncJobHandle[R]:
        """Schedule the function as a background job and return its handle."""
        return client.dispatch(self, target, Entrypoint.ASYNC, auth=auth)

    def call_sync_ssh(
        self,
        client: "NetApiClient",
        target: Target,
        ssh_config: SSHConfig | None = None,
        auth: AuthContext | None = None,
    ) -> dict[str, Result[SSHResult[R]]]:
        """Run the function over salt-ssh and wait for the results."""
        return client.dispatch(self, target, Entrypoint.SSH, auth=auth, ssh_config=ssh_config)
