"""
Handle for a job scheduled with the local_async client.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from netapi.types import ANY, TypeDescriptor

R = TypeVar("R")


@dataclass(frozen=True)
class AsyncJobHandle(Generic[R]):
    """
    Identifies a job the backend is running in the background.

    The backend answers an async call as soon as the job is published, so
    jid and the list of targeted minions are all that is known at that
    point. return_type keeps the declared result type of the call so the
    job's results can later be decoded against it.

    jid is None when the target matched no minions.
    """

    jid: str | None = None
    minions: list[str] = field(default_factory=list)
    return_type: TypeDescriptor = ANY
