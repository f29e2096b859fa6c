"""
Per-node outcomes.

Result is a tagged union: Ok(value) when a node ran the function and
returned a value of the declared type, Err(error) when it did not. A failed
node never fails the call as a whole.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")

FUNCTION_NOT_AVAILABLE = "function_not_available"
MODULE_NOT_SUPPORTED = "module_not_supported"
NO_RESPONSE = "no_response"
GENERIC = "generic"

_FUNCTION_NOT_AVAILABLE_RE = re.compile(r"^'(?P<name>[^']+)' is not available\.?$")
_MODULE_NOT_SUPPORTED_RE = re.compile(r"^'(?P<name>[^']+)' __virtual__ returned False")
_NO_RESPONSE_RE = re.compile(r"^Minion did not return\. \[(?P<reason>[^\]]*)\]$")


@dataclass(frozen=True)
class SaltError:
    """
    Error reported by a node instead of a return value.

    Attributes:
        kind: function_not_available, module_not_supported, no_response or generic
        message: The raw text the node returned
        subject: Function or module name, or the no-response reason, when the message names one
    """

    kind: str
    message: str
    subject: str | None = None

    def __str__(self) -> str:
        return self.message


def parse_salt_error(message: str) -> SaltError | None:
    """Recognise the error messages Salt returns in place of a result."""
    match = _FUNCTION_NOT_AVAILABLE_RE.match(message)
    if match:
        return SaltError(FUNCTION_NOT_AVAILABLE, message, match.group("name"))
    match = _MODULE_NOT_SUPPORTED_RE.match(message)
    if match:
        return SaltError(MODULE_NOT_SUPPORTED, message, match.group("name"))
    match = _NO_RESPONSE_RE.match(message)
    if match:
        return SaltError(NO_RESPONSE, message, match.group("reason"))
    return None


class Result(ABC, Generic[T]):
    """Common interface of Ok and Err."""

    is_ok: bool = False

    @property
    def is_err(self) -> bool:
        return not self.is_ok

    @abstractmethod
    def unwrap(self) -> T:
        ...

    @abstractmethod
    def unwrap_or(self, default: T) -> T:
        ...

    @abstractmethod
    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        ...


@dataclass(frozen=True)
class Ok(Result[T]):
    value: T
    is_ok = True

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err(Result[T]):
    error: SaltError
    is_ok = False

    def unwrap(self) -> T:
        raise ValueError(f"Called unwrap() on an Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        return Err(self.error)


@dataclass(frozen=True)
class SSHResult(Generic[T]):
    """
    Output of a function run over salt-ssh.

    return_value is None when the remote shell failed before the function
    produced a return (check retcode and stderr).
    """

    return_value: T | None = None
    retcode: int | None = None
    stdout: str | None = None
    stderr: str | None = None
    fun: str | None = None
    fun_args: list[Any] = field(default_factory=list)
    id: str | None = None
    jid: str | None = None
