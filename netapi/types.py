"""
Runtime type descriptors.

A call's result shape depends on two things known only at the call site:
the declared return type of the remote function and the execution mode,
which adds a different number of wrapper layers. Descriptors describe that
shape as a value so it can be composed per call and handed to the codec:

    Primitive(kind)       str, int, float, bool, any, none
    ListOf(item)          JSON array
    MapOf(key, value)     JSON object; keys are str or int
    Wrapper(name, inner)  named envelope type decoded by the codec
                          (Return, Result, SSHResult, AsyncJobHandle, ...)

as_descriptor() turns ordinary type hints into descriptors:

    as_descriptor(dict[str, list[int]])
    # MapOf(key=Primitive('str'), value=ListOf(item=Primitive('int')))
"""

from dataclasses import dataclass
from typing import Any, get_args, get_origin

PRIMITIVE_KINDS = frozenset({"str", "int", "float", "bool", "any", "none"})

RETURN = "Return"
RESULT = "Result"
SSH_RESULT = "SSHResult"
ASYNC_JOB = "AsyncJobHandle"
TOKEN = "Token"
STATS = "Stats"


@dataclass(frozen=True)
class TypeDescriptor:
    """Base class for all descriptor nodes."""


@dataclass(frozen=True)
class Primitive(TypeDescriptor):
    kind: str

    def __post_init__(self):
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"Unknown primitive kind: {self.kind!r}")

    def __str__(self) -> str:
        return self.kind


@dataclass(frozen=True)
class ListOf(TypeDescriptor):
    item: TypeDescriptor

    def __str__(self) -> str:
        return f"List[{self.item}]"


@dataclass(frozen=True)
class MapOf(TypeDescriptor):
    key: TypeDescriptor
    value: TypeDescriptor

    def __post_init__(self):
        if self.key not in (STR, INT):
            raise ValueError(f"Map keys must be str or int, got {self.key}")

    def __str__(self) -> str:
        return f"Map[{self.key}, {self.value}]"


@dataclass(frozen=True)
class Wrapper(TypeDescriptor):
    name: str
    inner: TypeDescriptor

    def __str__(self) -> str:
        return f"{self.name}[{self.inner}]"


STR = Primitive("str")
INT = Primitive("int")
FLOAT = Primitive("float")
BOOL = Primitive("bool")
ANY = Primitive("any")
NONE = Primitive("none")

_PRIMITIVE_TYPES = {
    str: STR,
    int: INT,
    float: FLOAT,
    bool: BOOL,
    object: ANY,
}


def as_descriptor(tp: Any) -> TypeDescriptor:
    """
    Convert a type hint into a descriptor.

    Accepts str, int, float, bool, None, Any, object, list, dict, list[T]
    and dict[K, V] (nested freely). Descriptors are returned unchanged.

    Raises:
        TypeError: For hints with no JSON counterpart
    """
    if isinstance(tp, TypeDescriptor):
        return tp
    if tp is Any:
        return ANY
    if tp is None or tp is type(None):
        return NONE
    if tp in _PRIMITIVE_TYPES:
        return _PRIMITIVE_TYPES[tp]
    if tp is list:
        return ListOf(ANY)
    if tp is dict:
        return MapOf(STR, ANY)

    origin = get_origin(tp)
    args = get_args(tp)
    if origin is list:
        return ListOf(as_descriptor(args[0]) if args else ANY)
    if origin is dict:
        if not args:
            return MapOf(STR, ANY)
        return MapOf(as_descriptor(args[0]), as_descriptor(args[1]))

    raise TypeError(f"Unsupported return type: {tp!r}")


def return_of(inner: TypeDescriptor) -> Wrapper:
    return Wrapper(RETURN, inner)


def result_of(inner: TypeDescriptor) -> Wrapper:
    return Wrapper(RESULT, inner)


def ssh_result_of(inner: TypeDescriptor) -> Wrapper:
    return Wrapper(SSH_RESULT, inner)


def async_job_of(inner: TypeDescriptor) -> Wrapper:
    return Wrapper(ASYNC_JOB, inner)
