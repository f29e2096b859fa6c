"""
JSON codec driven by type descriptors.

decode() parses the raw response text and walks it alongside a descriptor,
producing plain Python values for primitives, lists and maps and result
objects for named wrappers. Any mismatch raises DecodeError with the JSON
path where it happened.

Wrappers are looked up by name, so new envelope types can be added with
register_wrapper() without touching the walker.
"""

import json
from typing import Any, Callable, Protocol

from netapi.core.exceptions import DecodeError
from netapi.results.envelope import Envelope
from netapi.results.job import AsyncJobHandle
from netapi.results.result import GENERIC, Err, Ok, SaltError, SSHResult, parse_salt_error
from netapi.results.session import Stats, Token
from netapi.types import (
    ASYNC_JOB,
    RESULT,
    RETURN,
    SSH_RESULT,
    STATS,
    TOKEN,
    ListOf,
    MapOf,
    Primitive,
    TypeDescriptor,
    Wrapper,
)


class Codec(Protocol):
    def decode(self, raw: str, descriptor: TypeDescriptor) -> Any:
        ...


WrapperDecoder = Callable[["JsonCodec", Any, TypeDescriptor, str], Any]


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _require_object(value: Any, what: str, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(f"Expected an object for {what}, got {_describe(value)}", path)
    return value


class JsonCodec:
    """
    Decode JSON text against a TypeDescriptor.

    Usage:
        codec = JsonCodec()
        codec.decode('{"return": [{"m1": true}]}', ExecutionMode.LOCAL.compose(BOOL))
        # Envelope(value=[{"m1": Ok(True)}])
    """

    def __init__(self):
        self._wrappers: dict[str, WrapperDecoder] = dict(DEFAULT_WRAPPERS)

    def register_wrapper(self, name: str, decoder: WrapperDecoder) -> None:
        """Add or replace the decoder for Wrapper(name, ...) descriptors."""
        self._wrappers[name] = decoder

    def decode(self, raw: str, descriptor: TypeDescriptor) -> Any:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            raise DecodeError(f"Malformed JSON response: {e}") from e
        return self.decode_value(data, descriptor, "$")

    def decode_value(self, value: Any, descriptor: TypeDescriptor, path: str = "$") -> Any:
        if isinstance(descriptor, Primitive):
            return self._decode_primitive(value, descriptor, path)

        if isinstance(descriptor, ListOf):
            if not isinstance(value, list):
                raise DecodeError(f"Expected an array, got {_describe(value)}", path)
            return [self.decode_value(item, descriptor.item, f"{path}[{i}]") for i, item in enumerate(value)]

        if isinstance(descriptor, MapOf):
            if not isinstance(value, dict):
                raise DecodeError(f"Expected an object, got {_describe(value)}", path)
            return {
                self._decode_key(key, descriptor.key, path): self.decode_value(item, descriptor.value, f"{path}.{key}")
                for key, item in value.items()
            }

        if isinstance(descriptor, Wrapper):
            decoder = self._wrappers.get(descriptor.name)
            if decoder is None:
                raise DecodeError(f"No decoder registered for {descriptor.name}", path)
            return decoder(self, value, descriptor.inner, path)

        raise TypeError(f"Not a type descriptor: {descriptor!r}")

    def _decode_primitive(self, value: Any, descriptor: Primitive, path: str) -> Any:
        kind = descriptor.kind
        if kind == "any":
            return value
        if kind == "none":
            if value is None:
                return None
        elif kind == "str":
            if isinstance(value, str):
                return value
        elif kind == "bool":
            if isinstance(value, bool):
                return value
        elif kind == "int":
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        elif kind == "float":
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        raise DecodeError(f"Expected {kind}, got {_describe(value)}", path)

    def _decode_key(self, key: str, descriptor: TypeDescriptor, path: str) -> Any:
        if descriptor.kind == "int":
            try:
                return int(key)
            except ValueError:
                raise DecodeError(f"Expected an integer key, got {key!r}", path) from None
        return key


# =============================================================================
# Wrapper decoders
# =============================================================================


def _decode_return(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> Envelope[Any]:
    body = _require_object(value, "the response envelope", path)
    if "return" not in body:
        raise DecodeError("Response has no 'return' key", path)
    return Envelope(codec.decode_value(body["return"], inner, f"{path}.return"))


_BATCH_KEYS = ({"ret"}, {"ret", "retcode"})


def _decode_result(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> Any:
    # Batch waves report {"ret": <value>, "retcode": <int>} per minion.
    if isinstance(value, dict) and set(value) in _BATCH_KEYS:
        return _decode_result(codec, value["ret"], inner, f"{path}.ret")
    if isinstance(value, str):
        error = parse_salt_error(value)
        if error is not None:
            return Err(error)
    try:
        return Ok(codec.decode_value(value, inner, path))
    except DecodeError:
        # Some masters add fields such as jid next to ret.
        if isinstance(value, dict) and "ret" in value:
            return _decode_result(codec, value["ret"], inner, f"{path}.ret")
        if isinstance(value, str):
            return Err(SaltError(GENERIC, value))
        raise


def _decode_ssh_result(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> SSHResult[Any]:
    body = _require_object(value, "an ssh result", path)
    return_value = body.get("return")
    if return_value is not None:
        return_value = codec.decode_value(return_value, inner, f"{path}.return")
    return SSHResult(
        return_value=return_value,
        retcode=body.get("retcode"),
        stdout=body.get("stdout"),
        stderr=body.get("stderr"),
        fun=body.get("fun"),
        fun_args=list(body.get("fun_args") or []),
        id=body.get("id"),
        jid=body.get("jid"),
    )


def _decode_async_job(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> AsyncJobHandle[Any]:
    body = _require_object(value, "a job handle", path)
    jid = body.get("jid")
    if jid is not None and not isinstance(jid, str):
        raise DecodeError(f"Expected a string jid, got {_describe(jid)}", f"{path}.jid")
    minions = body.get("minions") or []
    if not isinstance(minions, list):
        raise DecodeError(f"Expected an array of minions, got {_describe(minions)}", f"{path}.minions")
    return AsyncJobHandle(jid=jid, minions=[str(m) for m in minions], return_type=inner)


def _decode_token(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> Token:
    body = _require_object(value, "a token", path)
    token = body.get("token")
    if not isinstance(token, str):
        raise DecodeError(f"Expected a string token, got {_describe(token)}", f"{path}.token")
    return Token(
        token=token,
        start=body.get("start"),
        expire=body.get("expire"),
        user=body.get("user"),
        eauth=body.get("eauth"),
        perms=list(body.get("perms") or []),
    )


def _decode_stats(codec: JsonCodec, value: Any, inner: TypeDescriptor, path: str) -> Stats:
    body = _require_object(value, "server statistics", path)
    server: dict[str, Any] = {}
    for key, section in body.items():
        if key.startswith("CherryPy HTTPServer"):
            server = section
            break
    return Stats(applications=body.get("CherryPy Applications", {}), server=server)


DEFAULT_WRAPPERS: dict[str, WrapperDecoder] = {
    RETURN: _decode_return,
    RESULT: _decode_result,
    SSH_RESULT: _decode_ssh_result,
    ASYNC_JOB: _decode_async_job,
    TOKEN: _decode_token,
    STATS: _decode_stats,
}
