"""
Unit Tests for the descriptor-driven JSON codec.
"""

import json
from typing import Any

import pytest

from netapi.calls.modes import ExecutionMode
from netapi.client.codec import JsonCodec
from netapi.core.exceptions import DecodeError
from netapi.results.envelope import Envelope
from netapi.results.job import AsyncJobHandle
from netapi.results.result import FUNCTION_NOT_AVAILABLE, GENERIC, NO_RESPONSE, Err, Ok, SSHResult
from netapi.types import ANY, BOOL, FLOAT, INT, NONE, STR, ListOf, MapOf, Wrapper, as_descriptor


@pytest.fixture
def codec() -> JsonCodec:
    return JsonCodec()


class TestPrimitives:
    """Tests for primitive decoding."""

    @pytest.mark.parametrize(
        "raw, descriptor, expected",
        [
            ('"x"', STR, "x"),
            ("3", INT, 3),
            ("3", FLOAT, 3.0),
            ("2.5", FLOAT, 2.5),
            ("true", BOOL, True),
            ("null", NONE, None),
            ('{"a": [1]}', ANY, {"a": [1]}),
        ],
    )
    def test_accepts(self, codec, raw, descriptor, expected):
        assert codec.decode(raw, descriptor) == expected

    @pytest.mark.parametrize(
        "raw, descriptor",
        [
            ("1", STR),
            ('"1"', INT),
            ("true", INT),
            ("1.5", INT),
            ("1", BOOL),
            ("false", FLOAT),
            ("0", NONE),
        ],
    )
    def test_rejects(self, codec, raw, descriptor):
        with pytest.raises(DecodeError):
            codec.decode(raw, descriptor)

    def test_float_result_is_float(self, codec):
        assert isinstance(codec.decode("3", FLOAT), float)


class TestContainers:
    """Tests for list and map decoding."""

    def test_nested_types_are_checked_at_depth(self, codec):
        """A numeric leaf three maps deep must be told apart from a string leaf."""
        descriptor = as_descriptor(dict[str, dict[str, dict[str, int]]])

        assert codec.decode('{"a": {"b": {"c": 1}}}', descriptor) == {"a": {"b": {"c": 1}}}
        with pytest.raises(DecodeError) as exc_info:
            codec.decode('{"a": {"b": {"c": "1"}}}', descriptor)
        assert exc_info.value.path == "$.a.b.c"

    def test_list_error_path(self, codec):
        with pytest.raises(DecodeError) as exc_info:
            codec.decode('[1, 2, "x"]', ListOf(INT))
        assert exc_info.value.path == "$[2]"

    def test_int_keys(self, codec):
        assert codec.decode('{"1": "a", "2": "b"}', MapOf(INT, STR)) == {1: "a", 2: "b"}

    def test_bad_int_key(self, codec):
        with pytest.raises(DecodeError):
            codec.decode('{"one": "a"}', MapOf(INT, STR))

    def test_list_where_map_expected(self, codec):
        with pytest.raises(DecodeError):
            codec.decode("[]", MapOf(STR, ANY))


class TestMalformed:
    """Tests for unparseable input."""

    @pytest.mark.parametrize("raw", ["", "{", "<html>Bad Gateway</html>"])
    def test_malformed_json(self, codec, raw):
        with pytest.raises(DecodeError, match="Malformed JSON"):
            codec.decode(raw, ANY)

    def test_unknown_wrapper(self, codec):
        with pytest.raises(DecodeError, match="No decoder registered"):
            codec.decode("{}", Wrapper("Mystery", ANY))

    def test_register_wrapper(self, codec):
        codec.register_wrapper("Upper", lambda c, value, inner, path: c.decode_value(value, inner, path).upper())

        assert codec.decode('"abc"', Wrapper("Upper", STR)) == "ABC"


class TestLocalEnvelope:
    """Tests for decoding LOCAL / LOCAL_BATCH responses."""

    def test_ret_wrapped_value(self, codec):
        """{"ret": ...} per node should decode to Ok of the inner value."""
        envelope = codec.decode('{"return":[{"nodeA":{"ret":"ok"}}]}', ExecutionMode.LOCAL.compose(STR))

        assert envelope == Envelope([{"nodeA": Ok("ok")}])

    def test_plain_value(self, codec):
        envelope = codec.decode('{"return":[{"minion1":true}]}', ExecutionMode.LOCAL.compose(BOOL))

        assert envelope.value == [{"minion1": Ok(True)}]

    def test_node_errors_are_values(self, codec):
        raw = json.dumps({
            "return": [{
                "m1": True,
                "m2": "'test.pingg' is not available.",
                "m3": "Minion did not return. [No response]",
                "m4": "some other failure",
            }]
        })

        nodes = codec.decode(raw, ExecutionMode.LOCAL.compose(BOOL)).value[0]

        assert nodes["m1"] == Ok(True)
        assert nodes["m2"].error.kind == FUNCTION_NOT_AVAILABLE
        assert nodes["m3"].error.kind == NO_RESPONSE
        assert nodes["m4"] == Err(nodes["m4"].error)
        assert nodes["m4"].error.kind == GENERIC

    def test_string_return_type_keeps_plain_strings(self, codec):
        raw = '{"return":[{"m1":"up 3 days","m2":"\'cmd.runn\' is not available."}]}'

        nodes = codec.decode(raw, ExecutionMode.LOCAL.compose(STR)).value[0]

        assert nodes["m1"] == Ok("up 3 days")
        assert nodes["m2"].is_err

    def test_shape_mismatch_is_decode_error(self, codec):
        """A node value that is neither R nor an error message fails the decode."""
        with pytest.raises(DecodeError):
            codec.decode('{"return":[{"m1":[1,2]}]}', ExecutionMode.LOCAL.compose(BOOL))

    def test_missing_return_key(self, codec):
        with pytest.raises(DecodeError, match="'return'"):
            codec.decode('{"result": []}', ExecutionMode.LOCAL.compose(BOOL))

    def test_batch_waves_preserve_order(self, codec):
        raw = '{"return":[{"m2":{"ret":true,"retcode":0}},{"m1":{"ret":false,"retcode":0}}]}'

        envelope = codec.decode(raw, ExecutionMode.LOCAL_BATCH.compose(BOOL))

        assert envelope.value == [{"m2": Ok(True)}, {"m1": Ok(False)}]

    def test_batch_wave_with_map_return_type(self, codec):
        """The ret/retcode wrapper should be removed even when it would decode as R."""
        raw = '{"return":[{"m1":{"ret":{"os":"SUSE"},"retcode":0}}]}'

        envelope = codec.decode(raw, ExecutionMode.LOCAL_BATCH.compose(as_descriptor(dict[str, Any])))

        assert envelope.value == [{"m1": Ok({"os": "SUSE"})}]

    def test_batch_wave_with_any_return_type(self, codec):
        raw = '{"return":[{"m1":{"ret":[1, 2],"retcode":0}},{"m2":{"ret":"done"}}]}'

        envelope = codec.decode(raw, ExecutionMode.LOCAL_BATCH.compose(ANY))

        assert envelope.value == [{"m1": Ok([1, 2])}, {"m2": Ok("done")}]

    def test_batch_wave_error_message(self, codec):
        raw = '{"return":[{"m1":{"ret":"\'grains.itemz\' is not available.","retcode":254}}]}'

        result = codec.decode(raw, ExecutionMode.LOCAL_BATCH.compose(MapOf(STR, ANY))).value[0]["m1"]

        assert result.error.kind == FUNCTION_NOT_AVAILABLE

    def test_map_with_other_keys_is_kept(self, codec):
        raw = '{"return":[{"m1":{"ret":1,"retcode":0,"extra":true}}]}'

        envelope = codec.decode(raw, ExecutionMode.LOCAL.compose(MapOf(STR, ANY)))

        assert envelope.value == [{"m1": Ok({"ret": 1, "retcode": 0, "extra": True})}]


class TestAsyncEnvelope:
    """Tests for decoding LOCAL_ASYNC responses."""

    def test_job_handle_keeps_return_type(self, codec):
        raw = '{"return":[{"jid":"20240101120000000000","minions":["m1","m2"]}]}'

        handle = codec.decode(raw, ExecutionMode.LOCAL_ASYNC.compose(INT)).value[0]

        assert handle == AsyncJobHandle(jid="20240101120000000000", minions=["m1", "m2"], return_type=INT)

    def test_no_matched_minions(self, codec):
        handle = codec.decode('{"return":[{}]}', ExecutionMode.LOCAL_ASYNC.compose(INT)).value[0]

        assert handle.jid is None
        assert handle.minions == []


class TestSSHEnvelope:
    """Tests for decoding SSH responses."""

    def test_ssh_result(self, codec):
        raw = json.dumps({
            "return": [{
                "host1": {
                    "return": {"os": "SUSE"},
                    "retcode": 0,
                    "stdout": "",
                    "stderr": "",
                    "fun": "grains.item",
                    "fun_args": ["os"],
                    "id": "host1",
                    "jid": "20240101",
                }
            }]
        })

        nodes = codec.decode(raw, ExecutionMode.SSH.compose(MapOf(STR, STR))).value[0]

        assert nodes["host1"] == Ok(SSHResult(
            return_value={"os": "SUSE"},
            retcode=0,
            stdout="",
            stderr="",
            fun="grains.item",
            fun_args=["os"],
            id="host1",
            jid="20240101",
        ))

    def test_ssh_failure_without_return(self, codec):
        raw = '{"return":[{"host1":{"retcode":255,"stderr":"Permission denied"}}]}'

        result = codec.decode(raw, ExecutionMode.SSH.compose(BOOL)).value[0]["host1"].unwrap()

        assert result.return_value is None
        assert result.retcode == 255
        assert result.stderr == "Permission denied"

    def test_ssh_return_is_type_checked(self, codec):
        with pytest.raises(DecodeError):
            codec.decode('{"return":[{"h":{"return":"yes"}}]}', ExecutionMode.SSH.compose(BOOL))
