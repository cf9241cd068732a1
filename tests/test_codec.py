"""
==============================================================================
Wire Codec Tests
==============================================================================

Tests for request/result encoding, size limits and malformed payloads.

==============================================================================
"""

import json

import pytest

from inventory.core import MalformedMessage, RequestTooLarge, ResultTooLarge
from inventory.network import WireCodec
from inventory.network.codec import HEADER
from inventory.schemas import CommandRequest, CommandResult, StatusCode


@pytest.fixture
def codec() -> WireCodec:
    return WireCodec(max_payload_size=1024)


def _body(payload: dict) -> bytes:
    return HEADER + json.dumps(payload).encode("utf-8")


class TestRoundTrip:
    """Tests for decode(encode(x)) == x."""

    @pytest.mark.parametrize("request_", [
        CommandRequest(name="help"),
        CommandRequest(name="add", argument="Flour 5 kilograms 2.40"),
        CommandRequest(name="filter_by_category", argument="молоко \"quoted\" \n tab\t"),
        CommandRequest(name="", argument=""),
    ])
    def test_request(self, codec: WireCodec, request_: CommandRequest):
        """Test requests survive encoding."""
        assert codec.decode_request(codec.encode_request(request_)) == request_

    @pytest.mark.parametrize("result", [
        CommandResult.success("done"),
        CommandResult.failure(StatusCode.UNKNOWN_COMMAND, "Unknown command: 'fake'"),
        CommandResult(status_code=-(2 ** 31), output=""),
        CommandResult(status_code=2 ** 31 - 1, output="ünïcødé ✓"),
    ])
    def test_result(self, codec: WireCodec, result: CommandResult):
        """Test results survive encoding."""
        assert codec.decode_result(codec.encode_result(result)) == result

    def test_payload_starts_with_header(self, codec: WireCodec):
        """Test the version header is written."""
        assert codec.encode_request(CommandRequest(name="info")).startswith(HEADER)


class TestSizeLimit:
    """Tests for the single-datagram size limit."""

    def test_result_too_large(self, codec: WireCodec):
        """Test an oversized result is refused."""
        with pytest.raises(ResultTooLarge) as exc_info:
            codec.encode_result(CommandResult.success("x" * 2000))
        assert exc_info.value.status_code == StatusCode.RESULT_TOO_LARGE

    def test_request_too_large(self, codec: WireCodec):
        """Test an oversized request is refused."""
        with pytest.raises(RequestTooLarge):
            codec.encode_request(CommandRequest(name="add", argument="x" * 2000))

    def test_payload_at_limit_is_accepted(self, codec: WireCodec):
        """Test a payload of exactly the limit encodes."""
        overhead = len(codec.encode_result(CommandResult.success("")))
        data = codec.encode_result(CommandResult.success("x" * (1024 - overhead)))
        assert len(data) == 1024

    def test_default_limit_fits_udp(self):
        """Test the default limit is the largest UDP payload."""
        assert WireCodec().max_payload_size == 65507


class TestMalformed:
    """Tests for MalformedMessage on bad input."""

    @pytest.mark.parametrize("data", [
        b"",
        b"IN",
        b"XYZ\x01{}",
        b"INV\x02" + b'{"kind": "request", "name": "help", "argument": ""}',
        HEADER + b"\xff\xfe",
        HEADER + b"{not json",
        HEADER + b"[]",
        _body({"kind": "result", "status_code": 0, "output": ""}),
        _body({"kind": "request", "name": "help"}),
        _body({"kind": "request", "name": 5, "argument": ""}),
        _body({"kind": "request", "name": "help", "argument": "", "extra": 1}),
    ])
    def test_bad_request(self, codec: WireCodec, data: bytes):
        """Test undecodable requests raise MalformedMessage."""
        with pytest.raises(MalformedMessage):
            codec.decode_request(data)

    @pytest.mark.parametrize("data", [
        _body({"kind": "request", "name": "help", "argument": ""}),
        _body({"kind": "result", "status_code": "0", "output": ""}),
        _body({"kind": "result", "status_code": 1.5, "output": ""}),
        _body({"kind": "result", "status_code": 2 ** 31, "output": ""}),
        _body({"kind": "result", "output": ""}),
    ])
    def test_bad_result(self, codec: WireCodec, data: bytes):
        """Test undecodable results raise MalformedMessage."""
        with pytest.raises(MalformedMessage):
            codec.decode_result(data)

    def test_pickle_payload_rejected(self, codec: WireCodec):
        """Test a native object stream is not accepted."""
        import pickle

        data = pickle.dumps({"name": "help", "argument": ""})
        with pytest.raises(MalformedMessage):
            codec.decode_request(data)
