"""
==============================================================================
Wire Codec Module
==============================================================================

Byte encoding of command requests and results for single-datagram
transport.

Datagram Layout:
---------------
    +-------+---------+------------------------------+
    | "INV" | version | UTF-8 JSON body              |
    | 3 B   | 1 B     | rest of the datagram         |
    +-------+---------+------------------------------+

Request body:  {"kind": "request", "name": "...", "argument": "..."}
Result body:   {"kind": "result", "status_code": 0, "output": "..."}

Every field is tagged and typed, so a payload is self-describing and
never needs a language-native object serializer to read. The codec only
moves fields; it knows nothing about individual commands.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Literal, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from inventory.config import UDP_MAX_PAYLOAD
from inventory.core import exceptions
from inventory.core.exceptions import MalformedMessage, RequestTooLarge
from inventory.schemas import CommandRequest, CommandResult
from inventory.schemas.protocol import INT32_MAX, INT32_MIN


# Module logger
logger = logging.getLogger(__name__)


MAGIC = b"INV"
PROTOCOL_VERSION = 1
HEADER = MAGIC + bytes([PROTOCOL_VERSION])


# =============================================================================
# WIRE ENVELOPES
# =============================================================================

class _Envelope(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)


class RequestEnvelope(_Envelope):
    kind: Literal["request"] = "request"
    name: str
    argument: str


class ResultEnvelope(_Envelope):
    kind: Literal["result"] = "result"
    status_code: int = Field(..., ge=INT32_MIN, le=INT32_MAX)
    output: str


E = TypeVar("E", bound=_Envelope)


class WireCodec:
    """
    Encoder/decoder shared by server and client.

    Attributes:
        max_payload_size: Largest datagram the codec will produce

    Example:
        >>> codec = WireCodec()
        >>> data = codec.encode_request(CommandRequest(name="help"))
        >>> codec.decode_request(data).name
        'help'
    """

    def __init__(self, max_payload_size: int = UDP_MAX_PAYLOAD) -> None:
        if max_payload_size <= len(HEADER):
            raise ValueError(f"max_payload_size must exceed {len(HEADER)} bytes")
        self.max_payload_size = max_payload_size

    # =========================================================================
    # REQUESTS
    # =========================================================================

    def encode_request(self, request: CommandRequest) -> bytes:
        """
        Encode a request.

        Raises:
            RequestTooLarge: If the payload exceeds ``max_payload_size``
        """
        data = self._pack(RequestEnvelope(name=request.name, argument=request.argument))

        if len(data) > self.max_payload_size:
            raise RequestTooLarge(
                f"Request too large to send: {len(data)} bytes exceeds "
                f"the {self.max_payload_size} byte limit",
                details={"size": len(data), "limit": self.max_payload_size}
            )

        return data

    def decode_request(self, data: bytes) -> CommandRequest:
        """
        Decode a request.

        Raises:
            MalformedMessage: If the payload cannot be decoded
        """
        envelope = self._unpack(data, RequestEnvelope)
        return CommandRequest(name=envelope.name, argument=envelope.argument)

    # =========================================================================
    # RESULTS
    # =========================================================================

    def encode_result(self, result: CommandResult) -> bytes:
        """
        Encode a result.

        Raises:
            ResultTooLarge: If the payload exceeds ``max_payload_size``
        """
        data = self._pack(ResultEnvelope(status_code=int(result.status_code), output=result.output))

        if len(data) > self.max_payload_size:
            raise exceptions.result_too_large(len(data), self.max_payload_size)

        return data

    def decode_result(self, data: bytes) -> CommandResult:
        """
        Decode a result.

        Raises:
            MalformedMessage: If the payload cannot be decoded
        """
        envelope = self._unpack(data, ResultEnvelope)
        return CommandResult(status_code=envelope.status_code, output=envelope.output)

    # =========================================================================
    # FRAMING
    # =========================================================================

    @staticmethod
    def _pack(envelope: _Envelope) -> bytes:
        return HEADER + envelope.model_dump_json().encode("utf-8")

    @staticmethod
    def _unpack(data: bytes, envelope_type: Type[E]) -> E:
        if len(data) < len(HEADER):
            raise MalformedMessage(f"Payload too short ({len(data)} bytes)")

        if data[:len(MAGIC)] != MAGIC:
            raise MalformedMessage("Payload does not start with the protocol marker")

        version = data[len(MAGIC)]
        if version != PROTOCOL_VERSION:
            raise MalformedMessage(
                f"Unsupported protocol version {version}",
                details={"version": version}
            )

        try:
            body = data[len(HEADER):].decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedMessage(f"Payload is not valid UTF-8: {e}") from e

        try:
            return envelope_type.model_validate_json(body)
        except ValidationError as e:
            raise MalformedMessage(
                f"Invalid {envelope_type.__name__}: {e.error_count()} error(s)",
                details={"errors": e.errors(include_url=False, include_context=False)}
            ) from e
