"""
==============================================================================
UDP Command Client Module
==============================================================================

Sends one request datagram and waits for one reply.

The transport may lose, duplicate or reorder datagrams and the protocol
carries no correlation id: the reply read is simply the first datagram
that arrives on the call's own socket before the timeout. No retries are
made here; callers decide whether a lost reply is worth resending.

==============================================================================
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from inventory.config import Settings, get_settings
from inventory.core.exceptions import RequestTimeout
from inventory.schemas import CommandRequest, CommandResult

from .codec import WireCodec


# Module logger
logger = logging.getLogger(__name__)


RECEIVE_BUFFER_SIZE = 65536

# Wildcard bind addresses are not valid destinations on every platform
_WILDCARD_HOSTS = {"", "0.0.0.0"}


class CommandClient:
    """
    Remote counterpart of ``Application.execute_command``.

    Example:
        >>> client = CommandClient("127.0.0.1", 52333)
        >>> client.execute("info").output
        'Collection type: ...'
    """

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        timeout: Optional[float] = None,
        settings: Optional[Settings] = None,
        codec: Optional[WireCodec] = None,
    ) -> None:
        settings = settings or get_settings()
        host = host if host is not None else settings.host
        self._host = "127.0.0.1" if host in _WILDCARD_HOSTS else host
        self._port = port if port is not None else settings.port
        self._timeout = timeout if timeout is not None else settings.client_timeout
        self._codec = codec or WireCodec(settings.max_payload_size)

    def execute(self, name: str, argument: str = "") -> CommandResult:
        """
        Execute a command on the server.

        Args:
            name: Command name
            argument: Raw argument string

        Returns:
            The decoded CommandResult

        Raises:
            RequestTooLarge: If the request does not fit in one datagram
            RequestTimeout: If no reply arrives within the timeout
            MalformedMessage: If the reply cannot be decoded
        """
        data = self._codec.encode_request(CommandRequest(name=name, argument=argument or ""))
        return self._codec.decode_result(self.send_raw(data))

    def send_raw(self, data: bytes) -> bytes:
        """
        Send an already encoded datagram and return the raw reply.

        Raises:
            RequestTimeout: If no reply arrives within the timeout
        """
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(self._timeout)
            sock.sendto(data, (self._host, self._port))
            logger.debug(f"Sent {len(data)} bytes to {self._host}:{self._port}")

            try:
                reply, _ = sock.recvfrom(RECEIVE_BUFFER_SIZE)
            except socket.timeout:
                raise RequestTimeout(
                    f"No reply from {self._host}:{self._port} within {self._timeout}s",
                    details={"host": self._host, "port": self._port}
                ) from None

        return reply
