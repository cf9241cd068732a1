"""
==============================================================================
UDP Command Server Module
==============================================================================

Serves catalog commands to independent clients over UDP.

State Machine:
-------------
    STOPPED --bind()--> LISTENING --stop()--> STOPPED

Receive Loop:
------------
1. Receive one datagram and its source address
2. Decode the request (malformed payloads are dropped, no reply)
3. Execute it through the CommandExecutor
4. Encode the result (an oversized result is replaced by an error result)
5. Send the reply to the source address

No per-request failure ends the loop. The receive call uses a short
timeout so ``stop()`` from another thread is observed promptly.

==============================================================================
"""

from __future__ import annotations

import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Optional, Tuple

from inventory.commands import CommandExecutor
from inventory.config import Settings, get_settings
from inventory.core import exceptions
from inventory.core.exceptions import MalformedMessage, ResultTooLarge
from inventory.schemas import CommandResult

from .codec import WireCodec


# Module logger
logger = logging.getLogger(__name__)


# Receive buffer; larger than any UDP payload
RECEIVE_BUFFER_SIZE = 65536

Address = Tuple[str, int]


class ServerState(str, Enum):
    STOPPED = "stopped"
    LISTENING = "listening"


class CommandServer:
    """
    UDP server answering one datagram with one datagram.

    Requests are handled inline on the receive thread, or on a worker pool
    when ``worker_threads`` > 0. The catalog lock keeps each request atomic
    in both modes.

    Example:
        >>> server = CommandServer(executor, port=0)
        >>> thread = server.start_background()
        >>> server.address
        ('0.0.0.0', 40123)
        >>> server.stop()
    """

    def __init__(
        self,
        executor: CommandExecutor,
        host: Optional[str] = None,
        port: Optional[int] = None,
        settings: Optional[Settings] = None,
        codec: Optional[WireCodec] = None,
        worker_threads: Optional[int] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._executor = executor
        self._host = host if host is not None else self._settings.host
        self._port = port if port is not None else self._settings.port
        self._codec = codec or WireCodec(self._settings.max_payload_size)
        self._worker_threads = (
            worker_threads if worker_threads is not None else self._settings.worker_threads
        )

        self._socket: Optional[socket.socket] = None
        self._state = ServerState.STOPPED
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._serving = threading.Event()
        self._address: Optional[Address] = None
        self._loop_done = threading.Event()
        self._loop_done.set()
        self._loop_thread: Optional[threading.Thread] = None

        self._stats_lock = threading.Lock()
        self._requests_served = 0
        self._packets_dropped = 0

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def address(self) -> Optional[Address]:
        """Bound (host, port), or None when stopped."""
        with self._state_lock:
            return self._address

    @property
    def requests_served(self) -> int:
        """Requests executed; counted before the reply is sent."""
        with self._stats_lock:
            return self._requests_served

    @property
    def packets_dropped(self) -> int:
        with self._stats_lock:
            return self._packets_dropped

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def bind(self) -> Address:
        """
        Bind the UDP endpoint and enter LISTENING.

        Returns:
            The bound (host, port)

        Raises:
            TransportUnavailable: If the endpoint cannot be bound
        """
        with self._state_lock:
            if self._socket is not None:
                return self._address

            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.bind((self._host, self._port))
            except OSError as e:
                sock.close()
                logger.error(f"❌ Cannot bind UDP {self._host}:{self._port}: {e}")
                raise exceptions.transport_unavailable(self._host, self._port, str(e)) from e

            sock.settimeout(self._settings.receive_timeout)
            host, port = sock.getsockname()[:2]
            self._socket = sock
            self._address = (host, port)
            self._state = ServerState.LISTENING

        logger.info(f"📡 Listening on udp://{host}:{port}")
        return host, port

    def start(self) -> None:
        """Bind and serve until ``stop()`` is called (blocking)."""
        self._stop_event.clear()
        self.bind()
        self.serve_forever()

    def start_background(self) -> threading.Thread:
        """
        Bind in the calling thread, then serve on a daemon thread.

        Raises:
            TransportUnavailable: If the endpoint cannot be bound
        """
        self._stop_event.clear()
        self.bind()
        # marked before the thread runs so an early stop() leaves cleanup to the loop
        self._mark_serving()
        thread = threading.Thread(
            target=self.serve_forever,
            name="inventory-udp-server",
            daemon=True
        )
        thread.start()
        return thread

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop serving and release the endpoint.

        Safe to call from any thread and more than once. When a receive
        loop is running, waits at most ``timeout`` seconds for it to close
        the endpoint; the state is STOPPED once this returns unless that
        wait timed out.
        """
        self._stop_event.set()

        if not self._serving.is_set():
            self._close()
            return

        if threading.current_thread() is self._loop_thread:
            return

        if timeout is None:
            timeout = self._settings.receive_timeout + 1.0
        if not self._loop_done.wait(timeout):
            logger.warning("Server loop still finishing its last receive")

    def wait_until_serving(self, timeout: Optional[float] = None) -> bool:
        """Block until the receive loop is running; False on timeout."""
        return self._serving.wait(timeout)

    def __enter__(self) -> "CommandServer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _mark_serving(self) -> None:
        self._loop_done.clear()
        self._serving.set()

    # =========================================================================
    # RECEIVE LOOP
    # =========================================================================

    def serve_forever(self) -> None:
        """
        Run the receive loop on a bound endpoint until stopped.

        Returns at once if the endpoint was already released by ``stop()``.
        """
        self._mark_serving()
        self._loop_thread = threading.current_thread()

        with self._state_lock:
            sock = self._socket

        if sock is None:
            logger.info("Endpoint released before serving started")
            self._finish_loop()
            return

        pool: Optional[ThreadPoolExecutor] = None
        if self._worker_threads > 0:
            pool = ThreadPoolExecutor(
                max_workers=self._worker_threads,
                thread_name_prefix="inventory-worker"
            )

        logger.info(
            f"🚀 Serving commands "
            f"({self._worker_threads or 'no'} worker threads)"
        )

        try:
            while not self._stop_event.is_set():
                try:
                    data, address = sock.recvfrom(RECEIVE_BUFFER_SIZE)
                except socket.timeout:
                    continue
                except OSError as e:
                    if self._stop_event.is_set():
                        break
                    logger.warning(f"Receive failed: {e}")
                    continue

                if pool is not None:
                    pool.submit(self._handle_datagram, sock, data, address)
                else:
                    self._handle_datagram(sock, data, address)
        finally:
            if pool is not None:
                pool.shutdown(wait=True)
            self._close()
            self._finish_loop()

    def _finish_loop(self) -> None:
        self._loop_thread = None
        self._serving.clear()
        self._loop_done.set()

    def _handle_datagram(self, sock: socket.socket, data: bytes, address: Address) -> None:
        """Decode, execute and answer one datagram; never raises."""
        try:
            self._answer(sock, data, address)
        except Exception:
            logger.exception(f"Unexpected error handling packet from {address[0]}:{address[1]}")

    def _answer(self, sock: socket.socket, data: bytes, address: Address) -> None:
        try:
            request = self._codec.decode_request(data)
        except MalformedMessage as e:
            with self._stats_lock:
                self._packets_dropped += 1
            logger.warning(f"Dropped malformed packet from {address[0]}:{address[1]}: {e.message}")
            return

        logger.debug(f"⬅️ {address[0]}:{address[1]} {request.name} {request.argument!r}")

        result = self._executor.execute(request.name, request.argument)
        payload = self._encode_result(result)

        with self._stats_lock:
            self._requests_served += 1

        try:
            sock.sendto(payload, address)
        except OSError as e:
            logger.warning(f"Reply to {address[0]}:{address[1]} failed: {e}")
            return

        logger.debug(f"➡️ {address[0]}:{address[1]} status={result.status_code} ({len(payload)} bytes)")

    def _encode_result(self, result: CommandResult) -> bytes:
        """Encode a result, substituting an error result when it is too large."""
        try:
            return self._codec.encode_result(result)
        except ResultTooLarge as e:
            logger.warning(e.message)
            return self._codec.encode_result(e.to_result())

    def _close(self) -> None:
        with self._state_lock:
            if self._socket is None:
                return
            self._socket.close()
            self._socket = None
            self._address = None
            self._state = ServerState.STOPPED

        logger.info("🛑 Server stopped")
