"""
==============================================================================
UDP Server Integration Tests
==============================================================================

Client/server tests over a real loopback UDP socket.

The transport gives no delivery, ordering or deduplication guarantees and
the protocol has no correlation id; these tests pin down that behavior
rather than compensate for it.

==============================================================================
"""

import re
import socket
import threading

import pytest

from inventory.config import Settings
from inventory.core import RequestTimeout, TransportUnavailable
from inventory.main import Application
from inventory.network import CommandClient, CommandServer, ServerState, WireCodec
from inventory.schemas import CommandRequest, StatusCode


def _last_number(text: str) -> int:
    return int(re.findall(r"\d+", text)[-1])


class TestTransportTransparency:
    """Remote results equal local results for the same catalog state."""

    @pytest.mark.parametrize("name, argument", [
        ("help", ""),
        ("info", ""),
        ("show", ""),
        ("filter_by_unit_of_measure", "pcs"),
        ("filter_by_category", "dairy"),
        ("filter_greater_than_price", "1"),
        ("show", "1 2 3 4 5"),
        ("filter_by_unit_of_measure", "1 2 3 4 5"),
        ("filter_by_unit_of_measure", "parsecs"),
        ("fake", "command"),
        ("add", "1 2 3"),
    ])
    def test_read_and_failing_commands(self, app: Application, client: CommandClient,
                                       name: str, argument: str):
        """Test local and remote results are identical."""
        expected = app.execute_command(name, argument)
        result = client.execute(name, argument)

        assert result.status_code == expected.status_code
        assert result.output == expected.output

    def test_help_scenario(self, app: Application, client: CommandClient):
        """Test help lists every registered command in order."""
        result = client.execute("help", "")

        assert result.status_code == 0
        for name, description in app.registry.entries():
            assert f"{name}: {description}" in result.output

    def test_unknown_command(self, client: CommandClient):
        """Test an unknown command reports a non-zero status."""
        result = client.execute("fake", "command")
        assert result.status_code == StatusCode.UNKNOWN_COMMAND
        assert "Unknown command" in result.output

    def test_wrong_arity(self, client: CommandClient):
        """Test show with five arguments fails remotely."""
        assert client.execute("show", "1 2 3 4 5").status_code != 0
        assert client.execute("filter_by_unit_of_measure", "1 2 3 4 5").status_code != 0

    def test_product_add_error(self, client: CommandClient):
        """Test add with bad arguments fails remotely."""
        assert client.execute("add", "1 2 3").status_code != 0

    def test_product_count_matches(self, app: Application, client: CommandClient):
        """Test catalog size, local info and remote info agree."""
        naive = app.catalog.size
        local = _last_number(app.execute_command("info").output)
        remote = _last_number(client.execute("info").output)

        assert naive == local == remote == 3

    def test_remote_mutation_visible_locally(self, app: Application, client: CommandClient):
        """Test the server mutates the shared catalog."""
        assert client.execute("add", "Flour 5 kilograms 2.40").ok
        assert app.catalog.get(4).name == "Flour"

        assert client.execute("clear").ok
        assert app.execute_command("show").output == "Catalog is empty"


class TestUnreliableTransport:
    """Behavior under duplication and reordering."""

    def test_duplicate_read_only_request(self, app: Application, client: CommandClient):
        """Test sending a read-only request twice equals sending it once."""
        client.execute("info", "")
        second = client.execute("info", "")

        assert second == app.execute_command("info", "")

    def test_duplicate_add_executes_twice(self, app: Application, client: CommandClient):
        """Test a duplicated mutating request is applied twice (not idempotent)."""
        first = client.execute("add", "Flour 5 kilograms 2.40")
        second = client.execute("add", "Flour 5 kilograms 2.40")

        assert first.ok and second.ok
        assert first.output != second.output
        assert [p.name for p in app.catalog.all()].count("Flour") == 2

    def test_duplicate_datagram_gets_two_replies(self, server: CommandServer):
        """Test the same datagram sent twice is answered twice."""
        codec = WireCodec()
        data = codec.encode_request(CommandRequest(name="add", argument="Salt 1 grams 0.1"))

        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(2)
            sock.sendto(data, server.address)
            sock.sendto(data, server.address)
            replies = [codec.decode_result(sock.recvfrom(65536)[0]) for _ in range(2)]

        assert [r.ok for r in replies] == [True, True]
        assert replies[0].output != replies[1].output
        assert server.requests_served == 2

    def test_replies_pair_by_arrival_only(self, app: Application, server: CommandServer):
        """Test replies carry no correlation id: pairing follows arrival order."""
        codec = WireCodec()

        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(2)
            sock.sendto(codec.encode_request(CommandRequest(name="info")), server.address)
            sock.sendto(codec.encode_request(CommandRequest(name="help")), server.address)
            first = codec.decode_result(sock.recvfrom(65536)[0])
            second = codec.decode_result(sock.recvfrom(65536)[0])

        # Nothing in a reply says which request it answers
        assert first == app.execute_command("info")
        assert second == app.execute_command("help")
        assert set(first.model_dump()) == {"status_code", "output"}

    def test_lost_request_is_retried_by_caller(self, app: Application, client: CommandClient):
        """Test a caller-side retry loop recovers from lost datagrams."""
        expected = app.execute_command("help")
        result = None

        # drop every other attempt to simulate loss
        for attempt in range(4):
            if attempt % 2 == 0:
                continue
            result = client.execute("help")
            if result.status_code == expected.status_code:
                break

        assert result == expected


class TestServerRobustness:
    """Per-request failures never stop the server."""

    def test_malformed_packet_dropped(self, server: CommandServer, client: CommandClient):
        """Test garbage gets no reply and the server keeps serving."""
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.settimeout(0.3)
            sock.sendto(b"\x00garbage", server.address)
            with pytest.raises(socket.timeout):
                sock.recvfrom(65536)

        assert client.execute("info").ok
        assert server.packets_dropped == 1
        assert server.requests_served == 1

    def test_handler_crash_does_not_stop_loop(self, app: Application, settings: Settings):
        """Test an unexpected error while answering one packet is contained."""
        executor = app.executor

        class FlakyExecutor:
            def execute(self, name, argument=""):
                if name == "explode":
                    raise RuntimeError("boom")
                return executor.execute(name, argument)

        server = CommandServer(FlakyExecutor(), host="127.0.0.1", port=0, settings=settings)
        with server:
            server.start_background()
            client = CommandClient(*server.address, timeout=0.3, settings=settings)

            with pytest.raises(RequestTimeout):
                client.execute("explode")

            assert client.execute("info").ok
            assert server.state is ServerState.LISTENING
            assert server.requests_served == 1

    def test_oversized_result_substituted(self, catalog, settings: Settings):
        """Test a result over the payload limit is replaced by an error result."""
        for i in range(20):
            catalog.insert({"name": f"Filler{i}", "quantity": i,
                            "unit_of_measure": "pcs", "price": 1})
        small = settings.model_copy(update={"max_payload_size": 600})
        app = Application(catalog=catalog, settings=small)

        with app.create_server() as server:
            server.start_background()
            client = CommandClient(*server.address, settings=small)

            result = client.execute("show")
            assert result.status_code == StatusCode.RESULT_TOO_LARGE
            assert "too large" in result.output

            assert client.execute("info").ok

    def test_worker_pool_serves_concurrent_clients(self, catalog, settings: Settings):
        """Test concurrent adds through a worker pool all land exactly once."""
        app = Application(catalog=catalog, settings=settings)
        errors = []

        with app.create_server(worker_threads=4) as server:
            server.start_background()
            host, port = server.address

            def worker(n: int) -> None:
                client = CommandClient(host, port, settings=settings)
                for i in range(10):
                    try:
                        if not client.execute("add", f"w{n}-{i} 1 pcs 1").ok:
                            errors.append((n, i))
                    except RequestTimeout as e:
                        errors.append(e.message)

            threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert errors == []
        ids = [p.id for p in catalog.all()]
        assert len(ids) == 43
        assert len(set(ids)) == 43


class TestServerLifecycle:
    """Tests for bind, start and stop."""

    def test_states(self, app: Application):
        """Test STOPPED -> LISTENING -> STOPPED."""
        server = app.create_server()
        assert server.state is ServerState.STOPPED
        assert server.address is None

        thread = server.start_background()
        assert server.state is ServerState.LISTENING
        assert server.address[1] > 0

        server.stop()
        thread.join(2)
        assert not thread.is_alive()
        assert server.state is ServerState.STOPPED
        assert server.address is None

    def test_bind_failure(self, app: Application, server: CommandServer):
        """Test binding a port in use raises TransportUnavailable."""
        other = app.create_server(port=server.address[1])

        with pytest.raises(TransportUnavailable):
            other.start()

        assert other.state is ServerState.STOPPED

    def test_stop_from_other_thread(self, app: Application):
        """Test stop() from another thread ends a blocking start()."""
        server = app.create_server()
        server.bind()

        thread = threading.Thread(target=server.start)
        thread.start()
        assert server.wait_until_serving(2)

        stopper = threading.Thread(target=server.stop)
        stopper.start()
        stopper.join(2)

        assert not stopper.is_alive()
        assert server.state is ServerState.STOPPED
        assert server.address is None

        thread.join(2)
        assert not thread.is_alive()
        assert server.state is ServerState.STOPPED

    def test_stop_between_bind_and_serve(self, app: Application):
        """Test a stop issued after bind() is honoured by a later serve_forever()."""
        server = app.create_server()
        server.bind()
        server.stop()
        assert server.state is ServerState.STOPPED

        thread = threading.Thread(target=server.serve_forever)
        thread.start()
        thread.join(2)

        assert not thread.is_alive()
        assert server.state is ServerState.STOPPED
        assert server.address is None

    def test_port_released_when_stop_returns(self, app: Application):
        """Test the endpoint can be rebound right after stop() returns."""
        server = app.create_server()
        server.start_background()
        port = server.address[1]
        server.stop()

        again = app.create_server(port=port)
        try:
            assert again.bind()[1] == port
        finally:
            again.stop()

    def test_restart_after_stop(self, app: Application):
        """Test a stopped server can be started again."""
        server = app.create_server()
        server.start_background()
        server.stop()

        server.start_background()
        try:
            client = CommandClient(*server.address, settings=app.settings)
            assert client.execute("info").ok
        finally:
            server.stop()
        assert server.state is ServerState.STOPPED

    def test_stop_is_idempotent(self, app: Application):
        """Test stopping twice, or before starting, is harmless."""
        server = app.create_server()
        server.stop()

        server.start_background()
        server.stop()
        server.stop()
        assert server.state is ServerState.STOPPED

    def test_client_timeout_without_server(self, settings: Settings):
        """Test a client gives up after its timeout."""
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]

            client = CommandClient("127.0.0.1", port, timeout=0.2, settings=settings)
            with pytest.raises(RequestTimeout):
                client.execute("info")
