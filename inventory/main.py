"""
==============================================================================
Inventory Command Server - Application Entry Point
==============================================================================

Wires the product catalog, the command registry and the executor into one
Application, and exposes it three ways:

- ``inventory serve``   UDP server over the shared catalog
- ``inventory local``   interactive prompt against an in-process catalog
- ``inventory remote``  interactive prompt against a running server

Usage:
------
    inventory serve --port 52333 --data data/products.json
    inventory remote --host 127.0.0.1 --port 52333

    >>> app = Application()
    >>> app.execute_command("help").status_code
    0

==============================================================================
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, TextIO

from inventory.catalog import ProductCatalog
from inventory.commands import CommandExecutor, CommandRegistry, build_registry
from inventory.config import Settings, get_settings
from inventory.core.exceptions import AppException, TransportUnavailable
from inventory.network import CommandClient, CommandServer
from inventory.schemas import CommandResult


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_TRANSPORT_ERROR = 1

PROMPT = "> "
EXIT_WORDS = {"exit", "quit"}


# ============================================================================
# LOGGING SETUP
# ============================================================================

def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


# ============================================================================
# APPLICATION
# ============================================================================

class Application:
    """
    Catalog, registry and executor for one process.

    ``execute_command`` is the local entry point; a server created with
    ``create_server`` serves the same catalog with identical semantics.
    """

    def __init__(
        self,
        catalog: Optional[ProductCatalog] = None,
        settings: Optional[Settings] = None
    ) -> None:
        self._settings = settings or get_settings()
        self._catalog = catalog if catalog is not None else ProductCatalog()
        self._registry = build_registry()
        self._executor = CommandExecutor(self._registry, self._catalog)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def catalog(self) -> ProductCatalog:
        return self._catalog

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    def execute_command(self, name: str, argument: str = "") -> CommandResult:
        """Execute a command against this application's catalog."""
        return self._executor.execute(name, argument)

    def load_catalog(self, products_path: Optional[Path] = None) -> int:
        """
        Pre-populate the catalog from a JSON file.

        A missing or unreadable file is logged and leaves the catalog as is.

        Returns:
            Number of products loaded
        """
        products_path = products_path or self._settings.products_path
        if products_path is None:
            return 0

        if not products_path.exists():
            logger.warning(f"⚠️ Products file not found: {products_path}")
            return 0

        try:
            return self._catalog.load_file(products_path)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Failed to load catalog: {e}")
            return 0

    def create_server(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        worker_threads: Optional[int] = None
    ) -> CommandServer:
        """Create a UDP server bound to this application's executor."""
        return CommandServer(
            self._executor,
            host=host,
            port=port,
            settings=self._settings,
            worker_threads=worker_threads
        )


# ============================================================================
# INTERACTIVE PROMPT
# ============================================================================

def run_repl(
    execute: Callable[[str, str], CommandResult],
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    prompt: str = PROMPT,
) -> None:
    """
    Read ``name [argument...]`` lines and print each result.

    Stops on end of input or an exit word. Failed results are prefixed
    with their status code.
    """
    while True:
        stdout.write(prompt)
        stdout.flush()

        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return

        line = line.strip()
        if not line:
            continue

        parts = line.split(maxsplit=1)
        name = parts[0]
        argument = parts[1] if len(parts) > 1 else ""

        if name in EXIT_WORDS:
            return

        try:
            result = execute(name, argument)
        except AppException as e:
            stdout.write(f"[error] {e.message}\n")
            continue

        if result.ok:
            stdout.write(f"{result.output}\n")
        else:
            stdout.write(f"[status {result.status_code}] {result.output}\n")


# ============================================================================
# COMMAND LINE
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="inventory", description="Inventory command server and client")
    p.add_argument("--debug", action="store_true", help="Verbose logging.")

    sub = p.add_subparsers(dest="cmd", required=True)

    serve_p = sub.add_parser("serve", help="Serve commands over UDP.")
    serve_p.add_argument("--host", default=None, help="Bind address (default: settings).")
    serve_p.add_argument("--port", type=int, default=None, help="UDP port (default: settings).")
    serve_p.add_argument("--data", default=None, help="Products JSON file to pre-load.")
    serve_p.add_argument("--workers", type=int, default=None, help="Worker threads (0 = inline).")

    local_p = sub.add_parser("local", help="Run commands against an in-process catalog.")
    local_p.add_argument("--data", default=None, help="Products JSON file to pre-load.")

    remote_p = sub.add_parser("remote", help="Run commands against a running server.")
    remote_p.add_argument("--host", default=None, help="Server address (default: settings).")
    remote_p.add_argument("--port", type=int, default=None, help="Server UDP port (default: settings).")
    remote_p.add_argument("--timeout", type=float, default=None, help="Reply timeout in seconds.")

    return p


def _serve(args: argparse.Namespace, settings: Settings) -> int:
    app = Application(settings=settings)
    app.load_catalog(Path(args.data) if args.data else None)

    server = app.create_server(host=args.host, port=args.port, worker_threads=args.workers)

    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info("=" * 60)

    try:
        server.start()
    except TransportUnavailable as e:
        logger.error(e.message)
        return EXIT_TRANSPORT_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        server.stop()

    return EXIT_OK


def _local(args: argparse.Namespace, settings: Settings) -> int:
    app = Application(settings=settings)
    app.load_catalog(Path(args.data) if args.data else None)
    run_repl(app.execute_command)
    return EXIT_OK


def _remote(args: argparse.Namespace, settings: Settings) -> int:
    client = CommandClient(args.host, args.port, timeout=args.timeout, settings=settings)
    run_repl(client.execute)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.debug:
        settings = settings.model_copy(update={"debug": True})
    configure_logging(settings)

    handlers = {
        "serve": _serve,
        "local": _local,
        "remote": _remote,
    }
    return handlers[args.cmd](args, settings)


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    sys.exit(main())
