"""
==============================================================================
Command Executor Module
==============================================================================

Resolves a command by name, parses its argument string, runs it against
the catalog and turns every outcome into a CommandResult.

Dispatch Steps:
--------------
1. Lookup            unknown name     → UNKNOWN_COMMAND
2. Parse arguments   wrong shape      → BAD_ARGUMENTS   (catalog untouched)
3. Execute           domain failure   → EXECUTION_ERROR (catalog unchanged)
4. Success                            → OK

``execute`` never raises: unexpected errors inside a command are logged
and reported as INTERNAL_ERROR.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Optional

from inventory.catalog import ProductCatalog
from inventory.core import exceptions
from inventory.core.exceptions import AppException
from inventory.schemas import CommandResult, StatusCode

from .registry import CommandRegistry


# Module logger
logger = logging.getLogger(__name__)


class CommandExecutor:
    """
    Executes commands from a registry against one catalog.

    Each execution holds the catalog lock for its whole duration, so a
    request is a single atomic unit with respect to concurrent requests.

    Example:
        >>> executor = CommandExecutor(build_registry(), ProductCatalog())
        >>> executor.execute("info", "").status_code
        0
    """

    def __init__(self, registry: CommandRegistry, catalog: ProductCatalog) -> None:
        self._registry = registry
        self._catalog = catalog

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def catalog(self) -> ProductCatalog:
        return self._catalog

    def execute(self, name: str, argument: Optional[str] = "") -> CommandResult:
        """
        Execute a command by name.

        Args:
            name: Registered command name
            argument: Raw argument string

        Returns:
            CommandResult with status 0 on success
        """
        argument = argument or ""

        try:
            command = self._registry.lookup(name)
            if command is None:
                raise exceptions.unknown_command(name)

            args = command.parse(argument)

            with self._catalog.locked():
                output = command.execute(self._catalog, args)

        except AppException as e:
            logger.warning(f"Command '{name}' failed [{e.code}]: {e.message}")
            return e.to_result()
        except Exception as e:
            logger.exception(f"Command '{name}' crashed")
            return CommandResult.failure(
                StatusCode.INTERNAL_ERROR,
                f"Internal error while executing '{name}': {e}"
            )

        logger.debug(f"Command '{name}' succeeded")
        return CommandResult.success(output)
