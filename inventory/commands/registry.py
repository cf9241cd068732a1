"""
==============================================================================
Command Registry Module
==============================================================================

Name → command mapping built once at startup.

Lifecycle:
---------
    registry = CommandRegistry()
    registry.register(ShowCommand())
    ...
    registry.freeze()        # read-only from here on

Registration order is preserved and is the order ``help`` lists commands.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from inventory.core import exceptions
from inventory.core.exceptions import RegistryFrozen

from .base import Command


# Module logger
logger = logging.getLogger(__name__)


class CommandRegistry:
    """Registry of the available commands, keyed by name."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._frozen = False

    def register(self, command: Command) -> Command:
        """
        Register a command under its name.

        Raises:
            DuplicateCommandName: If the name is already registered
            RegistryFrozen: If the registry has been frozen
        """
        if self._frozen:
            raise RegistryFrozen(
                f"Cannot register '{command.name}': registry is frozen",
                details={"command": command.name}
            )

        if not command.name:
            raise ValueError(f"{type(command).__name__} has no name")

        if command.name in self._commands:
            raise exceptions.duplicate_command_name(command.name)

        self._commands[command.name] = command
        logger.debug(f"Registered command '{command.name}'")
        return command

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, name: str) -> Optional[Command]:
        """Get a command by name."""
        return self._commands.get(name)

    def entries(self) -> List[Tuple[str, str]]:
        """(name, description) pairs in registration order."""
        return [(name, command.description) for name, command in self._commands.items()]

    def names(self) -> List[str]:
        """Registered command names in registration order."""
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
