"""
==============================================================================
Commands Package - Dispatch Layer
==============================================================================

Command contract, built-in catalog commands, the name registry and the
executor that maps ``(name, argument)`` to a CommandResult.

Usage:
------
    from inventory.commands import CommandExecutor, build_registry

    executor = CommandExecutor(build_registry(), catalog)
    result = executor.execute("show", "")

==============================================================================
"""

from .base import Command
from .registry import CommandRegistry
from .executor import CommandExecutor
from .products import (
    AddCommand,
    ClearCommand,
    FilterByCategoryCommand,
    FilterByUnitOfMeasureCommand,
    FilterGreaterThanPriceCommand,
    HelpCommand,
    InfoCommand,
    RemoveByIdCommand,
    ShowCommand,
    build_registry,
)

__all__ = [
    "Command",
    "CommandRegistry",
    "CommandExecutor",
    "AddCommand",
    "ClearCommand",
    "FilterByCategoryCommand",
    "FilterByUnitOfMeasureCommand",
    "FilterGreaterThanPriceCommand",
    "HelpCommand",
    "InfoCommand",
    "RemoveByIdCommand",
    "ShowCommand",
    "build_registry",
]
