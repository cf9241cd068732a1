"""
==============================================================================
Core Package
==============================================================================

Error taxonomy shared by the catalog, the command layer and the network
layer.

Usage:
------
    from inventory.core import exceptions
    raise exceptions.unknown_command("fake")

==============================================================================
"""

from .exceptions import (
    AppException,
    BadArguments,
    DuplicateCommandName,
    ExecutionError,
    InvalidRecord,
    MalformedMessage,
    ProductNotFound,
    RegistryFrozen,
    RequestTimeout,
    RequestTooLarge,
    ResultTooLarge,
    TransportUnavailable,
    UnknownCommand,
)

__all__ = [
    "AppException",
    "BadArguments",
    "DuplicateCommandName",
    "ExecutionError",
    "InvalidRecord",
    "MalformedMessage",
    "ProductNotFound",
    "RegistryFrozen",
    "RequestTimeout",
    "RequestTooLarge",
    "ResultTooLarge",
    "TransportUnavailable",
    "UnknownCommand",
]
