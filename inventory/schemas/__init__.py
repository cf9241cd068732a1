"""
==============================================================================
Schemas Package
==============================================================================

Payload models shared by the executor, the wire codec and the client.

==============================================================================
"""

from .protocol import CommandRequest, CommandResult, StatusCode

__all__ = [
    "CommandRequest",
    "CommandResult",
    "StatusCode",
]
