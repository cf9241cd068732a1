"""
==============================================================================
Network Package - UDP Transport
==============================================================================

Wire codec plus the datagram server and client.

Classes:
--------
- WireCodec: Request/result byte encoding
- CommandServer: UDP receive loop serving a CommandExecutor
- CommandClient: One request, one reply, bounded wait

==============================================================================
"""

from .codec import WireCodec
from .server import CommandServer, ServerState
from .client import CommandClient

__all__ = [
    "WireCodec",
    "CommandServer",
    "ServerState",
    "CommandClient",
]
