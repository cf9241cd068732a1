"""
==============================================================================
Command Protocol Schemas
==============================================================================

Request and result payloads of the command dispatch protocol.

A request names a command and carries its raw argument string; a result
carries a status code (0 on success) and human-readable output. Both are
immutable and compared by value, so a result produced locally can be
checked against one that travelled over the network.

==============================================================================
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class StatusCode(IntEnum):
    """Status codes carried by ``CommandResult``."""

    OK = 0
    UNKNOWN_COMMAND = 1
    BAD_ARGUMENTS = 2
    EXECUTION_ERROR = 3
    INTERNAL_ERROR = 4
    RESULT_TOO_LARGE = 5


class CommandRequest(BaseModel):
    """A named command invocation with its raw argument string."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Registered command name")
    argument: str = Field(default="", description="Command-specific argument string")


class CommandResult(BaseModel):
    """
    Outcome of a command invocation.

    Attributes:
        status_code: 0 on success, any other value is a failure
        output: Result text on success, error message on failure
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=INT32_MIN, le=INT32_MAX)
    output: str = Field(default="")

    @property
    def ok(self) -> bool:
        """True when the command succeeded."""
        return self.status_code == StatusCode.OK

    @classmethod
    def success(cls, output: str = "") -> "CommandResult":
        """Create a successful result."""
        return cls(status_code=int(StatusCode.OK), output=output)

    @classmethod
    def failure(cls, status_code: int, output: str) -> "CommandResult":
        """Create a failed result."""
        return cls(status_code=int(status_code), output=output)
