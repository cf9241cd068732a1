"""
Application Exception Handling

One root exception class for all application errors, a subclass per error
kind so callers can catch exactly what they handle, and factory functions
for the common cases.
"""

from typing import Any, Dict, Optional

from inventory.schemas import CommandResult, StatusCode


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Usage:
        raise AppException("Port in use", "TRANSPORT_UNAVAILABLE")
        raise BadArguments("Expected 1 argument, got 3", {"expected": 1})

    Error Codes:
        Dispatch (captured into a CommandResult):
            - UNKNOWN_COMMAND (status 1)
            - BAD_ARGUMENTS (status 2)
            - EXECUTION_ERROR (status 3)
            - INVALID_RECORD (status 3)
            - PRODUCT_NOT_FOUND (status 3)

        Transport:
            - MALFORMED_MESSAGE
            - RESULT_TOO_LARGE (status 5)
            - REQUEST_TOO_LARGE
            - TRANSPORT_UNAVAILABLE
            - REQUEST_TIMEOUT

        Registry:
            - DUPLICATE_COMMAND
            - REGISTRY_FROZEN
    """

    default_code = "INTERNAL_ERROR"
    default_status = StatusCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (defaults per subclass)
            status_code: Result status code reported to the caller
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code or self.default_code
        self.status_code = int(status_code if status_code is not None else self.default_status)
        self.details = details or {}
        super().__init__(self.message)

    def to_result(self) -> CommandResult:
        """Convert exception to a failed CommandResult."""
        return CommandResult.failure(self.status_code, self.message)


# ============================================
# DISPATCH ERRORS
# ============================================

class UnknownCommand(AppException):
    default_code = "UNKNOWN_COMMAND"
    default_status = StatusCode.UNKNOWN_COMMAND


class BadArguments(AppException):
    default_code = "BAD_ARGUMENTS"
    default_status = StatusCode.BAD_ARGUMENTS

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class ExecutionError(AppException):
    default_code = "EXECUTION_ERROR"
    default_status = StatusCode.EXECUTION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidRecord(ExecutionError):
    """Catalog rejected a malformed product record."""

    default_code = "INVALID_RECORD"


class ProductNotFound(ExecutionError):
    default_code = "PRODUCT_NOT_FOUND"


# ============================================
# TRANSPORT ERRORS
# ============================================

class MalformedMessage(AppException):
    """Wire payload could not be decoded."""

    default_code = "MALFORMED_MESSAGE"


class ResultTooLarge(AppException):
    default_code = "RESULT_TOO_LARGE"
    default_status = StatusCode.RESULT_TOO_LARGE


class RequestTooLarge(AppException):
    default_code = "REQUEST_TOO_LARGE"


class TransportUnavailable(AppException):
    """The server endpoint could not be bound."""

    default_code = "TRANSPORT_UNAVAILABLE"


class RequestTimeout(AppException):
    default_code = "REQUEST_TIMEOUT"


# ============================================
# REGISTRY ERRORS
# ============================================

class DuplicateCommandName(AppException):
    default_code = "DUPLICATE_COMMAND"


class RegistryFrozen(AppException):
    default_code = "REGISTRY_FROZEN"


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def unknown_command(name: str) -> UnknownCommand:
    """Create unknown command exception."""
    return UnknownCommand(
        f"Unknown command: '{name}'. Type 'help' for the list of commands.",
        details={"command": name}
    )


def wrong_arity(command: str, expected: str, got: int) -> BadArguments:
    """Create wrong argument count exception."""
    return BadArguments(
        f"Command '{command}' expects {expected}, got {got}",
        {"command": command, "expected": expected, "got": got}
    )


def not_a_number(field: str, value: str, kind: str = "a number") -> BadArguments:
    """Create argument type exception."""
    return BadArguments(
        f"Argument '{field}' must be {kind}, got '{value}'",
        {"field": field, "value": value}
    )


def product_not_found(product_id: int) -> ProductNotFound:
    """Create product not found exception."""
    return ProductNotFound(
        f"Product with id {product_id} not found",
        {"product_id": product_id}
    )


def duplicate_command_name(name: str) -> DuplicateCommandName:
    """Create duplicate command exception."""
    return DuplicateCommandName(
        f"Command '{name}' is already registered",
        details={"command": name}
    )


def result_too_large(size: int, limit: int) -> ResultTooLarge:
    """Create oversized result exception."""
    return ResultTooLarge(
        f"Result too large to send: {size} bytes exceeds the {limit} byte limit",
        details={"size": size, "limit": limit}
    )


def transport_unavailable(host: str, port: int, reason: str) -> TransportUnavailable:
    """Create bind failure exception."""
    return TransportUnavailable(
        f"Cannot bind UDP {host}:{port}: {reason}",
        details={"host": host, "port": port}
    )
