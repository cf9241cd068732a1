"""
==============================================================================
Command Base Module
==============================================================================

Contract every catalog command implements.

A command has a unique ``name``, a one-line ``description`` for help
output, a ``parse`` step that turns the raw argument string into the
shape ``execute`` expects, and ``execute`` itself, which runs against the
catalog and returns the output text.

Failure Signalling:
------------------
- ``parse`` raises BadArguments (wrong arity or type); it must not touch
  the catalog
- ``execute`` raises ExecutionError (or a subclass) for domain failures
  and must leave the catalog unchanged when it does

==============================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from inventory.catalog import ProductCatalog
from inventory.core import exceptions


class Command(ABC):
    """
    Named, described, executable unit of work against the catalog.

    Subclasses set ``name`` and ``description`` and implement ``execute``.
    The default ``parse`` accepts no arguments.
    """

    name: str = ""
    description: str = ""

    def parse(self, argument: str) -> Any:
        """
        Parse the raw argument string.

        Args:
            argument: Command-specific argument string

        Returns:
            Parsed arguments passed to ``execute``

        Raises:
            BadArguments: If the argument string has the wrong shape
        """
        self.split(argument, 0, 0)
        return None

    @abstractmethod
    def execute(self, catalog: ProductCatalog, args: Any) -> str:
        """
        Run the command.

        Args:
            catalog: Shared product catalog
            args: Value returned by ``parse``

        Returns:
            Output text
        """

    # =========================================================================
    # PARSING HELPERS
    # =========================================================================

    def split(self, argument: str, minimum: int, maximum: Optional[int] = None) -> List[str]:
        """
        Split an argument string on whitespace and check the token count.

        Args:
            argument: Raw argument string
            minimum: Fewest tokens accepted
            maximum: Most tokens accepted (defaults to ``minimum``)

        Returns:
            List of tokens

        Raises:
            BadArguments: If the count is out of range
        """
        if maximum is None:
            maximum = minimum

        tokens = (argument or "").split()

        if not minimum <= len(tokens) <= maximum:
            raise exceptions.wrong_arity(self.name, self._arity_text(minimum, maximum), len(tokens))

        return tokens

    @staticmethod
    def parse_int(field: str, value: str) -> int:
        """Convert a token to int or raise BadArguments."""
        try:
            return int(value)
        except ValueError:
            raise exceptions.not_a_number(field, value, "an integer") from None

    @staticmethod
    def parse_float(field: str, value: str) -> float:
        """Convert a token to float or raise BadArguments."""
        try:
            return float(value)
        except ValueError:
            raise exceptions.not_a_number(field, value) from None

    @staticmethod
    def _arity_text(minimum: int, maximum: int) -> str:
        if minimum == maximum == 0:
            return "no arguments"
        if minimum == maximum:
            return f"{minimum} argument{'s' if minimum != 1 else ''}"
        return f"{minimum} to {maximum} arguments"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
