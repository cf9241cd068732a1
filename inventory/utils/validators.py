"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation classes for product record fields.

This module implements:
- ProductNameValidator: Validates product names
- UPCValidator: Validates product UPC codes
- QuantityValidator: Validates stock quantities

Each validator returns ``(is_valid, error_message)`` style tuples so the
same rules can back both pydantic field validators and plain checks.

==============================================================================
"""

from __future__ import annotations

from typing import Optional, Tuple


class ProductNameValidator:
    """
    Validator for product names.

    Rules:
    - Required, not blank
    - At most 100 characters after stripping

    Example:
        >>> validator = ProductNameValidator()
        >>> validator.validate("  Sugar ")
        (True, 'Sugar', None)
    """

    MAX_LENGTH = 100

    def validate(self, name: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a product name.

        Args:
            name: Raw product name input

        Returns:
            Tuple of (is_valid, normalized_name, error_message)
        """
        if not name:
            return False, None, "Name is required"

        name = name.strip()

        if not name:
            return False, None, "Name cannot be blank"

        if len(name) > self.MAX_LENGTH:
            return False, None, f"Name must be at most {self.MAX_LENGTH} characters"

        return True, name, None


class UPCValidator:
    """
    Validator for product UPC codes.

    Accepts digit-only retail codes as well as internal stock codes with
    letters and hyphen separators (e.g., "BLT-0500"). Letters are
    normalized to upper case so the same code is always stored the same way.

    Example:
        >>> UPCValidator().validate(" blt-0500 ")
        (True, 'BLT-0500', None)
    """

    MIN_LENGTH = 4
    MAX_LENGTH = 20

    def validate(self, upc: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate and normalize a UPC code.

        Returns:
            Tuple of (is_valid, normalized_upc, error_message)
        """
        upc = (upc or "").strip().upper()

        if not upc:
            return False, None, "UPC cannot be empty"

        if upc.startswith("-") or upc.endswith("-") or "--" in upc:
            return False, None, "UPC hyphens must separate groups of characters"

        if not upc.replace("-", "").isalnum():
            return False, None, "UPC may only contain letters, digits and hyphens"

        if not self.MIN_LENGTH <= len(upc) <= self.MAX_LENGTH:
            return False, None, f"UPC must be {self.MIN_LENGTH}-{self.MAX_LENGTH} characters"

        return True, upc, None


class QuantityValidator:
    """
    Validator for stock quantity values.
    """

    MAX_QUANTITY = 1_000_000

    def validate(self, qty: int, max_qty: Optional[int] = None) -> Tuple[bool, Optional[str]]:
        """
        Validate a quantity value.

        Args:
            qty: Quantity to validate
            max_qty: Maximum allowed (defaults to MAX_QUANTITY)

        Returns:
            Tuple of (is_valid, error_message)
        """
        if max_qty is None:
            max_qty = self.MAX_QUANTITY

        if qty < 0:
            return False, "Quantity cannot be negative"

        if qty > max_qty:
            return False, f"Quantity cannot exceed {max_qty}"

        return True, None
