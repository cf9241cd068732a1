"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for product catalog records.

- ProductDraft: fields supplied by a caller (command, data file)
- Product: a stored record, a draft plus catalog-assigned identity

Both are frozen so readers can never observe a record changing under them.

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventory.utils.validators import (
    ProductNameValidator,
    QuantityValidator,
    UPCValidator,
)


class UnitOfMeasure(str, Enum):
    """Units a product quantity can be expressed in."""

    KILOGRAMS = "kilograms"
    GRAMS = "grams"
    LITERS = "liters"
    MILLILITERS = "milliliters"
    PCS = "pcs"

    @classmethod
    def parse(cls, value: str) -> "UnitOfMeasure":
        """
        Parse a unit name case-insensitively.

        Raises:
            ValueError: If the unit is not known
        """
        normalized = value.strip().lower()
        for unit in cls:
            if unit.value == normalized or unit.name.lower() == normalized:
                return unit
        choices = ", ".join(u.value for u in cls)
        raise ValueError(f"Unknown unit of measure '{value}'. Expected one of: {choices}")


class ProductDraft(BaseModel):
    """
    Product fields before insertion into the catalog.

    Attributes:
        name: Product display name
        quantity: Units in stock
        unit_of_measure: Unit the quantity is counted in
        price: Unit price, strictly positive
        category: Optional free-text category (e.g., "grocery")
        upc: Optional Universal Product Code (barcode)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Product name")
    quantity: int = Field(..., description="Units in stock")
    unit_of_measure: UnitOfMeasure = Field(..., description="Unit of measure")
    price: float = Field(..., gt=0, description="Unit price")
    category: Optional[str] = Field(default=None, description="Category")
    upc: Optional[str] = Field(default=None, description="Universal Product Code")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        is_valid, normalized, error = ProductNameValidator().validate(value)
        if not is_valid:
            raise ValueError(error)
        return normalized

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, value: int) -> int:
        is_valid, error = QuantityValidator().validate(value)
        if not is_valid:
            raise ValueError(error)
        return value

    @field_validator("unit_of_measure", mode="before")
    @classmethod
    def parse_unit(cls, value: Any) -> Any:
        if isinstance(value, str):
            return UnitOfMeasure.parse(value)
        return value

    @field_validator("category")
    @classmethod
    def normalize_category(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @field_validator("upc")
    @classmethod
    def validate_upc(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        is_valid, normalized, error = UPCValidator().validate(value)
        if not is_valid:
            raise ValueError(error)
        return normalized


class Product(ProductDraft):
    """
    Product stored in the catalog.

    Attributes:
        id: Catalog-assigned identity, unique within the catalog
        created_at: When the record was inserted
    """

    id: int = Field(..., gt=0, description="Catalog identity")
    created_at: datetime = Field(..., description="Insertion timestamp")

    @classmethod
    def from_draft(cls, draft: ProductDraft, product_id: int, created_at: datetime) -> "Product":
        """Create a stored product from a validated draft."""
        return cls(id=product_id, created_at=created_at, **draft.model_dump())
