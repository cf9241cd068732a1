"""
==============================================================================
Catalog Package - Product Management
==============================================================================

Shared in-memory product catalog.

Classes:
--------
- Product / ProductDraft: Pydantic models for product records
- UnitOfMeasure: Allowed quantity units
- ProductCatalog: Lock-guarded catalog with insert/all/filter/clear

==============================================================================
"""

from .models import Product, ProductDraft, UnitOfMeasure
from .catalog import ProductCatalog

__all__ = [
    "Product",
    "ProductDraft",
    "UnitOfMeasure",
    "ProductCatalog",
]
