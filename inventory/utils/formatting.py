"""
==============================================================================
Product Text Formatting Module
==============================================================================

Plain-text rendering of catalog contents for command output.

Output Layout:
-------------
    #1 Sugar
        Quantity:    10 kilograms
        Price:       1.50
        Category:    grocery
        UPC:         4600123
        Created At:  2026-10-19 10:30:45

Listings separate products with a blank line and end with a count line.

==============================================================================
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

if TYPE_CHECKING:
    from inventory.catalog.models import Product


class ProductFormatter:
    """
    Formatter for product listings and catalog summaries.

    Example:
        >>> formatter = ProductFormatter()
        >>> print(formatter.format_products(catalog.all()))
    """

    EMPTY_MESSAGE = "Catalog is empty"

    def format_product(self, product: "Product") -> str:
        """Format a single product as an indented block."""
        lines = [
            f"#{product.id} {product.name}",
            f"    Quantity:    {product.quantity} {product.unit_of_measure.value}",
            f"    Price:       {product.price:.2f}",
            f"    Category:    {product.category or '-'}",
        ]

        if product.upc:
            lines.append(f"    UPC:         {product.upc}")

        lines.append(f"    Created At:  {self._format_datetime(product.created_at)}")
        return "\n".join(lines)

    def format_products(
        self,
        products: Iterable["Product"],
        empty_message: Optional[str] = None
    ) -> str:
        """
        Format a product listing.

        Args:
            products: Products in display order
            empty_message: Text used when there is nothing to list

        Returns:
            Listing text ending with a count line
        """
        blocks: List[str] = [self.format_product(product) for product in products]

        if not blocks:
            return empty_message or self.EMPTY_MESSAGE

        blocks.append(f"Total: {len(blocks)}")
        return "\n\n".join(blocks)

    def format_info(self, collection_type: str, stats: Dict[str, Any]) -> str:
        """
        Format catalog information.

        The product count is always the last line.
        """
        lines = [
            f"Collection type: {collection_type}",
            f"Initialized at:  {stats['initialized_at']}",
            f"Total quantity:  {stats['total_quantity']}",
        ]

        categories = stats.get("categories") or {}
        if categories:
            summary = ", ".join(f"{name} ({count})" for name, count in categories.items())
            lines.append(f"Categories:      {summary}")

        lines.append(f"Products: {stats['total_products']}")
        return "\n".join(lines)

    @staticmethod
    def _format_datetime(dt: Optional[datetime]) -> str:
        """Format datetime for display."""
        if dt is None:
            return "N/A"
        return dt.strftime("%Y-%m-%d %H:%M:%S")
