"""
==============================================================================
Product Catalog Module
==============================================================================

In-memory, lock-guarded product catalog shared by every command.

Features:
---------
- Insertion-ordered storage with catalog-assigned ids
- Predicate filtering
- Re-entrant lock around every operation, plus ``locked()`` so a whole
  command runs as one atomic unit
- Optional pre-population from a JSON file

JSON Structure:
--------------
{
  "products": [
    {"name": "Sugar", "quantity": 10, "unit_of_measure": "kilograms",
     "price": 1.5, "category": "grocery", "upc": "4600123"},
    ...
  ]
}

==============================================================================
"""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import ValidationError

from inventory.core import exceptions
from inventory.core.exceptions import InvalidRecord

from .models import Product, ProductDraft


# Module logger
logger = logging.getLogger(__name__)


DraftInput = Union[ProductDraft, Mapping[str, Any]]


def _describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for item in error.errors():
        field = ".".join(str(loc) for loc in item["loc"]) or "record"
        parts.append(f"{field}: {item['msg']}")
    return "; ".join(parts)


class ProductCatalog:
    """
    Mutable product collection with atomic operations.

    Readers always receive copies; no caller gets a handle to the internal
    list. Records are frozen, so a copied list is a consistent snapshot.

    Example:
        >>> catalog = ProductCatalog()
        >>> product = catalog.insert({"name": "Sugar", "quantity": 10,
        ...                           "unit_of_measure": "kilograms", "price": 1.5})
        >>> [p.id for p in catalog.all()]
        [1]
    """

    def __init__(self) -> None:
        self._products: List[Product] = []
        self._by_id: Dict[int, Product] = {}
        self._next_id = 1
        self._lock = threading.RLock()
        self._initialized_at = datetime.now(timezone.utc)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def initialized_at(self) -> datetime:
        """When the catalog was created."""
        return self._initialized_at

    @property
    def size(self) -> int:
        """Number of stored products."""
        with self._lock:
            return len(self._products)

    def __len__(self) -> int:
        return self.size

    # =========================================================================
    # LOCKING
    # =========================================================================

    @contextmanager
    def locked(self) -> Iterator["ProductCatalog"]:
        """
        Hold the catalog lock for a sequence of operations.

        Operations called inside re-acquire the same re-entrant lock, so
        other threads see either none or all of the sequence.
        """
        with self._lock:
            yield self

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def insert(self, draft: DraftInput) -> Product:
        """
        Validate a record, assign its identity and append it.

        Args:
            draft: ProductDraft or mapping of draft fields

        Returns:
            The stored Product

        Raises:
            InvalidRecord: If the record is malformed (catalog unchanged)
        """
        if not isinstance(draft, ProductDraft):
            try:
                draft = ProductDraft.model_validate(draft)
            except ValidationError as e:
                raise InvalidRecord(
                    f"Invalid product: {_describe_validation_error(e)}",
                    {"errors": e.errors(include_url=False, include_context=False)}
                ) from e
            except TypeError as e:
                raise InvalidRecord(f"Invalid product: {e}") from e

        with self._lock:
            product_id = self._next_id
            if product_id in self._by_id:
                raise InvalidRecord(
                    f"Product id {product_id} is already in use",
                    {"product_id": product_id}
                )

            product = Product.from_draft(draft, product_id, datetime.now(timezone.utc))
            self._products.append(product)
            self._by_id[product_id] = product
            self._next_id += 1

        logger.debug(f"Inserted product #{product.id}: {product.name}")
        return product

    def remove(self, product_id: int) -> Product:
        """
        Remove a product by id.

        Raises:
            ProductNotFound: If no product has this id
        """
        with self._lock:
            product = self._by_id.pop(product_id, None)
            if product is None:
                raise exceptions.product_not_found(product_id)
            self._products.remove(product)

        logger.debug(f"Removed product #{product_id}")
        return product

    def clear(self) -> int:
        """
        Remove every product.

        Ids are not reused after a clear.

        Returns:
            Number of products removed
        """
        with self._lock:
            count = len(self._products)
            self._products.clear()
            self._by_id.clear()

        logger.info(f"🗑️ Cleared catalog ({count} products removed)")
        return count

    # =========================================================================
    # QUERIES
    # =========================================================================

    def all(self) -> List[Product]:
        """All products in insertion order."""
        with self._lock:
            return list(self._products)

    def filter(self, predicate: Callable[[Product], bool]) -> List[Product]:
        """
        Products matching a predicate, in insertion order.

        Args:
            predicate: Called once per product under the catalog lock

        Returns:
            List of matching products
        """
        with self._lock:
            return [product for product in self._products if predicate(product)]

    def get(self, product_id: int) -> Optional[Product]:
        """Find product by id."""
        with self._lock:
            return self._by_id.get(product_id)

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        with self._lock:
            categories: Dict[str, int] = {}
            for product in self._products:
                key = product.category or "uncategorized"
                categories[key] = categories.get(key, 0) + 1

            return {
                "total_products": len(self._products),
                "total_quantity": sum(p.quantity for p in self._products),
                "categories": categories,
                "initialized_at": self._initialized_at.isoformat(),
            }

    # =========================================================================
    # LOADING
    # =========================================================================

    def load_file(self, products_file: Path) -> int:
        """
        Insert products from a JSON file.

        Invalid entries are skipped with a warning.

        Args:
            products_file: Path to the products JSON file

        Returns:
            Number of products loaded

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
        """
        try:
            with products_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Products file not found: {products_file}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON: {e}")
            raise

        items = data.get("products", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            logger.warning(f"No product list in {products_file}")
            return 0

        loaded = 0
        with self._lock:
            for index, item in enumerate(items):
                if not isinstance(item, dict):
                    logger.warning(f"Skipping entry {index}: not an object")
                    continue
                try:
                    self.insert(item)
                    loaded += 1
                except InvalidRecord as e:
                    logger.warning(f"Skipping entry {index}: {e.message}")

        logger.info(f"✅ Loaded {loaded} products from {products_file}")
        return loaded
