"""
==============================================================================
Catalog Commands Module
==============================================================================

Built-in commands operating on the product catalog.

Commands:
--------
- help                          list commands with descriptions
- info                          catalog summary
- show                          every product
- add                           insert one product
- remove_by_id                  remove one product
- clear                         remove every product
- filter_by_unit_of_measure     products counted in a unit
- filter_by_category            products in a category
- filter_greater_than_price     products priced above a value

Argument Grammar:
----------------
    add <name> <quantity> <unit_of_measure> <price> [category] [upc]
    remove_by_id <id>
    filter_by_unit_of_measure <unit_of_measure>
    filter_by_category <category>
    filter_greater_than_price <price>

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from inventory.catalog import ProductCatalog, UnitOfMeasure
from inventory.core.exceptions import ExecutionError
from inventory.utils import ProductFormatter

from .base import Command
from .registry import CommandRegistry


# Module logger
logger = logging.getLogger(__name__)


_formatter = ProductFormatter()


# =============================================================================
# READ-ONLY COMMANDS
# =============================================================================

class HelpCommand(Command):
    """Lists every registered command with its description."""

    name = "help"
    description = "show the list of available commands"

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry = registry

    def execute(self, catalog: ProductCatalog, args: Any) -> str:
        lines = ["Available commands:"]
        lines.extend(f"{name}: {description}" for name, description in self._registry.entries())
        return "\n".join(lines)


class InfoCommand(Command):
    name = "info"
    description = "show catalog information (type, initialization date, product count)"

    COLLECTION_TYPE = "ProductCatalog (in-memory, insertion ordered)"

    def execute(self, catalog: ProductCatalog, args: Any) -> str:
        return _formatter.format_info(self.COLLECTION_TYPE, catalog.get_stats())


class ShowCommand(Command):
    name = "show"
    description = "show every product in the catalog"

    def execute(self, catalog: ProductCatalog, args: Any) -> str:
        return _formatter.format_products(catalog.all())


class FilterByUnitOfMeasureCommand(Command):
    name = "filter_by_unit_of_measure"
    description = "show products whose unit of measure equals the given one"

    def parse(self, argument: str) -> str:
        (unit,) = self.split(argument, 1)
        return unit

    def execute(self, catalog: ProductCatalog, args: str) -> str:
        try:
            unit = UnitOfMeasure.parse(args)
        except ValueError as e:
            raise ExecutionError(str(e), {"unit_of_measure": args}) from e

        products = catalog.filter(lambda p: p.unit_of_measure is unit)
        return _formatter.format_products(
            products,
            empty_message=f"No products measured in {unit.value}"
        )


class FilterByCategoryCommand(Command):
    name = "filter_by_category"
    description = "show products in the given category"

    def parse(self, argument: str) -> str:
        (category,) = self.split(argument, 1)
        return category.lower()

    def execute(self, catalog: ProductCatalog, args: str) -> str:
        products = catalog.filter(lambda p: (p.category or "").lower() == args)
        return _formatter.format_products(
            products,
            empty_message=f"No products in category '{args}'"
        )


class FilterGreaterThanPriceCommand(Command):
    name = "filter_greater_than_price"
    description = "show products priced above the given value"

    def parse(self, argument: str) -> float:
        (price,) = self.split(argument, 1)
        return self.parse_float("price", price)

    def execute(self, catalog: ProductCatalog, args: float) -> str:
        products = catalog.filter(lambda p: p.price > args)
        return _formatter.format_products(
            products,
            empty_message=f"No products priced above {args:.2f}"
        )


# =============================================================================
# MUTATING COMMANDS
# =============================================================================

class AddCommand(Command):
    name = "add"
    description = "add a product: <name> <quantity> <unit_of_measure> <price> [category] [upc]"

    def parse(self, argument: str) -> Dict[str, Any]:
        tokens = self.split(argument, 4, 6)
        name, quantity, unit, price = tokens[:4]

        fields: Dict[str, Any] = {
            "name": name,
            "quantity": self.parse_int("quantity", quantity),
            "unit_of_measure": unit,
            "price": self.parse_float("price", price),
        }

        if len(tokens) > 4:
            fields["category"] = tokens[4]
        if len(tokens) > 5:
            fields["upc"] = tokens[5]

        return fields

    def execute(self, catalog: ProductCatalog, args: Dict[str, Any]) -> str:
        product = catalog.insert(args)
        logger.info(f"➕ Added product #{product.id}: {product.name}")
        return f"Product #{product.id} '{product.name}' added"


class RemoveByIdCommand(Command):
    name = "remove_by_id"
    description = "remove the product with the given id"

    def parse(self, argument: str) -> int:
        (product_id,) = self.split(argument, 1)
        return self.parse_int("id", product_id)

    def execute(self, catalog: ProductCatalog, args: int) -> str:
        product = catalog.remove(args)
        logger.info(f"➖ Removed product #{product.id}: {product.name}")
        return f"Product #{product.id} '{product.name}' removed"


class ClearCommand(Command):
    name = "clear"
    description = "remove every product from the catalog"

    def execute(self, catalog: ProductCatalog, args: Any) -> str:
        count = catalog.clear()
        return f"Catalog cleared: {count} product{'s' if count != 1 else ''} removed"


# =============================================================================
# REGISTRY FACTORY
# =============================================================================

def build_registry(registry: Optional[CommandRegistry] = None) -> CommandRegistry:
    """
    Build the frozen registry of built-in commands.

    Args:
        registry: Registry to populate (a new one if None)

    Returns:
        Frozen CommandRegistry, ``help`` first
    """
    registry = registry if registry is not None else CommandRegistry()

    registry.register(HelpCommand(registry))
    registry.register(InfoCommand())
    registry.register(ShowCommand())
    registry.register(AddCommand())
    registry.register(RemoveByIdCommand())
    registry.register(ClearCommand())
    registry.register(FilterByUnitOfMeasureCommand())
    registry.register(FilterByCategoryCommand())
    registry.register(FilterGreaterThanPriceCommand())

    registry.freeze()
    logger.debug(f"Command registry built: {', '.join(registry.names())}")
    return registry
