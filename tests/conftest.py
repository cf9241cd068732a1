"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides settings, a pre-populated catalog, the application, and a live
UDP server/client pair on a free loopback port.

==============================================================================
"""

import json
from pathlib import Path
from typing import Generator, List

import pytest

from inventory.catalog import ProductCatalog
from inventory.config import Settings
from inventory.main import Application
from inventory.network import CommandClient, CommandServer


SAMPLE_PRODUCTS: List[dict] = [
    {"name": "Sugar", "quantity": 10, "unit_of_measure": "kilograms",
     "price": 1.5, "category": "grocery", "upc": "4600123"},
    {"name": "Milk", "quantity": 20, "unit_of_measure": "liters",
     "price": 0.99, "category": "dairy"},
    {"name": "Bolts", "quantity": 500, "unit_of_measure": "pcs",
     "price": 0.05, "category": "hardware"},
]


# ============================================================================
# CONFIGURATION FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment's .env file."""
    return Settings(
        _env_file=None,
        host="127.0.0.1",
        port=0,
        receive_timeout=0.05,
        client_timeout=2.0,
    )


# ============================================================================
# CATALOG FIXTURES
# ============================================================================

@pytest.fixture
def catalog() -> ProductCatalog:
    """Catalog with three sample products (ids 1-3)."""
    catalog = ProductCatalog()
    for item in SAMPLE_PRODUCTS:
        catalog.insert(item)
    return catalog


@pytest.fixture
def products_file(tmp_path: Path) -> Path:
    """JSON data file with the sample products and one invalid entry."""
    path = tmp_path / "products.json"
    items = SAMPLE_PRODUCTS + [{"name": "Broken", "quantity": -1,
                                "unit_of_measure": "pcs", "price": 1}]
    path.write_text(json.dumps({"products": items}), encoding="utf-8")
    return path


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def app(catalog: ProductCatalog, settings: Settings) -> Application:
    """Application over the sample catalog."""
    return Application(catalog=catalog, settings=settings)


@pytest.fixture
def server(app: Application) -> Generator[CommandServer, None, None]:
    """Server serving ``app`` on a free loopback port."""
    server = app.create_server()
    server.start_background()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def client(server: CommandServer, settings: Settings) -> CommandClient:
    """Client pointed at the running ``server``."""
    host, port = server.address
    return CommandClient(host, port, settings=settings)
