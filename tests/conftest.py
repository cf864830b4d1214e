# =============================================================================
# NOCTAMBULA COSTING ENGINE - PYTEST CONFIGURATION
# =============================================================================
# Shared fixtures and configuration for all tests.
# =============================================================================

import pytest
import sys
import os
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def project_root():
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def data_dir(project_root):
    """Sample dataset shipped with the repository."""
    return project_root / "data"


@pytest.fixture
def ledger():
    """Small ingredient ledger, one zero-priced entry."""
    from costing.ledger import IngredientPrice
    return [
        IngredientPrice("i1", "FLOUR", "Kg", 1.20),
        IngredientPrice("i2", "TOMATO", "Kg", 2.00),
        IngredientPrice("i3", "MOZZARELLA", "Kg", 8.00, 1.50, True),
        IngredientPrice("i4", "OIL", "L", 10.00),
        IngredientPrice("i5", "BASIL", "Kg", 0.0),
    ]


@pytest.fixture
def settings():
    from costing.settings import Settings
    return Settings(currency="€", decimals=2, glovo_commission=30.0)


@pytest.fixture
def products():
    """Three active products (one unpriced) and one inactive product."""
    from costing.products import Product, RecipeLine
    return [
        Product("p1", 1, "Margarita", [
            RecipeLine("flour", 0.25, "Kg"),
            RecipeLine("Tomato", 0.10, "Kg"),
            RecipeLine("MOZZARELLA", 0.15, "Kg"),
        ], sale_price=11.0),
        Product("p2", 2, "Marinara", [
            RecipeLine("Flour", 0.25, "Kg"),
            RecipeLine("Tomato", 0.15, "Kg"),
            RecipeLine("Oil", 0.02, "L"),
        ], sale_price=8.8),
        Product("p3", 3, "Special", [
            RecipeLine("Flour", 0.25, "Kg"),
            RecipeLine("Truffle", 0.01, "Kg"),
        ], sale_price=0.0),
        Product("p4", 4, "Retired", [
            RecipeLine("Flour", 1.0, "Kg"),
        ], sale_price=20.0, is_active=False),
    ]


@pytest.fixture
def reference_now():
    return datetime(2024, 6, 15, 12, 0)


@pytest.fixture
def tickets():
    """Tickets spread around 2024-06-15 12:00."""
    from costing.products import RecipeLine
    from costing.tickets import Ticket, TicketItem

    def _item(name, quantity):
        return TicketItem(name, quantity, [
            RecipeLine("Flour", 0.25, "Kg"),
            RecipeLine("Mozzarella", 0.10, "Kg"),
        ])

    return [
        Ticket("t1", 1, datetime(2024, 6, 15, 9, 30), False,
               [_item("Margarita", 2)], 22.0, 4.0, 16.0),
        Ticket("t2", 2, datetime(2024, 6, 14, 21, 0), True,
               [_item("margarita", 1), _item("Marinara", 1)], 19.8, 3.5, 9.0),
        Ticket("t3", 3, datetime(2024, 6, 8, 13, 0), False,
               [_item("Marinara", 1)], 8.8, 1.5, 6.5),
        Ticket("t4", 4, datetime(2024, 6, 8, 11, 0), False,
               [_item("Marinara", 3)], 26.4, 4.5, 19.5),
        Ticket("t5", 5, datetime(2024, 5, 20, 20, 0), False,
               [_item("Margarita", 1)], 11.0, 2.0, 8.0),
        Ticket("t6", 6, datetime(2023, 6, 15, 20, 0), False,
               [_item("Margarita", 1)], 11.0, 2.0, 8.0),
    ]
