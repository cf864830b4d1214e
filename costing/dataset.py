"""Dataset loading and validation utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
import copy

import yaml

from .ledger import IngredientPrice, ledger_to_records, load_ledger, validate_ledger
from .products import Product, load_products, validate_products
from .settings import Settings, load_settings, validate_settings
from .tickets import Ticket, load_tickets, validate_tickets


SETTINGS_FILE = "settings.yaml"
SETTINGS_OVERRIDE_FILE = "settings.local.yaml"
INGREDIENTS_FILE = "ingredients.yaml"
PRODUCTS_FILE = "products.yaml"
TICKETS_FILE = "tickets.yaml"


@dataclass
class Dataset:
    settings: Settings = field(default_factory=Settings)
    ledger: List[IngredientPrice] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    tickets: List[Ticket] = field(default_factory=list)


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base; lists are replaced, not merged."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_yaml_file(path: Path):
    """Load a YAML file (None for empty files)."""
    with open(path, "r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def _load_section(data_dir: Path, filename: str, default):
    path = data_dir / filename
    if not path.exists():
        return default
    loaded = load_yaml_file(path)
    return default if loaded is None else loaded


def load_settings_config(data_dir: Path) -> dict:
    """Base settings with the local override merged on top, if present."""
    base = _load_section(data_dir, SETTINGS_FILE, {})
    override = _load_section(data_dir, SETTINGS_OVERRIDE_FILE, {})
    return deep_merge(base, override)


def load_dataset(data_dir: Path) -> Dataset:
    """Load settings, ledger, products and tickets from a data directory."""
    data_dir = Path(data_dir)
    return Dataset(
        settings=load_settings(load_settings_config(data_dir)),
        ledger=load_ledger(_load_section(data_dir, INGREDIENTS_FILE, [])),
        products=load_products(_load_section(data_dir, PRODUCTS_FILE, [])),
        tickets=load_tickets(_load_section(data_dir, TICKETS_FILE, [])),
    )


def save_ledger(path: Path, ledger: List[IngredientPrice]) -> None:
    """Write the ledger back to its YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(ledger_to_records(ledger), handle, sort_keys=False, allow_unicode=True)


def validate_dataset(dataset: Dataset) -> List[str]:
    """Collect validation errors from every section."""
    errors: List[str] = []
    errors.extend(validate_settings(dataset.settings))
    errors.extend(validate_ledger(dataset.ledger))
    errors.extend(validate_products(dataset.products))
    errors.extend(validate_tickets(dataset.tickets))
    return errors
