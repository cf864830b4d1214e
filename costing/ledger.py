# =============================================================================
# NOCTAMBULA COSTING ENGINE - INGREDIENT LEDGER MODULE
# =============================================================================
# The ledger is the single source of truth for ingredient purchase prices.
# Products and tickets reference ingredients by name only, so every lookup
# is case-insensitive and "not found" is a normal outcome.
#
# KEY CONSTRAINT: names are unique under case-insensitive comparison
# =============================================================================

from dataclasses import dataclass, replace
from typing import Dict, List, Optional
import uuid


UNIT_KG = "Kg"
UNIT_L = "L"
UNIT_UD = "Ud"
UNITS = (UNIT_KG, UNIT_L, UNIT_UD)


@dataclass(frozen=True)
class IngredientPrice:
    """Single ingredient in the price ledger."""
    id: str
    name: str
    unit: str = UNIT_KG
    price_per_unit: float = 0.0  # purchase price per unit
    default_sale_price: float = 0.0  # price when sold as an extra
    show_in_sales: bool = False


def normalize_name(name) -> str:
    """Storage form of an ingredient name: trimmed, upper-case."""
    return str(name or "").strip().upper()


def same_name(a: str, b: str) -> bool:
    return str(a).lower() == str(b).lower()


def new_id() -> str:
    return uuid.uuid4().hex


def parse_price(value) -> float:
    """Parse a user-entered price; anything unparseable is 0."""
    if value is None or value == "":
        return 0.0
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return 0.0


def find_by_name(ledger: List[IngredientPrice], name: str) -> Optional[IngredientPrice]:
    """
    Look up an ingredient by case-insensitive name.

    Args:
        ledger: Ingredient price list
        name: Name as written in a recipe or ticket

    Returns:
        First matching entry, or None when the ingredient is not in the ledger
    """
    for entry in ledger:
        if same_name(entry.name, name):
            return entry
    return None


def load_ledger(config: List[Dict]) -> List[IngredientPrice]:
    """
    Load the ingredient ledger from dataset records.

    Expected structure (ingredients.yaml):
        - id: str (optional)
          name: str
          unit: Kg | L | Ud
          price_per_unit: float
          default_sale_price: float (optional)
          show_in_sales: bool (optional)
    """
    result: List[IngredientPrice] = []

    for record in config or []:
        result.append(IngredientPrice(
            id=str(record.get("id") or new_id()),
            name=normalize_name(record.get("name", "")),
            unit=record.get("unit", UNIT_KG),
            price_per_unit=parse_price(record.get("price_per_unit", 0.0)),
            default_sale_price=parse_price(record.get("default_sale_price", 0.0)),
            show_in_sales=bool(record.get("show_in_sales", False)),
        ))

    return result


def ledger_to_records(ledger: List[IngredientPrice]) -> List[Dict]:
    """Inverse of load_ledger, in storage order."""
    return [
        {
            "id": entry.id,
            "name": entry.name,
            "unit": entry.unit,
            "price_per_unit": entry.price_per_unit,
            "default_sale_price": entry.default_sale_price,
            "show_in_sales": entry.show_in_sales,
        }
        for entry in ledger
    ]


def add_ingredient(
    ledger: List[IngredientPrice],
    name: str,
    unit: str = UNIT_KG,
    price=0.0,
    sale_price=0.0,
    show_in_sales: bool = False
) -> List[IngredientPrice]:
    """Return a new ledger with the ingredient appended (blank names ignored)."""
    normalized = normalize_name(name)
    if not normalized:
        return list(ledger)

    entry = IngredientPrice(
        id=new_id(),
        name=normalized,
        unit=unit,
        price_per_unit=parse_price(price),
        default_sale_price=parse_price(sale_price),
        show_in_sales=show_in_sales,
    )
    return list(ledger) + [entry]


def update_ingredient(
    ledger: List[IngredientPrice],
    ingredient_id: str,
    **changes
) -> List[IngredientPrice]:
    """Return a new ledger with the given fields replaced on one entry."""
    if "name" in changes:
        changes["name"] = normalize_name(changes["name"])
    return [
        replace(entry, **changes) if entry.id == ingredient_id else entry
        for entry in ledger
    ]


def remove_ingredient(ledger: List[IngredientPrice], ingredient_id: str) -> List[IngredientPrice]:
    return [entry for entry in ledger if entry.id != ingredient_id]


def toggle_visibility(ledger: List[IngredientPrice], ingredient_id: str) -> List[IngredientPrice]:
    """Flip show_in_sales on one entry."""
    return [
        replace(entry, show_in_sales=not entry.show_in_sales)
        if entry.id == ingredient_id else entry
        for entry in ledger
    ]


def search_ingredients(ledger: List[IngredientPrice], term: str) -> List[IngredientPrice]:
    """Entries whose name contains term (case-insensitive), sorted by name."""
    needle = str(term or "").lower()
    matches = [entry for entry in ledger if needle in entry.name.lower()]
    return sorted(matches, key=lambda entry: entry.name)


def sale_extras(ledger: List[IngredientPrice]) -> List[IngredientPrice]:
    """Ingredients offered as paid extras at the till."""
    return [entry for entry in ledger if entry.show_in_sales]


def validate_ledger(ledger: List[IngredientPrice]) -> List[str]:
    """
    Validate ledger constraints.

    Validations:
        - Names unique under case-insensitive comparison
        - No blank names
        - Prices >= 0
        - Unit is one of Kg, L, Ud
    """
    errors = []
    seen = set()

    for entry in ledger:
        key = entry.name.lower()
        if not key:
            errors.append(f"Ingredient {entry.id} has an empty name")
        elif key in seen:
            errors.append(f"Duplicate ingredient name in ledger: {entry.name}")
        seen.add(key)

        if entry.price_per_unit < 0:
            errors.append(
                f"Negative purchase price for {entry.name}: {entry.price_per_unit}"
            )
        if entry.default_sale_price < 0:
            errors.append(
                f"Negative sale price for {entry.name}: {entry.default_sale_price}"
            )
        if entry.unit not in UNITS:
            errors.append(f"Unknown unit for {entry.name}: {entry.unit}")

    return errors


# =============================================================================
# END OF INGREDIENT LEDGER MODULE
# =============================================================================
