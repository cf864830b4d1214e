# =============================================================================
# NOCTAMBULA COSTING ENGINE - PRODUCTS MODULE
# =============================================================================
# Product (pizza) definitions and their recipes.
# A recipe line references a ledger ingredient by name; amount is taken in
# the unit written on the line and no unit conversion is performed.
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, List

from .ledger import IngredientPrice, find_by_name, new_id, parse_price, UNIT_KG


@dataclass(frozen=True)
class RecipeLine:
    """Single ingredient in a product's recipe."""
    ingredient_name: str
    amount: float
    unit: str = UNIT_KG


@dataclass
class Product:
    """Sellable product. sale_price is VAT-inclusive; 0 means not priced."""
    id: str
    number: int
    name: str
    ingredients: List[RecipeLine] = field(default_factory=list)
    sale_price: float = 0.0
    is_active: bool = True


def load_products(config: List[Dict]) -> List[Product]:
    """
    Load products from dataset records.

    Expected structure (products.yaml):
        - id: str (optional)
          number: int
          name: str
          sale_price: float
          is_active: bool (optional, default true)
          ingredients:
            - name: str
              amount: float
              unit: Kg | L | Ud
    """
    result: List[Product] = []

    for index, record in enumerate(config or [], start=1):
        lines = [
            RecipeLine(
                ingredient_name=str(line.get("name", "")),
                amount=parse_price(line.get("amount", 0.0)),
                unit=line.get("unit", UNIT_KG),
            )
            for line in record.get("ingredients", [])
        ]
        is_active = record.get("is_active")
        result.append(Product(
            id=str(record.get("id") or new_id()),
            number=int(record.get("number", index)),
            name=str(record.get("name", "")),
            ingredients=lines,
            sale_price=parse_price(record.get("sale_price", 0.0)),
            is_active=is_active is not False,
        ))

    return result


def active_products(products: List[Product]) -> List[Product]:
    """Products not switched off, in input order."""
    return [product for product in products if product.is_active is not False]


def missing_ingredients(recipe: List[RecipeLine], ledger: List[IngredientPrice]) -> List[str]:
    """
    Recipe ingredients that are absent from the ledger or priced at zero.

    Returns:
        Ingredient names in recipe order, without duplicates
    """
    names: List[str] = []
    seen = set()
    for line in recipe:
        entry = find_by_name(ledger, line.ingredient_name)
        if entry is None or entry.price_per_unit == 0:
            key = line.ingredient_name.lower()
            if key not in seen:
                seen.add(key)
                names.append(line.ingredient_name)
    return names


def validate_products(products: List[Product]) -> List[str]:
    """
    Validate product definitions.

    Validations:
        - sale_price >= 0
        - Recipe amounts >= 0
    """
    errors = []

    for product in products:
        if product.sale_price < 0:
            errors.append(
                f"Negative sale price for product {product.name}: {product.sale_price}"
            )
        for line in product.ingredients:
            if line.amount < 0:
                errors.append(
                    f"Negative amount for {product.name}/{line.ingredient_name}: "
                    f"{line.amount}"
                )

    return errors


# =============================================================================
# END OF PRODUCTS MODULE
# =============================================================================
