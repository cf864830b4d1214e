# =============================================================================
# NOCTAMBULA COSTING ENGINE - PRODUCT COST MODULE
# =============================================================================
# Production cost of a recipe against the current ledger.
#
# FORMULA:
# Cost = SUM(amount[i] * price_per_unit[i])
#
# Lines whose ingredient is missing or priced at zero contribute 0 and raise
# the data-quality flag.
# =============================================================================

from dataclasses import dataclass, field
from typing import List

from .ledger import IngredientPrice, find_by_name
from .products import RecipeLine


@dataclass
class ProductCost:
    """Cost of one unit of a recipe."""
    total_cost: float = 0.0
    has_missing_or_zero_price: bool = False
    missing: List[str] = field(default_factory=list)


def cost_recipe(recipe: List[RecipeLine], ledger: List[IngredientPrice]) -> ProductCost:
    """
    Calculate the production cost of a recipe.

    Args:
        recipe: Recipe lines (ingredient name, amount, unit)
        ledger: Ingredient price list

    Returns:
        ProductCost with the total and the lines flagged as missing/zero-priced
    """
    result = ProductCost()

    for line in recipe:
        entry = find_by_name(ledger, line.ingredient_name)
        if entry is None or entry.price_per_unit == 0:
            result.has_missing_or_zero_price = True
            result.missing.append(line.ingredient_name)
            continue

        result.total_cost += float(line.amount) * entry.price_per_unit

    return result


# =============================================================================
# END OF PRODUCT COST MODULE
# =============================================================================
