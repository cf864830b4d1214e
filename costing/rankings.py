# =============================================================================
# NOCTAMBULA COSTING ENGINE - RANKINGS MODULE
# =============================================================================
# Per-product statistics, rankings and summary figures for the active
# product set, plus rankings derived from a period report.
#
# KEY PRINCIPLES:
# - Recomputed from inputs on every call, never cached
# - Rankings are stable: ties keep input order
# - Unpriced products are excluded from the average margin
# =============================================================================

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .ledger import IngredientPrice
from .margin import SaleMode, calculate_margin
from .period_report import IngredientUsage, PeriodStats
from .product_cost import cost_recipe
from .products import Product, active_products
from .settings import Settings, sale_mode_from_settings
from .tickets import Ticket


@dataclass(frozen=True)
class ProductStats:
    """Cost and margin for one product."""
    product_id: str
    number: int
    name: str
    cost: float
    sale_price: float
    base_price: float
    profit: float
    margin_percent: float
    has_missing_or_zero_price: bool = False

    @property
    def is_priced(self) -> bool:
        return self.sale_price > 0


@dataclass(frozen=True)
class ProductSummary:
    """Summary figures over a list of ProductStats."""
    product_count: int = 0
    priced_count: int = 0
    avg_cost: float = 0.0
    avg_margin: float = 0.0
    top_margin: Optional[ProductStats] = None
    top_profit: Optional[ProductStats] = None
    max_cost: float = 1.0
    max_profit: float = 1.0


def compute_product_stats(
    products: List[Product],
    ledger: List[IngredientPrice],
    settings: Settings,
    mode: Optional[SaleMode] = None
) -> List[ProductStats]:
    """
    Cost and margin for every active product.

    Args:
        products: All products (inactive ones are skipped)
        ledger: Ingredient price list
        settings: Settings the sale mode is derived from when mode is None
        mode: Direct or marketplace sale (default: direct)

    Returns:
        ProductStats in product order
    """
    if mode is None:
        mode = sale_mode_from_settings(settings, marketplace=False)

    result: List[ProductStats] = []

    for product in active_products(products):
        cost = cost_recipe(product.ingredients, ledger)
        sale_price = product.sale_price or 0.0
        margin = calculate_margin(sale_price, cost.total_cost, mode)
        result.append(ProductStats(
            product_id=product.id,
            number=product.number,
            name=product.name,
            cost=cost.total_cost,
            sale_price=sale_price,
            base_price=margin.base_price,
            profit=margin.profit,
            margin_percent=margin.margin_percent,
            has_missing_or_zero_price=cost.has_missing_or_zero_price,
        ))

    return result


def rank_by_margin(stats: List[ProductStats]) -> List[ProductStats]:
    """Highest margin percentage first; sorted() is stable."""
    return sorted(stats, key=lambda s: s.margin_percent, reverse=True)


def rank_by_profit(stats: List[ProductStats]) -> List[ProductStats]:
    """Highest absolute profit first."""
    return sorted(stats, key=lambda s: s.profit, reverse=True)


def rank_by_cost(stats: List[ProductStats]) -> List[ProductStats]:
    return sorted(stats, key=lambda s: s.cost, reverse=True)


def summarize_products(stats: List[ProductStats]) -> ProductSummary:
    """
    Summary statistics for the product dashboard.

    Returns:
        ProductSummary where
        - avg_cost is over all products (0 when there are none)
        - avg_margin is over priced products only
        - max_cost / max_profit are bar-scaling denominators, never below 1
    """
    if not stats:
        return ProductSummary()

    priced = [s for s in stats if s.is_priced]
    avg_margin = (
        sum(s.margin_percent for s in priced) / len(priced) if priced else 0.0
    )

    by_margin = rank_by_margin(stats)
    by_profit = rank_by_profit(stats)

    return ProductSummary(
        product_count=len(stats),
        priced_count=len(priced),
        avg_cost=sum(s.cost for s in stats) / len(stats),
        avg_margin=avg_margin,
        top_margin=by_margin[0],
        top_profit=by_profit[0],
        max_cost=max([s.cost for s in stats] + [1.0]),
        max_profit=max([s.profit for s in stats] + [1.0]),
    )


def bar_percent(value: float, denominator: float) -> float:
    """Bar width in percent of the denominator, clamped to [0, 100]."""
    if denominator <= 0:
        return 0.0
    return min(max(value / denominator * 100, 0.0), 100.0)


# =============================================================================
# PERIOD REPORT RANKINGS
# =============================================================================

def top_sellers(report: PeriodStats, n: int = 6) -> List[Tuple[str, int]]:
    """Best-selling products by units sold."""
    entries = sorted(report.product_sales.items(), key=lambda e: e[1], reverse=True)
    return entries[:n]


def ingredients_by_cost(report: PeriodStats) -> List[Tuple[str, IngredientUsage]]:
    """Ingredient usage, most expensive first."""
    return sorted(
        report.ingredient_usage.items(), key=lambda e: e[1].cost, reverse=True
    )


def recent_days(report: PeriodStats, n: int = 7) -> List[str]:
    """Last n day keys of the daily series, in insertion order."""
    keys = list(report.daily_series.keys())
    return keys[-n:] if n > 0 else []


def ticket_history(report: PeriodStats) -> List[Ticket]:
    """Tickets in the period, newest entry first."""
    return list(reversed(report.tickets))


# =============================================================================
# END OF RANKINGS MODULE
# =============================================================================
