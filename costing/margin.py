# =============================================================================
# NOCTAMBULA COSTING ENGINE - MARGIN MODULE
# =============================================================================
# Net profit and margin percentage from a VAT-inclusive sale price.
#
# FORMULA:
# Base_price = Sale_price / 1.10
# Direct:      Profit = Base_price - Cost
# Marketplace: Profit = Base_price - Sale_price * Commission% - Cost
# Margin%     = Profit / Base_price * 100
#
# The marketplace commission is charged on the gross (VAT-inclusive) price
# while the margin denominator is the net base price.
# =============================================================================

from dataclasses import dataclass


# Fixed 10% VAT on prepared food
VAT_DIVISOR = 1.10


@dataclass(frozen=True)
class SaleMode:
    """Direct sale, or marketplace sale with a commission on gross price."""
    marketplace: bool = False
    commission_percent: float = 0.0

    @classmethod
    def direct(cls) -> "SaleMode":
        return cls(marketplace=False, commission_percent=0.0)

    @classmethod
    def marketplace_at(cls, commission_percent: float) -> "SaleMode":
        return cls(marketplace=True, commission_percent=float(commission_percent))


@dataclass(frozen=True)
class MarginResult:
    """Margin outputs; all zero when the sale price is undefined."""
    base_price: float = 0.0
    commission: float = 0.0
    profit: float = 0.0
    margin_percent: float = 0.0
    is_priced: bool = False


def extract_base_price(sale_price_with_tax: float) -> float:
    """Remove the fixed VAT from a tax-inclusive price."""
    return sale_price_with_tax / VAT_DIVISOR


def calculate_margin(
    sale_price_with_tax: float,
    cost: float,
    mode: SaleMode = SaleMode()
) -> MarginResult:
    """
    Calculate base price, profit and margin percentage.

    Args:
        sale_price_with_tax: VAT-inclusive sale price (0 means "not priced")
        cost: Production cost of one unit
        mode: Direct or marketplace sale

    Returns:
        MarginResult. A zero or negative sale price returns the all-zero sentinel
        with is_priced=False; profit and margin may be negative otherwise.
    """
    if sale_price_with_tax <= 0:
        return MarginResult()

    base_price = extract_base_price(sale_price_with_tax)

    commission = 0.0
    if mode.marketplace:
        commission = sale_price_with_tax * mode.commission_percent / 100

    profit = base_price - commission - cost
    margin_percent = profit / base_price * 100

    return MarginResult(
        base_price=base_price,
        commission=commission,
        profit=profit,
        margin_percent=margin_percent,
        is_priced=True,
    )


# =============================================================================
# END OF MARGIN MODULE
# =============================================================================
