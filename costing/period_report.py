# =============================================================================
# NOCTAMBULA COSTING ENGINE - PERIOD REPORT MODULE
# =============================================================================
# Aggregates historical tickets over a report period.
#
# EXECUTION ORDER:
# 1. Filter tickets to the period window around the reference instant
# 2. Sum ticket totals and count marketplace vs direct tickets
# 3. Sum units sold per product name
# 4. Sum ingredient usage (amount * quantity) priced at TODAY's ledger
# 5. Sum sales and cost per calendar day
#
# Period windows:
#   daily   - same calendar date as the reference
#   weekly  - reference - date < 7 * 24h (rolling, not a calendar week)
#   monthly - same calendar month and year
#   annual  - same calendar year
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List

from .ledger import IngredientPrice, find_by_name
from .tickets import Period, Ticket


WEEK_WINDOW = timedelta(days=7)


@dataclass
class IngredientUsage:
    """Consumption of one ingredient over the period."""
    amount: float = 0.0
    unit: str = ""
    cost: float = 0.0  # at current ledger price


@dataclass
class DaySales:
    venta: float = 0.0
    costo: float = 0.0


@dataclass
class PeriodStats:
    """Output structure for the period report."""
    period: Period
    reference: datetime

    tickets: List[Ticket] = field(default_factory=list)

    # Totals (as recorded on the tickets)
    total_venta: float = 0.0
    total_costo: float = 0.0
    total_profit: float = 0.0
    glovo_count: int = 0
    normal_count: int = 0

    # Breakdowns; insertion order is first-seen ticket order
    product_sales: Dict[str, int] = field(default_factory=dict)
    ingredient_usage: Dict[str, IngredientUsage] = field(default_factory=dict)
    daily_series: Dict[str, DaySales] = field(default_factory=dict)

    @property
    def ticket_count(self) -> int:
        return len(self.tickets)


def in_period(ticket_date: datetime, period: Period, now: datetime) -> bool:
    """Whether a ticket dated ticket_date falls inside the period window."""
    if period is Period.DAILY:
        return ticket_date.date() == now.date()
    if period is Period.WEEKLY:
        return now - ticket_date < WEEK_WINDOW
    if period is Period.MONTHLY:
        return ticket_date.month == now.month and ticket_date.year == now.year
    if period is Period.ANNUAL:
        return ticket_date.year == now.year
    raise ValueError(f"Unsupported report period: {period}")


def filter_tickets(tickets: List[Ticket], period: Period, now: datetime) -> List[Ticket]:
    """Tickets inside the period window, in input order."""
    period = Period.parse(period)
    return [ticket for ticket in tickets if in_period(ticket.date, period, now)]


def day_key(moment: datetime) -> str:
    """Calendar-day key for the daily series (YYYY-MM-DD)."""
    return moment.date().isoformat()


def _merge_key(key_by_lower: Dict[str, str], name: str) -> str:
    """First-seen spelling of a name, merging names that differ only in case."""
    lower = name.lower()
    if lower not in key_by_lower:
        key_by_lower[lower] = name
    return key_by_lower[lower]


def compute_period_report(
    tickets: List[Ticket],
    period: Period,
    now: datetime,
    ledger: List[IngredientPrice]
) -> PeriodStats:
    """
    Aggregate tickets over a report period.

    Args:
        tickets: All historical tickets
        period: Report period (or its name)
        now: Reference instant for the window
        ledger: Current ingredient prices, used for ingredient usage cost

    Returns:
        PeriodStats over the tickets inside the window

    Notes:
        - Ticket totals are trusted as recorded
        - Ingredient usage cost uses current prices, not price-at-sale-time;
          ingredients missing from the ledger add amount but no cost
    """
    period = Period.parse(period)
    stats = PeriodStats(period=period, reference=now)
    stats.tickets = filter_tickets(tickets, period, now)

    product_keys: Dict[str, str] = {}
    ingredient_keys: Dict[str, str] = {}

    for ticket in stats.tickets:
        stats.total_venta += ticket.total_venta
        stats.total_costo += ticket.total_costo
        stats.total_profit += ticket.total_profit

        if ticket.is_glovo:
            stats.glovo_count += 1
        else:
            stats.normal_count += 1

        day = stats.daily_series.setdefault(day_key(ticket.date), DaySales())
        day.venta += ticket.total_venta
        day.costo += ticket.total_costo

        for item in ticket.items:
            product = _merge_key(product_keys, item.name)
            stats.product_sales[product] = stats.product_sales.get(product, 0) + item.quantity

            for line in item.ingredients:
                total_amount = line.amount * item.quantity
                name = _merge_key(ingredient_keys, line.ingredient_name)
                usage = stats.ingredient_usage.get(name)
                if usage is None:
                    usage = IngredientUsage(unit=line.unit)
                    stats.ingredient_usage[name] = usage
                usage.amount += total_amount

                entry = find_by_name(ledger, line.ingredient_name)
                if entry is not None:
                    usage.cost += total_amount * entry.price_per_unit

    return stats


def chronological_series(stats: PeriodStats) -> Dict[str, DaySales]:
    """Daily series re-ordered by date."""
    return {key: stats.daily_series[key] for key in sorted(stats.daily_series)}


# =============================================================================
# END OF PERIOD REPORT MODULE
# =============================================================================
