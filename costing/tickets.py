# =============================================================================
# NOCTAMBULA COSTING ENGINE - TICKETS MODULE
# =============================================================================
# Historical sales tickets. Totals are computed when the ticket is rung up
# and are trusted as-is; tickets are never edited, only deleted.
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List

from .ledger import new_id, parse_price, UNIT_KG
from .products import RecipeLine


class Period(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUAL = "annual"

    @classmethod
    def parse(cls, value) -> "Period":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for period in cls:
            if period.value == text:
                return period
        raise ValueError(f"Unknown report period: {value}")


@dataclass(frozen=True)
class TicketItem:
    """Product line on a ticket; ingredient amounts are per unit sold."""
    name: str
    quantity: int = 1
    ingredients: List[RecipeLine] = field(default_factory=list)


@dataclass(frozen=True)
class Ticket:
    """A closed sale."""
    id: str
    ticket_number: int
    date: datetime
    is_glovo: bool = False
    items: List[TicketItem] = field(default_factory=list)
    total_venta: float = 0.0
    total_costo: float = 0.0
    total_profit: float = 0.0


def to_local_naive(moment: datetime) -> datetime:
    """Drop a UTC offset by converting to local wall-clock time."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def parse_ticket_date(value) -> datetime:
    """
    Parse a ticket timestamp.

    Accepts a datetime, ISO-8601 text, or epoch milliseconds. Timestamps
    carrying a UTC offset are converted to naive local time.
    """
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000.0)
    try:
        parsed = datetime.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid ticket date: {value}")
    return to_local_naive(parsed)


def load_tickets(config: List[Dict]) -> List[Ticket]:
    """
    Load tickets from dataset records.

    Expected structure (tickets.yaml):
        - id: str
          ticket_number: int
          date: ISO-8601 | epoch ms
          is_glovo: bool
          total_venta / total_costo / total_profit: float
          items:
            - name: str
              quantity: int
              ingredients: [{name, amount, unit}]
    """
    result: List[Ticket] = []

    for index, record in enumerate(config or [], start=1):
        items = []
        for item in record.get("items", []):
            items.append(TicketItem(
                name=str(item.get("name", "")),
                quantity=int(item.get("quantity", 1)),
                ingredients=[
                    RecipeLine(
                        ingredient_name=str(line.get("name", "")),
                        amount=parse_price(line.get("amount", 0.0)),
                        unit=line.get("unit", UNIT_KG),
                    )
                    for line in item.get("ingredients", [])
                ],
            ))

        result.append(Ticket(
            id=str(record.get("id") or new_id()),
            ticket_number=int(record.get("ticket_number", index)),
            date=parse_ticket_date(record.get("date")),
            is_glovo=bool(record.get("is_glovo", False)),
            items=items,
            total_venta=parse_price(record.get("total_venta", 0.0)),
            total_costo=parse_price(record.get("total_costo", 0.0)),
            total_profit=parse_price(record.get("total_profit", 0.0)),
        ))

    return result


def delete_ticket(tickets: List[Ticket], ticket_id: str) -> List[Ticket]:
    """Return the ticket list without the given ticket."""
    return [ticket for ticket in tickets if ticket.id != ticket_id]


def validate_tickets(tickets: List[Ticket]) -> List[str]:
    """
    Validate ticket records.

    Validations:
        - Unique ticket ids
        - Item quantity >= 1
        - Ingredient amounts >= 0
    """
    errors = []
    seen = set()

    for ticket in tickets:
        if ticket.id in seen:
            errors.append(f"Duplicate ticket id: {ticket.id}")
        seen.add(ticket.id)

        for item in ticket.items:
            if item.quantity < 1:
                errors.append(
                    f"Ticket #{ticket.ticket_number} item {item.name} has quantity "
                    f"{item.quantity} (< 1)"
                )
            for line in item.ingredients:
                if line.amount < 0:
                    errors.append(
                        f"Ticket #{ticket.ticket_number} item {item.name} has negative "
                        f"amount for {line.ingredient_name}: {line.amount}"
                    )

    return errors


# =============================================================================
# END OF TICKETS MODULE
# =============================================================================
