# =============================================================================
# NOCTAMBULA COSTING ENGINE - SETTINGS MODULE
# =============================================================================
# Process-wide display and commission settings.
#
# Settings are an immutable value passed into every calculation that needs
# them; nothing in the engine reads them from global state.
# =============================================================================

from dataclasses import dataclass
from typing import Dict, List

from .margin import MarginResult, SaleMode


DEFAULT_CURRENCY = "€"
DEFAULT_DECIMALS = 2
DEFAULT_GLOVO_COMMISSION = 30.0

ALLOWED_DECIMALS = (1, 2, 3, 4)

NO_PRICE_LABEL = "SIN PVP"


@dataclass(frozen=True)
class Settings:
    """Display settings and marketplace commission (percent, 0-100)."""
    currency: str = DEFAULT_CURRENCY
    decimals: int = DEFAULT_DECIMALS
    glovo_commission: float = DEFAULT_GLOVO_COMMISSION


def _to_float(value, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return default


def load_settings(config: Dict) -> Settings:
    """
    Build Settings from the 'settings' section of the dataset.

    Args:
        config: Plain dict, typically loaded from settings.yaml

    Returns:
        Settings with defaults for any missing key
    """
    config = config or {}
    decimals = config.get("decimals", DEFAULT_DECIMALS)
    try:
        decimals = int(decimals)
    except (TypeError, ValueError):
        decimals = DEFAULT_DECIMALS

    return Settings(
        currency=str(config.get("currency", DEFAULT_CURRENCY)),
        decimals=decimals,
        glovo_commission=_to_float(
            config.get("glovo_commission"), DEFAULT_GLOVO_COMMISSION
        ),
    )


def validate_settings(settings: Settings) -> List[str]:
    """
    Validate settings ranges.

    Validations:
        - decimals in 1..4
        - glovo_commission in [0, 100]
    """
    errors = []

    if settings.decimals not in ALLOWED_DECIMALS:
        errors.append(
            f"decimals must be one of {ALLOWED_DECIMALS}: {settings.decimals}"
        )

    if settings.glovo_commission < 0 or settings.glovo_commission > 100:
        errors.append(
            f"glovo_commission out of range [0, 100]: {settings.glovo_commission}"
        )

    return errors


def sale_mode_from_settings(settings: Settings, marketplace: bool) -> SaleMode:
    """Direct mode, or marketplace mode at the configured commission."""
    if marketplace:
        return SaleMode.marketplace_at(settings.glovo_commission)
    return SaleMode.direct()


def format_money(value: float, settings: Settings) -> str:
    return f"{value:.{settings.decimals}f}{settings.currency}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_margin(result: MarginResult, settings: Settings) -> str:
    """Margin as text; unpriced products render as NO_PRICE_LABEL, never 0%."""
    if not result.is_priced:
        return NO_PRICE_LABEL
    return (
        f"{format_percent(result.margin_percent)} "
        f"({format_money(result.profit, settings)})"
    )


# =============================================================================
# END OF SETTINGS MODULE
# =============================================================================
