# =============================================================================
# NOCTAMBULA COSTING ENGINE - DATA QUALITY REPORT
# =============================================================================
# Collects the data-quality flags raised by the engine (missing or zero
# priced ingredients, unpriced products, loss-making products) and the
# dataset validators into one report.
# =============================================================================

from dataclasses import dataclass, field
from typing import Dict, List
from datetime import datetime

from .dataset import Dataset
from .ledger import validate_ledger
from .margin import SaleMode
from .products import active_products, missing_ingredients, validate_products
from .rankings import compute_product_stats
from .settings import sale_mode_from_settings, validate_settings
from .tickets import validate_tickets


@dataclass
class CheckResult:
    """Result of a single check."""
    name: str
    passed: bool
    message: str = ""


@dataclass
class DataQualityReport:
    """Complete data-quality report."""
    timestamp: str = ""
    checks: Dict[str, List[CheckResult]] = field(default_factory=dict)

    total_passed: int = 0
    total_failed: int = 0
    overall_passed: bool = False

    warnings: List[str] = field(default_factory=list)


def _errors_check(name: str, errors: List[str]) -> CheckResult:
    if errors:
        return CheckResult(name, False, "; ".join(errors))
    return CheckResult(name, True)


def check_products(dataset: Dataset, mode: SaleMode) -> List[CheckResult]:
    """Pricing completeness and profitability of the active products."""
    results = []
    active = active_products(dataset.products)

    # Missing or zero-priced ingredients
    flagged = []
    for product in active:
        names = missing_ingredients(product.ingredients, dataset.ledger)
        if names:
            flagged.append(f"{product.name} ({', '.join(names)})")
    results.append(CheckResult(
        "ingredients_priced", not flagged,
        "" if not flagged else f"Missing or zero-priced ingredients: {'; '.join(flagged)}"
    ))

    # Sale price defined
    unpriced = [p.name for p in active if not p.sale_price]
    results.append(CheckResult(
        "sale_price_defined", not unpriced,
        "" if not unpriced else f"No sale price: {', '.join(unpriced)}"
    ))

    # Profitable at the given mode
    stats = compute_product_stats(dataset.products, dataset.ledger, dataset.settings, mode)
    losing = [s.name for s in stats if s.is_priced and s.profit < 0]
    results.append(CheckResult(
        "non_negative_profit", not losing,
        "" if not losing else f"Negative profit: {', '.join(losing)}"
    ))

    results.append(_errors_check("valid_definitions", validate_products(dataset.products)))

    return results


def generate_data_quality_report(dataset: Dataset) -> DataQualityReport:
    """
    Run every check over a dataset.

    Product profitability is checked in both direct and marketplace mode.
    """
    report = DataQualityReport(
        timestamp=datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    )

    report.checks["Settings"] = [
        _errors_check("valid_settings", validate_settings(dataset.settings))
    ]
    report.checks["Ledger"] = [
        _errors_check("valid_ledger", validate_ledger(dataset.ledger))
    ]
    zero_priced = [e.name for e in dataset.ledger if e.price_per_unit == 0]
    if zero_priced:
        report.warnings.append(f"Ingredients without purchase price: {', '.join(zero_priced)}")

    report.checks["Products (direct)"] = check_products(
        dataset, sale_mode_from_settings(dataset.settings, marketplace=False)
    )
    report.checks["Products (marketplace)"] = check_products(
        dataset, sale_mode_from_settings(dataset.settings, marketplace=True)
    )
    report.checks["Tickets"] = [
        _errors_check("valid_tickets", validate_tickets(dataset.tickets))
    ]

    all_checks = [check for checks in report.checks.values() for check in checks]
    report.total_passed = sum(1 for c in all_checks if c.passed)
    report.total_failed = sum(1 for c in all_checks if not c.passed)
    report.overall_passed = report.total_failed == 0

    return report


def format_report(report: DataQualityReport) -> str:
    """Format data-quality report as text."""
    lines = [
        "=" * 60,
        "DATA QUALITY REPORT",
        "=" * 60,
        f"Date: {report.timestamp}",
    ]

    for area, checks in report.checks.items():
        passed = sum(1 for c in checks if c.passed)
        status = "PASSED" if passed == len(checks) else "FAILED"
        lines.extend(["", f"{area}: {passed}/{len(checks)} {status}", "-" * 40])
        for check in checks:
            mark = "ok" if check.passed else "FAIL"
            line = f"  [{mark}] {check.name}"
            if check.message:
                line += f" - {check.message}"
            lines.append(line)

    if report.warnings:
        lines.extend(["", "WARNINGS"])
        lines.extend(f"  - {warning}" for warning in report.warnings)

    lines.extend([
        "",
        "=" * 60,
        f"OVERALL: {'PASSED' if report.overall_passed else 'FAILED'}",
        f"Total: {report.total_passed} passed, {report.total_failed} failed",
        "=" * 60
    ])

    return "\n".join(lines)


# =============================================================================
# END OF DATA QUALITY REPORT
# =============================================================================
