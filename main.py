# =============================================================================
# NOCTAMBULA COSTING ENGINE - MAIN ENTRY POINT
# =============================================================================
# Command-line interface for the costing engine.
#
# Usage:
#   python main.py products [--glovo]
#   python main.py report --period weekly
#   python main.py validate
#   python main.py import-ingredients --xlsx costes.xlsx
#   python main.py export-ingredients --xlsx costes.xlsx
# =============================================================================

import argparse
from datetime import datetime
from pathlib import Path

from costing.dataset import INGREDIENTS_FILE, load_dataset, save_ledger, validate_dataset
from costing.data_quality import generate_data_quality_report, format_report
from costing.ingredient_io import export_workbook, import_workbook
from costing.period_report import compute_period_report
from costing.rankings import compute_product_stats, summarize_products
from costing.settings import format_money, format_percent, sale_mode_from_settings
from costing.tickets import Period, parse_ticket_date
from views.report_tables import build_period_tables, product_table


def print_errors(errors, heading="ERRORS"):
    if errors:
        print(f"\n{heading}:")
        for error in errors:
            print(f"  - {error}")


def show_products(data_dir: Path, glovo: bool):
    """Print product cost/margin table and summary."""
    dataset = load_dataset(data_dir)
    settings = dataset.settings
    mode = sale_mode_from_settings(settings, marketplace=glovo)

    title = f"PRODUCTS - GLOVO ({settings.glovo_commission}%)" if glovo else "PRODUCTS"
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)

    print_errors(validate_dataset(dataset), "WARNINGS")

    stats = compute_product_stats(dataset.products, dataset.ledger, settings, mode)
    summary = summarize_products(stats)

    print()
    print(product_table(stats, summary).to_string(index=False))

    print("\nSUMMARY:")
    print(f"  Average cost:    {format_money(summary.avg_cost, settings)}")
    print(f"  Average margin:  {format_percent(summary.avg_margin)}")
    if summary.top_margin is not None:
        print(f"  Best margin:     {summary.top_margin.name}")
    if summary.top_profit is not None:
        print(f"  Top profit:      {summary.top_profit.name} "
              f"(+{format_money(summary.top_profit.profit, settings)}/u)")

    flagged = [s.name for s in stats if s.has_missing_or_zero_price]
    print_errors(
        [f"{name}: missing or zero-priced ingredients" for name in flagged],
        "WARNINGS"
    )
    return stats


def show_report(data_dir: Path, period: str, now: datetime):
    """Print the period sales report."""
    dataset = load_dataset(data_dir)
    settings = dataset.settings
    report = compute_period_report(dataset.tickets, Period.parse(period), now, dataset.ledger)
    tables = build_period_tables(report)

    print("\n" + "=" * 60)
    print(f"REPORT - {report.period.value.upper()} ({now:%Y-%m-%d %H:%M})")
    print("=" * 60)
    print(f"  Sales:     {format_money(report.total_venta, settings)}")
    print(f"  Cost:      {format_money(report.total_costo, settings)}")
    print(f"  Profit:    {format_money(report.total_profit, settings)}")
    print(f"  Tickets:   {report.normal_count} normal / {report.glovo_count} glovo")

    for heading, table in [
        ("TOP SELLERS", tables.top_sellers),
        ("DAILY", tables.daily),
        ("INGREDIENT USAGE", tables.ingredient_usage),
        ("TICKETS", tables.tickets),
    ]:
        print(f"\n{heading}:")
        print(table.to_string(index=False) if not table.empty else "  (none)")

    return report


def run_validation(data_dir: Path):
    report = generate_data_quality_report(load_dataset(data_dir))
    print(format_report(report))
    return report


def import_ingredients(data_dir: Path, workbook: Path):
    """Merge an ingredient workbook into the ledger and save it."""
    dataset = load_dataset(data_dir)
    result = import_workbook(dataset.ledger, workbook)
    if not result.ok:
        print_errors(result.errors)
        return result

    save_ledger(data_dir / INGREDIENTS_FILE, result.ledger)
    print(f"Imported {result.imported_count} ingredients into {data_dir / INGREDIENTS_FILE}")
    return result


def export_ingredients(data_dir: Path, workbook: Path):
    dataset = load_dataset(data_dir)
    path = export_workbook(dataset.ledger, workbook)
    print(f"Wrote {len(dataset.ledger)} ingredients to: {path}")
    return path


def main():
    parser = argparse.ArgumentParser(description="Noctambula Costing Engine")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    products_parser = subparsers.add_parser("products", help="Product cost and margin")
    products_parser.add_argument("--glovo", "-g", action="store_true",
                                 help="Use marketplace commission")

    report_parser = subparsers.add_parser("report", help="Sales report for a period")
    report_parser.add_argument("--period", "-p", default="daily",
                               choices=[p.value for p in Period])
    report_parser.add_argument("--now", help="Reference instant (ISO-8601), default now")

    subparsers.add_parser("validate", help="Data-quality report")

    import_parser = subparsers.add_parser("import-ingredients",
                                          help="Merge ingredient prices from a workbook")
    import_parser.add_argument("--xlsx", required=True, help="Path to workbook file")

    export_parser = subparsers.add_parser("export-ingredients",
                                          help="Write ingredient prices to a workbook")
    export_parser.add_argument("--xlsx", required=True, help="Path to workbook file")

    for sub in subparsers.choices.values():
        sub.add_argument("--dir", "-d", default="data", help="Data directory")

    args = parser.parse_args()

    data_dir = Path(args.dir if hasattr(args, "dir") else "data")

    if args.command == "products":
        show_products(data_dir, args.glovo)
    elif args.command == "report":
        now = parse_ticket_date(args.now) if args.now else datetime.now()
        show_report(data_dir, args.period, now)
    elif args.command == "validate":
        run_validation(data_dir)
    elif args.command == "import-ingredients":
        import_ingredients(data_dir, Path(args.xlsx))
    elif args.command == "export-ingredients":
        export_ingredients(data_dir, Path(args.xlsx))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
