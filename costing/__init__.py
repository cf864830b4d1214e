# =============================================================================
# NOCTAMBULA COSTING ENGINE - COSTING PACKAGE
# =============================================================================
# This package contains all calculation engines for the costing tool.
#
# Modules:
# - settings: Currency, decimals and marketplace commission
# - ledger: Ingredient purchase prices (name-keyed)
# - products: Product recipes and lifecycle
# - product_cost: Recipe cost against the ledger
# - margin: VAT extraction, direct and marketplace margin
# - tickets: Historical sales tickets and report periods
# - period_report: Ticket aggregation over a period
# - rankings: Product rankings and summary statistics
# - ingredient_io: Ingredient workbook import/export
# - dataset: YAML dataset loading and validation
# - data_quality: Data-quality report
# =============================================================================

__version__ = "0.1.0"
