"""Transform engine outputs into pandas tables for presentation layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd

from costing.period_report import PeriodStats, chronological_series
from costing.rankings import (
    ProductStats,
    ProductSummary,
    bar_percent,
    ingredients_by_cost,
    rank_by_margin,
    ticket_history,
    top_sellers,
)


PRODUCT_COLUMNS = [
    "number",
    "name",
    "cost",
    "sale_price",
    "base_price",
    "profit",
    "margin_pct",
    "priced",
    "data_warning",
    "cost_bar_pct",
    "profit_bar_pct",
]


@dataclass
class PeriodTables:
    totals: pd.DataFrame
    daily: pd.DataFrame
    top_sellers: pd.DataFrame
    ingredient_usage: pd.DataFrame
    tickets: pd.DataFrame


def product_table(stats: List[ProductStats], summary: ProductSummary) -> pd.DataFrame:
    """Products ranked by margin, with bar widths scaled to the summary maxima."""
    if not stats:
        return pd.DataFrame(columns=PRODUCT_COLUMNS)
    rows = []
    for s in rank_by_margin(stats):
        rows.append(
            {
                "number": s.number,
                "name": s.name,
                "cost": s.cost,
                "sale_price": s.sale_price,
                "base_price": s.base_price,
                "profit": s.profit,
                "margin_pct": s.margin_percent if s.is_priced else None,
                "priced": s.is_priced,
                "data_warning": s.has_missing_or_zero_price,
                "cost_bar_pct": bar_percent(s.cost, summary.max_cost),
                "profit_bar_pct": bar_percent(s.profit, summary.max_profit),
            }
        )
    return pd.DataFrame(rows, columns=PRODUCT_COLUMNS)


def _totals_df(report: PeriodStats) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"metric": "tickets", "value": report.ticket_count},
            {"metric": "normal_tickets", "value": report.normal_count},
            {"metric": "glovo_tickets", "value": report.glovo_count},
            {"metric": "total_venta", "value": report.total_venta},
            {"metric": "total_costo", "value": report.total_costo},
            {"metric": "total_profit", "value": report.total_profit},
        ]
    )


def _daily_df(report: PeriodStats) -> pd.DataFrame:
    rows = [
        {"date": day, "venta": sales.venta, "costo": sales.costo}
        for day, sales in chronological_series(report).items()
    ]
    if not rows:
        return pd.DataFrame(columns=["date", "venta", "costo", "margin"])
    data = pd.DataFrame(rows)
    data["margin"] = data["venta"] - data["costo"]
    return data


def _top_sellers_df(report: PeriodStats, n: int) -> pd.DataFrame:
    rows = [{"product": name, "units": units} for name, units in top_sellers(report, n)]
    if not rows:
        return pd.DataFrame(columns=["product", "units", "share_pct"])
    data = pd.DataFrame(rows)
    total = float(sum(report.product_sales.values()))
    data["share_pct"] = data["units"].apply(lambda value: (value / total) if total else 0.0)
    return data


def _ingredient_usage_df(report: PeriodStats) -> pd.DataFrame:
    rows = [
        {"ingredient": name, "amount": usage.amount, "unit": usage.unit, "cost": usage.cost}
        for name, usage in ingredients_by_cost(report)
    ]
    if not rows:
        return pd.DataFrame(columns=["ingredient", "amount", "unit", "cost"])
    return pd.DataFrame(rows)


def _tickets_df(report: PeriodStats) -> pd.DataFrame:
    rows = [
        {
            "ticket_number": t.ticket_number,
            "date": t.date,
            "channel": "glovo" if t.is_glovo else "normal",
            "total_venta": t.total_venta,
            "total_costo": t.total_costo,
            "total_profit": t.total_profit,
        }
        for t in ticket_history(report)
    ]
    if not rows:
        return pd.DataFrame(
            columns=["ticket_number", "date", "channel", "total_venta", "total_costo", "total_profit"]
        )
    return pd.DataFrame(rows)


def build_period_tables(report: PeriodStats, top_n: int = 6) -> PeriodTables:
    return PeriodTables(
        totals=_totals_df(report),
        daily=_daily_df(report),
        top_sellers=_top_sellers_df(report, top_n),
        ingredient_usage=_ingredient_usage_df(report),
        tickets=_tickets_df(report),
    )
