"""Ingredient price list import/export through spreadsheet workbooks."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from openpyxl import Workbook, load_workbook

from .ledger import (
    IngredientPrice,
    new_id,
    normalize_name,
    parse_price,
    same_name,
    UNIT_KG,
    UNIT_L,
    UNIT_UD,
)


EXPORT_SHEET = "COSTES"
EXPORT_HEADERS = ["INGREDIENTE", "UNIDAD", "PRECIO_COMPRA", "PVP_VENTA_EXTRA", "VENTA_ACTIVA"]

NAME_COLUMNS = ("INGREDIENTE", "NOMBRE")
UNIT_COLUMNS = ("UNIDAD",)
PRICE_COLUMNS = ("PRECIO_COMPRA", "PRECIO")
SALE_PRICE_COLUMNS = ("PVP_VENTA_EXTRA", "PVP")
ACTIVE_COLUMN = "VENTA_ACTIVA"

NO_VALID_ROWS = "No valid ingredients found"


@dataclass
class ImportResult:
    ledger: List[IngredientPrice] = field(default_factory=list)
    imported_count: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _normalize_row(row: Mapping) -> Dict[str, object]:
    return {str(key).strip().upper(): value for key, value in row.items() if key is not None}


def _first(row: Dict[str, object], columns: Iterable[str]):
    # Falsy cells fall through to the alias column
    for column in columns:
        value = row.get(column)
        if value:
            return value
    return None


def parse_unit(value) -> str:
    """Map free-text units: contains L -> L, contains UD -> Ud, else Kg."""
    text = str(value or UNIT_KG).upper()
    if "L" in text:
        return UNIT_L
    if "UD" in text:
        return UNIT_UD
    return UNIT_KG


def parse_ingredient_rows(rows: Iterable[Mapping]) -> List[IngredientPrice]:
    """
    Turn spreadsheet records into ledger entries.

    Column names are trimmed and matched case-insensitively. Rows whose
    name resolves to blank are dropped.
    """
    items: List[IngredientPrice] = []
    for raw in rows:
        row = _normalize_row(raw)
        name = normalize_name(_first(row, NAME_COLUMNS) or "")
        if not name:
            continue
        items.append(
            IngredientPrice(
                id=new_id(),
                name=name,
                unit=parse_unit(_first(row, UNIT_COLUMNS)),
                price_per_unit=parse_price(_first(row, PRICE_COLUMNS)),
                default_sale_price=parse_price(_first(row, SALE_PRICE_COLUMNS)),
                show_in_sales=str(row.get(ACTIVE_COLUMN) or "").strip().upper() == "SI",
            )
        )
    return items


def merge_ingredients(
    ledger: List[IngredientPrice], imported: List[IngredientPrice]
) -> List[IngredientPrice]:
    """Overwrite price, unit, sale price and flag on name matches; append the rest."""
    merged = list(ledger)
    for item in imported:
        index = next(
            (i for i, existing in enumerate(merged) if same_name(existing.name, item.name)),
            -1,
        )
        if index != -1:
            merged[index] = replace(
                merged[index],
                price_per_unit=item.price_per_unit,
                unit=item.unit,
                default_sale_price=item.default_sale_price,
                show_in_sales=item.show_in_sales,
            )
        else:
            merged.append(item)
    return merged


def import_ingredients(ledger: List[IngredientPrice], rows: Iterable[Mapping]) -> ImportResult:
    """Parse rows and merge them; the ledger is untouched when nothing is valid."""
    items = parse_ingredient_rows(rows)
    if not items:
        return ImportResult(ledger=list(ledger), errors=[NO_VALID_ROWS])
    return ImportResult(ledger=merge_ingredients(ledger, items), imported_count=len(items))


def read_workbook_rows(workbook_path: Path) -> List[Dict[str, object]]:
    """Read the first worksheet as records keyed by the header row."""
    wb = load_workbook(workbook_path, read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        records = []
        for values in rows:
            if values is None or all(v is None for v in values):
                continue
            records.append({key: value for key, value in zip(header, values) if key is not None})
        return records
    finally:
        wb.close()


def import_workbook(ledger: List[IngredientPrice], workbook_path: Path) -> ImportResult:
    """Import an ingredient workbook; unreadable files leave the ledger as-is."""
    try:
        rows = read_workbook_rows(Path(workbook_path))
    except Exception as exc:
        return ImportResult(ledger=list(ledger), errors=[f"Failed to import workbook: {exc}"])
    return import_ingredients(ledger, rows)


def export_rows(ledger: List[IngredientPrice]) -> List[List[object]]:
    """Header plus one row per ingredient, in ledger order."""
    rows: List[List[object]] = [list(EXPORT_HEADERS)]
    for entry in ledger:
        rows.append(
            [
                entry.name.upper(),
                entry.unit,
                entry.price_per_unit,
                entry.default_sale_price or 0,
                "SI" if entry.show_in_sales else "NO",
            ]
        )
    return rows


def export_records(ledger: List[IngredientPrice]) -> List[Dict[str, object]]:
    rows = export_rows(ledger)
    return [dict(zip(rows[0], row)) for row in rows[1:]]


def export_workbook(ledger: List[IngredientPrice], workbook_path: Path) -> Path:
    wb = Workbook()
    ws = wb.active
    ws.title = EXPORT_SHEET
    for row in export_rows(ledger):
        ws.append(row)
    path = Path(workbook_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
