# =============================================================================
# NOCTAMBULA COSTING ENGINE - INGREDIENT WORKBOOK TESTS
# =============================================================================

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from openpyxl import Workbook, load_workbook

from costing.ingredient_io import (
    EXPORT_HEADERS, EXPORT_SHEET, NO_VALID_ROWS,
    parse_unit, parse_ingredient_rows, merge_ingredients, import_ingredients,
    export_rows, export_records, export_workbook, import_workbook, read_workbook_rows
)
from costing.ledger import IngredientPrice, find_by_name


class TestParseRows:
    """Tests for spreadsheet row parsing."""

    def test_unit_mapping(self):
        assert parse_unit("litros") == "L"
        assert parse_unit("L") == "L"
        assert parse_unit("ud") == "Ud"
        assert parse_unit("Kg") == "Kg"
        assert parse_unit(None) == "Kg"

    def test_column_aliases_and_case(self):
        rows = [
            {" nombre ": "harina", "Precio": 1.1, "pvp": 0.5, "venta_activa": "si"},
            {"INGREDIENTE": "aceite", "UNIDAD": "L", "PRECIO_COMPRA": "8.4",
             "VENTA_ACTIVA": "NO"},
        ]
        items = parse_ingredient_rows(rows)
        assert [i.name for i in items] == ["HARINA", "ACEITE"]
        assert items[0].price_per_unit == 1.1
        assert items[0].default_sale_price == 0.5
        assert items[0].show_in_sales is True
        assert items[0].unit == "Kg"
        assert items[1].unit == "L"
        assert items[1].price_per_unit == 8.4
        assert items[1].show_in_sales is False

    def test_blank_names_dropped(self):
        rows = [{"INGREDIENTE": "  ", "PRECIO": 1}, {"PRECIO": 2}]
        assert parse_ingredient_rows(rows) == []

    def test_unparseable_price_is_zero(self):
        items = parse_ingredient_rows([{"INGREDIENTE": "sal", "PRECIO_COMPRA": "n/a"}])
        assert items[0].price_per_unit == 0.0


class TestMerge:
    """Tests for the overwrite/append merge policy."""

    def test_overwrite_case_insensitive(self):
        """Existing FLOUR 1.20 + imported 'flour' 1.50 -> one FLOUR at 1.50."""
        ledger = [IngredientPrice("f1", "FLOUR", "Kg", 1.20)]
        result = import_ingredients(ledger, [{"INGREDIENTE": "flour", "PRECIO_COMPRA": 1.50}])
        assert result.ok
        assert len(result.ledger) == 1
        assert result.ledger[0].name == "FLOUR"
        assert result.ledger[0].id == "f1"
        assert result.ledger[0].price_per_unit == 1.50

    def test_append_new(self, ledger):
        imported = parse_ingredient_rows([{"INGREDIENTE": "salt", "PRECIO": 0.4}])
        merged = merge_ingredients(ledger, imported)
        assert len(merged) == len(ledger) + 1
        assert find_by_name(merged, "SALT").price_per_unit == 0.4

    def test_no_valid_rows_is_failure(self, ledger):
        result = import_ingredients(ledger, [{"PRECIO": 3}])
        assert not result.ok
        assert result.errors == [NO_VALID_ROWS]
        assert result.ledger == ledger
        assert result.imported_count == 0


class TestExport:
    """Tests for export and export -> import round trip."""

    def test_export_rows(self, ledger):
        rows = export_rows(ledger)
        assert rows[0] == EXPORT_HEADERS
        assert rows[3] == ["MOZZARELLA", "Kg", 8.0, 1.5, "SI"]
        assert rows[1][4] == "NO"

    def test_round_trip_records(self, ledger):
        result = import_ingredients(ledger, export_records(ledger))
        assert result.ok
        assert result.ledger == ledger

    def test_round_trip_workbook(self, ledger, tmp_path):
        path = export_workbook(ledger, tmp_path / "out" / "costes.xlsx")
        wb = load_workbook(path)
        assert wb.sheetnames == [EXPORT_SHEET]

        result = import_workbook(ledger, path)
        assert result.ok
        assert result.imported_count == len(ledger)
        for original, reimported in zip(ledger, result.ledger):
            assert reimported.price_per_unit == original.price_per_unit
            assert reimported.unit == original.unit
            assert reimported.show_in_sales == original.show_in_sales
            assert reimported.default_sale_price == original.default_sale_price

        fresh = import_workbook([], path)
        assert [e.name for e in fresh.ledger] == [e.name for e in ledger]

    def test_read_workbook_rows_skips_empty(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.append(["INGREDIENTE", "PRECIO"])
        ws.append(["tomate", 2])
        ws.append([None, None])
        path = tmp_path / "in.xlsx"
        wb.save(path)
        assert read_workbook_rows(path) == [{"INGREDIENTE": "tomate", "PRECIO": 2}]


class TestImportFailures:
    """Unreadable sources leave the ledger untouched."""

    def test_missing_file(self, ledger, tmp_path):
        result = import_workbook(ledger, tmp_path / "nope.xlsx")
        assert not result.ok
        assert result.errors[0].startswith("Failed to import workbook")
        assert result.ledger == ledger

    def test_not_a_workbook(self, ledger, tmp_path):
        path = tmp_path / "bad.xlsx"
        path.write_text("not a spreadsheet")
        result = import_workbook(ledger, path)
        assert not result.ok
        assert result.ledger == ledger


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
