# =============================================================================
# NOCTAMBULA COSTING ENGINE - DATASET TESTS
# =============================================================================

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import yaml

from costing.dataset import (
    Dataset, deep_merge, load_dataset, load_settings_config, save_ledger,
    validate_dataset, INGREDIENTS_FILE
)
from costing.ledger import find_by_name, load_ledger
from costing.settings import Settings


class TestDeepMerge:
    """Tests for deep merge function."""

    def test_nested_merge(self):
        base = {"a": {"x": 1, "y": 2}}
        result = deep_merge(base, {"a": {"y": 3}})
        assert result == {"a": {"x": 1, "y": 3}}

    def test_lists_replaced(self):
        result = deep_merge({"a": [1, 2]}, {"a": [3]})
        assert result["a"] == [3]

    def test_immutability(self):
        base = {"a": {"x": 1}}
        deep_merge(base, {"a": {"x": 2}})
        assert base["a"]["x"] == 1


class TestLoadDataset:
    """Tests for loading the sample dataset."""

    def test_sample_dataset(self, data_dir):
        dataset = load_dataset(data_dir)
        assert dataset.settings == Settings(currency="€", decimals=2, glovo_commission=30.0)
        assert len(dataset.ledger) == 7
        assert find_by_name(dataset.ledger, "mozzarella").show_in_sales is True
        assert [p.name for p in dataset.products][:2] == ["Margarita", "Prosciutto"]
        assert dataset.products[3].is_active is False
        assert len(dataset.tickets) == 3
        assert dataset.tickets[1].is_glovo is True

    def test_sample_dataset_is_valid(self, data_dir):
        assert validate_dataset(load_dataset(data_dir)) == []

    def test_missing_files_give_empty_dataset(self, tmp_path):
        dataset = load_dataset(tmp_path)
        assert dataset == Dataset()

    def test_settings_override(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("currency: EUR\ndecimals: 2\n")
        (tmp_path / "settings.local.yaml").write_text("glovo_commission: 25\n")
        config = load_settings_config(tmp_path)
        assert config == {"currency": "EUR", "decimals": 2, "glovo_commission": 25}
        assert load_dataset(tmp_path).settings.glovo_commission == 25.0

    def test_empty_file(self, tmp_path):
        (tmp_path / "tickets.yaml").write_text("")
        assert load_dataset(tmp_path).tickets == []


class TestSaveLedger:
    """Tests for writing the ledger back to YAML."""

    def test_save_and_reload(self, ledger, tmp_path):
        path = tmp_path / INGREDIENTS_FILE
        save_ledger(path, ledger)
        with open(path, "r", encoding="utf-8") as handle:
            reloaded = load_ledger(yaml.safe_load(handle))
        assert reloaded == ledger


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
