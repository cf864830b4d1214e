"""Tabular views over costing engine outputs."""
