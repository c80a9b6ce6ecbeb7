"""BCBD validator: checks buyer cost breakdown spreadsheets against brand rule catalogs."""

__version__ = "0.1.0"
