"""Spreadsheet import and reconciliation engine for club belt-exam data."""

__version__ = "0.3.0"
