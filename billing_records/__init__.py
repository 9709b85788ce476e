"""Billing record management: CSV import, amount calculation and export."""

__version__ = "1.0.0"
