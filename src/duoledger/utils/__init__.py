"""Utility functions for duoledger."""

from duoledger.utils.date_parser import parse_date, parse_import_date
from duoledger.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_import_date", "parse_amount"]
