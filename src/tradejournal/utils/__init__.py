"""Utility functions for tradejournal."""

from tradejournal.utils.csv_parser import parse_csv_content, parse_csv_line
from tradejournal.utils.transformers import (
    transform_date,
    transform_market_type,
    transform_numeric,
    transform_type,
)
from tradejournal.utils.account_resolver import resolve_account

__all__ = [
    "parse_csv_content",
    "parse_csv_line",
    "transform_date",
    "transform_market_type",
    "transform_numeric",
    "transform_type",
    "resolve_account",
]
