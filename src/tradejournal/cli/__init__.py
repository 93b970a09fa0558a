"""Command-line interface for tradejournal."""
