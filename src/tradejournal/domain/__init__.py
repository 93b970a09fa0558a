"""Domain layer for tradejournal application.

Import services from their modules, e.g. ``tradejournal.domain.account``.
"""
