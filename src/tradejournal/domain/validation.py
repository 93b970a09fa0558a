"""Business-rule validation of candidate trades."""

from typing import Sequence

from tradejournal.domain.entities import (
    LONG,
    SHORT,
    RowValidationError,
    Trade,
    ValidationResult,
)

# Header line plus one-based display numbering
ROW_OFFSET = 2


def validate_trade(trade: Trade) -> list[str]:
    """Return every rule violation for a single candidate trade.

    All rules are checked; an empty list means the trade is valid.
    """
    errors = []

    if not trade.symbol:
        errors.append("Symbol is required")
    if not trade.date.is_set:
        errors.append("Invalid date format")
    if trade.entry <= 0:
        errors.append("Entry price must be greater than zero")
    if trade.exit <= 0:
        errors.append("Exit price must be greater than zero")
    if trade.size <= 0:
        errors.append("Position size must be greater than zero")

    if trade.sl is not None and trade.sl > 0:
        if trade.trade_type == LONG and trade.sl >= trade.entry:
            errors.append("Stop loss should be below entry price for long trades")
        elif trade.trade_type == SHORT and trade.sl <= trade.entry:
            errors.append("Stop loss should be above entry price for short trades")

    if trade.tp is not None and trade.tp > 0:
        if trade.trade_type == LONG and trade.tp <= trade.entry:
            errors.append("Take profit should be above entry price for long trades")
        elif trade.trade_type == SHORT and trade.tp >= trade.entry:
            errors.append("Take profit should be below entry price for short trades")

    return errors


def validate_trades(trades: Sequence[Trade]) -> ValidationResult:
    """Partition candidate trades into valid trades and row errors.

    A row is either wholly valid or reported with all of its violations.
    """
    valid_trades = []
    errors = []
    for index, trade in enumerate(trades):
        row_errors = validate_trade(trade)
        if row_errors:
            errors.append(RowValidationError(row=index + ROW_OFFSET, errors=tuple(row_errors)))
        else:
            valid_trades.append(trade)
    return ValidationResult(valid_trades=tuple(valid_trades), errors=tuple(errors))
