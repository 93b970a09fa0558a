"""Profit and loss calculation for trades of different market types."""

from decimal import Decimal
from typing import Optional

from tradejournal.domain.entities import LONG

TICK_MARKETS = ("futures", "stocks")
PIP_MARKETS = ("forex", "crypto")

PIP_SIZE = Decimal("0.0001")
JPY_PIP_SIZE = Decimal("0.01")

DEFAULT_TICK_VALUE = Decimal("5")
DEFAULT_PIP_VALUE = Decimal("10")


def pip_size_for(symbol: str) -> Decimal:
    """Return the pip size for a symbol (JPY pairs quote to two decimals)."""
    return JPY_PIP_SIZE if "JPY" in (symbol or "").upper() else PIP_SIZE


def direction_for(trade_type: str) -> int:
    return 1 if trade_type == LONG else -1


def calculate_pnl(
    entry: Decimal,
    exit: Decimal,
    size: Decimal,
    trade_type: str,
    market_type: str,
    symbol: str = "",
    commission: Decimal = Decimal("0"),
    tick_value: Optional[Decimal] = None,
    pip_value: Optional[Decimal] = None,
) -> Decimal:
    """Calculate signed profit for a closed trade.

    Futures and stocks scale the price move by the tick value; forex and
    crypto convert it to pips first and scale by the pip value; any other
    market uses the raw price move. Commission is charged per unit of size.

    Args:
        entry: Entry price
        exit: Exit price
        size: Position size
        trade_type: 'long' or 'short'
        market_type: Normalized market type
        symbol: Instrument symbol, used to pick the pip size
        commission: Commission per unit of size
        tick_value: Value of one tick (defaults to 5)
        pip_value: Value of one pip (defaults to 10)

    Returns:
        Profit (positive) or loss (negative); zero if entry, exit or size is zero
    """
    if not entry or not exit or not size:
        return Decimal("0")

    move = direction_for(trade_type) * (exit - entry)
    total_commission = (commission or Decimal("0")) * size

    if market_type in TICK_MARKETS:
        return move * (tick_value or DEFAULT_TICK_VALUE) * size - total_commission
    if market_type in PIP_MARKETS:
        pips = move / pip_size_for(symbol)
        return pips * (pip_value or DEFAULT_PIP_VALUE) * size - total_commission
    return move * size - total_commission
