"""Turn mapped CSV rows into candidate trades."""

import time
import uuid
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from tradejournal.domain.entities import ImportDefaults, Trade
from tradejournal.domain.pnl import PIP_MARKETS, TICK_MARKETS, calculate_pnl
from tradejournal.utils.transformers import (
    transform_date,
    transform_market_type,
    transform_numeric,
    transform_type,
)

DEFAULT_EXIT_TIME = "00:00:00"


def new_trade_id() -> str:
    return str(uuid.uuid4())


def _optional_price(value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    return transform_numeric(value) or None


def build_candidate_trade(
    row: Mapping[str, str],
    mapping: Mapping[str, str],
    defaults: ImportDefaults,
    created_at: Optional[int] = None,
) -> Trade:
    """Apply column mappings and field transformers to one raw row.

    Unmapped commission, tick value, pip value and market type take the
    session defaults. A mapped tick or pip value of zero counts as missing.

    Args:
        row: Raw CSV row keyed by header
        mapping: Frozen target field -> CSV column mapping
        defaults: Session defaults for unmapped fields
        created_at: Creation time in epoch milliseconds (defaults to now)

    Returns:
        Candidate trade with computed P&L
    """

    def cell(field_id: str) -> Optional[str]:
        column = mapping.get(field_id)
        if not column:
            return None
        return row.get(column, "")

    symbol = (cell("symbol") or "").upper()
    trade_type = transform_type(cell("type"))
    entry = transform_numeric(cell("entry"))
    exit_price = transform_numeric(cell("exit"))
    size = transform_numeric(cell("size"))

    market_cell = cell("marketType")
    market_type = transform_market_type(market_cell) if market_cell else defaults.market_type

    commission_cell = cell("commission")
    if commission_cell:
        commission = transform_numeric(commission_cell)
    else:
        commission = defaults.commission

    tick_value = _optional_price(cell("tickValue"))
    if tick_value is None and market_type in TICK_MARKETS:
        tick_value = defaults.tick_value
    pip_value = _optional_price(cell("pipValue"))
    if pip_value is None and market_type in PIP_MARKETS:
        pip_value = defaults.pip_value

    pnl = calculate_pnl(
        entry=entry,
        exit=exit_price,
        size=size,
        trade_type=trade_type,
        market_type=market_type,
        symbol=symbol,
        commission=commission,
        tick_value=tick_value,
        pip_value=pip_value,
    )

    return Trade(
        id=new_trade_id(),
        symbol=symbol,
        date=transform_date(cell("date")),
        trade_type=trade_type,
        market_type=market_type,
        entry=entry,
        exit=exit_price,
        size=size,
        pnl=pnl,
        commission=commission,
        tp=_optional_price(cell("tp")),
        sl=_optional_price(cell("sl")),
        tick_value=tick_value,
        pip_value=pip_value,
        notes=cell("notes") or None,
        exit_time=cell("time") or DEFAULT_EXIT_TIME,
        created_at=created_at if created_at is not None else int(time.time() * 1000),
    )


def build_candidate_trades(
    rows: Sequence[Mapping[str, str]],
    mapping: Mapping[str, str],
    defaults: ImportDefaults,
) -> list[Trade]:
    """Build one candidate trade per raw row, preserving row order."""
    created_at = int(time.time() * 1000)
    return [build_candidate_trade(row, mapping, defaults, created_at) for row in rows]
