"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the account store can keep
its document-style contract (whole accounts with their trades) on top of
relational tables.
"""

from decimal import Decimal
from typing import Optional

from tradejournal.domain import entities as domain
from tradejournal.database.models import (
    Account as ORMAccount,
    Trade as ORMTrade,
    ImportFormat as ORMImportFormat,
    ImportFormatMapping as ORMImportFormatMapping,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value)


def trade_to_domain(orm_trade: ORMTrade) -> domain.Trade:
    """Convert SQLAlchemy Trade model to domain Trade entity."""
    return domain.Trade(
        id=orm_trade.id,
        symbol=orm_trade.symbol,
        date=domain.TradeDate(orm_trade.date_seconds, orm_trade.date_nanoseconds),
        trade_type=orm_trade.trade_type,
        market_type=orm_trade.market_type,
        entry=_decimal(orm_trade.entry),
        exit=_decimal(orm_trade.exit),
        size=_decimal(orm_trade.size),
        pnl=_decimal(orm_trade.pnl),
        commission=_decimal(orm_trade.commission),
        tp=_decimal(orm_trade.tp),
        sl=_decimal(orm_trade.sl),
        tick_value=_decimal(orm_trade.tick_value),
        pip_value=_decimal(orm_trade.pip_value),
        notes=orm_trade.notes,
        exit_time=orm_trade.exit_time,
        followed_rules=tuple(orm_trade.followed_rules or ()),
        created_at=orm_trade.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model (with trades) to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        broker=orm_account.broker,
        account_type=orm_account.account_type,
        balance=_decimal(orm_account.balance),
        created_at=orm_account.created_at,
        trades=tuple(trade_to_domain(t) for t in orm_account.trades),
    )


def apply_trade_to_orm(
    trade: domain.Trade, position: int, orm_trade: Optional[ORMTrade] = None
) -> ORMTrade:
    """Copy a domain Trade onto a new or existing SQLAlchemy Trade model."""
    if orm_trade is None:
        orm_trade = ORMTrade(id=trade.id)
    orm_trade.position = position
    orm_trade.symbol = trade.symbol
    orm_trade.date_seconds = trade.date.seconds
    orm_trade.date_nanoseconds = trade.date.nanoseconds
    orm_trade.exit_time = trade.exit_time
    orm_trade.trade_type = trade.trade_type
    orm_trade.market_type = trade.market_type
    orm_trade.entry = trade.entry
    orm_trade.exit = trade.exit
    orm_trade.size = trade.size
    orm_trade.pnl = trade.pnl
    orm_trade.commission = trade.commission
    orm_trade.tp = trade.tp
    orm_trade.sl = trade.sl
    orm_trade.tick_value = trade.tick_value
    orm_trade.pip_value = trade.pip_value
    orm_trade.notes = trade.notes
    orm_trade.followed_rules = list(trade.followed_rules)
    orm_trade.created_at = trade.created_at
    return orm_trade


def import_format_to_domain(orm_format: ORMImportFormat) -> domain.ImportFormat:
    """Convert SQLAlchemy ImportFormat model to domain ImportFormat entity."""
    return domain.ImportFormat(
        id=orm_format.id,
        name=orm_format.name,
        created_at=orm_format.created_at,
    )


def import_format_mapping_to_domain(
    orm_mapping: ORMImportFormatMapping,
) -> domain.ImportFormatMapping:
    """Convert SQLAlchemy ImportFormatMapping model to domain entity."""
    return domain.ImportFormatMapping(
        id=orm_mapping.id,
        format_id=orm_mapping.format_id,
        csv_column_name=orm_mapping.csv_column_name,
        target_field=orm_mapping.target_field,
    )
