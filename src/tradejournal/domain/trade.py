"""Manual trade entry, editing and deletion."""

import dataclasses
import logging
import re
import time
from decimal import Decimal
from typing import Optional, Sequence

from tradejournal.database.base import Database
from tradejournal.domain.entities import (
    MARKET_TYPES,
    TRADE_TYPES,
    Account,
    ImportResult,
    Trade,
    TradeDate,
)
from tradejournal.domain.errors import (
    CommitFailureError,
    NotFoundError,
    ValidationError,
    trade_not_found,
)
from tradejournal.domain.pnl import (
    DEFAULT_PIP_VALUE,
    DEFAULT_TICK_VALUE,
    PIP_MARKETS,
    TICK_MARKETS,
    calculate_pnl,
)
from tradejournal.domain.trade_builder import DEFAULT_EXIT_TIME, new_trade_id
from tradejournal.domain.trade_import import TradeImportService
from tradejournal.domain.validation import validate_trade

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "symbol",
    "date",
    "trade_type",
    "market_type",
    "entry",
    "exit",
    "size",
    "commission",
    "tp",
    "sl",
    "tick_value",
    "pip_value",
    "notes",
    "exit_time",
    "followed_rules",
    "pnl",
)

_EXIT_TIME = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")


def _check_choices(trade: Trade) -> None:
    if trade.trade_type not in TRADE_TYPES:
        raise ValidationError(
            f"Invalid trade type '{trade.trade_type}'. Must be one of: {', '.join(TRADE_TYPES)}"
        )
    if trade.market_type not in MARKET_TYPES:
        raise ValidationError(
            f"Invalid market type '{trade.market_type}'. "
            f"Must be one of: {', '.join(MARKET_TYPES)}"
        )
    if not _EXIT_TIME.match(trade.exit_time):
        raise ValidationError(f"Invalid exit time '{trade.exit_time}'. Use HH:MM or HH:MM:SS")


def _normalize(trade: Trade) -> Trade:
    """Apply the market's unit values and drop zero stop or target prices."""
    tick_value = trade.tick_value if trade.market_type in TICK_MARKETS else None
    if trade.market_type in TICK_MARKETS and not tick_value:
        tick_value = DEFAULT_TICK_VALUE
    pip_value = trade.pip_value if trade.market_type in PIP_MARKETS else None
    if trade.market_type in PIP_MARKETS and not pip_value:
        pip_value = DEFAULT_PIP_VALUE

    return dataclasses.replace(
        trade,
        symbol=(trade.symbol or "").strip().upper(),
        tp=trade.tp or None,
        sl=trade.sl or None,
        tick_value=tick_value,
        pip_value=pip_value,
        notes=trade.notes or None,
    )


def _with_pnl(trade: Trade, pnl: Optional[Decimal]) -> Trade:
    if pnl is None:
        pnl = calculate_pnl(
            entry=trade.entry,
            exit=trade.exit,
            size=trade.size,
            trade_type=trade.trade_type,
            market_type=trade.market_type,
            symbol=trade.symbol,
            commission=trade.commission,
            tick_value=trade.tick_value,
            pip_value=trade.pip_value,
        )
    return dataclasses.replace(trade, pnl=pnl)


def _check_valid(trade: Trade) -> None:
    errors = validate_trade(trade)
    if errors:
        raise ValidationError("; ".join(errors))


class TradeService:
    """Service for trades entered or changed by hand."""

    def __init__(self, db: Database, user_id: str):
        """Initialize trade service.

        Args:
            db: Database instance holding the account store
            user_id: Owner of the accounts
        """
        self.db = db
        self.user_id = user_id

    def add_trade(
        self,
        account_ids: Sequence[str],
        symbol: str,
        date: TradeDate,
        trade_type: str,
        entry: Decimal,
        exit: Decimal,
        size: Decimal,
        market_type: str = "futures",
        commission: Decimal = Decimal("0"),
        tp: Optional[Decimal] = None,
        sl: Optional[Decimal] = None,
        tick_value: Optional[Decimal] = None,
        pip_value: Optional[Decimal] = None,
        notes: Optional[str] = None,
        exit_time: str = DEFAULT_EXIT_TIME,
        followed_rules: Sequence[str] = (),
        pnl: Optional[Decimal] = None,
    ) -> ImportResult:
        """Record one trade in every selected account.

        The P&L is calculated from prices, size and commission unless given.
        Each account gets its own copy of the trade and its balance grows by
        the trade's P&L.

        Returns:
            ImportResult for the single trade

        Raises:
            ValidationError: If a field is invalid or no account is selected
            NotFoundError: If none of the selected accounts exist
            CommitFailureError: If writing the accounts fails
        """
        trade = _normalize(
            Trade(
                id=new_trade_id(),
                symbol=symbol,
                date=date,
                trade_type=trade_type,
                market_type=market_type,
                entry=entry,
                exit=exit,
                size=size,
                pnl=Decimal("0"),
                commission=commission,
                tp=tp,
                sl=sl,
                tick_value=tick_value,
                pip_value=pip_value,
                notes=notes,
                exit_time=exit_time,
                followed_rules=tuple(followed_rules),
                created_at=int(time.time() * 1000),
            )
        )
        _check_choices(trade)
        trade = _with_pnl(trade, pnl)
        _check_valid(trade)

        result = TradeImportService(self.db, self.user_id).commit([trade], account_ids)
        logger.info("Added %s trade on %s with P&L %s", trade.symbol, trade.date, trade.pnl)
        return result

    def find_trade(self, trade_ref: str) -> tuple[Account, Trade]:
        """Find a trade by full ID or unique ID prefix.

        Raises:
            NotFoundError: If no trade matches
            ValidationError: If the prefix matches more than one trade
        """
        trade_ref = trade_ref.strip()
        if not trade_ref:
            raise ValidationError("Trade reference is empty")

        matches = []
        for account in self.db.get_accounts(self.user_id):
            for trade in account.trades:
                if trade.id == trade_ref:
                    return account, trade
                if trade.id.startswith(trade_ref):
                    matches.append((account, trade))

        if not matches:
            raise NotFoundError(trade_not_found(trade_ref))
        if len(matches) > 1:
            raise ValidationError(
                f"Trade '{trade_ref}' is ambiguous: {len(matches)} trades match. "
                "Use more of the trade ID."
            )
        return matches[0]

    def edit_trade(self, trade_ref: str, **changes) -> Trade:
        """Change fields of a stored trade and adjust its account balance.

        The P&L is recalculated from the updated fields unless 'pnl' is among
        the changes. The account balance moves by the difference between the
        new and the old P&L.

        Args:
            trade_ref: Trade ID or unique ID prefix
            **changes: New values keyed by Trade field name

        Returns:
            The updated trade

        Raises:
            NotFoundError: If the trade doesn't exist
            ValidationError: If a field is unknown or the result is invalid
            CommitFailureError: If writing the accounts fails
        """
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(
                f"Cannot edit trade field(s): {', '.join(unknown)}. "
                f"Editable fields: {', '.join(EDITABLE_FIELDS)}"
            )

        account, old_trade = self.find_trade(trade_ref)
        pnl = changes.pop("pnl", None)
        if "followed_rules" in changes:
            changes["followed_rules"] = tuple(changes["followed_rules"])

        trade = _normalize(dataclasses.replace(old_trade, **changes))
        _check_choices(trade)
        trade = _with_pnl(trade, pnl)
        _check_valid(trade)

        difference = trade.pnl - old_trade.pnl
        updated = dataclasses.replace(
            account,
            balance=(account.balance or Decimal("0")) + difference,
            trades=tuple(trade if t.id == trade.id else t for t in account.trades),
        )
        self._write(account, updated)
        logger.info("Edited trade %s (P&L change %s)", trade.id, difference)
        return trade

    def delete_trade(self, trade_ref: str) -> tuple[Account, Trade]:
        """Remove a trade and take its P&L back out of the account balance.

        Returns:
            The account as it was before the deletion and the removed trade

        Raises:
            NotFoundError: If the trade doesn't exist
            CommitFailureError: If writing the accounts fails
        """
        account, trade = self.find_trade(trade_ref)
        updated = dataclasses.replace(
            account,
            balance=(account.balance or Decimal("0")) - trade.pnl,
            trades=tuple(t for t in account.trades if t.id != trade.id),
        )
        self._write(account, updated)
        logger.info("Deleted trade %s from account %s", trade.id, account.id)
        return account, trade

    def _write(self, account: Account, updated: Account) -> None:
        accounts = self.db.get_accounts(self.user_id)
        replaced = [updated if acc.id == account.id else acc for acc in accounts]
        try:
            self.db.replace_accounts(self.user_id, replaced)
        except Exception as e:
            logger.exception("Account write failed for user %s", self.user_id)
            raise CommitFailureError(f"There was a problem saving your trade: {e}") from e
