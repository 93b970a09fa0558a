"""Commit of imported trades to trading accounts."""

import dataclasses
import logging
import uuid
from decimal import Decimal
from typing import Sequence

from tradejournal.database.base import Database
from tradejournal.domain.entities import Account, ImportResult, Trade
from tradejournal.domain.errors import (
    CommitFailureError,
    NoAccountsAvailableError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
    no_accounts_available,
)

logger = logging.getLogger(__name__)


class TradeImportService:
    """Service for writing validated trades into a user's accounts."""

    def __init__(self, db: Database, user_id: str):
        """Initialize trade import service.

        Args:
            db: Database instance holding the account store
            user_id: Owner of the target accounts
        """
        self.db = db
        self.user_id = user_id

    def fetch_accounts(self) -> list[Account]:
        """Read the user's account collection from the store.

        Raises:
            StoreUnavailableError: If the store cannot be read
        """
        try:
            return self.db.get_accounts(self.user_id)
        except Exception as e:
            logger.exception("Account fetch failed for user %s", self.user_id)
            raise StoreUnavailableError(f"Could not load accounts: {e}") from e

    def available_accounts(self) -> list[Account]:
        """Return the accounts trades can be imported into.

        Raises:
            NoAccountsAvailableError: If the user has no accounts
            StoreUnavailableError: If the store cannot be read
        """
        accounts = self.fetch_accounts()
        if not accounts:
            raise NoAccountsAvailableError(no_accounts_available())
        return accounts

    def commit(self, valid_trades: Sequence[Trade], account_ids: Sequence[str]) -> ImportResult:
        """Append valid trades to every selected account and adjust balances.

        Each account receives its own copy of every trade under a fresh ID,
        and its balance grows by the summed P&L of the imported trades. The
        accounts are read once and written back once; any failure before the
        write leaves the store untouched.

        Args:
            valid_trades: Trades that passed validation
            account_ids: IDs of the target accounts

        Returns:
            ImportResult with counts and the brokers of the updated accounts

        Raises:
            ValidationError: If there are no trades or no accounts selected
            NoAccountsAvailableError: If the user has no accounts
            NotFoundError: If none of the selected accounts exist
            StoreUnavailableError: If the accounts cannot be read
            CommitFailureError: If writing the accounts fails
        """
        if not valid_trades:
            raise ValidationError("No valid trades to import")
        if not account_ids:
            raise ValidationError("Select at least one account to import into")

        accounts = self.available_accounts()
        total_pnl = sum((trade.pnl for trade in valid_trades), Decimal("0"))

        selected = set(account_ids)
        updated_accounts = []
        accounts_updated = []
        trades_created = 0
        for account in accounts:
            if account.id not in selected:
                updated_accounts.append(account)
                continue

            new_trades = tuple(
                dataclasses.replace(trade, id=str(uuid.uuid4())) for trade in valid_trades
            )
            updated_accounts.append(
                dataclasses.replace(
                    account,
                    balance=(account.balance or Decimal("0")) + total_pnl,
                    trades=account.trades + new_trades,
                )
            )
            accounts_updated.append(account.broker)
            trades_created += len(new_trades)

        known_ids = {account.id for account in accounts}
        for account_id in account_ids:
            if account_id not in known_ids:
                logger.warning("Skipping unknown account %s", account_id)

        if not accounts_updated:
            raise NotFoundError(
                f"None of the selected accounts exist: {', '.join(account_ids)}"
            )

        try:
            self.db.replace_accounts(self.user_id, updated_accounts)
        except Exception as e:
            logger.exception("Account write failed for user %s", self.user_id)
            raise CommitFailureError(f"There was a problem saving your trades: {e}") from e

        logger.info(
            "Imported %d trades into %d accounts (total P&L %s)",
            len(valid_trades),
            len(accounts_updated),
            total_pnl,
        )
        return ImportResult(
            imported=len(valid_trades),
            accounts_updated=tuple(accounts_updated),
            total_pnl=total_pnl,
            trades_created=trades_created,
        )
