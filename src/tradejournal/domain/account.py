"""Account domain service."""

import dataclasses
from decimal import Decimal
from typing import Optional

from tradejournal.database.base import Database
from tradejournal.domain.entities import ACCOUNT_TYPES, Account as AccountEntity, Trade
from tradejournal.domain.errors import NotFoundError, ValidationError, account_not_found


class AccountService:
    """Service for managing a user's trading accounts."""

    def __init__(self, db: Database, user_id: str):
        """Initialize account service.

        Args:
            db: Database instance
            user_id: Owner of the accounts
        """
        self.db = db
        self.user_id = user_id

    def create_account(
        self, broker: str, account_type: str = "real", balance: Decimal = Decimal("0")
    ) -> str:
        """Create a new trading account.

        Args:
            broker: Broker or prop firm name
            account_type: One of real, demo, prop
            balance: Starting balance

        Returns:
            Account ID

        Raises:
            ValidationError: If broker is empty or account type is unknown
        """
        if not broker or not broker.strip():
            raise ValidationError("Broker name is required")
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. "
                f"Must be one of: {', '.join(ACCOUNT_TYPES)}"
            )
        return self.db.create_account(
            user_id=self.user_id,
            broker=broker.strip(),
            account_type=account_type,
            balance=balance,
        )

    def list_accounts(self) -> list[AccountEntity]:
        """List the user's accounts in their stored order."""
        return self.db.get_accounts(self.user_id)

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        for account in self.list_accounts():
            if account.id == account_id:
                return account
        return None

    def update_account(
        self,
        account_id: str,
        broker: Optional[str] = None,
        account_type: Optional[str] = None,
        balance: Optional[Decimal] = None,
    ) -> AccountEntity:
        """Update account details; fields left as None are not changed.

        Returns:
            The updated account

        Raises:
            NotFoundError: If account not found
            ValidationError: If broker is empty or account type is unknown
        """
        if broker is not None and not broker.strip():
            raise ValidationError("Broker name is required")
        if account_type is not None and account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. "
                f"Must be one of: {', '.join(ACCOUNT_TYPES)}"
            )

        accounts = self.list_accounts()
        for index, account in enumerate(accounts):
            if account.id == account_id:
                break
        else:
            raise NotFoundError(account_not_found(account_id))

        changes = {}
        if broker is not None:
            changes["broker"] = broker.strip()
        if account_type is not None:
            changes["account_type"] = account_type
        if balance is not None:
            changes["balance"] = balance
        accounts[index] = dataclasses.replace(account, **changes)

        self.db.replace_accounts(self.user_id, accounts)
        return accounts[index]

    def delete_account(self, account_id: str) -> None:
        """Delete an account together with its trades.

        Raises:
            NotFoundError: If account not found
        """
        if self.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.delete_account(self.user_id, account_id)

    def list_trades(
        self, account_id: Optional[str] = None, symbol: Optional[str] = None
    ) -> list[tuple[AccountEntity, Trade]]:
        """List trades, newest first, paired with the account holding them.

        Args:
            account_id: Optional account ID filter
            symbol: Optional symbol filter (case-insensitive)

        Raises:
            NotFoundError: If account_id is given but not found
        """
        accounts = self.list_accounts()
        if account_id is not None:
            accounts = [acc for acc in accounts if acc.id == account_id]
            if not accounts:
                raise NotFoundError(account_not_found(account_id))

        rows = []
        for account in accounts:
            for trade in account.trades:
                if symbol and trade.symbol != symbol.upper():
                    continue
                rows.append((account, trade))
        rows.sort(key=lambda row: (row[1].date, row[1].created_at), reverse=True)
        return rows
