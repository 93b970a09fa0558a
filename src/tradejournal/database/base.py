"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from tradejournal.domain.entities import (
    Account,
    ImportFormat,
    ImportFormatMapping,
)


class Database(ABC):
    """Abstract database interface for tradejournal.

    The account store follows a document contract: a user's accounts,
    each with its ordered trade list, are read and overwritten as a whole.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, user_id: str, broker: str, account_type: str, balance: Decimal
    ) -> str:
        """Create a new account for a user. Returns account ID."""
        pass

    @abstractmethod
    def get_accounts(self, user_id: str) -> list[Account]:
        """Fetch a user's account collection, in order, with trades."""
        pass

    @abstractmethod
    def replace_accounts(self, user_id: str, accounts: Sequence[Account]) -> None:
        """Overwrite a user's entire account collection.

        The write is all-or-nothing: on failure no account is changed.
        """
        pass

    @abstractmethod
    def delete_account(self, user_id: str, account_id: str) -> None:
        """Delete an account and its trades."""
        pass

    # Import format operations
    @abstractmethod
    def create_import_format(self, name: str) -> int:
        """Create a new import format. Returns format ID."""
        pass

    @abstractmethod
    def get_import_format(self, format_id: int) -> Optional[ImportFormat]:
        """Get import format by ID."""
        pass

    @abstractmethod
    def get_import_format_by_name(self, name: str) -> Optional[ImportFormat]:
        """Get import format by name."""
        pass

    @abstractmethod
    def list_import_formats(self) -> list[ImportFormat]:
        """List import formats."""
        pass

    @abstractmethod
    def delete_import_format(self, format_id: int) -> None:
        """Delete an import format and its mappings."""
        pass

    # Import format mapping operations
    @abstractmethod
    def set_format_mapping(self, format_id: int, csv_column_name: str, target_field: str) -> int:
        """Map a CSV column to a target field, replacing any previous column. Returns mapping ID."""
        pass

    @abstractmethod
    def get_format_mappings(self, format_id: int) -> list[ImportFormatMapping]:
        """Get all column mappings for a format."""
        pass
