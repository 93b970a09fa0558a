"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class MalformedInputError(ValidationError):
    """CSV payload is empty or its header line cannot be parsed."""


class MissingRequiredMappingError(ValidationError):
    """Import cannot progress until every required field is mapped."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(missing_required_mappings(self.missing))


class NoAccountsAvailableError(DomainError):
    """There are no trading accounts to import trades into."""


class StoreUnavailableError(DomainError):
    """The account store could not be read."""


class CommitFailureError(DomainError):
    """Writing imported trades to the account store failed."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def import_format_not_found(name: str) -> str:
    """Return message for missing import format."""
    return f"Import format '{name}' not found"


def missing_required_mappings(missing: list[str]) -> str:
    """Return message for unmapped required target fields."""
    return f"Missing required column mappings: {', '.join(missing)}"


def no_accounts_available() -> str:
    """Return message when the user has no trading accounts."""
    return (
        "No trading accounts found. "
        "Please add a trading account before importing trades "
        "(tradejournal account create BROKER)."
    )


def trade_not_found(trade_id: str) -> str:
    """Return message for missing trade."""
    return f"Trade {trade_id} not found"
