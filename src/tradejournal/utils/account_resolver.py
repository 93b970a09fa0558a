"""Utility for resolving account references to IDs."""

from tradejournal.domain.account import AccountService
from tradejournal.domain.errors import NotFoundError, ValidationError


def resolve_account(account_service: AccountService, account: str) -> str:
    """Resolve an account ID, ID prefix or broker name to an account ID.

    Args:
        account_service: AccountService instance
        account: Full account ID, a unique ID prefix, or a broker name

    Returns:
        Account ID

    Raises:
        NotFoundError: If no account matches
        ValidationError: If the reference matches more than one account
    """
    account = account.strip()
    if not account:
        raise ValidationError("Account reference is empty")
    accounts = account_service.list_accounts()

    # Exact ID
    for acc in accounts:
        if acc.id == account:
            return acc.id

    # Unique ID prefix, as shown by 'account list'
    prefixed = [acc for acc in accounts if acc.id.startswith(account)]
    if len(prefixed) == 1:
        return prefixed[0].id

    # Broker name
    named = [acc for acc in accounts if acc.broker.lower() == account.lower()]
    if len(named) == 1:
        return named[0].id
    if len(named) > 1:
        raise ValidationError(
            f"Account '{account}' is ambiguous: {len(named)} accounts use that broker. "
            "Use the account ID instead."
        )

    raise NotFoundError(f"Account '{account}' not found")
