"""Account lookup for CLI commands."""

from typing import Iterable

import click
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.domain.account import AccountService
from tradejournal.domain.errors import DomainError
from tradejournal.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str
) -> str:
    """Resolve an account ID, ID prefix or broker name, or exit with status 1."""
    return resolve_accounts_or_exit(ctx, account_service, [account])[0]


def resolve_accounts_or_exit(
    ctx: click.Context, account_service: AccountService, accounts: Iterable[str]
) -> list[str]:
    """Resolve several account references in order, dropping repeats.

    Exits with status 1 on the first reference that matches no account or
    more than one.
    """
    resolved: list[str] = []
    for account in accounts:
        try:
            account_id = resolve_account(account_service, account)
        except DomainError as e:
            handle_domain_error(ctx, e)
        if account_id not in resolved:
            resolved.append(account_id)
    return resolved
