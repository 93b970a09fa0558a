"""Account management commands."""

from decimal import Decimal

import click
from tradejournal.cli.account_resolution import resolve_account_or_exit
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.domain.account import AccountService
from tradejournal.domain.entities import ACCOUNT_TYPES
from tradejournal.domain.errors import DomainError


@click.group()
def account_group():
    """Manage trading accounts."""
    pass


@account_group.command("create")
@click.argument("broker", metavar="BROKER")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES),
    default="real",
    show_default=True,
    help="Account type",
)
@click.option("--balance", type=float, default=0.0, help="Starting balance")
@click.pass_context
def create_account(ctx, broker: str, account_type: str, balance: float):
    """Create a new trading account.

    Examples:
        tradejournal account create "Interactive Brokers"
        tradejournal account create "FTMO" --type prop --balance 100000
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    try:
        account_id = service.create_account(
            broker=broker, account_type=account_type, balance=Decimal(str(balance))
        )
        click.echo(f"Created account '{broker}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all trading accounts."""
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 78)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id[:8]} | {acc.broker:20s} | {acc.account_type:5s} | "
            f"Balance: {acc.balance:>12,.2f} | Trades: {len(acc.trades)}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str) -> None:
    """Show details of an account.

    ACCOUNT can be an account ID, ID prefix or broker name.
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    click.echo(f"\nAccount: {acc.broker}")
    click.echo("-" * 60)
    click.echo(f"ID:      {acc.id}")
    click.echo(f"Type:    {acc.account_type}")
    click.echo(f"Balance: {acc.balance:,.2f}")
    click.echo(f"Trades:  {len(acc.trades)}")
    click.echo(f"Created: {acc.created_at:%Y-%m-%d}")


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--broker", help="New broker or prop firm name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--balance", type=float, help="Set the balance")
@click.pass_context
def edit_account(
    ctx, account: str, broker: str | None, account_type: str | None, balance: float | None
) -> None:
    """Edit an account's broker name, type or balance.

    ACCOUNT can be an account ID, ID prefix or broker name.

    Examples:
        tradejournal account edit FTMO --type prop
        tradejournal account edit 3f2a1b9c --broker "FTMO Challenge" --balance 100000
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    if broker is None and account_type is None and balance is None:
        click.echo("Error: Nothing to change. Pass --broker, --type or --balance.", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        acc = service.update_account(
            account_id,
            broker=broker,
            account_type=account_type,
            balance=Decimal(str(balance)) if balance is not None else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account '{acc.broker}' (ID: {acc.id[:8]})")
    click.echo(f"Type:    {acc.account_type}")
    click.echo(f"Balance: {acc.balance:,.2f}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account and all of its trades.

    ACCOUNT can be an account ID, ID prefix or broker name.
    """
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)

    trade_count = len(acc.trades)
    prompt = f"Are you sure you want to delete account '{acc.broker}' (ID: {acc.id[:8]})"
    if trade_count:
        prompt += f" and its {trade_count} trade{'s' if trade_count != 1 else ''}"
    if not yes and not click.confirm(f"{prompt}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{acc.broker}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
