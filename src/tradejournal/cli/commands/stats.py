"""Performance statistics command."""

import click
from tradejournal.cli.account_resolution import resolve_account_or_exit
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.domain.account import AccountService
from tradejournal.domain.errors import DomainError
from tradejournal.domain.stats import StatsService


def _format_profit_factor(value: float) -> str:
    return "∞" if value == float("inf") else f"{value:.2f}"


@click.command("stats")
@click.option("--account", help="Account ID, ID prefix or broker name (default: all accounts)")
@click.pass_context
def show_stats(ctx, account: str | None):
    """Show win rate, profit factor, drawdown and streaks."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, AccountService(db, user_id), account)

    try:
        stats = StatsService(db, user_id).account_stats(account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if stats.total_trades == 0:
        click.echo("No trades found.")
        return

    click.echo("\nPerformance:")
    click.echo("-" * 40)
    click.echo(f"Total trades:    {stats.total_trades}")
    click.echo(f"Win rate:        {stats.win_rate:.1f}% "
               f"({stats.winning_trades}W / {stats.losing_trades}L)")
    click.echo(f"Profit factor:   {_format_profit_factor(stats.profit_factor)}")
    click.echo(f"Net P&L:         {stats.net_pnl:,.2f}")
    click.echo(f"Today's P&L:     {stats.today_pnl:,.2f}")
    click.echo(f"Average win:     {stats.average_win:,.2f}")
    click.echo(f"Average loss:    {stats.average_loss:,.2f}")
    click.echo(f"Max drawdown:    {stats.max_drawdown:.2f}%")
    click.echo(f"Longest streaks: {stats.streaks.longest_win} wins, "
               f"{stats.streaks.longest_loss} losses")
    current = stats.streaks.current
    if current > 0:
        click.echo(f"Current streak:  {current} win{'s' if current != 1 else ''}")
    elif current < 0:
        click.echo(f"Current streak:  {-current} loss{'es' if current != -1 else ''}")


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(show_stats)
