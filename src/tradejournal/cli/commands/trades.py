"""Trade listing, entry, editing and export commands."""

from decimal import Decimal, InvalidOperation

import click
from tradejournal.cli.account_resolution import resolve_account_or_exit, resolve_accounts_or_exit
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.domain.account import AccountService
from tradejournal.domain.entities import MARKET_TYPES, TRADE_TYPES, TradeDate
from tradejournal.domain.errors import DomainError
from tradejournal.domain.trade import TradeService
from tradejournal.utils.csv_parser import format_csv_line

# Header names match target field ids so exports can be re-imported as-is
EXPORT_COLUMNS = (
    "symbol",
    "date",
    "time",
    "type",
    "entry",
    "exit",
    "size",
    "tp",
    "sl",
    "marketType",
    "commission",
    "tickValue",
    "pipValue",
    "notes",
    "pnl",
    "account",
)


def _optional(value) -> str:
    return "" if value is None else str(value)


class DecimalType(click.ParamType):
    """Exact decimal number, kept as Decimal."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation:
            number = None
        if number is None or not number.is_finite():
            self.fail(f"'{value}' is not a valid number", param, ctx)
        return number


DECIMAL = DecimalType()

TRADE_DATE = click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S"])


@click.group()
def trades_group():
    """List, add, edit and export trades."""
    pass


@trades_group.command("list")
@click.option("--account", help="Filter by account ID, ID prefix or broker name")
@click.option("--symbol", help="Filter by symbol")
@click.option("--limit", type=int, default=None, help="Show at most this many trades")
@click.pass_context
def list_trades(ctx, account: str | None, symbol: str | None, limit: int | None):
    """List trades, newest first."""
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    account_id = resolve_account_or_exit(ctx, service, account) if account else None
    try:
        rows = service.list_trades(account_id=account_id, symbol=symbol)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No trades found.")
        return
    if limit is not None:
        rows = rows[:limit]

    click.echo(
        f"\n{'Date':10s}  {'Symbol':10s}  {'Type':5s}  {'Entry':>12s}  "
        f"{'Exit':>12s}  {'Size':>8s}  {'P&L':>12s}  {'ID':8s}  Account"
    )
    click.echo("-" * 102)
    for acc, trade in rows:
        pnl_text = f"{trade.pnl:>12,.2f}"
        click.echo(
            f"{trade.date.to_datetime():%Y-%m-%d}  {trade.symbol:10s}  {trade.trade_type:5s}  "
            f"{trade.entry:>12}  {trade.exit:>12}  {trade.size:>8}  "
            + click.style(pnl_text, fg="green" if trade.pnl > 0 else "red")
            + f"  {trade.id[:8]}  {acc.broker}"
        )


@trades_group.command("export")
@click.option("--account", help="Filter by account ID, ID prefix or broker name")
@click.option(
    "--output",
    "-o",
    type=click.File("w", encoding="utf-8"),
    default="-",
    help="Output CSV file (defaults to stdout)",
)
@click.pass_context
def export_trades(ctx, account: str | None, output):
    """Export trades as CSV, ready to be imported again."""
    db = ctx.obj["db"]
    service = AccountService(db, ctx.obj["user_id"])

    account_id = resolve_account_or_exit(ctx, service, account) if account else None
    try:
        rows = service.list_trades(account_id=account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    output.write(format_csv_line(list(EXPORT_COLUMNS)) + "\n")
    for acc, trade in reversed(rows):
        output.write(
            format_csv_line(
                [
                    trade.symbol,
                    f"{trade.date.to_datetime():%Y-%m-%d}",
                    trade.exit_time,
                    trade.trade_type,
                    str(trade.entry),
                    str(trade.exit),
                    str(trade.size),
                    _optional(trade.tp),
                    _optional(trade.sl),
                    trade.market_type,
                    str(trade.commission),
                    _optional(trade.tick_value),
                    _optional(trade.pip_value),
                    trade.notes or "",
                    str(trade.pnl),
                    acc.broker,
                ]
            )
            + "\n"
        )


def _echo_trade(trade) -> None:
    click.echo(f"  {trade.symbol} {trade.trade_type} {trade.size} @ {trade.entry} -> {trade.exit}")
    click.echo("  P&L: " + click.style(f"{trade.pnl:,.2f}", fg="green" if trade.pnl > 0 else "red"))


@trades_group.command("add")
@click.argument("symbol")
@click.option("--account", "accounts", multiple=True, required=True,
              help="Account ID, ID prefix or broker name (repeatable)")
@click.option("--date", "trade_date", type=TRADE_DATE, required=True,
              help="Trade date (YYYY-MM-DD, optionally with HH:MM[:SS])")
@click.option("--type", "trade_type", type=click.Choice(TRADE_TYPES), required=True,
              help="Trade direction")
@click.option("--entry", type=DECIMAL, required=True, help="Entry price")
@click.option("--exit", "exit_price", type=DECIMAL, required=True, help="Exit price")
@click.option("--size", type=DECIMAL, required=True, help="Position size")
@click.option("--market-type", type=click.Choice(MARKET_TYPES), default="futures",
              show_default=True, help="Market type")
@click.option("--commission", type=DECIMAL, default=Decimal("0"), help="Commission per unit")
@click.option("--tick-value", type=DECIMAL, help="Tick value (futures and stocks)")
@click.option("--pip-value", type=DECIMAL, help="Pip value (forex and crypto)")
@click.option("--tp", type=DECIMAL, help="Take profit price")
@click.option("--sl", type=DECIMAL, help="Stop loss price")
@click.option("--exit-time", default="00:00:00", show_default=True, help="Exit time (HH:MM:SS)")
@click.option("--notes", help="Notes")
@click.option("--rule", "rules", multiple=True, help="Trading rule that was followed (repeatable)")
@click.option("--pnl", type=DECIMAL, help="P&L to record instead of the calculated one")
@click.pass_context
def add_trade(
    ctx,
    symbol: str,
    accounts: tuple[str, ...],
    trade_date,
    trade_type: str,
    entry: Decimal,
    exit_price: Decimal,
    size: Decimal,
    market_type: str,
    commission: Decimal,
    tick_value: Decimal | None,
    pip_value: Decimal | None,
    tp: Decimal | None,
    sl: Decimal | None,
    exit_time: str,
    notes: str | None,
    rules: tuple[str, ...],
    pnl: Decimal | None,
) -> None:
    """Record a trade by hand in one or more accounts.

    Examples:
        tradejournal trades add ES --account "Interactive Brokers" --date 2024-01-15 \\
            --type long --entry 4800 --exit 4810 --size 2
        tradejournal trades add EURUSD --account FTMO --account Demo --date 2024-01-16 \\
            --type short --entry 1.0950 --exit 1.0920 --size 1 --market-type forex
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    account_ids = resolve_accounts_or_exit(ctx, AccountService(db, user_id), accounts)

    try:
        result = TradeService(db, user_id).add_trade(
            account_ids,
            symbol=symbol,
            date=TradeDate.from_datetime(trade_date),
            trade_type=trade_type,
            entry=entry,
            exit=exit_price,
            size=size,
            market_type=market_type,
            commission=commission,
            tp=tp,
            sl=sl,
            tick_value=tick_value,
            pip_value=pip_value,
            notes=notes,
            exit_time=exit_time,
            followed_rules=rules,
            pnl=pnl,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Trade added to {', '.join(result.accounts_updated)}")
    click.echo("  P&L: " + click.style(
        f"{result.total_pnl:,.2f}", fg="green" if result.total_pnl > 0 else "red"
    ))


@trades_group.command("edit")
@click.argument("trade_ref", metavar="TRADE")
@click.option("--symbol", help="Symbol")
@click.option("--date", "trade_date", type=TRADE_DATE,
              help="Trade date (YYYY-MM-DD, optionally with HH:MM[:SS])")
@click.option("--type", "trade_type", type=click.Choice(TRADE_TYPES), help="Trade direction")
@click.option("--entry", type=DECIMAL, help="Entry price")
@click.option("--exit", "exit_price", type=DECIMAL, help="Exit price")
@click.option("--size", type=DECIMAL, help="Position size")
@click.option("--market-type", type=click.Choice(MARKET_TYPES), help="Market type")
@click.option("--commission", type=DECIMAL, help="Commission per unit")
@click.option("--tick-value", type=DECIMAL, help="Tick value (futures and stocks)")
@click.option("--pip-value", type=DECIMAL, help="Pip value (forex and crypto)")
@click.option("--tp", type=DECIMAL, help="Take profit price (0 clears it)")
@click.option("--sl", type=DECIMAL, help="Stop loss price (0 clears it)")
@click.option("--exit-time", help="Exit time (HH:MM:SS)")
@click.option("--notes", help="Notes (empty string clears them)")
@click.option("--rule", "rules", multiple=True, help="Replace the followed rules (repeatable)")
@click.option("--pnl", type=DECIMAL, help="P&L to record instead of the recalculated one")
@click.pass_context
def edit_trade(ctx, trade_ref: str, trade_date, exit_price, rules, **options) -> None:
    """Edit a trade and adjust its account balance.

    TRADE is a trade ID or ID prefix as shown by 'trades list'. Only the
    given fields change; the P&L is recalculated and the account balance
    moves by the difference.

    Examples:
        tradejournal trades edit 3f2a1b9c --exit 4812.25
        tradejournal trades edit 3f2a1b9c --notes "" --sl 0
    """
    db = ctx.obj["db"]
    changes = {name: value for name, value in options.items() if value is not None}
    if trade_date is not None:
        changes["date"] = TradeDate.from_datetime(trade_date)
    if exit_price is not None:
        changes["exit"] = exit_price
    if rules:
        changes["followed_rules"] = rules
    if not changes:
        click.echo("Error: Nothing to change. Pass at least one field option.", err=True)
        ctx.exit(1)

    try:
        trade = TradeService(db, ctx.obj["user_id"]).edit_trade(trade_ref, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated trade {trade.id[:8]}")
    _echo_trade(trade)


@trades_group.command("delete")
@click.argument("trade_ref", metavar="TRADE")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_trade(ctx, trade_ref: str, yes: bool) -> None:
    """Delete a trade and take its P&L out of the account balance.

    TRADE is a trade ID or ID prefix as shown by 'trades list'.
    """
    db = ctx.obj["db"]
    service = TradeService(db, ctx.obj["user_id"])

    try:
        account, trade = service.find_trade(trade_ref)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(
        f"Are you sure you want to delete the {trade.symbol} trade {trade.id[:8]} "
        f"from '{account.broker}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_trade(trade.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted trade {trade.id[:8]} from '{account.broker}'")


def register_commands(cli):
    """Register trade commands with main CLI."""
    cli.add_command(trades_group, name="trades")
