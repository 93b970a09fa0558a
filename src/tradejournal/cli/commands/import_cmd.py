"""CSV trade import command."""

from decimal import Decimal

import click
from tradejournal.cli.account_resolution import resolve_accounts_or_exit
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.cli.notifier import ClickNotifier
from tradejournal.domain import import_session as steps
from tradejournal.domain.account import AccountService
from tradejournal.domain.entities import MARKET_TYPES, ImportDefaults, ImportStep
from tradejournal.domain.errors import DomainError, MissingRequiredMappingError
from tradejournal.domain.import_format import ImportFormatService
from tradejournal.domain.trade_import import TradeImportService
from tradejournal.utils.csv_parser import read_csv_file


def _parse_map_option(value: str) -> tuple[str, str]:
    field_id, sep, column = value.partition("=")
    if not sep or not field_id.strip() or not column.strip():
        raise click.BadParameter(f"expected FIELD=COLUMN, got '{value}'", param_hint="--map")
    return field_id.strip(), column.strip()


def _read_content(csv_file: str) -> str:
    if csv_file == "-":
        return click.get_text_stream("stdin").read()
    return read_csv_file(csv_file)


def _echo_validation(session: steps.ImportSession) -> None:
    validation = session.validation
    click.echo(f"\nValidation: {len(validation.valid_trades)} valid, "
               f"{len(validation.errors)} with errors")
    for row_error in validation.errors:
        click.echo(f"  Row {row_error.row}: {'; '.join(row_error.errors)}", err=True)
    if validation.valid_trades:
        click.echo(f"  Total P&L of valid trades: {validation.total_pnl:,.2f}")


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--format", "format_name", help="Saved import format name")
@click.option(
    "--map",
    "column_maps",
    multiple=True,
    metavar="FIELD=COLUMN",
    help="Map a CSV column to a trade field (repeatable, overrides --format)",
)
@click.option(
    "--account",
    "accounts",
    multiple=True,
    help="Target account ID, ID prefix or broker name (repeatable)",
)
@click.option(
    "--market-type",
    type=click.Choice(MARKET_TYPES),
    default="futures",
    show_default=True,
    help="Market type when not mapped",
)
@click.option("--commission", type=float, default=0.0, show_default=True,
              help="Commission per unit when not mapped")
@click.option("--tick-value", type=float, default=5.0, show_default=True,
              help="Tick value when not mapped")
@click.option("--pip-value", type=float, default=10.0, show_default=True,
              help="Pip value when not mapped")
@click.option("--dry-run", is_flag=True, help="Validate only, do not import")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def import_trades(
    ctx,
    csv_file: str,
    format_name: str | None,
    column_maps: tuple[str, ...],
    accounts: tuple[str, ...],
    market_type: str,
    commission: float,
    tick_value: float,
    pip_value: float,
    dry_run: bool,
    yes: bool,
):
    """Import trades from a CSV file (use - to read pasted text from stdin).

    Without --format or --map, columns named like a trade field (Symbol,
    Date, Type, Entry, Exit, Size, ...) are mapped automatically.

    Examples:
        tradejournal import trades.csv --account "Interactive Brokers"
        tradejournal import export.csv --format "NinjaTrader" --account FTMO --account Demo
        tradejournal import fills.csv --map symbol=Ticker --map type=Side --dry-run
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    notifier = ClickNotifier()
    overrides = [_parse_map_option(value) for value in column_maps]

    defaults = ImportDefaults(
        commission=Decimal(str(commission)),
        tick_value=Decimal(str(tick_value)),
        pip_value=Decimal(str(pip_value)),
        market_type=market_type,
    )

    try:
        session = steps.set_defaults(steps.ImportSession(), defaults)
        session = steps.upload(session, _read_content(csv_file))
        click.echo(f"Parsed {len(session.parsed.rows)} rows with columns: "
                   f"{', '.join(session.headers)}")

        if format_name:
            mapping = ImportFormatService(db).column_mapping(format_name, session.headers)
            session = steps.apply_mapping(session, mapping)
        elif not overrides:
            session = steps.auto_map(session)
        for field_id, column in overrides:
            session = steps.map_column(session, field_id, column)

        session = steps.process(session, notifier)
    except MissingRequiredMappingError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(f"Available columns: {', '.join(session.headers)}", err=True)
        ctx.exit(1)
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    _echo_validation(session)
    if not session.valid_trades:
        click.echo("Error: No valid trades found", err=True)
        ctx.exit(1)

    if dry_run:
        click.echo("\nDry run: no trades were imported.")
        return

    import_service = TradeImportService(db, user_id)
    account_service = AccountService(db, user_id)
    try:
        available = import_service.available_accounts()
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("Error: Select at least one account with --account. Available accounts:", err=True)
        for acc in available:
            click.echo(f"  {acc.id[:8]}  {acc.broker}", err=True)
        ctx.exit(1)

    account_ids = resolve_accounts_or_exit(ctx, account_service, accounts)
    brokers = [acc.broker for acc in available if acc.id in account_ids]

    session = steps.proceed_to_confirm(steps.select_accounts(session, account_ids))
    if not yes and not click.confirm(
        f"Import {len(session.valid_trades)} trades into {', '.join(brokers)}?"
    ):
        click.echo("Import cancelled.")
        return

    session = steps.confirm(session, import_service, notifier)
    if session.step != ImportStep.DONE:
        ctx.exit(1)

    click.echo("Run 'tradejournal trades list' to view your trades.")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_trades)
