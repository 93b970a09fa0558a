"""Main CLI entry point."""

import logging
import os

import click
from tradejournal.database.factories import create_sqlite_database

# Import and register all commands at module level
from tradejournal.cli.commands import (
    account,
    format,
    import_cmd,
    trades,
    stats,
)

DEFAULT_USER = "default"


class ClickEchoHandler(logging.Handler):
    """Log handler that writes through click to whatever stderr is current."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr.

    Level comes from -v flags (-v info, -vv debug), else TRADEJOURNAL_LOG_LEVEL,
    else WARNING.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(
            logging, os.environ.get("TRADEJOURNAL_LOG_LEVEL", "WARNING").upper(), logging.WARNING
        )

    root = logging.getLogger("tradejournal")
    root.setLevel(level)
    if not any(isinstance(h, ClickEchoHandler) for h in root.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TRADEJOURNAL_DB_PATH environment variable)",
    envvar="TRADEJOURNAL_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default=DEFAULT_USER,
    show_default=True,
    help="User whose accounts are used",
    envvar="TRADEJOURNAL_USER",
)
@click.option("-v", "--verbose", count=True, help="Increase log output (-v, -vv)")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, verbose: int):
    """Tradejournal - Trading journal.

    Keep trading accounts and their trades, bulk-import trades from broker
    CSV exports and review performance statistics.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
format.register_commands(cli)
import_cmd.register_commands(cli)
trades.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
