"""Import format management commands."""

import click
from tradejournal.cli.error_handling import handle_domain_error
from tradejournal.domain.column_mapping import TARGET_FIELDS, TARGET_FIELD_IDS
from tradejournal.domain.errors import DomainError, import_format_not_found
from tradejournal.domain.import_format import ImportFormatService


@click.group()
def format_group():
    """Manage saved CSV import formats."""
    pass


@format_group.command("create")
@click.argument("name")
@click.pass_context
def create_format(ctx, name: str):
    """Create a new import format."""
    db = ctx.obj["db"]
    service = ImportFormatService(db)

    try:
        format_id = service.create_format(name=name)
        click.echo(f"Created import format '{name}' (ID: {format_id})")
        click.echo("Use 'format map' to add column mappings.")
    except DomainError as e:
        handle_domain_error(ctx, e)


@format_group.command("map")
@click.argument("format_name")
@click.argument("csv_column")
@click.argument("target_field", type=click.Choice(TARGET_FIELD_IDS))
@click.pass_context
def map_column(ctx, format_name: str, csv_column: str, target_field: str):
    """Map a CSV column to a trade field.

    Examples:
        tradejournal format map "NinjaTrader" "Instrument" symbol
        tradejournal format map "NinjaTrader" "Entry price" entry
    """
    db = ctx.obj["db"]
    service = ImportFormatService(db)

    fmt = service.get_format_by_name(format_name)
    if fmt is None:
        click.echo(f"Error: {import_format_not_found(format_name)}", err=True)
        ctx.exit(1)

    try:
        mapping_id = service.set_mapping(
            format_id=fmt.id,
            csv_column_name=csv_column,
            target_field=target_field,
        )
        click.echo(f"Mapped CSV column '{csv_column}' to '{target_field}' (ID: {mapping_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@format_group.command("list")
@click.pass_context
def list_formats(ctx):
    """List import formats."""
    db = ctx.obj["db"]
    service = ImportFormatService(db)

    formats = service.list_formats()
    if not formats:
        click.echo("No import formats found.")
        return

    click.echo("\nImport Formats:")
    click.echo("-" * 60)
    for fmt in formats:
        is_valid, missing = service.validate_format(fmt.id)
        status = "✓" if is_valid else "✗"
        click.echo(f"{status} {fmt.name} (ID: {fmt.id})")
        if not is_valid:
            click.echo(f"  Missing required fields: {', '.join(missing)}")


@format_group.command("show")
@click.argument("format_name")
@click.pass_context
def show_format(ctx, format_name: str):
    """Show the column mappings of a format."""
    db = ctx.obj["db"]
    service = ImportFormatService(db)

    fmt = service.get_format_by_name(format_name)
    if fmt is None:
        click.echo(f"Error: {import_format_not_found(format_name)}", err=True)
        ctx.exit(1)

    mapped = {m.target_field: m.csv_column_name for m in service.get_mappings(fmt.id)}
    click.echo(f"\nImport Format: {fmt.name} (ID: {fmt.id})")
    click.echo("-" * 60)
    for target in TARGET_FIELDS:
        column = mapped.get(target.id)
        marker = "*" if target.required else " "
        click.echo(f"{marker} {target.label:25s} <- {column if column else '(unmapped)'}")


@format_group.command("delete")
@click.argument("format_name")
@click.pass_context
def delete_format(ctx, format_name: str):
    """Delete an import format."""
    db = ctx.obj["db"]
    service = ImportFormatService(db)

    fmt = service.get_format_by_name(format_name)
    if fmt is None:
        click.echo(f"Error: {import_format_not_found(format_name)}", err=True)
        ctx.exit(1)

    try:
        service.delete_format(fmt.id)
        click.echo(f"Deleted import format '{format_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register format commands with main CLI."""
    cli.add_command(format_group, name="format")
