"""Terminal notification surface."""

from typing import Optional

import click

from tradejournal.domain.notifications import ERROR, SUCCESS, WARNING


class ClickNotifier:
    """Notifier that echoes to the terminal; errors go to stderr."""

    _colors = {SUCCESS: "green", WARNING: "yellow", ERROR: "red"}

    def notify(self, kind: str, message: str, description: Optional[str] = None) -> None:
        err = kind == ERROR
        text = f"Error: {message}" if err else message
        click.secho(text, fg=self._colors.get(kind), err=err)
        if description:
            click.echo(f"  {description}", err=err)
