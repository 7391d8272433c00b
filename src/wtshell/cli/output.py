"""Output utilities for CLI commands with clear intent.

- user_output(): messages for humans, routed to stderr so stdout stays
  byte-identical to the wrapped command's output
- machine_output(): results meant for capture (scripts, config values), on stdout
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Output an informational message for human users (stderr)."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    """Output data for machine consumption or shell capture (stdout)."""
    click.echo(message, nl=nl)
