import logging
import os

import click

from wtshell.cli.commands.config import config_group
from wtshell.cli.commands.init import init_cmd
from wtshell.cli.commands.shim import git_cmd
from wtshell.cli.output import user_output
from wtshell.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

# Enable debug logging if WTSHELL_DEBUG environment variable is set
if os.getenv("WTSHELL_DEBUG"):
    logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="wtshell")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Shell integration for git-wt worktree commands."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_context()
        except ValueError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e


cli.add_command(config_group)
cli.add_command(init_cmd)
cli.add_command(git_cmd)


def main() -> None:
    """CLI entry point used by the `wtshell` console script."""
    cli()
